"""Provider 產出的規格：協議定義加上已綁定的 handler。"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from mcpanything.binding.builder import Callback
from mcpanything.binding.call_kinds import CallKind
from mcpanything.protocol.types import (
    CompleteReference,
    Prompt,
    PromptReference,
    Resource,
    ResourceTemplate,
    Tool,
)


@dataclass(frozen=True)
class ToolSpecification:
    tool: Tool
    handler: Callback


@dataclass(frozen=True)
class PromptSpecification:
    prompt: Prompt
    handler: Callback


@dataclass(frozen=True)
class ResourceSpecification:
    resource: Union[Resource, ResourceTemplate]
    handler: Callback

    @property
    def is_template(self) -> bool:
        return isinstance(self.resource, ResourceTemplate)

    @property
    def uri(self) -> str:
        if isinstance(self.resource, ResourceTemplate):
            return self.resource.uri_template
        return self.resource.uri


@dataclass(frozen=True)
class CompleteSpecification:
    reference: CompleteReference
    handler: Callback

    @property
    def key(self) -> str:
        if isinstance(self.reference, PromptReference):
            return f"{self.reference.type}:{self.reference.name}"
        return f"{self.reference.type}:{self.reference.uri}"


@dataclass(frozen=True)
class SamplingSpecification:
    client_id: str | None
    handler: Callback


@dataclass(frozen=True)
class ElicitationSpecification:
    client_id: str | None
    handler: Callback


@dataclass(frozen=True)
class ProgressSpecification:
    clients: Tuple[str, ...]
    handler: Callback


@dataclass(frozen=True)
class LoggingSpecification:
    clients: Tuple[str, ...]
    handler: Callback


@dataclass(frozen=True)
class ListChangedSpecification:
    call_kind: CallKind
    clients: Tuple[str, ...]
    handler: Callback
