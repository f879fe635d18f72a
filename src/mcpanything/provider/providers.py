"""掃描物件、模組或函數上的 decorator 標記，建立各 call kind 的規格。

    provider = ToolProvider(Calculator(), weather_module)
    for spec in provider.specifications():
        server.add_tool(spec.tool, spec.handler)
"""
from __future__ import annotations

import inspect
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from mcpanything.binding.builder import Callback, CallbackBuilder, CallbackConfig
from mcpanything.binding.call_kinds import CallKind, ExecutionMode, TransportMode
from mcpanything.binding.roles import ReturnKind
from mcpanything.core.schema import build_input_schema, build_output_schema
from mcpanything.core.uri_template import UriTemplate
from mcpanything.decorators.base import McpMethodInfo, get_method_info
from mcpanything.exceptions import BindingError
from mcpanything.protocol.types import Prompt, PromptArgument, Resource, ResourceTemplate, Tool
from mcpanything.provider.specs import (
    CompleteSpecification,
    ElicitationSpecification,
    ListChangedSpecification,
    LoggingSpecification,
    ProgressSpecification,
    PromptSpecification,
    ResourceSpecification,
    SamplingSpecification,
    ToolSpecification,
)
from mcpanything.utils.docstring_parser import parse_docstring
from mcpanything.utils.logger import logger

_LIST_CHANGED_KINDS = frozenset(
    {CallKind.TOOL_LIST_CHANGED, CallKind.PROMPT_LIST_CHANGED, CallKind.RESOURCE_LIST_CHANGED}
)


def discover_methods(sources: Iterable[Any]) -> List[Tuple[Any, McpMethodInfo]]:
    """回傳 (可呼叫物件, 標記) 清單，順序與宣告順序一致。"""

    found: List[Tuple[Any, McpMethodInfo]] = []
    for source in sources:
        if inspect.ismodule(source):
            for value in vars(source).values():
                info = get_method_info(value)
                if info is not None and callable(value):
                    found.append((value, info))
            continue

        info = get_method_info(source)
        if info is not None and callable(source):
            found.append((source, info))
            continue

        cls = source if inspect.isclass(source) else type(source)
        seen: set[str] = set()
        for klass in cls.__mro__:
            for attr_name, attr in vars(klass).items():
                if attr_name in seen:
                    continue
                seen.add(attr_name)
                info = get_method_info(attr)
                if info is None:
                    continue
                # 類別本身只取 static/class method，一般方法需要實例
                if inspect.isclass(source) and not isinstance(attr, (staticmethod, classmethod)):
                    logger.warning(
                        "Skipping %s.%s: instance methods need an instance, not the class",
                        cls.__name__,
                        attr_name,
                    )
                    continue
                found.append((getattr(source, attr_name), info))
    return found


class McpMethodProvider:
    """各 provider 的共用掃描與建立流程。"""

    call_kinds: FrozenSet[CallKind] = frozenset()
    label = "MCP"

    def __init__(
        self,
        *sources: Any,
        execution: ExecutionMode = ExecutionMode.SYNC,
        transport: TransportMode = TransportMode.STATEFUL,
        offload_sync: bool = False,
        builder: Optional[CallbackBuilder] = None,
    ) -> None:
        self.sources = sources
        self.execution = execution
        self.transport = transport
        self.offload_sync = offload_sync
        self._builder = builder or CallbackBuilder()

    def _methods(self) -> List[Tuple[Any, McpMethodInfo]]:
        methods = [(fn, info) for fn, info in discover_methods(self.sources) if info.call_kind in self.call_kinds]
        if not methods:
            logger.warning("No %s methods found in %s", self.label, [type(s).__name__ for s in self.sources])
        return methods

    def _build(self, fn: Any, info: McpMethodInfo, name: str | None = None) -> Callback:
        config = CallbackConfig(
            method=fn,
            call_kind=info.call_kind,
            execution=self.execution,
            transport=self.transport,
            uri=info.uri,
            mime_type=info.mime_type or "text/plain",
            structured_output=info.structured_output,
            offload_sync=self.offload_sync,
            name=name,
        )
        return self._builder.build(config)

    @staticmethod
    def _distinct(items: Iterable[Tuple[Optional[str], Any]], label: str) -> List[Any]:
        """依鍵值去重，保留第一個。鍵為 None 的項目不參與去重。"""

        kept: List[Any] = []
        seen: Dict[str, Any] = {}
        for key, item in items:
            if key is not None:
                if key in seen:
                    logger.warning("Duplicate %s '%s' ignored; keeping the first definition", label, key)
                    continue
                seen[key] = item
            kept.append(item)
        return kept

    def specifications(self) -> List[Any]:
        raise NotImplementedError


class ToolProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.TOOL})
    label = "tool"

    def specifications(self) -> List[ToolSpecification]:
        return self._distinct(
            ((spec.tool.name, spec) for spec in (self._tool(fn, info) for fn, info in self._methods())),
            self.label,
        )

    def _tool(self, fn: Any, info: McpMethodInfo) -> ToolSpecification:
        name = info.name or fn.__name__
        handler = self._build(fn, info, name)
        documentation = parse_docstring(fn)
        description = info.description or (documentation.summary if documentation else None) or name
        shape = handler.binding.return_shape
        output_schema = None
        if info.structured_output and shape.kind is ReturnKind.STRUCTURED and not shape.stream:
            output_schema = build_output_schema(shape.annotation)
        tool = Tool(
            name=name,
            description=description,
            input_schema=build_input_schema(handler.binding.roles, documentation),
            title=info.title,
            output_schema=output_schema,
            annotations=info.annotations,
        )
        return ToolSpecification(tool=tool, handler=handler)


class PromptProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.PROMPT})
    label = "prompt"

    def specifications(self) -> List[PromptSpecification]:
        return self._distinct(
            ((spec.prompt.name, spec) for spec in (self._prompt(fn, info) for fn, info in self._methods())),
            self.label,
        )

    def _prompt(self, fn: Any, info: McpMethodInfo) -> PromptSpecification:
        name = info.name or fn.__name__
        handler = self._build(fn, info, name)
        documentation = parse_docstring(fn)
        arguments = [
            PromptArgument(
                name=role.name,
                description=role.description or (documentation.describe(role.parameter) if documentation else None),
                required=role.required,
            )
            for role in handler.binding.named_arguments
        ]
        prompt = Prompt(
            name=name,
            description=info.description or (documentation.summary if documentation else None),
            title=info.title,
            arguments=arguments,
        )
        return PromptSpecification(prompt=prompt, handler=handler)


class ResourceProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.RESOURCE})
    label = "resource"

    def specifications(self) -> List[ResourceSpecification]:
        return self._distinct(
            ((spec.uri, spec) for spec in (self._resource(fn, info) for fn, info in self._methods())),
            self.label,
        )

    def _resource(self, fn: Any, info: McpMethodInfo) -> ResourceSpecification:
        name = info.name or fn.__name__
        handler = self._build(fn, info, name)
        documentation = parse_docstring(fn)
        description = info.description or (documentation.summary if documentation else None)
        if UriTemplate(info.uri or "").is_template:
            resource: Resource | ResourceTemplate = ResourceTemplate(
                uri_template=info.uri or "",
                name=name,
                title=info.title,
                description=description,
                mime_type=info.mime_type,
            )
        else:
            resource = Resource(
                uri=info.uri or "",
                name=name,
                title=info.title,
                description=description,
                mime_type=info.mime_type,
            )
        return ResourceSpecification(resource=resource, handler=handler)


class CompleteProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.COMPLETE})
    label = "complete"

    def specifications(self) -> List[CompleteSpecification]:
        return self._distinct(
            ((spec.key, spec) for spec in (self._complete(fn, info) for fn, info in self._methods())),
            self.label,
        )

    def _complete(self, fn: Any, info: McpMethodInfo) -> CompleteSpecification:
        if info.reference is None:
            raise BindingError(f"Complete method {fn!r} has no prompt or URI reference")
        return CompleteSpecification(reference=info.reference, handler=self._build(fn, info))


class SamplingProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.SAMPLING})
    label = "sampling"

    def specifications(self) -> List[SamplingSpecification]:
        return self._distinct(
            (
                (info.client_id, SamplingSpecification(info.client_id, self._build(fn, info)))
                for fn, info in self._methods()
            ),
            self.label,
        )


class ElicitationProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.ELICITATION})
    label = "elicitation"

    def specifications(self) -> List[ElicitationSpecification]:
        return self._distinct(
            (
                (info.client_id, ElicitationSpecification(info.client_id, self._build(fn, info)))
                for fn, info in self._methods()
            ),
            self.label,
        )


class ProgressProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.PROGRESS})
    label = "progress"

    def specifications(self) -> List[ProgressSpecification]:
        return [ProgressSpecification(info.clients, self._build(fn, info)) for fn, info in self._methods()]


class LoggingProvider(McpMethodProvider):
    call_kinds = frozenset({CallKind.LOGGING})
    label = "logging"

    def specifications(self) -> List[LoggingSpecification]:
        return [LoggingSpecification(info.clients, self._build(fn, info)) for fn, info in self._methods()]


class ListChangedProvider(McpMethodProvider):
    call_kinds = _LIST_CHANGED_KINDS
    label = "list changed"

    def specifications(self) -> List[ListChangedSpecification]:
        return [
            ListChangedSpecification(info.call_kind, info.clients, self._build(fn, info))
            for fn, info in self._methods()
        ]
