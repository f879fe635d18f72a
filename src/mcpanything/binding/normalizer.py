"""將使用者方法的回傳值轉成各 call kind 的結果封裝。"""
from __future__ import annotations

import base64
import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from pydantic_core import to_jsonable_python

from mcpanything.binding.call_kinds import CallKind, CallKindSpec, spec_for
from mcpanything.binding.roles import MethodBinding, ReturnKind
from mcpanything.protocol.types import (
    BlobResourceContents,
    CallToolResult,
    CompleteCompletion,
    CompleteResult,
    GetPromptResult,
    ImageContent,
    PromptMessage,
    ReadResourceResult,
    Role,
    TextContent,
    TextResourceContents,
)
from mcpanything.utils.logger import logger

DONE = json.dumps("Done")
DEFAULT_MIME_TYPE = "text/plain"


def _public_attributes(value: Any) -> Any:
    """``to_jsonable_python`` 不認得的物件改用公開屬性表示。"""

    attributes = getattr(value, "__dict__", None)
    if attributes is None:
        return str(value)
    return {key: item for key, item in attributes.items() if not key.startswith("_")}


def to_json_value(value: Any) -> Any:
    return to_jsonable_python(value, fallback=_public_attributes)


def to_json_text(value: Any) -> str:
    return json.dumps(to_json_value(value), ensure_ascii=False)


def _is_text_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and bool(value) and all(isinstance(item, str) for item in value)


class ResultNormalizer(ABC):
    def __init__(self, binding: MethodBinding) -> None:
        self._binding = binding
        self._spec: CallKindSpec = spec_for(binding.call_kind)
        self._kind = binding.return_shape.kind

    @abstractmethod
    def normalize(self, value: Any, request: Any) -> Any:
        raise NotImplementedError


class ToolResultNormalizer(ResultNormalizer):
    """Tool 回傳值：基本型別轉文字，複雜物件轉 structured content。"""

    def __init__(self, binding: MethodBinding, *, structured_output: bool = True) -> None:
        super().__init__(binding)
        self._structured_output = structured_output

    def normalize(self, value: Any, request: Any) -> CallToolResult:
        if isinstance(value, CallToolResult):
            return value
        if self._kind is ReturnKind.VOID or (value is None and self._kind is ReturnKind.DYNAMIC):
            return CallToolResult(content=[TextContent(DONE)])
        if value is None:
            return CallToolResult(content=[TextContent("null")])

        if isinstance(value, (TextContent, ImageContent)):
            return CallToolResult(content=[value])
        if isinstance(value, (list, tuple)) and value and all(
            isinstance(item, (TextContent, ImageContent)) for item in value
        ):
            return CallToolResult(content=list(value))
        if isinstance(value, str):
            return CallToolResult(content=[TextContent(value)])
        if self._kind is ReturnKind.TEXT_LIST or (self._kind is ReturnKind.DYNAMIC and _is_text_list(value)):
            return CallToolResult(content=[TextContent(item) for item in value])
        if isinstance(value, (bool, int, float, Enum)):
            return CallToolResult(content=[TextContent(self._primitive_text(value))])
        if isinstance(value, (bytes, bytearray)):
            return CallToolResult(content=[TextContent(base64.b64encode(value).decode("ascii"))])

        payload = to_json_value(value)
        text = json.dumps(payload, ensure_ascii=False)
        if not self._structured_output:
            return CallToolResult(content=[TextContent(text)])
        return CallToolResult(content=[TextContent(text)], structured_content=payload)

    @staticmethod
    def _primitive_text(value: Any) -> str:
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            return json.dumps(value)
        return str(value)


class PromptResultNormalizer(ResultNormalizer):
    """Prompt 回傳值：字串成為 assistant 訊息。"""

    def normalize(self, value: Any, request: Any) -> GetPromptResult:
        if isinstance(value, GetPromptResult):
            return value
        if value is None:
            return GetPromptResult(messages=[])
        if isinstance(value, (list, tuple)):
            return GetPromptResult(messages=[self._message(item) for item in value])
        return GetPromptResult(messages=[self._message(value)])

    @staticmethod
    def _message(value: Any) -> PromptMessage:
        if isinstance(value, PromptMessage):
            return value
        if isinstance(value, str):
            return PromptMessage(role=Role.ASSISTANT, content=TextContent(value))
        return PromptMessage(role=Role.ASSISTANT, content=TextContent(to_json_text(value)))


class ResourceResultNormalizer(ResultNormalizer):
    """Resource 回傳值：依 mime type 決定 text 或 blob contents。"""

    def __init__(self, binding: MethodBinding, *, mime_type: Optional[str] = None) -> None:
        super().__init__(binding)
        self._mime_type = mime_type or DEFAULT_MIME_TYPE
        self._textual = self._mime_type.startswith("text/")

    def normalize(self, value: Any, request: Any) -> ReadResourceResult:
        if isinstance(value, ReadResourceResult):
            return value
        if value is None:
            return ReadResourceResult(contents=[])
        uri = request.uri
        if isinstance(value, (list, tuple)):
            return ReadResourceResult(contents=[self._contents(item, uri) for item in value])
        return ReadResourceResult(contents=[self._contents(value, uri)])

    def _contents(self, value: Any, uri: str) -> Any:
        if isinstance(value, (TextResourceContents, BlobResourceContents)):
            return value
        if isinstance(value, (bytes, bytearray)):
            return BlobResourceContents(uri, self._mime_type, base64.b64encode(value).decode("ascii"))
        if isinstance(value, str):
            if self._textual:
                return TextResourceContents(uri, self._mime_type, value)
            blob = base64.b64encode(value.encode("utf-8")).decode("ascii")
            return BlobResourceContents(uri, self._mime_type, blob)
        return TextResourceContents(uri, self._mime_type, to_json_text(value))


class CompleteResultNormalizer(ResultNormalizer):
    """Complete 回傳值：字串或字串 list 成為候選值，total 為候選數量。"""

    def normalize(self, value: Any, request: Any) -> CompleteResult:
        if isinstance(value, CompleteResult):
            return value
        if isinstance(value, CompleteCompletion):
            return CompleteResult(completion=value)
        if value is None:
            values: list[str] = []
        elif isinstance(value, str):
            values = [value]
        elif isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            values = list(value)
        else:
            raise self._spec.method_error(
                f"Complete method {self._binding.owner}.{self._binding.name} returned "
                f"{type(value).__name__}, expected CompleteResult, CompleteCompletion, str or list of str",
                method=f"{self._binding.owner}.{self._binding.name}",
            )
        return CompleteResult(completion=CompleteCompletion(values=values, total=len(values), has_more=False))


class EnvelopeNormalizer(ResultNormalizer):
    """Sampling 與 elicitation 只接受原生結果型別。"""

    def normalize(self, value: Any, request: Any) -> Any:
        envelope = self._spec.envelope_type
        if isinstance(value, envelope):
            return value
        raise self._spec.method_error(
            f"{self._spec.label} method {self._binding.owner}.{self._binding.name} returned "
            f"{type(value).__name__}, expected {envelope.__name__}",
            method=f"{self._binding.owner}.{self._binding.name}",
        )


class VoidNormalizer(ResultNormalizer):
    """通知型 call kind 忽略回傳值。"""

    def normalize(self, value: Any, request: Any) -> None:
        if value is not None:
            logger.debug(
                "Ignoring %s returned by %s notification method %s",
                type(value).__name__,
                self._spec.kind.value,
                self._binding.name,
            )
        return None


def normalizer_for(
    binding: MethodBinding,
    *,
    structured_output: bool = True,
    mime_type: Optional[str] = None,
) -> ResultNormalizer:
    kind = binding.call_kind
    if kind is CallKind.TOOL:
        return ToolResultNormalizer(binding, structured_output=structured_output)
    if kind is CallKind.PROMPT:
        return PromptResultNormalizer(binding)
    if kind is CallKind.RESOURCE:
        return ResourceResultNormalizer(binding, mime_type=mime_type)
    if kind is CallKind.COMPLETE:
        return CompleteResultNormalizer(binding)
    if kind in (CallKind.SAMPLING, CallKind.ELICITATION):
        return EnvelopeNormalizer(binding)
    return VoidNormalizer(binding)

