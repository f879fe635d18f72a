"""各 call kind 的固定規則表：request 型別、允許的角色與回傳形狀、錯誤策略。"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Type

from mcpanything.binding.roles import ReturnKind, RoleKind
from mcpanything.exceptions import (
    CompleteMethodError,
    ElicitationMethodError,
    InvocationError,
    ListChangedMethodError,
    LoggingMethodError,
    ProgressMethodError,
    PromptMethodError,
    ResourceMethodError,
    SamplingMethodError,
    ToolMethodError,
)
from mcpanything.protocol.types import (
    BlobResourceContents,
    CallToolRequest,
    CallToolResult,
    CompleteCompletion,
    CompleteRequest,
    CompleteResult,
    CreateMessageRequest,
    CreateMessageResult,
    ElicitRequest,
    ElicitResult,
    GetPromptRequest,
    GetPromptResult,
    ImageContent,
    LoggingMessageNotification,
    ProgressNotification,
    Prompt,
    PromptMessage,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    TextContent,
    TextResourceContents,
    Tool,
)
from mcpanything.utils.introspection import matches_type, sequence_item


class CallKind(str, Enum):
    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE = "resource"
    SAMPLING = "sampling"
    ELICITATION = "elicitation"
    COMPLETE = "complete"
    PROGRESS = "progress"
    LOGGING = "logging"
    TOOL_LIST_CHANGED = "tool_list_changed"
    PROMPT_LIST_CHANGED = "prompt_list_changed"
    RESOURCE_LIST_CHANGED = "resource_list_changed"


class ExecutionMode(str, Enum):
    SYNC = "sync"
    ASYNC = "async"


class TransportMode(str, Enum):
    STATEFUL = "stateful"
    STATELESS = "stateless"


class ErrorPolicy(str, Enum):
    ERROR_RESULT = "error_result"
    PROTOCOL_ERROR = "protocol_error"
    RAISE = "raise"


class HandlerShape(str, Enum):
    EXCHANGE_AND_REQUEST = "exchange_and_request"
    REQUEST_ONLY = "request_only"
    NOTIFICATION = "notification"


_ALL_ROLES = frozenset(RoleKind)
_MESSAGE_RETURNS = frozenset(
    {
        ReturnKind.ENVELOPE,
        ReturnKind.MESSAGE,
        ReturnKind.MESSAGE_LIST,
        ReturnKind.TEXT,
        ReturnKind.TEXT_LIST,
        ReturnKind.DYNAMIC,
    }
)
_ENVELOPE_RETURNS = frozenset({ReturnKind.ENVELOPE, ReturnKind.DYNAMIC})
_NOTIFICATION_RETURNS = frozenset({ReturnKind.VOID, ReturnKind.DYNAMIC})
_COMPLETE_RETURNS = frozenset(
    {ReturnKind.ENVELOPE, ReturnKind.MESSAGE, ReturnKind.TEXT, ReturnKind.TEXT_LIST, ReturnKind.DYNAMIC}
)


@dataclass(frozen=True)
class CallKindSpec:
    """單一 call kind 的綁定規則。

    ``request_item_type`` 不為 None 時，request 是該型別的 list（list-changed
    通知）。``payload_fields`` 是通知與 complete request 中可以具名綁定的欄位。
    """

    kind: CallKind
    label: str
    request_type: Type[Any]
    method_error: Type[InvocationError]
    error_policy: ErrorPolicy
    handler_shape: HandlerShape
    allowed_roles: FrozenSet[RoleKind]
    accepted_returns: FrozenSet[ReturnKind]
    envelope_type: Optional[Type[Any]] = None
    message_types: Tuple[Type[Any], ...] = ()
    request_item_type: Optional[Type[Any]] = None
    payload_fields: Tuple[str, ...] = ()
    positional_request: bool = False

    @property
    def is_notification(self) -> bool:
        return self.handler_shape is HandlerShape.NOTIFICATION

    @property
    def accepts_exchange(self) -> bool:
        return RoleKind.EXCHANGE in self.allowed_roles

    @property
    def request_name(self) -> str:
        if self.request_item_type is not None:
            return f"List[{self.request_item_type.__name__}]"
        return self.request_type.__name__

    def matches_request(self, annotation: Any) -> bool:
        if self.request_item_type is not None:
            is_sequence, item = sequence_item(annotation)
            return is_sequence and matches_type(item, self.request_item_type)
        return matches_type(annotation, self.request_type)

    def arguments_of(self, request: Any) -> Dict[str, Any]:
        """取得 request 中可供具名參數查詢的 map。

        tool 與 prompt 回傳原始 arguments 物件；complete 另外展開 argument 的
        ``name`` 與 ``value``。
        """

        if self.kind in (CallKind.TOOL, CallKind.PROMPT):
            arguments = getattr(request, "arguments", None)
            return arguments if arguments is not None else {}
        if self.kind is CallKind.COMPLETE:
            argument = getattr(request, "argument", None)
            return {
                "ref": getattr(request, "ref", None),
                "argument": argument,
                "name": getattr(argument, "name", None),
                "value": getattr(argument, "value", None),
            }
        if self.payload_fields:
            return {name: getattr(request, name, None) for name in self.payload_fields}
        return {}


def _payload_fields(payload_type: type) -> Tuple[str, ...]:
    return tuple(f.name for f in fields(payload_type) if f.name != "meta")


CALL_KIND_SPECS: Dict[CallKind, CallKindSpec] = {
    CallKind.TOOL: CallKindSpec(
        kind=CallKind.TOOL,
        label="Tool",
        request_type=CallToolRequest,
        method_error=ToolMethodError,
        error_policy=ErrorPolicy.ERROR_RESULT,
        handler_shape=HandlerShape.EXCHANGE_AND_REQUEST,
        allowed_roles=_ALL_ROLES,
        accepted_returns=frozenset(ReturnKind) - {ReturnKind.BINARY},
        envelope_type=CallToolResult,
        message_types=(TextContent, ImageContent),
    ),
    CallKind.PROMPT: CallKindSpec(
        kind=CallKind.PROMPT,
        label="Prompt",
        request_type=GetPromptRequest,
        method_error=PromptMethodError,
        error_policy=ErrorPolicy.PROTOCOL_ERROR,
        handler_shape=HandlerShape.EXCHANGE_AND_REQUEST,
        allowed_roles=_ALL_ROLES,
        accepted_returns=_MESSAGE_RETURNS,
        envelope_type=GetPromptResult,
        message_types=(PromptMessage,),
    ),
    CallKind.RESOURCE: CallKindSpec(
        kind=CallKind.RESOURCE,
        label="Resource",
        request_type=ReadResourceRequest,
        method_error=ResourceMethodError,
        error_policy=ErrorPolicy.PROTOCOL_ERROR,
        handler_shape=HandlerShape.EXCHANGE_AND_REQUEST,
        allowed_roles=_ALL_ROLES,
        accepted_returns=_MESSAGE_RETURNS | {ReturnKind.BINARY},
        envelope_type=ReadResourceResult,
        message_types=(TextResourceContents, BlobResourceContents),
    ),
    CallKind.SAMPLING: CallKindSpec(
        kind=CallKind.SAMPLING,
        label="Sampling",
        request_type=CreateMessageRequest,
        method_error=SamplingMethodError,
        error_policy=ErrorPolicy.RAISE,
        handler_shape=HandlerShape.REQUEST_ONLY,
        allowed_roles=frozenset({RoleKind.REQUEST}),
        accepted_returns=_ENVELOPE_RETURNS,
        envelope_type=CreateMessageResult,
        positional_request=True,
    ),
    CallKind.ELICITATION: CallKindSpec(
        kind=CallKind.ELICITATION,
        label="Elicitation",
        request_type=ElicitRequest,
        method_error=ElicitationMethodError,
        error_policy=ErrorPolicy.RAISE,
        handler_shape=HandlerShape.REQUEST_ONLY,
        allowed_roles=frozenset({RoleKind.REQUEST}),
        accepted_returns=_ENVELOPE_RETURNS,
        envelope_type=ElicitResult,
        positional_request=True,
    ),
    CallKind.COMPLETE: CallKindSpec(
        kind=CallKind.COMPLETE,
        label="Complete",
        request_type=CompleteRequest,
        method_error=CompleteMethodError,
        error_policy=ErrorPolicy.PROTOCOL_ERROR,
        handler_shape=HandlerShape.EXCHANGE_AND_REQUEST,
        allowed_roles=_ALL_ROLES - {RoleKind.ARGUMENTS_MAP},
        accepted_returns=_COMPLETE_RETURNS,
        envelope_type=CompleteResult,
        message_types=(CompleteCompletion,),
        payload_fields=("ref", "argument", "name", "value"),
    ),
    CallKind.PROGRESS: CallKindSpec(
        kind=CallKind.PROGRESS,
        label="Progress",
        request_type=ProgressNotification,
        method_error=ProgressMethodError,
        error_policy=ErrorPolicy.RAISE,
        handler_shape=HandlerShape.NOTIFICATION,
        allowed_roles=frozenset(
            {RoleKind.REQUEST, RoleKind.METADATA, RoleKind.PROGRESS_TOKEN, RoleKind.NAMED_ARGUMENT}
        ),
        accepted_returns=_NOTIFICATION_RETURNS,
        payload_fields=_payload_fields(ProgressNotification),
    ),
    CallKind.LOGGING: CallKindSpec(
        kind=CallKind.LOGGING,
        label="Logging",
        request_type=LoggingMessageNotification,
        method_error=LoggingMethodError,
        error_policy=ErrorPolicy.RAISE,
        handler_shape=HandlerShape.NOTIFICATION,
        allowed_roles=frozenset({RoleKind.REQUEST, RoleKind.METADATA, RoleKind.NAMED_ARGUMENT}),
        accepted_returns=_NOTIFICATION_RETURNS,
        payload_fields=_payload_fields(LoggingMessageNotification),
    ),
}

for _kind, _item_type in (
    (CallKind.TOOL_LIST_CHANGED, Tool),
    (CallKind.PROMPT_LIST_CHANGED, Prompt),
    (CallKind.RESOURCE_LIST_CHANGED, Resource),
):
    CALL_KIND_SPECS[_kind] = CallKindSpec(
        kind=_kind,
        label=f"{_item_type.__name__} list changed",
        request_type=list,
        method_error=ListChangedMethodError,
        error_policy=ErrorPolicy.RAISE,
        handler_shape=HandlerShape.NOTIFICATION,
        allowed_roles=frozenset({RoleKind.REQUEST}),
        accepted_returns=_NOTIFICATION_RETURNS,
        request_item_type=_item_type,
        positional_request=True,
    )


def spec_for(kind: CallKind) -> CallKindSpec:
    return CALL_KIND_SPECS[CallKind(kind)]
