"""Host runtime 提供的 MCP 型別。

這些型別代表 transport 與 session 層交給 binding engine 的固定介面：
exchange/context 只做型別辨識，不會被 engine 深入讀取；request 與
result 則是各 call kind 的請求與回應封裝。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ErrorCodes:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class LoggingLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"


class ElicitAction(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"


# ---------------------------
# Exchange / context
# ---------------------------


class TransportContext:
    """無狀態 transport 的請求情境，只攜帶 transport 層提供的 metadata。"""

    def __init__(self, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._metadata = dict(metadata or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._metadata.get(key, default)


class ServerExchange:
    """有狀態 session 的 exchange 基底。"""

    def __init__(
        self,
        session: Any = None,
        *,
        transport_context: Optional[TransportContext] = None,
        client_info: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.session = session
        self.transport_context = transport_context or TransportContext()
        self.client_info = dict(client_info or {})


class SyncServerExchange(ServerExchange):
    """同步 server 的 exchange。"""


class AsyncServerExchange(ServerExchange):
    """非同步 server 的 exchange。"""


# ---------------------------
# Content
# ---------------------------


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ImageContent:
    data: str
    mime_type: str
    type: str = "image"


Content = Union[TextContent, ImageContent]


@dataclass(frozen=True)
class TextResourceContents:
    uri: str
    mime_type: Optional[str]
    text: str


@dataclass(frozen=True)
class BlobResourceContents:
    uri: str
    mime_type: Optional[str]
    blob: str


ResourceContents = Union[TextResourceContents, BlobResourceContents]


@dataclass(frozen=True)
class PromptMessage:
    role: Role
    content: Content


@dataclass(frozen=True)
class SamplingMessage:
    role: Role
    content: Content


@dataclass(frozen=True)
class PromptReference:
    name: str
    type: str = "ref/prompt"


@dataclass(frozen=True)
class ResourceReference:
    uri: str
    type: str = "ref/resource"


CompleteReference = Union[PromptReference, ResourceReference]


@dataclass(frozen=True)
class CompleteArgument:
    name: str
    value: str


# ---------------------------
# Requests
# ---------------------------


@dataclass(frozen=True)
class CallToolRequest:
    name: str
    arguments: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class GetPromptRequest:
    name: str
    arguments: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class ReadResourceRequest:
    uri: str
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class CreateMessageRequest:
    messages: List[SamplingMessage]
    max_tokens: int = 1024
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None
    stop_sequences: Optional[List[str]] = None
    model_preferences: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class ElicitRequest:
    message: str
    requested_schema: Dict[str, Any] = field(default_factory=dict)
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class CompleteRequest:
    ref: CompleteReference
    argument: CompleteArgument
    context_arguments: Optional[Dict[str, str]] = None
    meta: Optional[Dict[str, Any]] = None
    progress_token: Any = None


@dataclass(frozen=True)
class ProgressNotification:
    progress_token: Any
    progress: float
    total: Optional[float] = None
    message: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class LoggingMessageNotification:
    level: LoggingLevel
    data: Any
    logger: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


# ---------------------------
# Results
# ---------------------------


@dataclass(frozen=True)
class CallToolResult:
    content: List[Content] = field(default_factory=list)
    is_error: bool = False
    structured_content: Any = None
    meta: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class GetPromptResult:
    messages: List[PromptMessage] = field(default_factory=list)
    description: Optional[str] = None


@dataclass(frozen=True)
class ReadResourceResult:
    contents: List[ResourceContents] = field(default_factory=list)


@dataclass(frozen=True)
class CreateMessageResult:
    role: Role
    content: Content
    model: str
    stop_reason: Optional[str] = None


@dataclass(frozen=True)
class CompleteCompletion:
    values: List[str] = field(default_factory=list)
    total: Optional[int] = None
    has_more: Optional[bool] = None


@dataclass(frozen=True)
class CompleteResult:
    completion: CompleteCompletion = field(default_factory=CompleteCompletion)


@dataclass(frozen=True)
class ElicitResult:
    action: ElicitAction
    content: Optional[Dict[str, Any]] = None


# ---------------------------
# Definitions
# ---------------------------


@dataclass(frozen=True)
class ToolAnnotations:
    title: Optional[str] = None
    read_only_hint: bool = False
    destructive_hint: bool = True
    idempotent_hint: bool = False
    open_world_hint: bool = True


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_schema: Dict[str, Any]
    title: Optional[str] = None
    output_schema: Optional[Dict[str, Any]] = None
    annotations: Optional[ToolAnnotations] = None


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: Optional[str] = None
    required: bool = True


@dataclass(frozen=True)
class Prompt:
    name: str
    description: Optional[str] = None
    title: Optional[str] = None
    arguments: List[PromptArgument] = field(default_factory=list)


@dataclass(frozen=True)
class Resource:
    uri: str
    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class ResourceTemplate:
    uri_template: str
    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = None
