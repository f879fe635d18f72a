"""Binding engine 的不可變描述子：參數角色、回傳形狀與方法綁定。"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple

from mcpanything.utils.introspection import EMPTY

if TYPE_CHECKING:
    from mcpanything.binding.call_kinds import CallKind
    from mcpanything.core.uri_template import UriTemplate


class RoleKind(str, Enum):
    EXCHANGE = "exchange"
    REQUEST = "request"
    NAMED_ARGUMENT = "named_argument"
    ARGUMENTS_MAP = "arguments_map"
    METADATA = "metadata"
    PROGRESS_TOKEN = "progress_token"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class ReturnKind(str, Enum):
    ENVELOPE = "envelope"
    VOID = "void"
    MESSAGE = "message"
    MESSAGE_LIST = "message_list"
    TEXT = "text"
    TEXT_LIST = "text_list"
    BINARY = "binary"
    PRIMITIVE = "primitive"
    STRUCTURED = "structured"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class ParameterRole:
    """單一參數的角色。``name`` 只對具名參數有意義，是請求中的鍵名。"""

    kind: RoleKind
    parameter: str
    position: int
    annotation: Any = EMPTY
    name: Optional[str] = None
    required: bool = False
    description: str = ""
    default: Any = EMPTY
    keyword_only: bool = False

    @property
    def is_named(self) -> bool:
        return self.kind is RoleKind.NAMED_ARGUMENT


@dataclass(frozen=True)
class ReturnShape:
    """宣告的回傳形狀。

    ``deferred`` 表示方法回傳 awaitable（``async def``），``stream`` 表示
    方法產生有限序列（generator / async generator），執行時會收集成 list。
    """

    kind: ReturnKind
    annotation: Any = EMPTY
    deferred: bool = False
    stream: bool = False


@dataclass(frozen=True)
class MethodBinding:
    """建立一次、之後所有呼叫共用的方法描述。"""

    target: Callable[..., Any]
    receiver: Any
    call_kind: "CallKind"
    roles: Tuple[ParameterRole, ...]
    return_shape: ReturnShape
    uri_template: Optional["UriTemplate"] = None

    @property
    def name(self) -> str:
        return getattr(self.target, "__name__", None) or type(self.target).__name__

    @property
    def owner(self) -> str:
        if self.receiver is not None:
            return type(self.receiver).__name__
        qualname = getattr(self.target, "__qualname__", "")
        if "." in qualname:
            return qualname.rsplit(".", 1)[0]
        return getattr(self.target, "__module__", None) or "<unknown>"

    @property
    def named_arguments(self) -> Tuple[ParameterRole, ...]:
        return tuple(role for role in self.roles if role.is_named)

    def role_of(self, kind: RoleKind) -> Optional[ParameterRole]:
        for role in self.roles:
            if role.kind is kind:
                return role
        return None
