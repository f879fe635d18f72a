"""Decorator 共用的標記資料。

decorator 不會包裝函數，只會在函數上附加 ``mcp_method`` 屬性，由 provider
掃描後交給 :class:`~mcpanything.binding.CallbackBuilder` 建立 handler。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from mcpanything.binding.call_kinds import CallKind
from mcpanything.protocol.types import CompleteReference, ToolAnnotations

MCP_METHOD_ATTR = "mcp_method"


@dataclass(frozen=True)
class McpMethodInfo:
    call_kind: CallKind
    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    uri: Optional[str] = None
    mime_type: Optional[str] = None
    structured_output: bool = True
    annotations: Optional[ToolAnnotations] = None
    client_id: Optional[str] = None
    clients: Tuple[str, ...] = ()
    reference: Optional[CompleteReference] = None


def _underlying(fn: Any) -> Callable[..., Any]:
    if isinstance(fn, (staticmethod, classmethod)):
        return fn.__func__
    return fn


def get_method_info(fn: Any) -> Optional[McpMethodInfo]:
    info = getattr(_underlying(fn), MCP_METHOD_ATTR, None)
    return info if isinstance(info, McpMethodInfo) else None


def mark(func: Any, info: McpMethodInfo) -> Any:
    """支援 ``@decorator`` 與 ``@decorator(...)`` 兩種寫法。"""

    def decorator(fn: Any) -> Any:
        target = _underlying(fn)
        if not callable(target):
            raise TypeError(f"@mcp_{info.call_kind.value} can only decorate callables, got {fn!r}")
        setattr(target, MCP_METHOD_ATTR, info)
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def as_clients(clients: str | Tuple[str, ...] | list[str] | None) -> Tuple[str, ...]:
    if clients is None:
        return ()
    if isinstance(clients, str):
        return (clients,)
    return tuple(clients)
