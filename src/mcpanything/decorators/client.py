"""Client 端方法：sampling、elicitation 與各種通知。"""
from __future__ import annotations

from typing import Any, Callable, Sequence

from mcpanything.binding.call_kinds import CallKind
from mcpanything.decorators.base import McpMethodInfo, as_clients, mark


def mcp_sampling(func: Callable[..., Any] | None = None, *, client_id: str | None = None) -> Any:
    return mark(func, McpMethodInfo(call_kind=CallKind.SAMPLING, client_id=client_id))


def mcp_elicitation(func: Callable[..., Any] | None = None, *, client_id: str | None = None) -> Any:
    return mark(func, McpMethodInfo(call_kind=CallKind.ELICITATION, client_id=client_id))


def _notification(kind: CallKind, func: Any, clients: str | Sequence[str] | None) -> Any:
    return mark(func, McpMethodInfo(call_kind=kind, clients=as_clients(clients)))


def mcp_progress(func: Callable[..., Any] | None = None, *, clients: str | Sequence[str] | None = None) -> Any:
    return _notification(CallKind.PROGRESS, func, clients)


def mcp_logging(func: Callable[..., Any] | None = None, *, clients: str | Sequence[str] | None = None) -> Any:
    return _notification(CallKind.LOGGING, func, clients)


def mcp_tool_list_changed(
    func: Callable[..., Any] | None = None, *, clients: str | Sequence[str] | None = None
) -> Any:
    return _notification(CallKind.TOOL_LIST_CHANGED, func, clients)


def mcp_prompt_list_changed(
    func: Callable[..., Any] | None = None, *, clients: str | Sequence[str] | None = None
) -> Any:
    return _notification(CallKind.PROMPT_LIST_CHANGED, func, clients)


def mcp_resource_list_changed(
    func: Callable[..., Any] | None = None, *, clients: str | Sequence[str] | None = None
) -> Any:
    return _notification(CallKind.RESOURCE_LIST_CHANGED, func, clients)
