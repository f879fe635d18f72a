"""Server 端方法：tool、prompt、resource。"""
from __future__ import annotations

from typing import Any, Callable, Optional

from mcpanything.binding.call_kinds import CallKind
from mcpanything.decorators.base import McpMethodInfo, mark
from mcpanything.protocol.types import CompleteReference, PromptReference, ResourceReference, ToolAnnotations


def mcp_tool(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    title: str | None = None,
    description: str | None = None,
    structured_output: bool = True,
    annotations: Optional[ToolAnnotations] = None,
) -> Any:
    """標記 tool 方法。

    未提供 description 時 provider 會改用 docstring 摘要；``structured_output``
    為 False 時，複雜回傳值只以 JSON 文字輸出。
    """

    info = McpMethodInfo(
        call_kind=CallKind.TOOL,
        name=name,
        title=title,
        description=description,
        structured_output=structured_output,
        annotations=annotations,
    )
    return mark(func, info)


def mcp_prompt(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Any:
    """標記 prompt 方法，具名參數會成為 prompt arguments。"""

    return mark(func, McpMethodInfo(call_kind=CallKind.PROMPT, name=name, title=title, description=description))


def mcp_resource(
    func: Callable[..., Any] | None = None,
    *,
    uri: str,
    name: str | None = None,
    title: str | None = None,
    description: str | None = None,
    mime_type: str = "text/plain",
) -> Any:
    """標記 resource 方法。``uri`` 含 ``{變數}`` 時視為 resource template。"""

    info = McpMethodInfo(
        call_kind=CallKind.RESOURCE,
        name=name,
        title=title,
        description=description,
        uri=uri,
        mime_type=mime_type,
    )
    return mark(func, info)


def mcp_complete(
    func: Callable[..., Any] | None = None,
    *,
    prompt: str | None = None,
    uri: str | None = None,
) -> Any:
    """標記 completion 方法，``prompt`` 與 ``uri`` 必須且只能指定一個。

    方法可宣告 ``CompleteRequest``，或以 ``argument``、``ref``、``name``、
    ``value`` 具名參數取得要補完的引數。
    """

    if (prompt is None) == (uri is None):
        raise ValueError("Either prompt or uri must be provided for @mcp_complete, but not both")
    reference: CompleteReference = PromptReference(prompt) if prompt is not None else ResourceReference(uri or "")
    return mark(func, McpMethodInfo(call_kind=CallKind.COMPLETE, reference=reference))
