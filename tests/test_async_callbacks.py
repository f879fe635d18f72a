import asyncio
import inspect
import threading
from typing import Any, AsyncIterator, List, Optional

import pytest

from mcpanything import CallKind, ExecutionMode, McpError, build_callback
from mcpanything.binding import AsyncMethodCallback
from mcpanything.protocol import (
    AsyncServerExchange,
    CallToolRequest,
    GetPromptRequest,
    LoggingLevel,
    LoggingMessageNotification,
    TextContent,
)

CALLS: List[str] = []


def _async_tool(method, **options):
    return build_callback(method, CallKind.TOOL, execution=ExecutionMode.ASYNC, **options)


async def slow_add(exchange: AsyncServerExchange, a: int, b: int) -> int:
    await asyncio.sleep(0)
    CALLS.append("slow_add")
    return a + b


@pytest.mark.asyncio
async def test_coroutine_method_runs_only_when_awaited():
    CALLS.clear()
    handler = _async_tool(slow_add)
    assert isinstance(handler, AsyncMethodCallback)

    pending = handler(AsyncServerExchange(), CallToolRequest(name="add", arguments={"a": 5, "b": 3}))
    assert inspect.iscoroutine(pending)
    assert CALLS == []

    result = await pending
    assert CALLS == ["slow_add"]
    assert result.content == [TextContent("8")]


async def stream(count: int) -> AsyncIterator[str]:
    for index in range(count):
        await asyncio.sleep(0)
        yield f"item-{index}"


@pytest.mark.asyncio
async def test_async_generator_is_drained_into_list():
    result = await _async_tool(stream)(None, CallToolRequest(name="stream", arguments={"count": 3}))

    assert [item.text for item in result.content] == ["item-0", "item-1", "item-2"]


def plain_echo(text: str) -> str:
    return text


def thread_name() -> str:
    return str(threading.get_ident())


@pytest.mark.asyncio
async def test_plain_method_behind_async_handler():
    result = await _async_tool(plain_echo)(None, CallToolRequest(name="echo", arguments={"text": "hi"}))
    assert result.content == [TextContent("hi")]

    inline = await _async_tool(thread_name)(None, CallToolRequest(name="thread"))
    assert inline.content[0].text == str(threading.get_ident())

    offloaded = await _async_tool(thread_name, offload_sync=True)(None, CallToolRequest(name="thread"))
    assert offloaded.content[0].text != str(threading.get_ident())


async def async_fire(text: str) -> None:
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_async_void_returns_done():
    result = await _async_tool(async_fire)(None, CallToolRequest(name="fire", arguments={"text": "x"}))

    assert result.content == [TextContent('"Done"')]


async def async_boom(text: str) -> str:
    await asyncio.sleep(0)
    raise ValueError("bad value")


@pytest.mark.asyncio
async def test_async_exception_becomes_error_result():
    result = await _async_tool(async_boom)(None, CallToolRequest(name="boom", arguments={"text": "x"}))

    assert result.is_error is True
    assert result.content == [TextContent("Error invoking method: bad value")]


async def hang() -> str:
    await asyncio.sleep(10)
    return "late"


@pytest.mark.asyncio
async def test_cancellation_is_not_wrapped():
    task = asyncio.ensure_future(_async_tool(hang)(None, CallToolRequest(name="hang")))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


class AsyncPrompts:
    async def broken(self, topic: str) -> str:
        raise RuntimeError(f"no prompt for {topic}")


@pytest.mark.asyncio
async def test_async_prompt_error_becomes_protocol_error():
    handler = build_callback(AsyncPrompts().broken, CallKind.PROMPT, execution=ExecutionMode.ASYNC)

    with pytest.raises(McpError) as exc:
        await handler(None, GetPromptRequest(name="broken", arguments={"topic": "cats"}))

    assert exc.value.message == "Error invoking prompt method: broken in AsyncPrompts. Cause: no prompt for cats"


RECEIVED: List[Any] = []


async def on_log(level: LoggingLevel, data: Any, logger: Optional[str]) -> None:
    RECEIVED.append((level, data, logger))


@pytest.mark.asyncio
async def test_async_notification_returns_none():
    RECEIVED.clear()
    handler = build_callback(on_log, CallKind.LOGGING, execution=ExecutionMode.ASYNC)

    result = await handler(LoggingMessageNotification(level=LoggingLevel.INFO, data="ready", logger="srv"))

    assert result is None
    assert RECEIVED == [(LoggingLevel.INFO, "ready", "srv")]
