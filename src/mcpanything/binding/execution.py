"""同步與 asyncio 兩種執行模式的橋接。"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Iterator, Mapping
from typing import Any, Sequence

from mcpanything.binding.call_kinds import ExecutionMode
from mcpanything.binding.invoker import Invoker
from mcpanything.binding.roles import ReturnShape


def _is_iterator(value: Any) -> bool:
    return isinstance(value, Iterator) and not isinstance(value, (str, bytes, bytearray, Mapping))


class ExecutionModeAdapter:
    """將純值、awaitable 或有限序列的回傳轉成單一結果值。

    SYNC 模式在呼叫端執行緒上完成；ASYNC 模式只在被 await 時才呼叫方法，
    純值直接使用，不額外排程。``offload_sync`` 為 True 時，同步方法改由
    ``asyncio.to_thread`` 執行。
    """

    def __init__(
        self,
        invoker: Invoker,
        shape: ReturnShape,
        mode: ExecutionMode,
        *,
        offload_sync: bool = False,
    ) -> None:
        self._invoker = invoker
        self._shape = shape
        self.mode = mode
        self._offload = offload_sync and not shape.deferred and not shape.stream

    def run(self, args: Sequence[Any]) -> Any:
        value = self._invoker.call(args)
        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            raise self._invoker.reject("Method returned an awaitable in sync execution mode")
        if _is_iterator(value):
            value = self._invoker.drain(value)
        return value

    async def run_async(self, args: Sequence[Any]) -> Any:
        if self._offload:
            value = await asyncio.to_thread(self._invoker.call, args)
        else:
            value = self._invoker.call(args)

        if inspect.isawaitable(value):
            value = await self._invoker.await_value(value)
        if isinstance(value, AsyncIterator):
            value = await self._invoker.drain_async(value)
        elif _is_iterator(value):
            value = self._invoker.drain(value)
        return value
