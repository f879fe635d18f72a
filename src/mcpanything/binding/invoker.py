"""呼叫使用者方法，並把其例外包裝成 call kind 專屬的 InvocationError。"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, AsyncIterable, Awaitable, Dict, Iterable, Iterator, List, Sequence, Tuple, Type

from mcpanything.binding.call_kinds import spec_for
from mcpanything.binding.roles import MethodBinding
from mcpanything.exceptions import InvocationError


class Invoker:
    def __init__(self, binding: MethodBinding) -> None:
        self._binding = binding
        spec = spec_for(binding.call_kind)
        self._method_error: Type[InvocationError] = spec.method_error
        self._kind_label = spec.label
        self._label = f"{binding.owner}.{binding.name}"

    @contextmanager
    def user_errors(self) -> Iterator[None]:
        """使用者程式碼拋出的 ``Exception`` 一律包裝；``CancelledError`` 不受影響。"""

        try:
            yield
        except Exception as exc:
            raise self._method_error(
                f"{self._kind_label} method {self._label} raised "
                f"{type(exc).__name__}: {exc}",
                method=self._label,
            ) from exc

    def _split(self, args: Sequence[Any]) -> Tuple[List[Any], Dict[str, Any]]:
        positional: List[Any] = []
        keywords: Dict[str, Any] = {}
        for role, value in zip(self._binding.roles, args):
            if role.keyword_only:
                keywords[role.parameter] = value
            else:
                positional.append(value)
        return positional, keywords

    def call(self, args: Sequence[Any]) -> Any:
        positional, keywords = self._split(args)
        with self.user_errors():
            return self._binding.target(*positional, **keywords)

    def drain(self, values: Iterable[Any]) -> List[Any]:
        with self.user_errors():
            return list(values)

    async def await_value(self, awaitable: Awaitable[Any]) -> Any:
        with self.user_errors():
            return await awaitable

    async def drain_async(self, values: AsyncIterable[Any]) -> List[Any]:
        with self.user_errors():
            return [value async for value in values]

    def reject(self, message: str) -> InvocationError:
        return self._method_error(message, method=self._label)
