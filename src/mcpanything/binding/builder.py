"""Binding engine 的入口：驗證設定、分類參數一次，回傳可重複使用的 handler。

    handler = CallbackBuilder().build(
        CallbackConfig(method=Calculator().add, call_kind=CallKind.TOOL)
    )
    result = handler(exchange, CallToolRequest(name="add", arguments={"a": 5, "b": 3}))
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from mcpanything.binding.call_kinds import (
    CallKind,
    CallKindSpec,
    ErrorPolicy,
    ExecutionMode,
    HandlerShape,
    TransportMode,
    spec_for,
)
from mcpanything.binding.classifier import ParameterRoleClassifier
from mcpanything.binding.execution import ExecutionModeAdapter
from mcpanything.binding.invoker import Invoker
from mcpanything.binding.normalizer import ResultNormalizer, normalizer_for
from mcpanything.binding.resolver import ArgumentResolver
from mcpanything.binding.roles import MethodBinding
from mcpanything.core.converter import TypeConverter
from mcpanything.exceptions import (
    BindingError,
    ConversionError,
    InvocationError,
    McpError,
    find_root_cause,
)
from mcpanything.protocol.types import CallToolResult, ErrorCodes, TextContent
from mcpanything.utils.logger import logger


@dataclass(frozen=True)
class CallbackConfig:
    """建立 handler 所需的全部設定，在 :meth:`validate` 一次檢查完畢。"""

    method: Optional[Callable[..., Any]]
    call_kind: CallKind
    bean: Any = None
    execution: ExecutionMode = ExecutionMode.SYNC
    transport: TransportMode = TransportMode.STATEFUL
    uri: Optional[str] = None
    mime_type: Optional[str] = "text/plain"
    structured_output: bool = True
    offload_sync: bool = False
    name: Optional[str] = None

    def validate(self) -> "CallbackConfig":
        if self.method is None:
            raise BindingError("Method must not be null")
        if not callable(self.method):
            raise BindingError(f"Method must be callable, got {type(self.method).__name__}")
        if not isinstance(self.call_kind, CallKind):
            raise BindingError(f"Unsupported call kind: {self.call_kind!r}")
        if not isinstance(self.execution, ExecutionMode):
            raise BindingError(f"Unsupported execution mode: {self.execution!r}")
        if not isinstance(self.transport, TransportMode):
            raise BindingError(f"Unsupported transport mode: {self.transport!r}")
        if self.call_kind is CallKind.RESOURCE and not self.uri:
            raise BindingError("URI must not be null or empty")
        if self.call_kind is not CallKind.RESOURCE and self.uri is not None:
            raise BindingError(f"URI is only supported for resource methods, got {self.call_kind.value}")
        return self


class _BoundCallback:
    """組合 resolver、invoker、normalizer 與執行模式，並套用 call kind 的錯誤策略。"""

    def __init__(
        self,
        binding: MethodBinding,
        resolver: ArgumentResolver,
        adapter: ExecutionModeAdapter,
        normalizer: ResultNormalizer,
        name: Optional[str] = None,
    ) -> None:
        self.binding = binding
        self.name = name or binding.name
        self._spec: CallKindSpec = spec_for(binding.call_kind)
        self._resolver = resolver
        self._adapter = adapter
        self._normalizer = normalizer

    def _handle(self, exchange: Any, request: Any) -> Any:
        try:
            args = self._resolver.resolve(exchange, request)
            value = self._adapter.run(args)
            return self._normalizer.normalize(value, request)
        except (ConversionError, InvocationError) as exc:
            return self._on_error(exc)

    async def _handle_async(self, exchange: Any, request: Any) -> Any:
        try:
            args = self._resolver.resolve(exchange, request)
            value = await self._adapter.run_async(args)
            return self._normalizer.normalize(value, request)
        except (ConversionError, InvocationError) as exc:
            return self._on_error(exc)

    def _on_error(self, exc: Exception) -> Any:
        policy = self._spec.error_policy
        root = exc if isinstance(exc, ConversionError) else find_root_cause(exc)
        if policy is ErrorPolicy.ERROR_RESULT:
            logger.warning("Tool %s failed: %s", self.name, exc)
            return CallToolResult(is_error=True, content=[TextContent(f"Error invoking method: {root}")])

        if policy is ErrorPolicy.PROTOCOL_ERROR:
            if isinstance(exc.__cause__, McpError):
                raise exc.__cause__
            raise McpError(
                ErrorCodes.INVALID_PARAMS,
                f"Error invoking {self._spec.kind.value} method: {self.binding.name} "
                f"in {self.binding.owner}. Cause: {root}",
                data=str(root),
            ) from exc

        raise exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._spec.kind.value}:{self.binding.owner}.{self.binding.name})"


class SyncMethodCallback(_BoundCallback):
    """``handler(exchange_or_context, request) -> envelope``"""

    def __call__(self, exchange: Any, request: Any) -> Any:
        return self._handle(exchange, request)


class AsyncMethodCallback(_BoundCallback):
    """``await handler(exchange_or_context, request) -> envelope``"""

    async def __call__(self, exchange: Any, request: Any) -> Any:
        return await self._handle_async(exchange, request)


class SyncRequestCallback(_BoundCallback):
    """Client 端 request（sampling、elicitation）：``handler(request) -> envelope``"""

    def __call__(self, request: Any) -> Any:
        return self._handle(None, request)


class AsyncRequestCallback(_BoundCallback):
    async def __call__(self, request: Any) -> Any:
        return await self._handle_async(None, request)


class SyncNotificationCallback(_BoundCallback):
    """``handler(payload) -> None``"""

    def __call__(self, payload: Any) -> None:
        self._handle(None, payload)


class AsyncNotificationCallback(_BoundCallback):
    async def __call__(self, payload: Any) -> None:
        await self._handle_async(None, payload)


Callback = Union[
    SyncMethodCallback,
    AsyncMethodCallback,
    SyncRequestCallback,
    AsyncRequestCallback,
    SyncNotificationCallback,
    AsyncNotificationCallback,
]

_CALLBACK_TYPES = {
    (HandlerShape.EXCHANGE_AND_REQUEST, ExecutionMode.SYNC): SyncMethodCallback,
    (HandlerShape.EXCHANGE_AND_REQUEST, ExecutionMode.ASYNC): AsyncMethodCallback,
    (HandlerShape.REQUEST_ONLY, ExecutionMode.SYNC): SyncRequestCallback,
    (HandlerShape.REQUEST_ONLY, ExecutionMode.ASYNC): AsyncRequestCallback,
    (HandlerShape.NOTIFICATION, ExecutionMode.SYNC): SyncNotificationCallback,
    (HandlerShape.NOTIFICATION, ExecutionMode.ASYNC): AsyncNotificationCallback,
}


class CallbackBuilder:
    """建立 handler；所有簽名錯誤都在這裡以 BindingError 拋出。"""

    def __init__(
        self,
        converter: Optional[TypeConverter] = None,
        classifier: Optional[ParameterRoleClassifier] = None,
    ) -> None:
        self._converter = converter or TypeConverter()
        self._classifier = classifier or ParameterRoleClassifier()

    def bind(self, config: CallbackConfig) -> MethodBinding:
        return self._classifier.classify(config.validate())

    def build(self, config: CallbackConfig) -> Callback:
        binding = self.bind(config)
        spec = spec_for(binding.call_kind)
        invoker = Invoker(binding)
        adapter = ExecutionModeAdapter(
            invoker,
            binding.return_shape,
            config.execution,
            offload_sync=config.offload_sync,
        )
        normalizer = normalizer_for(
            binding,
            structured_output=config.structured_output,
            mime_type=config.mime_type,
        )
        callback_type = _CALLBACK_TYPES[(spec.handler_shape, config.execution)]
        return callback_type(
            binding,
            ArgumentResolver(binding, self._converter),
            adapter,
            normalizer,
            name=config.name,
        )


def build_callback(method: Callable[..., Any], call_kind: CallKind, **options: Any) -> Callback:
    """``CallbackBuilder().build(CallbackConfig(...))`` 的簡寫。"""

    return CallbackBuilder().build(CallbackConfig(method=method, call_kind=call_kind, **options))
