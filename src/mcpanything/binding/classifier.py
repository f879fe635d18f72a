"""將方法參數逐一分類成角色，並在建立 handler 時完成所有簽名驗證。"""
from __future__ import annotations

import inspect
from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Tuple

from mcpanything.binding.call_kinds import CallKindSpec, ExecutionMode, TransportMode, spec_for
from mcpanything.binding.roles import MethodBinding, ParameterRole, ReturnKind, ReturnShape, RoleKind
from mcpanything.core.markers import META, PROGRESS_TOKEN, Param
from mcpanything.core.meta import McpMeta
from mcpanything.core.uri_template import UriTemplate
from mcpanything.exceptions import BindingError, StatelessExchangeError
from mcpanything.protocol.types import (
    AsyncServerExchange,
    ServerExchange,
    SyncServerExchange,
    TransportContext,
)
from mcpanything.utils.introspection import (
    EMPTY,
    annotation_name,
    is_iterator_type,
    is_string_mapping,
    is_union,
    matches_type,
    resolve_type_hints,
    safe_issubclass,
    sequence_item,
    split_annotated,
    strip_optional,
    type_name,
)
from mcpanything.utils.logger import logger

if TYPE_CHECKING:
    from mcpanything.binding.builder import CallbackConfig

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_PRIMITIVES = (int, float, bool, complex)


def _bind_receiver(method: Callable[..., Any], bean: Any) -> Tuple[Callable[..., Any], Any]:
    """回傳 (實際呼叫目標, receiver)。"""

    if inspect.ismethod(method):
        return method, method.__self__
    if bean is not None:
        name = getattr(method, "__name__", "")
        static = inspect.getattr_static(type(bean), name, None)
        if isinstance(static, staticmethod):
            return method, bean
        if hasattr(method, "__get__"):
            return method.__get__(bean, type(bean)), bean
        return method, bean

    try:
        parameters = list(inspect.signature(method).parameters)
    except (TypeError, ValueError):
        parameters = []
    if parameters and parameters[0] == "self":
        raise BindingError("Bean must not be null", parameter="self", position=0)
    return method, None


class ParameterRoleClassifier:
    """以參數型別與 ``Annotated`` 標記決定每個參數的角色。

    優先順序：exchange/context、request、metadata、progress token、字串鍵
    map、具名參數。分類與驗證只在建立 handler 時執行一次。
    """

    def classify(self, config: "CallbackConfig") -> MethodBinding:
        spec = spec_for(config.call_kind)
        target, receiver = _bind_receiver(config.method, config.bean)

        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError) as exc:
            raise BindingError(f"Cannot inspect signature of {target!r}") from exc
        hints = resolve_type_hints(target)

        roles: List[ParameterRole] = []
        for position, parameter in enumerate(signature.parameters.values()):
            roles.append(self._classify_parameter(parameter, position, hints, spec, config))

        self._check_cardinality(roles, spec)
        self._check_named_arguments(roles, spec)
        if spec.positional_request and not any(role.kind is RoleKind.REQUEST for role in roles):
            raise BindingError(f"{spec.label} method must have a {spec.request_name} parameter")

        return_shape = self._classify_return(target, hints, spec, config)

        uri_template = None
        if config.uri is not None:
            uri_template = UriTemplate(config.uri)
            self._check_uri_variables(roles, uri_template)

        binding = MethodBinding(
            target=target,
            receiver=receiver,
            call_kind=spec.kind,
            roles=tuple(roles),
            return_shape=return_shape,
            uri_template=uri_template,
        )
        logger.debug(
            "Bound %s method %s.%s roles=%s return=%s",
            spec.kind.value,
            binding.owner,
            binding.name,
            [role.kind.value for role in roles],
            return_shape.kind.value,
        )
        return binding

    # ------------------------------------------------------------------
    # 參數
    # ------------------------------------------------------------------
    def _classify_parameter(
        self,
        parameter: inspect.Parameter,
        position: int,
        hints: Dict[str, Any],
        spec: CallKindSpec,
        config: "CallbackConfig",
    ) -> ParameterRole:
        if parameter.kind in _VARIADIC:
            raise BindingError(
                f"Variadic parameter '{parameter.name}' at position {position} is not supported",
                parameter=parameter.name,
                position=position,
            )

        annotation = hints.get(parameter.name, parameter.annotation)
        base, markers = split_annotated(annotation)
        base, inner_markers = split_annotated(strip_optional(base))
        markers = markers + inner_markers
        param_marker = next((m for m in markers if isinstance(m, Param)), None)
        keyword_only = parameter.kind is inspect.Parameter.KEYWORD_ONLY

        def role(kind: RoleKind) -> ParameterRole:
            if kind not in spec.allowed_roles:
                raise BindingError(
                    f"{spec.label} methods do not accept {kind.label} parameters: "
                    f"'{parameter.name}' at position {position}",
                    role=kind,
                    parameter=parameter.name,
                    position=position,
                )
            return ParameterRole(
                kind=kind,
                parameter=parameter.name,
                position=position,
                annotation=base,
                keyword_only=keyword_only,
            )

        if base is not EMPTY and matches_type(base, (TransportContext, ServerExchange)):
            classified = role(RoleKind.EXCHANGE)
            self._check_exchange(base, parameter.name, position, spec, config)
            return classified
        if base is not EMPTY and spec.matches_request(base):
            return role(RoleKind.REQUEST)
        if META in markers or (base is not EMPTY and matches_type(base, McpMeta)):
            return role(RoleKind.METADATA)
        if PROGRESS_TOKEN in markers:
            return role(RoleKind.PROGRESS_TOKEN)
        if param_marker is None and base is not EMPTY and is_string_mapping(base):
            return role(RoleKind.ARGUMENTS_MAP)
        if spec.positional_request and base is EMPTY:
            return role(RoleKind.REQUEST)

        named = role(RoleKind.NAMED_ARGUMENT)
        if param_marker is not None and param_marker.required is not None:
            required = param_marker.required
        else:
            required = parameter.default is EMPTY
        return ParameterRole(
            kind=RoleKind.NAMED_ARGUMENT,
            parameter=parameter.name,
            position=position,
            annotation=named.annotation,
            name=(param_marker.name if param_marker and param_marker.name else parameter.name),
            required=required,
            description=param_marker.description if param_marker else "",
            default=parameter.default,
            keyword_only=keyword_only,
        )

    def _check_exchange(
        self,
        annotation: Any,
        parameter: str,
        position: int,
        spec: CallKindSpec,
        config: "CallbackConfig",
    ) -> None:
        if matches_type(annotation, TransportContext):
            return
        if config.transport is TransportMode.STATELESS:
            raise StatelessExchangeError(
                f"Stateless {spec.label.lower()} methods cannot use {annotation_name(annotation)} "
                f"parameter '{parameter}' at position {position}. Use TransportContext instead.",
                role=RoleKind.EXCHANGE,
                parameter=parameter,
                position=position,
            )
        if config.execution is ExecutionMode.SYNC:
            expected, forbidden = SyncServerExchange, AsyncServerExchange
        else:
            expected, forbidden = AsyncServerExchange, SyncServerExchange
        if matches_type(annotation, forbidden):
            raise BindingError(
                f"{config.execution.value.capitalize()} {spec.label.lower()} methods must use "
                f"{expected.__name__} or TransportContext, got {annotation_name(annotation)} "
                f"for parameter '{parameter}' at position {position}",
                role=RoleKind.EXCHANGE,
                parameter=parameter,
                position=position,
            )

    def _check_cardinality(self, roles: List[ParameterRole], spec: CallKindSpec) -> None:
        seen: Counter = Counter()
        for role in roles:
            if role.is_named:
                continue
            seen[role.kind] += 1
            if seen[role.kind] > 1:
                raise BindingError(
                    f"Method cannot have more than one {role.kind.label} parameter: "
                    f"'{role.parameter}' at position {role.position}",
                    role=role.kind,
                    parameter=role.parameter,
                    position=role.position,
                )

    def _check_named_arguments(self, roles: List[ParameterRole], spec: CallKindSpec) -> None:
        names: Dict[str, ParameterRole] = {}
        for role in roles:
            if not role.is_named:
                continue
            if role.name in names:
                raise BindingError(
                    f"Duplicate argument name '{role.name}' for parameter '{role.parameter}' "
                    f"at position {role.position}",
                    role=role.kind,
                    parameter=role.parameter,
                    position=role.position,
                )
            if spec.payload_fields and role.name not in spec.payload_fields:
                raise BindingError(
                    f"{spec.label} method parameter '{role.parameter}' at position {role.position} "
                    f"does not match any {spec.request_name} field {list(spec.payload_fields)}",
                    role=role.kind,
                    parameter=role.parameter,
                    position=role.position,
                )
            names[role.name] = role

    def _check_uri_variables(self, roles: List[ParameterRole], template: UriTemplate) -> None:
        named = [role for role in roles if role.is_named]
        names = {role.name for role in named}
        if not template.is_template:
            if len(named) > 1:
                extra = named[1]
                raise BindingError(
                    "Resource methods without URI variables can have at most one named parameter, "
                    f"got '{extra.parameter}' at position {extra.position}",
                    role=extra.kind,
                    parameter=extra.parameter,
                    position=extra.position,
                )
            return

        missing = [variable for variable in template.variables if variable not in names]
        if missing:
            raise BindingError(
                f"Method must have parameters for all URI variables. Missing {missing} "
                f"for URI template: {template.template}",
                role=RoleKind.NAMED_ARGUMENT,
            )
        allowed = set(template.variables) | {"uri"}
        for role in named:
            if role.name not in allowed:
                raise BindingError(
                    f"Parameter '{role.parameter}' at position {role.position} does not match "
                    f"any URI variable of {template.template}",
                    role=role.kind,
                    parameter=role.parameter,
                    position=role.position,
                )

    # ------------------------------------------------------------------
    # 回傳形狀
    # ------------------------------------------------------------------
    def _classify_return(
        self,
        target: Callable[..., Any],
        hints: Dict[str, Any],
        spec: CallKindSpec,
        config: "CallbackConfig",
    ) -> ReturnShape:
        function = inspect.unwrap(getattr(target, "__func__", target))
        is_coroutine = inspect.iscoroutinefunction(function)
        is_async_gen = inspect.isasyncgenfunction(function)
        is_generator = inspect.isgeneratorfunction(function)

        if config.execution is ExecutionMode.SYNC and (is_coroutine or is_async_gen):
            raise BindingError(
                f"Method '{getattr(function, '__name__', function)}' is asynchronous "
                "and cannot be bound in sync execution mode"
            )

        annotation = hints.get("return", EMPTY)
        stream = is_generator or is_async_gen or is_iterator_type(annotation)
        if stream:
            # Iterator[X] / AsyncIterator[X] / Generator[X, ...] 收集後視為 list[X]
            item = _stream_item(annotation)
            kind = self.return_kind(List[item] if item is not EMPTY else EMPTY, spec)  # type: ignore[valid-type]
        else:
            kind = self.return_kind(annotation, spec)

        if kind not in spec.accepted_returns:
            raise BindingError(
                f"{spec.label} methods cannot return {type_name(annotation)}; "
                f"accepted shapes are {sorted(k.value for k in spec.accepted_returns)}"
            )
        return ReturnShape(kind=kind, annotation=annotation, deferred=is_coroutine, stream=stream)

    @staticmethod
    def return_kind(annotation: Any, spec: CallKindSpec) -> ReturnKind:
        base, _ = split_annotated(annotation)
        if base is EMPTY or base is Any or base is object:
            return ReturnKind.DYNAMIC
        if base is None or base is type(None):
            return ReturnKind.VOID
        base = strip_optional(base)
        if isinstance(base, str):
            if spec.envelope_type is not None and matches_type(base, spec.envelope_type):
                return ReturnKind.ENVELOPE
            return ReturnKind.DYNAMIC
        if is_union(base):
            return ReturnKind.DYNAMIC
        if spec.envelope_type is not None and safe_issubclass(base, spec.envelope_type):
            return ReturnKind.ENVELOPE
        if spec.message_types and safe_issubclass(base, spec.message_types):
            return ReturnKind.MESSAGE
        if base is str:
            return ReturnKind.TEXT
        if safe_issubclass(base, (bytes, bytearray)):
            return ReturnKind.BINARY
        if safe_issubclass(base, _PRIMITIVES) or safe_issubclass(base, Enum):
            return ReturnKind.PRIMITIVE

        is_sequence, item = sequence_item(base)
        if is_sequence:
            item = strip_optional(split_annotated(item)[0])
            if spec.message_types and safe_issubclass(item, spec.message_types):
                return ReturnKind.MESSAGE_LIST
            if item is str:
                return ReturnKind.TEXT_LIST
            if item is Any and spec.envelope_type is not None and spec.message_types:
                return ReturnKind.DYNAMIC
        return ReturnKind.STRUCTURED


def _stream_item(annotation: Any) -> Any:
    base, _ = split_annotated(annotation)
    args = getattr(base, "__args__", None)
    if not args:
        return EMPTY
    return args[0]
