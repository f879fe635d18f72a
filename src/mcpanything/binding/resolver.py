"""每次呼叫時，依角色從請求中取出參數值。"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcpanything.binding.call_kinds import CallKind, CallKindSpec, spec_for
from mcpanything.binding.roles import MethodBinding, ParameterRole, RoleKind
from mcpanything.core.converter import TypeConverter
from mcpanything.core.meta import McpMeta
from mcpanything.exceptions import ResolutionError
from mcpanything.protocol.types import ServerExchange, TransportContext
from mcpanything.utils.introspection import EMPTY, matches_type


class ArgumentResolver:
    """依 ``MethodBinding`` 的角色順序產生呼叫參數。

    缺少的具名參數（即使標示為必填）會解析為預設值或 None，由方法本身或
    上游的 schema 驗證負責檢查。
    """

    def __init__(self, binding: MethodBinding, converter: Optional[TypeConverter] = None) -> None:
        self._binding = binding
        self._spec: CallKindSpec = spec_for(binding.call_kind)
        self._converter = converter or TypeConverter()
        self._uri_argument: Optional[str] = None
        template = binding.uri_template
        if binding.call_kind is CallKind.RESOURCE and (template is None or not template.is_template):
            named = binding.named_arguments
            if len(named) == 1:
                self._uri_argument = named[0].name

    def resolve(self, exchange: Any, request: Any) -> List[Any]:
        if request is None:
            raise ResolutionError("Request must not be null")

        arguments = self._arguments(request)
        values: List[Any] = []
        for role in self._binding.roles:
            values.append(self._resolve_role(role, exchange, request, arguments))
        return values

    def _arguments(self, request: Any) -> Dict[str, Any]:
        if self._binding.call_kind is not CallKind.RESOURCE:
            return self._spec.arguments_of(request)

        uri = request.uri
        arguments: Dict[str, Any] = {"uri": uri}
        template = self._binding.uri_template
        if template is not None and template.is_template:
            arguments.update(template.extract(uri))
        elif self._uri_argument is not None:
            arguments[self._uri_argument] = uri
        return arguments

    def _resolve_role(
        self,
        role: ParameterRole,
        exchange: Any,
        request: Any,
        arguments: Dict[str, Any],
    ) -> Any:
        if role.kind is RoleKind.EXCHANGE:
            if isinstance(exchange, ServerExchange) and matches_type(role.annotation, TransportContext):
                return exchange.transport_context
            return exchange
        if role.kind is RoleKind.REQUEST:
            return request
        if role.kind is RoleKind.METADATA:
            return McpMeta(getattr(request, "meta", None))
        if role.kind is RoleKind.PROGRESS_TOKEN:
            return getattr(request, "progress_token", None)
        if role.kind is RoleKind.ARGUMENTS_MAP:
            return arguments

        if role.name in arguments:
            return self._converter.convert(arguments[role.name], role.annotation, argument=role.name)
        return None if role.default is EMPTY else role.default
