from .builder import (
    AsyncMethodCallback,
    AsyncNotificationCallback,
    AsyncRequestCallback,
    Callback,
    CallbackBuilder,
    CallbackConfig,
    SyncMethodCallback,
    SyncNotificationCallback,
    SyncRequestCallback,
    build_callback,
)
from .call_kinds import CALL_KIND_SPECS, CallKind, CallKindSpec, ErrorPolicy, ExecutionMode, TransportMode
from .classifier import ParameterRoleClassifier
from .execution import ExecutionModeAdapter
from .invoker import Invoker
from .normalizer import ResultNormalizer
from .resolver import ArgumentResolver
from .roles import MethodBinding, ParameterRole, ReturnKind, ReturnShape, RoleKind

__all__ = [
    "ArgumentResolver",
    "AsyncMethodCallback",
    "AsyncNotificationCallback",
    "AsyncRequestCallback",
    "CALL_KIND_SPECS",
    "CallKind",
    "CallKindSpec",
    "Callback",
    "CallbackBuilder",
    "CallbackConfig",
    "ErrorPolicy",
    "ExecutionMode",
    "ExecutionModeAdapter",
    "Invoker",
    "MethodBinding",
    "ParameterRole",
    "ParameterRoleClassifier",
    "ResultNormalizer",
    "ReturnKind",
    "ReturnShape",
    "RoleKind",
    "SyncMethodCallback",
    "SyncNotificationCallback",
    "SyncRequestCallback",
    "TransportMode",
    "build_callback",
]
