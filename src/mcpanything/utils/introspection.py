from __future__ import annotations

import collections.abc
import inspect
import typing
from types import UnionType
from typing import Annotated, Any, Callable, Dict, Tuple, get_args, get_origin

EMPTY = inspect.Parameter.empty

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_ITERATOR_ORIGINS = (
    collections.abc.Iterator,
    collections.abc.Generator,
    collections.abc.AsyncIterator,
    collections.abc.AsyncGenerator,
)


def unwrap_callable(fn: Callable[..., Any]) -> Callable[..., Any]:
    """取得 bound method / decorator 之下的原始函數。"""

    return inspect.unwrap(getattr(fn, "__func__", fn))


def resolve_type_hints(fn: Callable[..., Any]) -> Dict[str, Any]:
    """解析函數的 type hints（保留 Annotated）。

    整體解析失敗時逐一解析每個 annotation，只有無法解析的那一個保留字串，
    後續以名稱比對。
    """

    target = unwrap_callable(fn)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError):
        pass

    globalns = getattr(target, "__globals__", {})
    annotations = getattr(target, "__annotations__", {}) or {}
    return {name: _resolve_annotation(value, globalns) for name, value in annotations.items()}


def _resolve_annotation(value: Any, globalns: Dict[str, Any]) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return eval(value, globalns)  # noqa: S307
    except (NameError, TypeError, AttributeError, SyntaxError):
        return value


def split_annotated(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(tp) is Annotated:
        args = get_args(tp)
        return args[0], tuple(args[1:])
    return tp, ()


def is_union(tp: Any) -> bool:
    return get_origin(tp) in (typing.Union, UnionType)


def strip_optional(tp: Any) -> Any:
    """將 ``Optional[X]`` 還原為 ``X``；多型別 union 原樣回傳。"""

    if not is_union(tp):
        return tp
    args = [arg for arg in get_args(tp) if arg is not type(None)]
    if len(args) == 1:
        return args[0]
    return tp


def annotation_name(tp: Any) -> str:
    if isinstance(tp, str):
        return tp.split("[", 1)[0].rsplit(".", 1)[-1].strip()
    return getattr(tp, "__name__", None) or repr(tp).replace("typing.", "")


def safe_issubclass(tp: Any, cls: type | Tuple[type, ...]) -> bool:
    try:
        return inspect.isclass(tp) and issubclass(tp, cls)
    except TypeError:
        return False


def matches_type(tp: Any, cls: type | Tuple[type, ...]) -> bool:
    """判斷 annotation 是否為指定類別；字串 annotation 以類別名稱比對。"""

    if isinstance(tp, str):
        classes = cls if isinstance(cls, tuple) else (cls,)
        return annotation_name(tp) in {c.__name__ for c in classes}
    if is_union(tp):
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        return bool(args) and all(matches_type(arg, cls) for arg in args)
    return safe_issubclass(tp, cls)


def sequence_item(tp: Any) -> Tuple[bool, Any]:
    """回傳 (是否為序列型別, 元素型別)。``str`` 與 ``bytes`` 不視為序列。"""

    if tp in (list, tuple) or tp in (typing.List, typing.Tuple, typing.Sequence):
        return True, Any
    origin = get_origin(tp)
    if origin not in _SEQUENCE_ORIGINS:
        return False, None
    args = [arg for arg in get_args(tp) if arg is not Ellipsis]
    if not args:
        return True, Any
    if origin is tuple and len(set(args)) > 1:
        return True, Any
    return True, args[0]


def is_string_mapping(tp: Any) -> bool:
    if tp in (dict, collections.abc.Mapping, collections.abc.MutableMapping, typing.Dict, typing.Mapping):
        return True
    if get_origin(tp) not in _MAPPING_ORIGINS:
        return False
    args = get_args(tp)
    return not args or args[0] in (str, Any)


def type_name(tp: Any) -> str:
    if tp is EMPTY:
        return "Any"
    if tp is None or tp is type(None):
        return "None"
    if inspect.isclass(tp) and not get_args(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")


def is_iterator_type(tp: Any) -> bool:
    """``Iterator[X]``、``Generator[X, ...]`` 及其 async 版本。"""

    base = split_annotated(tp)[0]
    return base in _ITERATOR_ORIGINS or get_origin(base) in _ITERATOR_ORIGINS
