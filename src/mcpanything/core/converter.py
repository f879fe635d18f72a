"""將請求中未定型的參數值轉換為方法宣告的型別。"""
from __future__ import annotations

import inspect
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from mcpanything.exceptions import ConversionError
from mcpanything.utils.introspection import EMPTY, safe_issubclass, split_annotated, strip_optional, type_name


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter(target: Any) -> TypeAdapter:
    try:
        return _cached_adapter(target)
    except TypeError as exc:
        # 不可 hash 的型別無法進入快取；schema 產生失敗則直接拋出
        if "unhashable" not in str(exc):
            raise
        return TypeAdapter(target)


class TypeConverter:
    """以 pydantic ``TypeAdapter`` 為基礎的結構化轉換器。

    支援基本型別、巢狀 dataclass、pydantic model、list 與 dict。Enum 先以
    成員名稱（區分大小寫）比對，再以值比對；目標為 ``str`` 時數值會轉成
    字串。轉換失敗拋出 :class:`ConversionError`。
    """

    def convert(self, value: Any, target: Any, *, argument: str | None = None) -> Any:
        if value is None or target is EMPTY or target is Any:
            return value

        base, _ = split_annotated(target)
        base = strip_optional(base)
        if isinstance(base, str) or base is Any:
            # 無法解析的前向參照，原樣傳遞
            return value

        if inspect.isclass(base) and isinstance(value, base) and not (
            base is int and isinstance(value, bool)
        ):
            return value

        if safe_issubclass(base, Enum):
            return self._convert_enum(value, base, argument)

        if base is str and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)

        try:
            return _adapter(base).validate_python(value)
        except (ValidationError, TypeError, ValueError) as exc:
            raise ConversionError(type_name(base), value, argument=argument) from exc

    def _convert_enum(self, value: Any, enum_type: type[Enum], argument: str | None) -> Enum:
        if isinstance(value, str) and value in enum_type.__members__:
            return enum_type[value]
        try:
            return enum_type(value)
        except ValueError as exc:
            raise ConversionError(enum_type.__name__, value, argument=argument) from exc
