"""Schema 生成工具，根據具名參數的 type hints 產生 JSON Schema。"""
from __future__ import annotations

import copy
import dataclasses
import inspect
from enum import Enum
from functools import lru_cache
from types import UnionType
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, get_args, get_origin

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticUserError

from mcpanything.utils.docstring_parser import DocMetadata
from mcpanything.utils.introspection import EMPTY, safe_issubclass, split_annotated, strip_optional

if TYPE_CHECKING:
    from mcpanything.binding.roles import ParameterRole

_TYPE_MAPPING = {
    str: {"type": "string"},
    int: {"type": "integer"},
    float: {"type": "number"},
    bool: {"type": "boolean"},
    dict: {"type": "object"},
    list: {"type": "array"},
}


def _literal_schema(py_type: Any) -> Dict[str, Any]:
    values = list(get_args(py_type))
    return {"enum": values}


def _enum_schema(py_type: type[Enum]) -> Dict[str, Any]:
    values = [member.value for member in py_type]
    schema: Dict[str, Any] = {"enum": values}

    if values and type(values[0]) in _TYPE_MAPPING:
        schema = {"type": _TYPE_MAPPING[type(values[0])]["type"], **schema}

    return schema


def _union_schema(args: tuple[Any, ...]) -> Dict[str, Any]:
    return {"oneOf": [python_type_to_schema(arg) for arg in args]}


def _container_schema(origin: Any, args: tuple[Any, ...]) -> Dict[str, Any]:
    if origin in (list, tuple, set, frozenset) or str(origin).endswith("Sequence"):
        item_type = args[0] if args else Any
        return {"type": "array", "items": python_type_to_schema(item_type)}
    if origin is dict or str(origin).endswith("Mapping"):
        value_type = args[1] if len(args) > 1 else Any
        return {
            "type": "object",
            "additionalProperties": python_type_to_schema(value_type),
        }
    return {"type": "string"}


def _is_model_type(py_type: Any) -> bool:
    return (inspect.isclass(py_type) and dataclasses.is_dataclass(py_type)) or safe_issubclass(py_type, BaseModel)


@lru_cache(maxsize=128)
def _python_type_to_schema_cached(py_type: Any) -> Dict[str, Any]:
    """快取版本的類型轉換，避免重複計算。"""
    if py_type is Any or py_type is EMPTY:
        return {}

    if py_type in _TYPE_MAPPING:
        return dict(_TYPE_MAPPING[py_type])

    if isinstance(py_type, type) and issubclass(py_type, Enum):
        return _enum_schema(py_type)

    if py_type is type(None):
        return {"type": "null"}

    if _is_model_type(py_type):
        return TypeAdapter(py_type).json_schema()

    origin = get_origin(py_type)
    args = get_args(py_type)

    if origin is None:
        return {"type": "string"}

    if str(origin).endswith("Literal"):
        return _literal_schema(py_type)

    if origin in (getattr(__import__("typing"), "Union", None), UnionType):
        return _union_schema(args)

    return _container_schema(origin, args)


def python_type_to_schema(py_type: Any) -> Dict[str, Any]:
    """將 Python 類型轉換成 JSON Schema 片段並確保回傳可安全修改的副本。"""

    base, _ = split_annotated(py_type)
    if isinstance(base, str):
        return {"type": "string"}
    # 深拷貝避免外部修改破壞快取內容
    return copy.deepcopy(_python_type_to_schema_cached(base))


def build_input_schema(
    roles: Sequence["ParameterRole"], documentation: Optional[DocMetadata] = None
) -> Dict[str, Any]:
    """只以具名參數產生 input schema；exchange、request 等注入參數不對外公開。"""

    properties: Dict[str, Any] = {}
    required = []

    for role in roles:
        if not role.is_named:
            continue

        annotation = role.annotation if role.annotation is not EMPTY else str
        schema = python_type_to_schema(annotation)
        description = role.description or (documentation.describe(role.parameter) if documentation else None)
        if description:
            schema["description"] = description
        if isinstance(role.default, (str, int, float, bool)):
            schema["default"] = role.default

        properties[role.name] = schema
        if role.required:
            required.append(role.name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def build_output_schema(return_annotation: Any) -> Optional[Dict[str, Any]]:
    """結構化回傳值的 output schema；純文字或無法描述的型別回傳 None。"""

    if return_annotation in (EMPTY, None, type(None), Any, str):
        return None
    base = strip_optional(split_annotated(return_annotation)[0])
    if isinstance(base, str) or base in _TYPE_MAPPING or safe_issubclass(base, Enum):
        return None
    try:
        schema = TypeAdapter(base).json_schema()
    except (PydanticUserError, TypeError):
        return None
    if schema.get("type") != "object":
        return None
    return schema
