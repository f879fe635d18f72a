from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from mcpanything import CallbackBuilder, CallbackConfig, CallKind, McpMeta, Param
from mcpanything.core import schema
from mcpanything.core.schema import build_input_schema, build_output_schema, python_type_to_schema
from mcpanything.protocol import SyncServerExchange
from mcpanything.utils.docstring_parser import parse_docstring


class Status(Enum):
    READY = "ready"
    DONE = "done"


@dataclass
class Point:
    x: int
    y: int


def test_python_type_to_schema_basic():
    assert python_type_to_schema(int) == {"type": "integer"}
    assert python_type_to_schema(str) == {"type": "string"}
    assert python_type_to_schema(list) == {"type": "array"}


def test_python_type_to_schema_complex_types():
    assert python_type_to_schema(bool) == {"type": "boolean"}
    assert python_type_to_schema(float) == {"type": "number"}
    assert python_type_to_schema(Union[int, str]) == {"oneOf": [{"type": "integer"}, {"type": "string"}]}
    assert python_type_to_schema(Optional[int]) == {"oneOf": [{"type": "integer"}, {"type": "null"}]}
    assert python_type_to_schema(List[List[int]]) == {
        "type": "array",
        "items": {"type": "array", "items": {"type": "integer"}},
    }
    assert python_type_to_schema(Dict[str, List[int]]) == {
        "type": "object",
        "additionalProperties": {"type": "array", "items": {"type": "integer"}},
    }
    assert python_type_to_schema(Literal["red", "blue"]) == {"enum": ["red", "blue"]}
    assert python_type_to_schema(Status) == {"type": "string", "enum": ["ready", "done"]}


def test_dataclass_schema_comes_from_pydantic():
    point = python_type_to_schema(Point)

    assert point["type"] == "object"
    assert set(point["properties"]) == {"x", "y"}
    assert point["required"] == ["x", "y"]


def test_python_type_to_schema_cache_and_copy():
    schema._python_type_to_schema_cached.cache_clear()

    first = python_type_to_schema(int)
    assert schema._python_type_to_schema_cached.cache_info().misses == 1

    first["patched"] = True

    second = python_type_to_schema(int)
    assert schema._python_type_to_schema_cached.cache_info().hits >= 1
    assert "patched" not in second


def search(
    exchange: SyncServerExchange,
    meta: McpMeta,
    query: Annotated[str, Param(name="q", description="搜尋字串")],
    limit: int = 10,
    status: Status = Status.READY,
) -> List[str]:
    """搜尋文件。

    Args:
        query: 不會被使用，Param 的說明優先
        limit: 回傳筆數上限
    """
    return []


def test_input_schema_only_exposes_named_arguments():
    binding = CallbackBuilder().bind(CallbackConfig(method=search, call_kind=CallKind.TOOL))

    input_schema = build_input_schema(binding.roles, parse_docstring(search))

    assert input_schema == {
        "type": "object",
        "properties": {
            "q": {"type": "string", "description": "搜尋字串"},
            "limit": {"type": "integer", "description": "回傳筆數上限", "default": 10},
            "status": {"type": "string", "enum": ["ready", "done"]},
        },
        "required": ["q"],
        "additionalProperties": False,
    }


def test_output_schema_for_structured_results():
    assert build_output_schema(str) is None
    assert build_output_schema(int) is None
    assert build_output_schema(List[str]) is None

    point = build_output_schema(Point)
    assert point["type"] == "object"
    assert set(point["properties"]) == {"x", "y"}
