"""從方法 docstring 擷取描述資訊。

decorator 未提供 ``description`` 時，tool 與 prompt 的描述改用 docstring
摘要；``Args`` 區段中的說明則成為 input schema 與 prompt argument 的
``description``。只支援 Google 風格的區段標題，其餘格式一律視為摘要。
"""
from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from mcpanything.utils.introspection import unwrap_callable


@dataclass(frozen=True)
class DocMetadata:
    """Docstring 解析後的結構化結果。"""

    summary: str
    parameters: Dict[str, str] = field(default_factory=dict)
    returns: Optional[str] = None

    def describe(self, parameter: str) -> Optional[str]:
        return self.parameters.get(parameter)


_SECTION_HEADERS = {
    "args": {"args", "arguments", "parameters", "params", "參數"},
    "returns": {"returns", "return", "回傳", "輸出"},
    "raises": {"raises", "exceptions", "例外"},
}

# "name (type): description" 或 "name: description"
_PARAM_LINE = re.compile(r"^(\*{0,2}\w+)\s*(?:\([^)]*\))?\s*:\s*(.*)$")


def _match_section(line: str) -> str | None:
    if not line.endswith(":"):
        return None
    header = line[:-1].strip().lower()
    for section, aliases in _SECTION_HEADERS.items():
        if header in aliases:
            return section
    return None


def parse_docstring(func: Callable[..., object]) -> DocMetadata | None:
    """解析函數 docstring，沒有 docstring 時回傳 None。"""

    raw_doc = inspect.getdoc(unwrap_callable(func))
    if not raw_doc:
        return None

    summary_lines: list[str] = []
    return_lines: list[str] = []
    parameters: Dict[str, str] = {}

    section = "summary"
    current_param: str | None = None
    param_indent: int | None = None

    for raw_line in raw_doc.splitlines():
        line = raw_line.strip()
        if not line:
            if section == "summary" and summary_lines:
                section = "description"
            continue

        matched = _match_section(line)
        if matched:
            section = matched
            current_param = None
            param_indent = None
            continue

        if section == "summary":
            summary_lines.append(line)
        elif section == "args":
            indent = len(raw_line) - len(raw_line.lstrip())
            if param_indent is None:
                param_indent = indent
            param_match = _PARAM_LINE.match(line)
            if param_match and indent <= param_indent:
                current_param = param_match.group(1).lstrip("*")
                parameters[current_param] = param_match.group(2).strip()
            elif current_param:
                parameters[current_param] = f"{parameters[current_param]} {line}".strip()
        elif section == "returns":
            return_lines.append(line)

    return DocMetadata(
        summary=" ".join(summary_lines).strip(),
        parameters=parameters,
        returns=" ".join(return_lines).strip() or None,
    )
