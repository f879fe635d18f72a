"""請求 metadata 的唯讀存取器。"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator, Optional


class McpMeta(Mapping):
    """包裝請求的 ``_meta`` 欄位；沒有 metadata 時為空集合而非 None。"""

    __slots__ = ("_meta",)

    def __init__(self, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._meta = MappingProxyType(dict(meta or {}))

    def __getitem__(self, key: str) -> Any:
        return self._meta[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._meta)

    def __len__(self) -> int:
        return len(self._meta)

    def __repr__(self) -> str:
        return f"McpMeta({dict(self._meta)!r})"
