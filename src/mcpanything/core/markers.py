"""參數層級的標記，透過 ``typing.Annotated`` 附加在 annotation 上。

    def search(
        self,
        query: Annotated[str, Param(description="搜尋字串")],
        token: ProgressToken = None,
        meta: McpMeta = None,
    ) -> list[str]: ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Optional


@dataclass(frozen=True)
class Param:
    """具名參數的外部名稱、說明與是否必填。"""

    name: Optional[str] = None
    description: str = ""
    required: Optional[bool] = None


class _RoleMarker:
    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return self.label


META = _RoleMarker("META")
PROGRESS_TOKEN = _RoleMarker("PROGRESS_TOKEN")

ProgressToken = Annotated[Any, PROGRESS_TOKEN]
