from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class LabelingScope:
    """Names the label/category index a repository reads and writes (e.g. ``"post"``)."""

    namespace: str

    def __post_init__(self) -> None:
        if not self.namespace or not self.namespace.strip():
            raise ValueError("LabelingScope.namespace cannot be empty")


@dataclass
class RequestContextBundle:
    db: "AsyncSession"
    scope: LabelingScope
