from __future__ import annotations

from typing import Any, Mapping, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_ignoring_conflicts(
    db: AsyncSession,
    model: Any,
    values: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    index_elements: Sequence[str],
):
    """``INSERT ... ON CONFLICT (index_elements) DO NOTHING`` for the session's dialect."""
    if db.bind.dialect.name == "sqlite":
        stmt = sqlite.insert(model)
    else:
        stmt = postgresql.insert(model)
    return stmt.values(values).on_conflict_do_nothing(index_elements=list(index_elements))


__all__ = ["insert_ignoring_conflicts"]
