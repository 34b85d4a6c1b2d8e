from __future__ import annotations

from typing import AsyncIterator, List, Optional, Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.context import LabelingScope
from infrastructure.database.models.labeling import CategoryLabel, LabelCategory
from infrastructure.database.upsert import insert_ignoring_conflicts
from infrastructure.errors import NotFoundError
from schemas.labeling import Category, CategoryRecord


class CategoryRepository:
    """Category index: category name -> set of label ids, scoped to one namespace."""

    def __init__(self, db: AsyncSession, scope: LabelingScope) -> None:
        self.db = db
        self.scope = scope

    async def get_category(self, category: str) -> Optional[CategoryRecord]:
        row = await self._get_category_row(category)
        if row is None:
            return None
        label_ids = await self._label_ids_for_category_ids([row.id])
        return CategoryRecord(id=row.id, category=Category(row.name), label_ids=label_ids)

    async def attach_labels(self, category: str, label_ids: Sequence[int]) -> Optional[int]:
        """Union ``label_ids`` into ``category``, creating the category when absent. Safe to race."""
        name = Category.coerce(category).value

        unique_ids = list(dict.fromkeys(label_ids))
        if not unique_ids:
            return None

        await self.db.execute(
            insert_ignoring_conflicts(
                self.db,
                LabelCategory,
                {"namespace": self.scope.namespace, "name": name},
                index_elements=["namespace", "name"],
            )
        )
        row = await self._get_category_row(name)

        await self.db.execute(
            insert_ignoring_conflicts(
                self.db,
                CategoryLabel,
                [{"category_id": row.id, "label_id": label_id} for label_id in unique_ids],
                index_elements=["category_id", "label_id"],
            )
        )
        return row.id

    async def remove_empty_categories(self) -> List[str]:
        """Delete categories that no longer group any label. Returns the removed names."""
        stmt = select(LabelCategory.id, LabelCategory.name).where(
            LabelCategory.namespace == self.scope.namespace,
            ~exists().where(CategoryLabel.category_id == LabelCategory.id),
        )
        result = await self.db.execute(stmt)
        rows = result.all()
        if not rows:
            return []

        await self.db.execute(
            delete(LabelCategory)
            .where(LabelCategory.id.in_([row.id for row in rows]))
            .execution_options(synchronize_session="fetch")
        )
        return [row.name for row in rows]

    async def labels_in(self, category: str) -> List[int]:
        stmt = select(LabelCategory.id).where(
            LabelCategory.namespace == self.scope.namespace,
            LabelCategory.name == str(category),
        )
        result = await self.db.execute(stmt)
        category_ids = list(result.scalars().all())
        label_ids = await self._label_ids_for_category_ids(category_ids) if category_ids else []
        if not label_ids:
            raise NotFoundError(f"No items are in category {category}!")
        return label_ids

    async def all_categories(self) -> AsyncIterator[str]:
        """Yield every category name that currently groups at least one label."""
        stmt = (
            select(LabelCategory.name)
            .where(
                LabelCategory.namespace == self.scope.namespace,
                exists().where(CategoryLabel.category_id == LabelCategory.id),
            )
            .order_by(LabelCategory.id)
        )
        result = await self.db.execute(stmt)
        for name in result.scalars():
            yield name

    async def _get_category_row(self, category: str) -> Optional[LabelCategory]:
        stmt = select(LabelCategory).where(
            LabelCategory.namespace == self.scope.namespace,
            LabelCategory.name == str(category),
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _label_ids_for_category_ids(self, category_ids: Sequence[int]) -> List[int]:
        stmt = (
            select(CategoryLabel.label_id)
            .where(CategoryLabel.category_id.in_(list(category_ids)))
            .order_by(CategoryLabel.id)
        )
        result = await self.db.execute(stmt)
        return list(dict.fromkeys(result.scalars().all()))


__all__ = ["CategoryRepository"]
