from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.context import LabelingScope
from infrastructure.database.models.labeling import CategoryLabel, Label, LabelItem
from infrastructure.database.upsert import insert_ignoring_conflicts
from infrastructure.errors import NotFoundError
from schemas.labeling import ItemId, LabelRecord


class LabelRepository:
    """Label index: label text -> set of item ids, scoped to one namespace."""

    def __init__(self, db: AsyncSession, scope: LabelingScope) -> None:
        self.db = db
        self.scope = scope

    async def get_label(self, label: str) -> Optional[LabelRecord]:
        row = await self._get_label_row(label)
        if row is None:
            return None
        items = await self._items_for_label_ids([row.id])
        return LabelRecord(id=row.id, label=row.label, items=items)

    async def upsert_item(self, label: str, item_id: ItemId) -> int:
        """Add ``item_id`` to ``label``, creating the label on first use. Safe to repeat or race."""
        label_id = await self._ensure_label(label)
        await self.db.execute(
            insert_ignoring_conflicts(
                self.db,
                LabelItem,
                {"label_id": label_id, "item_id": item_id},
                index_elements=["label_id", "item_id"],
            )
        )
        return label_id

    async def remove_item(
        self,
        item_id: ItemId,
        labels: Optional[Iterable[str]] = None,
    ) -> List[int]:
        """
        Detach an item from every label (or only from ``labels`` when given).

        Labels left without items are detached from their categories and deleted.

        Returns:
            Ids of the labels that were deleted.
        """
        label_scope = select(Label.id).where(Label.namespace == self.scope.namespace)
        if labels is not None:
            label_filter = list(labels)
            if not label_filter:
                return []
            label_scope = label_scope.where(Label.label.in_(label_filter))

        await self.db.execute(
            delete(LabelItem)
            .where(
                LabelItem.item_id == item_id,
                LabelItem.label_id.in_(label_scope),
            )
            .execution_options(synchronize_session=False)
        )
        return await self._delete_empty_labels()

    async def items_for(self, label: str) -> List[ItemId]:
        """Union of item ids across label records matching ``label``, in insertion order."""
        stmt = (
            select(LabelItem.item_id)
            .join(Label, Label.id == LabelItem.label_id)
            .where(
                Label.namespace == self.scope.namespace,
                Label.label == label,
            )
            .order_by(LabelItem.id)
        )
        result = await self.db.execute(stmt)
        items = list(dict.fromkeys(result.scalars().all()))
        if not items:
            raise NotFoundError(f"No items have label {label}!")
        return items

    async def labels_for(self, item_id: ItemId) -> List[str]:
        stmt = (
            select(Label.label)
            .join(LabelItem, LabelItem.label_id == Label.id)
            .where(
                Label.namespace == self.scope.namespace,
                LabelItem.item_id == item_id,
            )
            .order_by(Label.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def label_values(self, label_ids: Sequence[int]) -> List[str]:
        """Resolve label ids to label text, keeping the order of ``label_ids``."""
        unique_ids = list(dict.fromkeys(label_ids))
        if not unique_ids:
            return []

        stmt = select(Label.id, Label.label).where(
            Label.id.in_(unique_ids),
            Label.namespace == self.scope.namespace,
        )
        result = await self.db.execute(stmt)
        by_id: Dict[int, str] = {row.id: row.label for row in result.all()}
        return [by_id[label_id] for label_id in unique_ids if label_id in by_id]

    async def _get_label_row(self, label: str) -> Optional[Label]:
        stmt = select(Label).where(
            Label.namespace == self.scope.namespace,
            Label.label == label,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _ensure_label(self, label: str) -> int:
        await self.db.execute(
            insert_ignoring_conflicts(
                self.db,
                Label,
                {"namespace": self.scope.namespace, "label": label},
                index_elements=["namespace", "label"],
            )
        )
        result = await self.db.execute(
            select(Label.id).where(
                Label.namespace == self.scope.namespace,
                Label.label == label,
            )
        )
        return result.scalar_one()

    async def _items_for_label_ids(self, label_ids: Sequence[int]) -> List[ItemId]:
        stmt = (
            select(LabelItem.item_id)
            .where(LabelItem.label_id.in_(list(label_ids)))
            .order_by(LabelItem.id)
        )
        result = await self.db.execute(stmt)
        return list(dict.fromkeys(result.scalars().all()))

    async def _delete_empty_labels(self) -> List[int]:
        stmt = select(Label.id).where(
            Label.namespace == self.scope.namespace,
            ~exists().where(LabelItem.label_id == Label.id),
        )
        result = await self.db.execute(stmt)
        empty_ids = list(result.scalars().all())
        if not empty_ids:
            return []

        # categories must never reference a deleted label
        await self.db.execute(
            delete(CategoryLabel)
            .where(CategoryLabel.label_id.in_(empty_ids))
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(Label)
            .where(Label.id.in_(empty_ids))
            .execution_options(synchronize_session="fetch")
        )
        return empty_ids


__all__ = ["LabelRepository"]
