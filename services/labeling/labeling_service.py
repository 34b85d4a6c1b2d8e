from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.ai.labeling_oracles import ClassificationOracle, OppositionOracle
from infrastructure.context import LabelingScope
from infrastructure.database.repositories import CategoryRepository, LabelRepository
from infrastructure.errors import InvalidCategoryError, NotFoundError
from schemas.labeling import (
    Category,
    ItemId,
    LabelingResult,
    OpposingItemView,
    OpposingPairView,
)

logger = logging.getLogger(__name__)


def normalize_labels(labels: Iterable[str]) -> List[str]:
    """Strip whitespace, drop blanks and repeated labels, keep first-seen order."""
    cleaned = (label.strip() for label in labels if isinstance(label, str))
    return list(dict.fromkeys(label for label in cleaned if label))


class LabelingService:
    """
    Attaches labels to items, keeps the label and category indices consistent,
    and pairs items that sit on opposing sides of a category.

    Writes are individually idempotent and are not wrapped in a cross-index
    transaction, so a failed call can be retried as a whole.
    """

    def __init__(
        self,
        db: AsyncSession,
        scope: LabelingScope,
        classification_oracle: ClassificationOracle,
        opposition_oracle: OppositionOracle,
    ) -> None:
        self.db = db
        self.scope = scope
        self.label_repository = LabelRepository(db, scope)
        self.category_repository = CategoryRepository(db, scope)
        self.classification_oracle = classification_oracle
        self.opposition_oracle = opposition_oracle

    async def add_labels_for_item(self, item_id: ItemId, labels: Sequence[str]) -> LabelingResult:
        normalized = normalize_labels(labels)
        if not normalized:
            return LabelingResult(message="No labels to add.")

        category = await self._classify(normalized)

        label_ids: List[int] = []
        for label in normalized:
            label_ids.append(await self.label_repository.upsert_item(label, item_id))

        await self.category_repository.attach_labels(category, label_ids)
        logger.info(
            "Attached labels=%s to item=%s under category=%r (namespace=%s)",
            normalized,
            item_id,
            category.value,
            self.scope.namespace,
        )
        return LabelingResult(message=f"Labels {', '.join(normalized)} successfully added!")

    async def update_labels_for_item(self, item_id: ItemId, labels: Sequence[str]) -> LabelingResult:
        """Make ``labels`` the item's label set: add the new ones first, then drop the stale ones."""
        requested = normalize_labels(labels)
        current = await self.get_labels_for_item(item_id)

        to_add = [label for label in requested if label not in current]
        to_remove = [label for label in current if label not in requested]
        logger.info("Updating labels for item=%s: add=%s remove=%s", item_id, to_add, to_remove)

        if to_add:
            await self.add_labels_for_item(item_id, to_add)
        if to_remove:
            await self.remove_item_from_label(item_id, to_remove)
        return LabelingResult(message="Labels successfully updated!")

    async def remove_item_from_label(
        self,
        item_id: ItemId,
        labels: Optional[Iterable[str]] = None,
    ) -> None:
        """Detach the item from ``labels`` (every label when omitted) and collect empty entries."""
        deleted_label_ids = await self.label_repository.remove_item(item_id, labels)
        removed_categories = await self.category_repository.remove_empty_categories()
        if deleted_label_ids or removed_categories:
            logger.info(
                "Removed item=%s: deleted %d empty label(s), removed categories=%s",
                item_id,
                len(deleted_label_ids),
                removed_categories,
            )

    async def get_labels_for_item(self, item_id: ItemId) -> List[str]:
        return await self.label_repository.labels_for(item_id)

    async def get_items_with_label(self, label: str) -> List[ItemId]:
        return await self.label_repository.items_for(label)

    async def get_all_categories(self) -> List[str]:
        return [name async for name in self.category_repository.all_categories()]

    async def get_opposing_items(self, category: str) -> List[Tuple[ItemId, ItemId]]:
        """
        Pair items carrying opposing labels within ``category``.

        For every label pair the opposition oracle returns, the i-th item of the
        first label is paired with the i-th item of the second, up to the shorter
        of the two item lists. Pairs keep oracle order, then positional order.

        Raises:
            InvalidCategoryError: ``category`` is outside the allow-list.
            NotFoundError: the category holds no labels.
            OracleFailure: the opposition oracle failed.
        """
        closest_category = Category.coerce(await self._closest_existing_category(category)).value

        label_ids = await self.category_repository.labels_in(closest_category)
        label_values = await self.label_repository.label_values(label_ids)
        label_pairs = await self.opposition_oracle.find_opposites(label_values, closest_category)

        opposing: List[Tuple[ItemId, ItemId]] = []
        for first_label, second_label in label_pairs:
            try:
                first_items = await self.label_repository.items_for(first_label)
                second_items = await self.label_repository.items_for(second_label)
            except NotFoundError as exc:
                # the oracle may name labels that are not indexed
                logger.warning(
                    "Skipping opposing pair (%r, %r) in category=%r: %s",
                    first_label,
                    second_label,
                    closest_category,
                    exc,
                )
                continue
            opposing.extend(zip(first_items, second_items))
        return opposing

    async def get_opposing_item_views(self, category: str) -> List[OpposingPairView]:
        """Opposing item pairs, each item shown with the labels it carries."""
        pairs = await self.get_opposing_items(category)
        labels_by_item: Dict[ItemId, List[str]] = {}
        views: List[OpposingPairView] = []
        for pair in pairs:
            items: List[OpposingItemView] = []
            for item_id in pair:
                if item_id not in labels_by_item:
                    labels_by_item[item_id] = await self.get_labels_for_item(item_id)
                items.append(OpposingItemView(item_id=item_id, labels=labels_by_item[item_id]))
            views.append(OpposingPairView(items=items))
        return views

    async def _classify(self, labels: Sequence[str]) -> Category:
        answer = await self.classification_oracle.classify(labels, Category.allowed())
        try:
            return Category.coerce(answer)
        except InvalidCategoryError:
            logger.warning(
                "Classification returned %r outside the allowed categories; using %r",
                answer,
                Category.ALL.value,
            )
            return Category.ALL

    async def _closest_existing_category(self, category: str) -> str:
        # TODO: fuzzy-match free-form topics onto an allowed category
        return category


__all__ = ["LabelingService", "normalize_labels"]
