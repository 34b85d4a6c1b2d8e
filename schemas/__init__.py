from .labeling import (
    Category,
    CategoryRecord,
    ItemId,
    LabelingResult,
    LabelRecord,
    OppositeLabelPair,
    OppositeLabelPairs,
    OpposingItemView,
    OpposingPairView,
)

__all__ = [
    "Category",
    "CategoryRecord",
    "ItemId",
    "LabelingResult",
    "LabelRecord",
    "OppositeLabelPair",
    "OppositeLabelPairs",
    "OpposingItemView",
    "OpposingPairView",
]
