from .labeling_service import LabelingService, normalize_labels

__all__ = [
    "LabelingService",
    "normalize_labels",
]
