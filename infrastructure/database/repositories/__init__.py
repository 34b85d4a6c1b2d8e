from .label_repository import LabelRepository
from .category_repository import CategoryRepository

__all__ = [
    "LabelRepository",
    "CategoryRepository",
]
