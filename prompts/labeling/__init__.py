from .category_classification import (
    category_classification_prompt,
    render_categories,
    render_labels,
)
from .opposite_pairs import opposite_pairs_prompt

__all__ = [
    "category_classification_prompt",
    "opposite_pairs_prompt",
    "render_categories",
    "render_labels",
]
