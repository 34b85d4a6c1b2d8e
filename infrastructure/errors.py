"""Error taxonomy for the labeling subsystem."""

from __future__ import annotations


class LabelingError(Exception):
    """Base class for labeling and opposition-discovery failures."""


class NotFoundError(LabelingError):
    """A label, category, or item-label association required by a read is absent."""


class InvalidCategoryError(LabelingError, ValueError):
    """A category-scoped request named a category outside the allow-list."""

    def __init__(self, category: str, allowed: list[str] | None = None) -> None:
        self.category = category
        self.allowed = list(allowed or [])
        if self.allowed:
            message = f"expected one of {self.allowed} but got category {category!r}"
        else:
            message = f"category {category!r} is not allowed"
        super().__init__(message)


class OracleFailure(LabelingError):
    """Transport or parsing failure from a classification/opposition oracle."""

    def __init__(self, oracle: str, message: str) -> None:
        self.oracle = oracle
        super().__init__(f"{oracle} failed: {message}")


__all__ = [
    "LabelingError",
    "NotFoundError",
    "InvalidCategoryError",
    "OracleFailure",
]
