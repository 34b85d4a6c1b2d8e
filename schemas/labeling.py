from __future__ import annotations

from enum import StrEnum
from typing import List

from pydantic import BaseModel, Field, field_validator

from infrastructure.errors import InvalidCategoryError

ItemId = str


class Category(StrEnum):
    """Fixed topical categories; ``ALL`` is the fallback for unclassifiable label sets."""

    ARTS_ENTERTAINMENT = "Arts & Entertainment"
    BUSINESS_FINANCE = "Business & Finance"
    EDUCATION = "Education"
    ENVIRONMENT = "Environment"
    HEALTH_WELLNESS = "Health & Wellness"
    POLITICS_GOVERNANCE = "Politics & Governance"
    RELIGION_PHILOSOPHY = "Religion & Philosophy"
    SCIENCE_TECHNOLOGY = "Science & Technology"
    SOCIETY_CULTURE = "Society & Culture"
    SPORTS = "Sports"
    ALL = "all"

    @classmethod
    def allowed(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def is_allowed(cls, value: object) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_

    @classmethod
    def coerce(cls, value: str) -> "Category":
        if not cls.is_allowed(value):
            raise InvalidCategoryError(str(value), cls.allowed())
        return cls(value)


class LabelRecord(BaseModel):
    """A label and the items currently carrying it."""

    id: int
    label: str
    items: List[ItemId] = Field(default_factory=list)


class CategoryRecord(BaseModel):
    """A category and the ids of the labels grouped under it."""

    id: int
    category: Category
    label_ids: List[int] = Field(default_factory=list)


class OppositeLabelPair(BaseModel):
    """Two labels judged to hold opposing meaning within a category."""

    first: str = Field(..., description="Label on one side of the topic")
    second: str = Field(..., description="Label holding the opposing view")

    @field_validator("first", "second", mode="before")
    @classmethod
    def _strip(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value


class OppositeLabelPairs(BaseModel):
    """Structured output for the opposition oracle."""

    pairs: List[OppositeLabelPair] = Field(default_factory=list)


class LabelingResult(BaseModel):
    message: str


class OpposingItemView(BaseModel):
    item_id: ItemId
    labels: List[str] = Field(default_factory=list)


class OpposingPairView(BaseModel):
    """An opposing item pair decorated with the labels each item carries."""

    items: List[OpposingItemView]
