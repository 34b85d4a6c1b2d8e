from typing import List

from pydantic import BaseModel, Field, field_validator


class ItemLabelsRequest(BaseModel):
    labels: List[str] = Field(
        default_factory=list,
        description="Labels for the item, as a list or a comma separated string",
    )

    @field_validator("labels", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",")]
        return value
