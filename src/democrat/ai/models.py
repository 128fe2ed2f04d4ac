from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from democrat.drucksache.models import Category


class DocumentSummary(BaseModel):
    summary: str = ""
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    affected_areas: list[str] = Field(default_factory=list, alias="affectedAreas")

    model_config = {"populate_by_name": True}

    @field_validator("summary", mode="before")
    @classmethod
    def coerce_summary(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("key_points", "affected_areas", mode="before")
    @classmethod
    def coerce_string_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(v) for v in value if v]
        return []


class DocumentCategorization(BaseModel):
    category: Category = Category.SONSTIGES
    confidence: float = 0.0
    reasoning: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, value: Any) -> Category:
        return Category.coerce(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(confidence, 0.0), 1.0)

    @field_validator("reasoning", mode="before")
    @classmethod
    def coerce_reasoning(cls, value: Any) -> str:
        return "" if value is None else str(value)


class SearchResult(BaseModel):
    dip_id: Optional[str] = None
    titel: Optional[str] = None
    score: float
    payload: dict[str, Any] = Field(default_factory=dict)
