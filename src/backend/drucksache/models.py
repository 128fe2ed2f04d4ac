from typing import Optional

from pydantic import BaseModel, Field


class SimilarSearch(BaseModel):
    query: str = Field(description="Free text to embed and compare against enriched Drucksachen")
    limit: int = Field(default=10, ge=1, le=100)
    category: Optional[str] = Field(default=None, description="Restrict results to one category")
    ressort: Optional[str] = Field(default=None, description="Restrict results to one ressort")
