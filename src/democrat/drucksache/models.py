from datetime import date, datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from democrat.core.models import DemocratModel


class Category(str, Enum):
    """Closed taxonomy of policy domains a Drucksache is filed under.

    SONSTIGES is the catch-all for anything the model cannot place.
    """

    WIRTSCHAFT_FINANZEN = "Wirtschaft und Finanzen"
    UMWELT_KLIMASCHUTZ = "Umwelt und Klimaschutz"
    SOZIALES_ARBEIT = "Soziales und Arbeit"
    GESUNDHEIT = "Gesundheit"
    BILDUNG_FORSCHUNG = "Bildung und Forschung"
    VERKEHR_INFRASTRUKTUR = "Verkehr und Infrastruktur"
    INNERE_SICHERHEIT = "Innere Sicherheit"
    AUSSENPOLITIK_VERTEIDIGUNG = "Außenpolitik und Verteidigung"
    JUSTIZ_RECHT = "Justiz und Recht"
    DIGITALISIERUNG_TECHNOLOGIE = "Digitalisierung und Technologie"
    FAMILIE_JUGEND = "Familie und Jugend"
    KULTUR_MEDIEN = "Kultur und Medien"
    LANDWIRTSCHAFT_ERNAEHRUNG = "Landwirtschaft und Ernährung"
    WOHNEN_BAUEN = "Wohnen und Bauen"
    SONSTIGES = "Sonstiges"

    @classmethod
    def coerce(cls, value: Any) -> "Category":
        """Map a model-produced label onto the taxonomy, falling back to SONSTIGES."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.SONSTIGES
        label = value.strip().casefold()
        for category in cls:
            if category.value.casefold() == label:
                return category
        return cls.SONSTIGES


class Drucksache(DemocratModel):
    """A Bundestag printed paper (bill draft) keyed by its DIP id."""

    dip_id: str
    titel: str
    dokumentart: Optional[str] = None
    drucksachetyp: Optional[str] = None
    datum: Optional[date] = None
    ressort: Optional[str] = None
    urheber: list[str] = Field(default_factory=list)
    pdf_url: Optional[str] = None
    dokumentnummer: Optional[str] = None
    abstract: Optional[str] = None
    wahlperiode: Optional[int] = None

    # AI-generated fields
    summary: Optional[str] = None
    category: Optional[Category] = None
    qdrant_point_id: Optional[str] = None
    ai_processed: bool = False
    ai_processed_at: Optional[datetime] = None

    @field_validator("dip_id", mode="before")
    @classmethod
    def coerce_dip_id(cls, value: Any) -> str:
        """DIP ids arrive as strings, but older exports carry them as integers."""
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def has_pdf(self) -> bool:
        return bool(self.pdf_url and self.pdf_url.strip())

    def registry_fields(self) -> dict[str, Any]:
        """Fields owned by the registry sync (everything except the AI fields)."""
        return self.model_dump(
            exclude={
                "summary",
                "category",
                "qdrant_point_id",
                "ai_processed",
                "ai_processed_at",
                "created_at",
            }
        )

    def vector_payload(self) -> dict[str, Any]:
        """Denormalized snapshot stored alongside the embedding in Qdrant."""
        return {
            "dipId": self.dip_id,
            "titel": self.titel,
            "category": self.category.value if self.category else None,
            "datum": self.datum.isoformat() if self.datum else None,
            "ressort": self.ressort,
            "summary": self.summary,
        }


class RegistryPage(BaseModel):
    """One page of the DIP /drucksache listing."""

    # Raw records; each one is validated on its own during sync
    documents: list[Any] = Field(default_factory=list)
    num_found: int = Field(default=0, alias="numFound")
    cursor: Optional[str] = None

    model_config = {"populate_by_name": True}


class SyncResult(BaseModel):
    synced: int = 0
    errors: int = 0


class DrucksacheQuery(BaseModel):
    """Filter, sort and paging options for listing stored Drucksachen."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    ressort: Optional[str] = None
    category: Optional[str] = None
    # Case-insensitive substring match on titel, abstract and dokumentnummer
    search: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_by: Literal["datum", "titel", "dokumentnummer", "created_at", "updated_at"] = "datum"
    sort_order: Literal["asc", "desc"] = "desc"

    def matches(self, doc: Drucksache) -> bool:
        if self.ressort and doc.ressort != self.ressort:
            return False
        if self.category and (doc.category is None or doc.category.value != self.category):
            return False
        if self.start_date and (doc.datum is None or doc.datum < self.start_date):
            return False
        if self.end_date and (doc.datum is None or doc.datum > self.end_date):
            return False
        if self.search:
            needle = self.search.casefold()
            haystack = (doc.titel, doc.abstract or "", doc.dokumentnummer or "")
            if not any(needle in field.casefold() for field in haystack):
                return False
        return True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class DrucksachePage(BaseModel):
    data: list[Drucksache] = Field(default_factory=list)
    pagination: Pagination
