import threading
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TextSource(str, Enum):
    """Where the text fed to the AI stages came from."""

    PDF = "pdf"
    ABSTRACT = "abstract"
    TITLE = "title"


class ExtractionOutcome(BaseModel):
    """Result of the extract stage: text on success, the failure message otherwise."""

    text: Optional[str] = None
    error: Optional[str] = None
    attempted: bool = False

    @property
    def succeeded(self) -> bool:
        return self.attempted and self.error is None


class WorkingText(BaseModel):
    text: str
    source: TextSource

    @classmethod
    def select(
        cls, extracted: Optional[str], abstract: Optional[str], titel: str
    ) -> "WorkingText":
        """Prefer extracted PDF text, then the abstract, then the title."""
        if extracted and extracted.strip():
            return cls(text=extracted, source=TextSource.PDF)
        if abstract and abstract.strip():
            return cls(text=abstract, source=TextSource.ABSTRACT)
        return cls(text=titel, source=TextSource.TITLE)


class EnrichmentResult(BaseModel):
    processed: int = 0
    errors: int = 0
    skipped: bool = False


class RunGuard:
    """Single-slot token that allows at most one enrichment run at a time.

    try_acquire() never blocks; a caller that loses the race is expected to
    drop its run rather than queue it.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def active(self) -> bool:
        return self._lock.locked()
