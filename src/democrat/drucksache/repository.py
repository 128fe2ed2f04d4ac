"""Document store for Drucksachen.

The pipeline only depends on the abstract DrucksacheRepository. The disk
implementation is the default for the CLI and the API so that a sync run in
one process is visible to enrichment in another; the in-memory one serves
single-process use and the tests.
"""

import logging
import math
import threading
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional

from diskcache import Index

from democrat.core.models import utcnow
from democrat.drucksache.models import Category, Drucksache, DrucksachePage, DrucksacheQuery, Pagination
from democrat.settings import REPOSITORY_DIR

logger = logging.getLogger(__name__)


def _merge_registry_fields(existing: Optional[Drucksache], doc: Drucksache) -> Drucksache:
    if existing is None:
        return doc.model_copy(deep=True)
    update = doc.registry_fields()
    update["updated_at"] = utcnow()
    return existing.model_copy(update=update, deep=True)


def _enrichment_update(**fields: Any) -> dict[str, Any]:
    update = {k: v for k, v in fields.items() if v is not None}
    update["updated_at"] = utcnow()
    return update


def _newest_first(documents: list[Drucksache]) -> list[Drucksache]:
    return sorted(documents, key=lambda d: d.datum or date.min, reverse=True)


class DrucksacheRepository(ABC):
    """Upsert-by-natural-key store for Drucksachen."""

    @abstractmethod
    def upsert_by_natural_key(self, doc: Drucksache) -> Drucksache:
        """Insert or overwrite the registry fields of the document keyed by doc.dip_id.

        AI fields already stored for that key are left untouched.
        """

    @abstractmethod
    def find_unenriched(self, limit: int = 10) -> list[Drucksache]:
        """Documents with ai_processed false and a non-empty pdf_url, newest datum first."""

    @abstractmethod
    def update_enrichment_fields(
        self,
        dip_id: str,
        *,
        summary: Optional[str] = None,
        category: Optional[Category] = None,
        qdrant_point_id: Optional[str] = None,
        ai_processed: Optional[bool] = None,
        ai_processed_at: Optional[datetime] = None,
    ) -> Optional[Drucksache]:
        """Set the given AI fields; returns the updated document or None if the key is unknown."""

    @abstractmethod
    def get(self, dip_id: str) -> Optional[Drucksache]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def all(self) -> list[Drucksache]:
        pass

    def distinct_ressorts(self) -> list[str]:
        return sorted({d.ressort for d in self.all() if d.ressort})

    def distinct_categories(self) -> list[str]:
        return sorted({d.category.value for d in self.all() if d.category})

    def find(self, query: DrucksacheQuery) -> DrucksachePage:
        """Filtered, sorted page of documents.

        Documents without a value for the sort field always come last.
        """
        matching = [d for d in self.all() if query.matches(d)]

        present = [d for d in matching if getattr(d, query.sort_by) is not None]
        missing = [d for d in matching if getattr(d, query.sort_by) is None]
        present.sort(key=lambda d: getattr(d, query.sort_by), reverse=query.sort_order == "desc")
        ordered = present + missing

        total = len(ordered)
        offset = (query.page - 1) * query.limit
        return DrucksachePage(
            data=ordered[offset : offset + query.limit],
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit),
            ),
        )


class InMemoryDrucksacheRepository(DrucksacheRepository):
    """Thread-safe dict-backed repository. Every read returns a copy."""

    def __init__(self):
        self._documents: dict[str, Drucksache] = {}
        self._lock = threading.Lock()

    def upsert_by_natural_key(self, doc: Drucksache) -> Drucksache:
        with self._lock:
            existing = self._documents.get(doc.dip_id)
            stored = _merge_registry_fields(existing, doc)
            if existing is None:
                logger.debug(f"Inserted Drucksache {doc.dip_id}")
            self._documents[doc.dip_id] = stored
            return stored.model_copy(deep=True)

    def find_unenriched(self, limit: int = 10) -> list[Drucksache]:
        with self._lock:
            candidates = [
                d for d in self._documents.values() if not d.ai_processed and d.has_pdf
            ]
        return [d.model_copy(deep=True) for d in _newest_first(candidates)[:limit]]

    def update_enrichment_fields(
        self,
        dip_id: str,
        *,
        summary: Optional[str] = None,
        category: Optional[Category] = None,
        qdrant_point_id: Optional[str] = None,
        ai_processed: Optional[bool] = None,
        ai_processed_at: Optional[datetime] = None,
    ) -> Optional[Drucksache]:
        update = _enrichment_update(
            summary=summary,
            category=category,
            qdrant_point_id=qdrant_point_id,
            ai_processed=ai_processed,
            ai_processed_at=ai_processed_at,
        )

        with self._lock:
            existing = self._documents.get(dip_id)
            if existing is None:
                logger.warning(f"Cannot update AI fields, unknown Drucksache {dip_id}")
                return None
            stored = existing.model_copy(update=update, deep=True)
            self._documents[dip_id] = stored
            return stored.model_copy(deep=True)

    def get(self, dip_id: str) -> Optional[Drucksache]:
        with self._lock:
            doc = self._documents.get(dip_id)
            return doc.model_copy(deep=True) if doc else None

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def all(self) -> list[Drucksache]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._documents.values()]


class DiskDrucksacheRepository(DrucksacheRepository):
    """Repository persisted in a diskcache Index.

    Documents are stored as JSON-mode dicts keyed by dip_id. Every process
    opening the same directory sees the same documents; read-modify-write
    updates run inside an Index transaction.
    """

    def __init__(self, directory: str = REPOSITORY_DIR):
        self.directory = directory
        self._index = Index(directory)
        logger.debug(f"Drucksache store at {directory}")

    def _load(self, dip_id: str) -> Optional[Drucksache]:
        data = self._index.get(dip_id)
        return Drucksache.model_validate(data) if data is not None else None

    def _store(self, doc: Drucksache) -> None:
        self._index[doc.dip_id] = doc.model_dump(mode="json")

    def upsert_by_natural_key(self, doc: Drucksache) -> Drucksache:
        with self._index.transact():
            existing = self._load(doc.dip_id)
            stored = _merge_registry_fields(existing, doc)
            self._store(stored)
        if existing is None:
            logger.debug(f"Inserted Drucksache {doc.dip_id}")
        return stored

    def find_unenriched(self, limit: int = 10) -> list[Drucksache]:
        candidates = [d for d in self.all() if not d.ai_processed and d.has_pdf]
        return _newest_first(candidates)[:limit]

    def update_enrichment_fields(
        self,
        dip_id: str,
        *,
        summary: Optional[str] = None,
        category: Optional[Category] = None,
        qdrant_point_id: Optional[str] = None,
        ai_processed: Optional[bool] = None,
        ai_processed_at: Optional[datetime] = None,
    ) -> Optional[Drucksache]:
        update = _enrichment_update(
            summary=summary,
            category=category,
            qdrant_point_id=qdrant_point_id,
            ai_processed=ai_processed,
            ai_processed_at=ai_processed_at,
        )

        with self._index.transact():
            existing = self._load(dip_id)
            if existing is None:
                logger.warning(f"Cannot update AI fields, unknown Drucksache {dip_id}")
                return None
            stored = existing.model_copy(update=update, deep=True)
            self._store(stored)
        return stored

    def get(self, dip_id: str) -> Optional[Drucksache]:
        return self._load(dip_id)

    def count(self) -> int:
        return len(self._index)

    def all(self) -> list[Drucksache]:
        return [Drucksache.model_validate(data) for data in self._index.values()]
