"""Incremental sync of DIP bill drafts into the Drucksache repository."""

import logging
import time
from typing import Any, Optional

from democrat.core.error_utils import ErrorCategorizer
from democrat.core.exceptions import RegistryError
from democrat.drucksache.models import SyncResult
from democrat.drucksache.registry import DIPRegistryClient, drucksache_from_record
from democrat.drucksache.repository import DrucksacheRepository

logger = logging.getLogger(__name__)


class RegistrySyncEngine:
    """Walks the DIP listing cursor by cursor and upserts every record.

    The cursor only lives for the duration of one sync() call; a restart
    begins again at page one, which is safe because upserts are keyed by dip_id.
    """

    def __init__(
        self,
        registry: DIPRegistryClient,
        repository: DrucksacheRepository,
        max_pages: Optional[int] = None,
    ):
        self.registry = registry
        self.repository = repository
        self.max_pages = max_pages

    def sync(self) -> SyncResult:
        if not self.registry.is_configured:
            logger.error(
                "DIP_API_KEY not configured",
                extra={"error_category": "configuration_error"},
            )
            return SyncResult(synced=0, errors=1)

        result = SyncResult()
        cursor: Optional[str] = None
        pages = 0
        start_time = time.time()

        logger.info("Starting sync of Drucksachen", extra={"pipeline_status": "started"})

        try:
            while True:
                page = self.registry.fetch_page(cursor)
                pages += 1

                for record in page.documents:
                    self._sync_record(record, result)

                logger.info(
                    f"Synced batch: {len(page.documents)} documents",
                    extra={"page": pages, "records": len(page.documents), "num_found": page.num_found},
                )

                # DIP repeats the last cursor once the listing is exhausted
                if not page.cursor or page.cursor == cursor:
                    break
                if self.max_pages is not None and pages >= self.max_pages:
                    logger.info(f"Stopping sync after max_pages={self.max_pages}")
                    break
                cursor = page.cursor

        except RegistryError as e:
            result.errors += 1
            logger.error(
                f"Sync failed on page {pages + 1}: {e}",
                extra=ErrorCategorizer.extract_error_metadata(e, {"page": pages + 1}),
            )

        elapsed = time.time() - start_time
        logger.info(
            f"Sync completed: {result.synced} synced, {result.errors} errors",
            extra={
                "pipeline_status": "completed",
                "synced": result.synced,
                "errors": result.errors,
                "pages": pages,
                "elapsed_seconds": elapsed,
            },
        )
        return result

    def _sync_record(self, record: Any, result: SyncResult) -> None:
        dip_id = record.get("id") if isinstance(record, dict) else None
        try:
            doc = drucksache_from_record(record)
            self.repository.upsert_by_natural_key(doc)
            result.synced += 1
        except Exception as e:
            result.errors += 1
            logger.error(
                f"Failed to sync document {dip_id}: {e}",
                extra=ErrorCategorizer.extract_error_metadata(e, {"dip_id": dip_id}),
            )
