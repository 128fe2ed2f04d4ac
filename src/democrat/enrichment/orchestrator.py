"""AI enrichment of synced Drucksachen.

Each run pulls a small batch of documents that have a PDF but no AI fields
yet and walks every document through a fixed sequence of stages:

    extract -> select text -> summarize -> categorize -> embed -> vector upsert -> persist

Documents are processed one at a time with a pause in between to stay within
provider rate limits. A failure in any stage after text selection abandons
that document only; nothing is written to the repository for it and it is
picked up again on the next run.
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from democrat.ai.client import EnrichmentClient
from democrat.ai.models import DocumentCategorization, DocumentSummary
from democrat.ai.pdf import TextExtractor
from democrat.ai.vector_store import QdrantVectorStore
from democrat.core.error_utils import ErrorCategorizer
from democrat.core.exceptions import EnrichmentError
from democrat.core.models import utcnow
from democrat.core.utils import truncate
from democrat.drucksache.models import Drucksache
from democrat.drucksache.repository import DrucksacheRepository
from democrat.enrichment.models import (
    EnrichmentResult,
    ExtractionOutcome,
    RunGuard,
    WorkingText,
)
from democrat.settings import (
    EMBEDDING_TEXT_LIMIT,
    ENRICHMENT_BATCH_SIZE,
    ENRICHMENT_DELAY_SECONDS,
)

logger = logging.getLogger(__name__)

# Shared by every orchestrator in the process unless one is injected
_process_guard = RunGuard()


def build_embedding_input(titel: str, summary: str, text: str) -> str:
    return f"{titel}\n\n{summary}\n\n{truncate(text, EMBEDDING_TEXT_LIMIT)}"


class EnrichmentOrchestrator:
    def __init__(
        self,
        repository: DrucksacheRepository,
        extractor: TextExtractor,
        ai_client: EnrichmentClient,
        vector_store: QdrantVectorStore,
        batch_size: int = ENRICHMENT_BATCH_SIZE,
        delay_seconds: float = ENRICHMENT_DELAY_SECONDS,
        guard: Optional[RunGuard] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.extractor = extractor
        self.ai_client = ai_client
        self.vector_store = vector_store
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self.guard = guard or _process_guard
        self._sleep = sleep
        self._clock = clock

    @property
    def is_running(self) -> bool:
        return self.guard.active

    def run(self) -> EnrichmentResult:
        if not self.guard.try_acquire():
            logger.info("AI processing already running, skipping")
            return EnrichmentResult(skipped=True)

        try:
            return self._run_batch()
        finally:
            self.guard.release()

    def _run_batch(self) -> EnrichmentResult:
        result = EnrichmentResult()
        documents = self.repository.find_unenriched(self.batch_size)

        if not documents:
            logger.info("No unprocessed Drucksachen found")
            return result

        logger.info(
            f"Processing {len(documents)} Drucksachen with AI",
            extra={"pipeline_status": "started", "batch_size": len(documents)},
        )
        start_time = time.time()

        for index, doc in enumerate(documents):
            try:
                self.enrich_document(doc)
                result.processed += 1
            except Exception as e:
                result.errors += 1
                logger.error(
                    f"Failed to process Drucksache {doc.dip_id}: {e}",
                    exc_info=True,
                    extra=ErrorCategorizer.extract_error_metadata(e, {"dip_id": doc.dip_id}),
                )

            if index < len(documents) - 1 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        logger.info(
            f"AI processing completed: {result.processed} processed, {result.errors} errors",
            extra={
                "pipeline_status": "completed",
                "processed": result.processed,
                "errors": result.errors,
                "elapsed_seconds": time.time() - start_time,
            },
        )
        return result

    def enrich_document(self, doc: Drucksache) -> Drucksache:
        """Run one document through every stage and persist the AI fields in a single update."""
        logger.info(f"Processing Drucksache {doc.dip_id}: {doc.titel[:80]}")

        extraction = self.extract(doc)
        working = WorkingText.select(extraction.text, doc.abstract, doc.titel)
        logger.debug(
            f"Using {working.source.value} text for {doc.dip_id}",
            extra={
                "dip_id": doc.dip_id,
                "text_source": working.source.value,
                "text_length": len(working.text),
                "pdf_extracted": extraction.succeeded,
            },
        )

        summary = self.summarize(doc, working)
        categorization = self.categorize(doc, working)
        vector = self.ai_client.embed(build_embedding_input(doc.titel, summary.summary, working.text))

        enriched = doc.model_copy(
            update={"summary": summary.summary, "category": categorization.category}
        )
        point_id = self.vector_store.upsert(doc.dip_id, vector, enriched.vector_payload())

        updated = self.repository.update_enrichment_fields(
            doc.dip_id,
            summary=summary.summary,
            category=categorization.category,
            qdrant_point_id=str(point_id),
            ai_processed=True,
            ai_processed_at=self._clock(),
        )
        if updated is None:
            raise EnrichmentError(f"Drucksache {doc.dip_id} disappeared before persisting")

        logger.info(
            f"Processed Drucksache {doc.dip_id}",
            extra={
                "dip_id": doc.dip_id,
                "category": categorization.category.value,
                "confidence": categorization.confidence,
                "point_id": point_id,
                "text_source": working.source.value,
            },
        )
        return updated

    def extract(self, doc: Drucksache) -> ExtractionOutcome:
        if not doc.has_pdf:
            return ExtractionOutcome()

        try:
            return ExtractionOutcome(text=self.extractor.extract(doc.pdf_url), attempted=True)
        except Exception as e:
            logger.warning(
                f"PDF extraction failed for {doc.dip_id}, using fallback text: {e}",
                extra=ErrorCategorizer.extract_error_metadata(e, {"dip_id": doc.dip_id}),
            )
            return ExtractionOutcome(error=str(e), attempted=True)

    def summarize(self, doc: Drucksache, working: WorkingText) -> DocumentSummary:
        return self.ai_client.summarize(doc.titel, working.text)

    def categorize(self, doc: Drucksache, working: WorkingText) -> DocumentCategorization:
        return self.ai_client.categorize(doc.titel, doc.abstract, working.text)
