"""Wiring of the sync and enrichment pipelines around one shared repository."""

import logging
import threading
from typing import Optional

from democrat.ai.client import OpenAIEnrichmentClient
from democrat.ai.pdf import TextExtractor
from democrat.ai.vector_store import QdrantVectorStore
from democrat.core.exceptions import ConfigurationError
from democrat.drucksache.registry import DIPRegistryClient
from democrat.drucksache.repository import (
    DiskDrucksacheRepository,
    DrucksacheRepository,
    InMemoryDrucksacheRepository,
)
from democrat.drucksache.sync import RegistrySyncEngine
from democrat.enrichment.orchestrator import EnrichmentOrchestrator
from democrat.scheduler import Scheduler
from democrat.settings import REPOSITORY_BACKEND, REPOSITORY_DIR

logger = logging.getLogger(__name__)

_repository = None
_repository_lock = threading.Lock()


def create_repository(backend: Optional[str] = None) -> DrucksacheRepository:
    backend = backend or REPOSITORY_BACKEND
    if backend == "disk":
        logger.info(f"Using disk Drucksache repository at {REPOSITORY_DIR}")
        return DiskDrucksacheRepository(REPOSITORY_DIR)
    if backend == "memory":
        logger.info("Using in-memory Drucksache repository")
        return InMemoryDrucksacheRepository()
    raise ConfigurationError(f"Unknown REPOSITORY_BACKEND {backend!r}, expected 'disk' or 'memory'")


def get_repository() -> DrucksacheRepository:
    """Process-wide repository shared by sync, enrichment and the API (lazy, thread-safe)."""
    global _repository
    if _repository is None:
        with _repository_lock:
            if _repository is None:
                _repository = create_repository()
    return _repository


def build_sync_engine(repository: Optional[DrucksacheRepository] = None) -> RegistrySyncEngine:
    return RegistrySyncEngine(DIPRegistryClient(), repository or get_repository())


def build_orchestrator(repository: Optional[DrucksacheRepository] = None) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(
        repository=repository or get_repository(),
        extractor=TextExtractor(),
        ai_client=OpenAIEnrichmentClient(),
        vector_store=QdrantVectorStore(),
    )


def build_scheduler(repository: Optional[DrucksacheRepository] = None) -> Scheduler:
    repository = repository or get_repository()
    return Scheduler(build_sync_engine(repository), build_orchestrator(repository))
