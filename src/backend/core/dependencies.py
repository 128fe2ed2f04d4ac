"""FastAPI dependencies for backend services."""

from fastapi import Depends

from democrat.ai.client import EnrichmentClient, OpenAIEnrichmentClient
from democrat.ai.vector_store import QdrantVectorStore
from democrat.drucksache.registry import DIPRegistryClient
from democrat.drucksache.repository import DrucksacheRepository
from democrat.drucksache.sync import RegistrySyncEngine
from democrat.pipeline import get_repository


def get_drucksache_repository() -> DrucksacheRepository:
    return get_repository()


def get_registry_client() -> DIPRegistryClient:
    return DIPRegistryClient()


def get_sync_engine(
    registry: DIPRegistryClient = Depends(get_registry_client),
    repository: DrucksacheRepository = Depends(get_drucksache_repository),
) -> RegistrySyncEngine:
    """Dependency to provide a sync engine bound to the shared repository."""
    return RegistrySyncEngine(registry, repository)


def get_vector_store() -> QdrantVectorStore:
    return QdrantVectorStore()


def get_enrichment_client() -> EnrichmentClient:
    return OpenAIEnrichmentClient()
