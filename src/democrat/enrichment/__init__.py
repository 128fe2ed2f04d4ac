from democrat.enrichment.models import (
    EnrichmentResult,
    ExtractionOutcome,
    RunGuard,
    TextSource,
    WorkingText,
)
from democrat.enrichment.orchestrator import EnrichmentOrchestrator, build_embedding_input
from democrat.enrichment.search import find_similar

__all__ = [
    "EnrichmentResult",
    "ExtractionOutcome",
    "RunGuard",
    "TextSource",
    "WorkingText",
    "EnrichmentOrchestrator",
    "build_embedding_input",
    "find_similar",
]
