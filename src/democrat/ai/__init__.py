from democrat.ai.client import EnrichmentClient, OpenAIEnrichmentClient
from democrat.ai.models import DocumentCategorization, DocumentSummary, SearchResult
from democrat.ai.pdf import TextExtractor
from democrat.ai.vector_store import QdrantVectorStore, derive_point_id

__all__ = [
    "EnrichmentClient",
    "OpenAIEnrichmentClient",
    "DocumentCategorization",
    "DocumentSummary",
    "SearchResult",
    "TextExtractor",
    "QdrantVectorStore",
    "derive_point_id",
]
