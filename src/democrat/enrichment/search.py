import logging
from typing import List, Optional

from democrat.ai.client import EnrichmentClient
from democrat.ai.models import SearchResult
from democrat.ai.vector_store import QdrantVectorStore

logger = logging.getLogger(__name__)


def find_similar(
    query_text: str,
    ai_client: EnrichmentClient,
    vector_store: QdrantVectorStore,
    limit: int = 10,
    category: Optional[str] = None,
    ressort: Optional[str] = None,
) -> List[SearchResult]:
    """Semantic search over enriched Drucksachen.

    Embeds the free-text query with the same model used for documents and
    returns the nearest points, optionally restricted to one category and/or
    ressort.
    """
    if not query_text or not query_text.strip():
        return []

    vector = ai_client.embed(query_text)
    results = vector_store.search(vector, limit=limit, category=category, ressort=ressort)

    logger.info(
        f"Similarity search returned {len(results)} results",
        extra={"query_length": len(query_text), "category": category, "ressort": ressort},
    )
    return results
