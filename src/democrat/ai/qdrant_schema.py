"""Qdrant collection schema for Drucksachen."""

from qdrant_client.models import Distance, PayloadSchemaType, VectorParams

from democrat.settings import EMBEDDING_DIMENSIONS, QDRANT_COLLECTION_NAME


def get_drucksache_schema(
    collection_name: str = QDRANT_COLLECTION_NAME,
    dimensions: int = EMBEDDING_DIMENSIONS,
):
    """
    Schema for the drucksachen collection.

    Vectors:
    - one unnamed dense vector: OpenAI embedding of title + summary + text excerpt (COSINE)

    Payload:
    - dipId, titel, category, datum, ressort, summary
    - Indexed fields: category, ressort (exact-match filters)
    """
    return {
        "collection_name": collection_name,
        "vectors_config": VectorParams(size=dimensions, distance=Distance.COSINE),
        "payload_schema": {
            "category": PayloadSchemaType.KEYWORD,
            "ressort": PayloadSchemaType.KEYWORD,
        },
    }
