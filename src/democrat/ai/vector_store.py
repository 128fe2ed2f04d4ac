import logging
from typing import Any, Callable, List, Optional, TypeVar

from qdrant_client import QdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from qdrant_client.models import FieldCondition, Filter, MatchValue, PointIdsList, PointStruct

from democrat.ai.models import SearchResult
from democrat.ai.qdrant_schema import get_drucksache_schema
from democrat.core.exceptions import VectorStoreError
from democrat.core.qdrant_client import get_qdrant_client
from democrat.settings import EMBEDDING_DIMENSIONS, QDRANT_COLLECTION_NAME

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UINT32 = 2**32


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - _UINT32 if value >= 2**31 else value


def derive_point_id(dip_id: str) -> int:
    """Derive the Qdrant point id for a DIP id.

    Rolling 32-bit hash over the UTF-16 code units of the key,
    acc = int32((acc << 5) - acc + code), returning abs(acc). Existing points
    were written with this exact formula, so it must not change. Collisions
    are not detected.

    Example:
        derive_point_id("1234") -> 1509442
    """
    acc = 0
    encoded = dip_id.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        acc = _to_int32((acc << 5) - acc + code)
    # abs(INT32_MIN) stays 2**31 rather than wrapping
    return abs(acc)


class QdrantVectorStore:
    """Vector store adapter for Drucksache embeddings.

    Every Qdrant failure is re-raised as VectorStoreError so the enrichment
    run can count it against the current document only.
    """

    def __init__(
        self,
        client: Optional[QdrantClient] = None,
        collection_name: str = QDRANT_COLLECTION_NAME,
        dimensions: int = EMBEDDING_DIMENSIONS,
    ):
        self._client = client
        self.collection_name = collection_name
        self.dimensions = dimensions

    @property
    def client(self) -> QdrantClient:
        if self._client is None:
            self._client = get_qdrant_client()
        return self._client

    def _call(self, operation_name: str, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except (UnexpectedResponse, ResponseHandlingException, ConnectionError, TimeoutError) as e:
            logger.error(
                f"Qdrant {operation_name} failed: {e}",
                extra={"collection": self.collection_name, "operation": operation_name},
            )
            raise VectorStoreError(f"Qdrant {operation_name} failed: {e}") from e

    def ensure_collection(self) -> None:
        """Create the collection and its keyword payload indexes if they are missing."""
        schema = get_drucksache_schema(self.collection_name, self.dimensions)

        exists = self._call(
            "collection_exists", lambda: self.client.collection_exists(self.collection_name)
        )
        if not exists:
            logger.info(f"Creating collection {self.collection_name}")
            self._call(
                "create_collection",
                lambda: self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=schema["vectors_config"],
                ),
            )
        else:
            logger.info(f"Qdrant collection {self.collection_name} already exists")

        info = self._call("get_collection", lambda: self.client.get_collection(self.collection_name))
        indexed = set((info.payload_schema or {}).keys())

        for field_name, field_schema in schema["payload_schema"].items():
            if field_name in indexed:
                continue
            self._call(
                "create_payload_index",
                lambda: self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=field_schema,
                    wait=True,
                ),
            )
            logger.info(f"Created payload index {field_name} on {self.collection_name}")

    def upsert(self, dip_id: str, vector: List[float], payload: dict[str, Any]) -> int:
        """Write the point for dip_id, waiting for Qdrant to acknowledge it. Returns the point id."""
        point_id = derive_point_id(dip_id)
        point = PointStruct(id=point_id, vector=vector, payload=payload)

        self._call(
            "upsert",
            lambda: self.client.upsert(
                collection_name=self.collection_name,
                points=[point],
                wait=True,
            ),
        )
        logger.debug(f"Upserted point {point_id} for {dip_id}")
        return point_id

    def search(
        self,
        vector: List[float],
        limit: int = 10,
        category: Optional[str] = None,
        ressort: Optional[str] = None,
    ) -> List[SearchResult]:
        """Nearest neighbours by cosine similarity, optionally filtered on category and ressort."""
        conditions = []
        if category:
            conditions.append(FieldCondition(key="category", match=MatchValue(value=category)))
        if ressort:
            conditions.append(FieldCondition(key="ressort", match=MatchValue(value=ressort)))
        query_filter = Filter(must=conditions) if conditions else None

        response = self._call(
            "query_points",
            lambda: self.client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=limit,
                query_filter=query_filter,
                with_payload=True,
            ),
        )

        results = []
        for point in response.points:
            payload = point.payload or {}
            results.append(
                SearchResult(
                    dip_id=payload.get("dipId"),
                    titel=payload.get("titel"),
                    score=point.score,
                    payload=payload,
                )
            )
        return results

    def delete(self, dip_id: str) -> None:
        point_id = derive_point_id(dip_id)
        self._call(
            "delete",
            lambda: self.client.delete(
                collection_name=self.collection_name,
                points_selector=PointIdsList(points=[point_id]),
                wait=True,
            ),
        )
        logger.info(f"Deleted point {point_id} for {dip_id}")
