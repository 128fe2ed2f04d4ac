from unittest.mock import MagicMock

import pytest
from qdrant_client.http.exceptions import ResponseHandlingException
from qdrant_client.models import Distance, PayloadSchemaType

from democrat.ai.qdrant_schema import get_drucksache_schema
from democrat.ai.vector_store import QdrantVectorStore, derive_point_id
from democrat.core.exceptions import VectorStoreError


class TestDerivePointId:
    def test_documented_example(self):
        assert derive_point_id("1234") == 1509442

    @pytest.mark.parametrize(
        "dip_id", ["", "0", "271234", "Gesetzentwurf-20/1234", "ÄÖÜß", "x" * 500]
    )
    def test_deterministic_and_non_negative(self, dip_id):
        first = derive_point_id(dip_id)
        assert first == derive_point_id(dip_id)
        assert 0 <= first <= 2**31

    def test_empty_key_is_zero(self):
        assert derive_point_id("") == 0

    def test_wraps_at_32_bits(self):
        # overflows a signed 32-bit accumulator
        assert derive_point_id("abcdefghij") < 2**31

    def test_distinct_keys_usually_differ(self):
        ids = {derive_point_id(str(n)) for n in range(1000)}
        assert len(ids) == 1000


def test_schema():
    schema = get_drucksache_schema("drucksachen", 1536)

    assert schema["collection_name"] == "drucksachen"
    assert schema["vectors_config"].size == 1536
    assert schema["vectors_config"].distance == Distance.COSINE
    assert schema["payload_schema"] == {
        "category": PayloadSchemaType.KEYWORD,
        "ressort": PayloadSchemaType.KEYWORD,
    }


@pytest.fixture
def qdrant():
    return MagicMock()


@pytest.fixture
def store(qdrant):
    return QdrantVectorStore(client=qdrant, collection_name="drucksachen", dimensions=4)


class TestEnsureCollection:
    def test_creates_missing_collection_and_indexes(self, store, qdrant):
        qdrant.collection_exists.return_value = False
        qdrant.get_collection.return_value.payload_schema = {}

        store.ensure_collection()

        qdrant.create_collection.assert_called_once()
        assert qdrant.create_collection.call_args.kwargs["vectors_config"].size == 4
        indexed = [c.kwargs["field_name"] for c in qdrant.create_payload_index.call_args_list]
        assert indexed == ["category", "ressort"]

    def test_existing_collection_only_gets_missing_index(self, store, qdrant):
        qdrant.collection_exists.return_value = True
        qdrant.get_collection.return_value.payload_schema = {"category": MagicMock()}

        store.ensure_collection()

        qdrant.create_collection.assert_not_called()
        qdrant.create_payload_index.assert_called_once()
        assert qdrant.create_payload_index.call_args.kwargs["field_name"] == "ressort"


class TestUpsert:
    def test_writes_derived_point_and_waits(self, store, qdrant):
        payload = {"dipId": "1234", "titel": "Entwurf"}

        point_id = store.upsert("1234", [0.1, 0.2, 0.3, 0.4], payload)

        assert point_id == 1509442
        kwargs = qdrant.upsert.call_args.kwargs
        assert kwargs["collection_name"] == "drucksachen"
        assert kwargs["wait"] is True
        assert kwargs["points"][0].id == 1509442
        assert kwargs["points"][0].payload == payload

    def test_qdrant_failure_is_wrapped(self, store, qdrant):
        qdrant.upsert.side_effect = ResponseHandlingException(Exception("connection refused"))

        with pytest.raises(VectorStoreError):
            store.upsert("1234", [0.1, 0.2, 0.3, 0.4], {})


class TestSearch:
    def test_maps_points_and_builds_filter(self, store, qdrant):
        point = MagicMock(
            score=0.87, payload={"dipId": "1", "titel": "Entwurf", "category": "Gesundheit"}
        )
        qdrant.query_points.return_value.points = [point]

        results = store.search([0.1] * 4, limit=5, category="Gesundheit", ressort="BMG")

        assert len(results) == 1
        assert results[0].dip_id == "1"
        assert results[0].score == pytest.approx(0.87)

        kwargs = qdrant.query_points.call_args.kwargs
        assert kwargs["limit"] == 5
        keys = [condition.key for condition in kwargs["query_filter"].must]
        assert keys == ["category", "ressort"]

    def test_no_filter_without_criteria(self, store, qdrant):
        qdrant.query_points.return_value.points = []

        assert store.search([0.1] * 4) == []
        assert qdrant.query_points.call_args.kwargs["query_filter"] is None


def test_delete_uses_derived_id(store, qdrant):
    store.delete("1234")

    selector = qdrant.delete.call_args.kwargs["points_selector"]
    assert selector.points == [1509442]
