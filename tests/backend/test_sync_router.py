"""Tests for the sync trigger and health endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from backend.api.app import create_app
from backend.core.dependencies import get_drucksache_repository, get_sync_engine, get_vector_store
from democrat.core.exceptions import ConfigurationError
from democrat.drucksache.models import RegistryPage
from democrat.drucksache.repository import InMemoryDrucksacheRepository
from democrat.drucksache.sync import RegistrySyncEngine
from tests.democrat.fakes import FakeRegistry, make_drucksache, make_record


@pytest.fixture
def repository():
    return InMemoryDrucksacheRepository()


@pytest.fixture
def app():
    app = create_app(enable_scheduler=False)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Return a TestClient for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


def test_trigger_sync_endpoint(app, client, repository):
    """POST /sync/trigger runs a full sync and reports the counts."""
    page = RegistryPage(documents=[make_record("1"), make_record("2")], num_found=2, cursor=None)
    app.dependency_overrides[get_sync_engine] = lambda: RegistrySyncEngine(
        FakeRegistry([page]), repository
    )

    response = client.post("/sync/trigger")

    assert response.status_code == 200, response.text
    assert response.json() == {"message": "Sync completed", "synced": 2, "errors": 0}
    assert repository.count() == 2


def test_trigger_sync_without_api_key(app, client, repository):
    app.dependency_overrides[get_sync_engine] = lambda: RegistrySyncEngine(
        FakeRegistry([], api_key=None), repository
    )

    response = client.post("/sync/trigger")

    assert response.status_code == 200
    assert response.json() == {"message": "Sync completed", "synced": 0, "errors": 1}


def test_trigger_sync_unexpected_error(app, client):
    engine = MagicMock()
    engine.sync.side_effect = ConfigurationError("QDRANT_URL environment variable is not set")
    app.dependency_overrides[get_sync_engine] = lambda: engine

    response = client.post("/sync/trigger")

    assert response.status_code == 503
    assert response.json()["detail"]["error_category"] == "configuration_error"


def test_healthcheck(app, client, repository):
    vector_store = MagicMock(collection_name="drucksachen")
    vector_store.client.get_collection.return_value.points_count = 7
    repository.upsert_by_natural_key(make_drucksache("1"))
    app.dependency_overrides[get_vector_store] = lambda: vector_store
    app.dependency_overrides[get_drucksache_repository] = lambda: repository

    response = client.get("/healthcheck")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "database": "qdrant",
        "collection": "drucksachen",
        "points": 7,
        "drucksachen": 1,
        "scheduler": "stopped",
        "enrichment_running": False,
    }


def test_healthcheck_unhealthy(app, client, repository):
    vector_store = MagicMock(collection_name="drucksachen")
    vector_store.client.get_collection.side_effect = ConnectionError("connection refused")
    app.dependency_overrides[get_vector_store] = lambda: vector_store
    app.dependency_overrides[get_drucksache_repository] = lambda: repository

    response = client.get("/healthcheck")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
