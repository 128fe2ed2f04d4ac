import pytest
from tenacity import wait_none

from democrat.ai.client import OpenAIEnrichmentClient
from democrat.drucksache.repository import DiskDrucksacheRepository, InMemoryDrucksacheRepository


@pytest.fixture(params=["memory", "disk"])
def repository(request, tmp_path):
    if request.param == "disk":
        return DiskDrucksacheRepository(str(tmp_path / "drucksachen"))
    return InMemoryDrucksacheRepository()


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Retry transient OpenAI errors without sleeping."""
    for method in (OpenAIEnrichmentClient._complete_json, OpenAIEnrichmentClient._create_embedding):
        monkeypatch.setattr(method.retry, "wait", wait_none())
