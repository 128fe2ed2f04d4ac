from unittest.mock import MagicMock

import pytest
import requests

from democrat.core.http import HttpClient


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    session.request.return_value.content = b"%PDF-1.7"
    return session


class TestHttpClient:
    def test_default_timeout_and_headers(self, session):
        client = HttpClient(
            timeout=12, headers={"User-Agent": "DEMOCRAT-Backend/1.0"}, session=session
        )

        client.get("https://example.test/a", params={"q": "1"})

        session.request.assert_called_once_with(
            method="GET", url="https://example.test/a", params={"q": "1"}, timeout=12
        )
        assert session.headers["User-Agent"] == "DEMOCRAT-Backend/1.0"

    def test_single_attempt_raises_immediately(self, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        client = HttpClient(max_attempts=1, session=session)

        with pytest.raises(requests.exceptions.ConnectionError):
            client.get("https://example.test/a")
        assert session.request.call_count == 1

    def test_retries_transient_errors(self, session):
        ok = MagicMock()
        session.request.side_effect = [requests.exceptions.Timeout("slow"), ok]
        client = HttpClient(max_attempts=2, backoff_seconds=0, session=session)

        assert client.get("https://example.test/a") is ok
        assert session.request.call_count == 2

    def test_non_2xx_raises(self, session):
        response = session.request.return_value
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        client = HttpClient(session=session)

        with pytest.raises(requests.exceptions.HTTPError):
            client.get("https://example.test/missing.pdf")

    def test_get_content_without_cache(self, session):
        client = HttpClient(session=session)

        assert client.get_content("https://example.test/a.pdf") == b"%PDF-1.7"
        assert client.get_content("https://example.test/a.pdf") == b"%PDF-1.7"
        assert session.request.call_count == 2

    def test_get_content_is_cached_on_disk(self, session, tmp_path):
        client = HttpClient(session=session, cache_dir=str(tmp_path / "http"))
        try:
            assert client.get_content("https://example.test/a.pdf") == b"%PDF-1.7"
            assert client.get_content("https://example.test/a.pdf") == b"%PDF-1.7"
            assert session.request.call_count == 1

            client.clear_cache()
            client.get_content("https://example.test/a.pdf")
            assert session.request.call_count == 2
        finally:
            client.close()
