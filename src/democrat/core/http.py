import logging
from typing import Any, Dict, Optional

import requests
from diskcache import FanoutCache
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


class HttpClient:
    """requests.Session wrapper with default headers, a default timeout and optional retries.

    The registry and the PDF extractor both use ``max_attempts=1``: a failed
    request goes straight back to the caller and the next scheduled run is the
    retry. When ``cache_dir`` is given, bodies fetched with get_content() are
    kept in a diskcache FanoutCache keyed by URL.
    """

    def __init__(
        self,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
        max_attempts: int = 1,
        backoff_seconds: float = 1.0,
        session: Optional[requests.Session] = None,
        cache_dir: Optional[str] = None,
        cache_ttl: int = 7 * 24 * 3600,
    ):
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

        self.cache_ttl = cache_ttl
        self._cache = None
        if cache_dir:
            self._cache = FanoutCache(directory=cache_dir, shards=4, timeout=60)
            logger.debug(f"HTTP body cache at {cache_dir}")

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, retrying connection errors and timeouts up to max_attempts.

        Raises:
            requests.exceptions.RequestException: On the last failed attempt or a non-2xx status
        """
        kwargs.setdefault("timeout", self.timeout)
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=60),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self.session.request(method=method, url=url, **kwargs)
                response.raise_for_status()
        return response

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", url, **kwargs)

    @property
    def caching(self) -> bool:
        return self._cache is not None

    def get_content(self, url: str, **kwargs: Any) -> bytes:
        """Body of a GET request, read from the disk cache when enabled."""
        if not self.caching:
            return self.get(url, **kwargs).content

        content = self._cache.get(url)
        if content is not None:
            logger.debug(f"Cache hit for {url}")
            return content

        content = self.get(url, **kwargs).content
        self._cache.set(url, content, expire=self.cache_ttl)
        return content

    def clear_cache(self) -> None:
        if self.caching:
            self._cache.clear()

    def close(self) -> None:
        self.session.close()
        if self.caching:
            self._cache.close()
