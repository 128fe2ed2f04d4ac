import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from openai import APIConnectionError, APITimeoutError, OpenAI, RateLimitError
from pydantic import ValidationError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from democrat.ai.models import DocumentCategorization, DocumentSummary
from democrat.ai.prompts import build_category_prompt, build_summary_prompt
from democrat.core.exceptions import AIResponseError, ConfigurationError
from democrat.core.utils import truncate
from democrat.settings import (
    CATEGORY_TEXT_LIMIT,
    EMBEDDING_DIMENSIONS,
    EMBEDDING_INPUT_LIMIT,
    OPENAI_API_KEY,
    OPENAI_CHAT_MODEL,
    OPENAI_EMBEDDING_MODEL,
    SUMMARY_TEXT_LIMIT,
)

logger = logging.getLogger(__name__)

_openai_client = None
_openai_client_lock = threading.Lock()

# Rate limiting config
MAX_RETRIES = 5
BASE_BACKOFF = 1.0  # seconds
MAX_BACKOFF = 60.0

retry_transient = retry(
    stop=stop_after_attempt(MAX_RETRIES),
    wait=wait_exponential(multiplier=BASE_BACKOFF, min=BASE_BACKOFF, max=MAX_BACKOFF),
    retry=retry_if_exception_type((RateLimitError, APITimeoutError, APIConnectionError)),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def get_openai_client() -> OpenAI:
    """Lazy load OpenAI client (thread-safe)."""
    global _openai_client
    if _openai_client is None:
        with _openai_client_lock:
            if _openai_client is None:
                if not OPENAI_API_KEY:
                    raise ConfigurationError("OPENAI_API_KEY not configured")
                logger.info("Initializing OpenAI client...")
                _openai_client = OpenAI(api_key=OPENAI_API_KEY, max_retries=0)
    return _openai_client


class EnrichmentClient(ABC):
    """Summarization, categorization and embedding over document text."""

    @abstractmethod
    def summarize(self, title: str, text: str) -> DocumentSummary:
        pass

    @abstractmethod
    def categorize(self, title: str, abstract: Optional[str], text: str) -> DocumentCategorization:
        pass

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        pass


def parse_json_object(content: Optional[str]) -> Optional[dict[str, Any]]:
    """Decode a model answer that should be a JSON object; None if it is not one."""
    if not content or not content.strip():
        return None
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


class OpenAIEnrichmentClient(EnrichmentClient):
    """EnrichmentClient backed by OpenAI chat completions and embeddings.

    Malformed or empty JSON answers degrade to default results. Request
    failures (after retrying rate limits, timeouts and connection errors)
    propagate to the caller.
    """

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        chat_model: str = OPENAI_CHAT_MODEL,
        embedding_model: str = OPENAI_EMBEDDING_MODEL,
        dimensions: int = EMBEDDING_DIMENSIONS,
    ):
        self._client = client
        self.chat_model = chat_model
        self.embedding_model = embedding_model
        self.dimensions = dimensions

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    @retry_transient
    def _complete_json(self, prompt: str, temperature: float) -> Optional[str]:
        response = self.client.chat.completions.create(
            model=self.chat_model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def summarize(self, title: str, text: str) -> DocumentSummary:
        prompt = build_summary_prompt(title, truncate(text, SUMMARY_TEXT_LIMIT))
        content = self._complete_json(prompt, temperature=0.5)

        data = parse_json_object(content)
        if data is None:
            logger.warning(f"Malformed summary response for '{title[:80]}', using empty summary")
            return DocumentSummary()
        try:
            return DocumentSummary.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid summary response for '{title[:80]}': {e}")
            return DocumentSummary()

    def categorize(self, title: str, abstract: Optional[str], text: str) -> DocumentCategorization:
        prompt = build_category_prompt(title, abstract, truncate(text, CATEGORY_TEXT_LIMIT))
        content = self._complete_json(prompt, temperature=0.3)

        data = parse_json_object(content)
        if data is None:
            logger.warning(f"Malformed category response for '{title[:80]}', using default")
            return DocumentCategorization()
        try:
            return DocumentCategorization.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid category response for '{title[:80]}': {e}")
            return DocumentCategorization()

    @retry_transient
    def _create_embedding(self, text: str) -> List[float]:
        response = self.client.embeddings.create(model=self.embedding_model, input=text)
        if not response.data:
            raise AIResponseError("Embedding response contained no data")
        return list(response.data[0].embedding)

    def embed(self, text: str) -> List[float]:
        """
        Generate a dense embedding.

        Args:
            text: Text to embed (truncated to the provider input limit)

        Returns:
            Vector of `dimensions` floats

        Raises:
            AIResponseError: If the provider returns no vector or one of the wrong size
        """
        vector = self._create_embedding(truncate(text, EMBEDDING_INPUT_LIMIT))
        if len(vector) != self.dimensions:
            raise AIResponseError(
                f"Embedding has {len(vector)} dimensions, expected {self.dimensions}"
            )
        return vector
