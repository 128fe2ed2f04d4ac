import logging
import threading

from qdrant_client import QdrantClient

from democrat.core.exceptions import ConfigurationError
from democrat.settings import QDRANT_API_KEY, QDRANT_TIMEOUT, QDRANT_URL

logger = logging.getLogger(__name__)

_qdrant_client = None
_qdrant_client_lock = threading.Lock()


def get_qdrant_client() -> QdrantClient:
    """
    Returns a Qdrant client based on the configured settings (lazy, thread-safe).

    Returns:
        QdrantClient: Configured Qdrant client
    """
    global _qdrant_client
    if _qdrant_client is None:
        with _qdrant_client_lock:
            if _qdrant_client is None:
                if not QDRANT_URL:
                    raise ConfigurationError("QDRANT_URL environment variable is not set")
                _qdrant_client = QdrantClient(
                    url=QDRANT_URL,
                    api_key=QDRANT_API_KEY,
                    timeout=QDRANT_TIMEOUT,
                )
                logger.info(f"Connecting to Qdrant: {QDRANT_URL}")
    return _qdrant_client
