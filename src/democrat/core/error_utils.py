"""Error categorization and metadata extraction utilities."""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests
from openai import APIError
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from democrat.core.exceptions import (
    AIResponseError,
    ConfigurationError,
    RegistryError,
    TextExtractionError,
    VectorStoreError,
)


class ErrorCategories:
    """Standard error categories across the pipeline."""
    CONFIGURATION_ERROR = "configuration_error"
    TRANSPORT_ERROR = "transport_error"
    DATA_ERROR = "data_error"
    UNKNOWN_ERROR = "unknown_error"


class ErrorCategorizer:
    """Categorize and extract metadata from errors in a consistent way."""

    ERROR_TYPES = {
        ErrorCategories.CONFIGURATION_ERROR: (ConfigurationError,),
        ErrorCategories.TRANSPORT_ERROR: (
            RegistryError,
            TextExtractionError,
            VectorStoreError,
            requests.exceptions.RequestException,
            APIError,
            UnexpectedResponse,
            ResponseHandlingException,
            ConnectionError,
            TimeoutError,
        ),
        ErrorCategories.DATA_ERROR: (AIResponseError, ValueError, KeyError, TypeError),
    }

    # Fallback patterns for exceptions raised by libraries we don't type-match
    ERROR_PATTERNS = {
        ErrorCategories.TRANSPORT_ERROR: [
            "timeout",
            "connection",
            "unreachable",
            "502",
            "503",
            "504",
        ],
        ErrorCategories.DATA_ERROR: [
            "validation error",
            "malformed",
            "decode",
        ],
    }

    @classmethod
    def categorize_error(cls, error: Exception) -> str:
        """Categorize an error based on its type, then on its message.

        Args:
            error: The exception to categorize

        Returns:
            Error category string
        """
        for category, types in cls.ERROR_TYPES.items():
            if isinstance(error, types):
                return category

        error_str = str(error).lower()
        error_type = type(error).__name__.lower()
        for category, patterns in cls.ERROR_PATTERNS.items():
            for pattern in patterns:
                if pattern in error_str or pattern in error_type:
                    return category

        return ErrorCategories.UNKNOWN_ERROR

    @classmethod
    def extract_error_metadata(
        cls, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Extract structured metadata from an error for `extra=` logging.

        Args:
            error: The exception to analyze
            context: Optional context information (e.g. {"dip_id": ...})

        Returns:
            Dictionary of error metadata
        """
        metadata = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            "error_category": cls.categorize_error(error),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        status_code = getattr(error, "status_code", None)
        if status_code is None:
            status_match = re.search(r"\b([45]\d{2})\b", str(error))
            if status_match:
                status_code = int(status_match.group(1))
        if status_code is not None:
            metadata["http_status"] = status_code

        url = getattr(error, "url", None)
        if url:
            metadata["error_url"] = url

        if context:
            metadata.update(context)

        return metadata
