"""Error handling utilities for FastAPI routers."""

import logging
from functools import wraps
from typing import Callable, TypeVar

from fastapi import HTTPException

from democrat.core.error_utils import ErrorCategories, ErrorCategorizer

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATUS_BY_CATEGORY = {
    ErrorCategories.CONFIGURATION_ERROR: 503,
    ErrorCategories.TRANSPORT_ERROR: 502,
}


def handle_errors(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that converts unexpected exceptions into an HTTPException.

    HTTPExceptions pass through unchanged. Anything else is logged with its
    error category and answered with 503 (configuration), 502 (upstream
    transport) or 500.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as e:
            metadata = ErrorCategorizer.extract_error_metadata(e, {"endpoint": func.__name__})
            logger.error(f"{func.__name__} failed: {e}", exc_info=True, extra=metadata)
            raise HTTPException(
                status_code=_STATUS_BY_CATEGORY.get(metadata["error_category"], 500),
                detail={
                    "error_type": metadata["error_type"],
                    "error_message": metadata["error_message"],
                    "error_category": metadata["error_category"],
                },
            )

    return wrapper
