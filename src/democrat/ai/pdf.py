"""Download Drucksache PDFs and turn them into normalized plain text."""

import logging
import re
from io import BytesIO
from typing import Optional

import requests
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from democrat.core.exceptions import TextExtractionError
from democrat.core.http import HttpClient
from democrat.settings import (
    PDF_CACHE_DIR,
    PDF_CACHE_ENABLED,
    PDF_DOWNLOAD_TIMEOUT,
    PDF_USER_AGENT,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")


def clean_text(text: str) -> str:
    """Collapse whitespace runs, strip control characters and trim."""
    text = _WHITESPACE.sub(" ", text)
    text = _CONTROL_CHARS.sub("", text)
    return text.strip()


def extract_text_from_bytes(pdf_bytes: bytes) -> str:
    """Concatenate the text of every page, in page order, and normalize it."""
    reader = PdfReader(BytesIO(pdf_bytes))
    pages = [page.extract_text() or "" for page in reader.pages]
    return clean_text("\n".join(pages))


class TextExtractor:
    """
    Extract text from a PDF URL.

    A single attempt is made per call: download failures, non-2xx responses
    and unparseable PDFs all raise TextExtractionError and the caller decides
    on a fallback.

    Usage:
        extractor = TextExtractor()
        text = extractor.extract("https://dserver.bundestag.de/btd/20/123/2012345.pdf")
    """

    def __init__(self, http_client: Optional[HttpClient] = None):
        self.http_client = http_client or HttpClient(
            timeout=PDF_DOWNLOAD_TIMEOUT,
            headers={"User-Agent": PDF_USER_AGENT},
            max_attempts=1,
            cache_dir=PDF_CACHE_DIR if PDF_CACHE_ENABLED else None,
        )

    def extract(self, url: str) -> str:
        logger.debug(f"Downloading PDF from {url}")

        try:
            pdf_bytes = self.http_client.get_content(url, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            raise TextExtractionError(f"Failed to download PDF from {url}: {e}", url) from e

        try:
            text = extract_text_from_bytes(pdf_bytes)
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise TextExtractionError(f"Failed to parse PDF from {url}: {e}", url) from e

        logger.debug(
            f"Extracted {len(text)} chars from {url}",
            extra={"pdf_url": url, "pdf_bytes": len(pdf_bytes), "text_length": len(text)},
        )
        return text
