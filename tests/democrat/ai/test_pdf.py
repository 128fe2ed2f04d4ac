from io import BytesIO
from unittest.mock import MagicMock

import pytest
import requests
from pypdf import PdfWriter

from democrat.ai import pdf
from democrat.ai.pdf import TextExtractor, clean_text, extract_text_from_bytes
from democrat.core.exceptions import TextExtractionError

PDF_URL = "https://dserver.bundestag.de/btd/20/123/2012345.pdf"


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=595, height=842)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Entwurf   eines\n\nGesetzes \t ", "Entwurf eines Gesetzes"),
        ("Art.\x0c1\x00 Abs.\x7f 2", "Art. 1 Abs. 2"),
        ("\n\n", ""),
        ("", ""),
    ],
)
def test_clean_text(raw, expected):
    assert clean_text(raw) == expected


def test_pages_are_joined_in_order(monkeypatch):
    pages = [MagicMock(), MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = "Seite eins"
    pages[1].extract_text.return_value = None
    pages[2].extract_text.return_value = "Seite\ndrei"
    monkeypatch.setattr(pdf, "PdfReader", lambda stream: MagicMock(pages=pages))

    assert extract_text_from_bytes(b"%PDF") == "Seite eins Seite drei"


def test_blank_pdf_has_no_text():
    assert extract_text_from_bytes(_blank_pdf()) == ""


class TestTextExtractor:
    def test_extract(self, monkeypatch):
        http_client = MagicMock()
        http_client.get_content.return_value = b"%PDF-1.7"
        monkeypatch.setattr(pdf, "extract_text_from_bytes", lambda data: "Volltext")

        assert TextExtractor(http_client=http_client).extract(PDF_URL) == "Volltext"
        http_client.get_content.assert_called_once_with(PDF_URL, allow_redirects=True)

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.Timeout("read timed out"),
            requests.exceptions.ConnectionError("connection refused"),
            requests.exceptions.HTTPError("404 Client Error: Not Found"),
        ],
    )
    def test_download_failure(self, error):
        http_client = MagicMock()
        http_client.get_content.side_effect = error

        with pytest.raises(TextExtractionError) as exc_info:
            TextExtractor(http_client=http_client).extract(PDF_URL)
        assert exc_info.value.url == PDF_URL
        assert exc_info.value.__cause__ is error

    def test_unparseable_pdf(self):
        http_client = MagicMock()
        http_client.get_content.return_value = b"<html>Wartungsarbeiten</html>"

        with pytest.raises(TextExtractionError, match="Failed to parse PDF"):
            TextExtractor(http_client=http_client).extract(PDF_URL)

    def test_default_client_sends_user_agent(self):
        extractor = TextExtractor()

        assert extractor.http_client.session.headers["User-Agent"] == "DEMOCRAT-Backend/1.0"
        assert extractor.http_client.timeout == 60
        assert extractor.http_client.max_attempts == 1
        assert not extractor.http_client.caching
