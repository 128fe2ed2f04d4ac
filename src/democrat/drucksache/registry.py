"""Client for the DIP (Bundestag documentation system) Drucksache listing."""

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from democrat.core.exceptions import ConfigurationError, RegistryError
from democrat.core.http import HttpClient
from democrat.drucksache.models import Drucksache, RegistryPage
from democrat.settings import (
    DIP_API_KEY,
    DIP_BASE_URL,
    DIP_DRUCKSACHETYP,
    DIP_REQUEST_TIMEOUT,
    DIP_ZUORDNUNG,
)

logger = logging.getLogger(__name__)


def drucksache_from_record(record: dict[str, Any]) -> Drucksache:
    """
    Map a raw DIP record onto the Drucksache model.

    Only the first ressort is kept as the originating department; urheber is
    flattened to its titles.

    Raises:
        TypeError: If the record is not a JSON object
        pydantic.ValidationError: If required fields (id, titel) are missing or malformed
    """
    if not isinstance(record, dict):
        raise TypeError(f"DIP record must be an object, got {type(record).__name__}")

    fundstelle = record.get("fundstelle") or {}
    ressorts = record.get("ressort") or []
    urheber = record.get("urheber") or []

    return Drucksache(
        dip_id=record.get("id"),
        titel=record.get("titel"),
        dokumentart=record.get("dokumentart"),
        drucksachetyp=record.get("drucksachetyp"),
        datum=record.get("datum") or None,
        pdf_url=fundstelle.get("pdf_url"),
        dokumentnummer=fundstelle.get("dokumentnummer"),
        ressort=ressorts[0].get("titel") if ressorts else None,
        urheber=[u.get("titel") for u in urheber if u.get("titel")],
        abstract=record.get("abstract"),
        wahlperiode=record.get("wahlperiode"),
    )


class DIPRegistryClient:
    """Fetches pages of bill drafts from the DIP API.

    Usage:
        client = DIPRegistryClient(api_key="...")
        page = client.fetch_page()
        page = client.fetch_page(cursor=page.cursor)
    """

    def __init__(
        self,
        api_key: Optional[str] = DIP_API_KEY,
        base_url: str = DIP_BASE_URL,
        drucksachetyp: str = DIP_DRUCKSACHETYP,
        zuordnung: str = DIP_ZUORDNUNG,
        http_client: Optional[HttpClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.drucksachetyp = drucksachetyp
        self.zuordnung = zuordnung
        self.http_client = http_client or HttpClient(
            timeout=DIP_REQUEST_TIMEOUT,
            headers={"Accept": "application/json"},
            max_attempts=1,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_params(self, cursor: Optional[str] = None) -> dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("DIP_API_KEY not configured")

        params = {
            "f.drucksachetyp": self.drucksachetyp,
            "f.zuordnung": self.zuordnung,
            "apikey": self.api_key,
        }
        if cursor:
            params["cursor"] = cursor
        return params

    def fetch_page(self, cursor: Optional[str] = None) -> RegistryPage:
        """
        Request one page of the listing.

        Args:
            cursor: Opaque cursor returned with the previous page, None for the first page

        Returns:
            RegistryPage with the raw records and the next cursor (if any)

        Raises:
            ConfigurationError: If no API key is set
            RegistryError: On network errors, non-2xx responses or an undecodable body
        """
        params = self.build_params(cursor)
        url = f"{self.base_url}/drucksache"

        try:
            response = self.http_client.get(url, params=params)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise RegistryError(f"DIP request failed with status {status}", status) from e
        except requests.exceptions.RequestException as e:
            raise RegistryError(f"DIP request failed: {e}") from e

        try:
            return RegistryPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RegistryError(f"Malformed DIP response page: {e}") from e
