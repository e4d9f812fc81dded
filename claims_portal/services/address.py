import logging
from typing import Any, Dict, Optional

import httpx

from ..config import get_settings
from ..constants import ADDRESS_QUERY_MIN

logger = logging.getLogger(__name__)

PLACES_AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
PLACES_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
CHIMNIE_DETAILS_URL = "https://api.chimnie.com/v1/property/details"


class AddressLookupError(Exception):
    pass


class AddressLookupUnavailable(AddressLookupError):
    pass


class AddressService:
    """Address search (Google Places, GB only) and construction details (Chimnie)."""

    def __init__(
        self,
        places_api_key: Optional[str] = None,
        chimnie_api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        settings = get_settings()
        self.places_api_key = settings.google_places_api_key if places_api_key is None else places_api_key
        self.chimnie_api_key = settings.chimnie_api_key if chimnie_api_key is None else chimnie_api_key
        self.timeout = settings.http_timeout
        self.transport = transport

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                resp = client.request(method, url, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Address lookup failed: url={url} error={e}")
            raise AddressLookupError(str(e)) from e

    def autocomplete(self, query: str) -> Dict[str, Any]:
        query = (query or "").strip()
        if len(query) < ADDRESS_QUERY_MIN:
            raise ValueError(f"Input must be at least {ADDRESS_QUERY_MIN} characters")
        if not self.places_api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not configured, address autocomplete disabled")
            raise AddressLookupUnavailable("Address autocomplete service not configured")
        return self._request("GET", PLACES_AUTOCOMPLETE_URL, params={
            "input": query,
            "types": "address",
            "components": "country:gb",
            "key": self.places_api_key,
        })

    def place_details(self, place_id: str) -> Dict[str, Any]:
        if not self.places_api_key:
            raise AddressLookupUnavailable("Google Places API not configured")
        return self._request("GET", PLACES_DETAILS_URL, params={
            "place_id": place_id,
            "fields": "formatted_address,address_components",
            "key": self.places_api_key,
        })

    def construction_details(self, address: str) -> Dict[str, Any]:
        if not address or not address.strip():
            raise ValueError("Address is required")
        if not self.chimnie_api_key:
            logger.warning("CHIMNIE_API_KEY not configured, construction details disabled")
            raise AddressLookupUnavailable("Construction details service not configured")
        return self._request(
            "POST",
            CHIMNIE_DETAILS_URL,
            headers={"Authorization": f"Bearer {self.chimnie_api_key}", "Accept": "application/json"},
            json={"address": address.strip()},
        )


def get_address_service() -> AddressService:
    return AddressService()
