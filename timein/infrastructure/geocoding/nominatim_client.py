"""OpenStreetMap Nominatim geocoder.

Resolves free-text place names to coordinates using the public search
endpoint. Nominatim requires an identifying User-Agent and allows at most
one request per second, which a single CLI lookup stays well under.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from timein.domain.interfaces.geocoder import Geocoder
from timein.domain.models.errors import GeocodingError, InvalidLocationError
from timein.domain.models.geo import Location

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_TIMEOUT = 10.0


class NominatimGeocoder(Geocoder):
    """Geocoder backed by the Nominatim /search API."""

    def __init__(
        self,
        user_agent: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initializes the geocoder.

        Args:
            user_agent: Identifying User-Agent header, required by Nominatim.
            base_url: API root, without trailing slash.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._transport = transport

    async def geocode(self, query: str) -> Location:
        params = {"q": query, "format": "json", "limit": 1}
        logger.debug(f"Geocoding '{query}' via {self.base_url}")
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get("/search", params=params)
                response.raise_for_status()
                results: List[Dict[str, Any]] = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Nominatim returned HTTP {e.response.status_code} for '{query}'")
            raise GeocodingError(f"geocoding failed: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Nominatim request failed for '{query}': {e}")
            raise GeocodingError(f"geocoding failed: {e}") from e
        except ValueError as e:
            raise GeocodingError(f"geocoding failed: invalid JSON response ({e})") from e

        if not isinstance(results, list) or not results:
            raise GeocodingError(f"no results found for: {query}")

        first = results[0]
        try:
            return Location(name=query, latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError, InvalidLocationError) as e:
            raise GeocodingError(f"unusable geocoding result for '{query}': {e}") from e
