"""Geotz Service: city or landmark name -> IANA timezone.

Checks the cache first; only a miss pays for the network geocoding call and
the polygon lookup, and a successful resolution is written back.
"""

import asyncio
import logging
from dataclasses import dataclass

from timein.domain.interfaces.cache import TimezoneCache
from timein.domain.interfaces.geocoder import Geocoder
from timein.domain.interfaces.timezone_finder import TimezoneFinder
from timein.domain.models.common import make_cache_key
from timein.domain.models.errors import (
    GeocodingError,
    InvalidTimezoneError,
    MissingArgumentError,
    TimezoneResolutionError,
)
from timein.domain.models.geo import Timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeotzResult:
    timezone: Timezone
    city: str
    cached: bool


class GeotzService:
    """Resolves place names to timezones through the cache."""

    def __init__(self, geocoder: Geocoder, timezone_finder: TimezoneFinder, cache: TimezoneCache):
        self.geocoder = geocoder
        self.timezone_finder = timezone_finder
        self.cache = cache

    async def lookup(self, city: str) -> GeotzResult:
        """Finds the timezone for a city.

        Args:
            city: City or landmark as typed by the user.

        Returns:
            The resolved timezone, the trimmed city and whether it was cached.

        Raises:
            MissingArgumentError: If the city is blank.
            GeocodingError: If the city cannot be geocoded.
            TimezoneResolutionError: If no timezone covers the coordinates.
        """
        city = city.strip()
        if not city:
            raise MissingArgumentError("City or landmark argument required.")

        key = make_cache_key(city)
        cached_value = self.cache.get(key)
        if cached_value is not None:
            try:
                timezone = Timezone.parse(cached_value)
            except InvalidTimezoneError:
                logger.warning(f"Ignoring invalid cached timezone {cached_value!r} for '{key}'")
            else:
                logger.debug(f"Cache hit for '{key}': {timezone}")
                return GeotzResult(timezone=timezone, city=city, cached=True)

        logger.debug(f"Cache miss for '{key}', geocoding")
        try:
            location = await self.geocoder.geocode(city)
        except GeocodingError as e:
            logger.info(f"Geocoding failed for '{city}': {e}")
            raise GeocodingError(f"Could not geocode: {city}") from e

        try:
            name = await asyncio.to_thread(
                self.timezone_finder.timezone_at, location.longitude, location.latitude
            )
            timezone = Timezone.parse(name)
        except (TimezoneResolutionError, InvalidTimezoneError) as e:
            logger.info(f"Timezone resolution failed for '{city}': {e}")
            raise TimezoneResolutionError(f"Could not resolve timezone for: {city}") from e

        self.cache.set(key, timezone.name)
        return GeotzResult(timezone=timezone, city=city, cached=False)
