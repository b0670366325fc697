"""Coordinate -> timezone resolution using the timezonefinder package.

The polygon data is loaded lazily on first use, so a cache hit never pays
for it.
"""

import logging
from typing import Optional

from timezonefinder import TimezoneFinder as _PolygonFinder

from timein.domain.interfaces.timezone_finder import TimezoneFinder
from timein.domain.models.common import TimezoneName
from timein.domain.models.errors import TimezoneResolutionError

logger = logging.getLogger(__name__)


class TzFinder(TimezoneFinder):
    """TimezoneFinder adapter over timezonefinder's polygon lookup."""

    def __init__(self, finder: Optional[_PolygonFinder] = None):
        self._finder = finder

    @property
    def finder(self) -> _PolygonFinder:
        if self._finder is None:
            logger.debug("Loading timezone polygons")
            self._finder = _PolygonFinder()
        return self._finder

    def timezone_at(self, longitude: float, latitude: float) -> TimezoneName:
        try:
            name = self.finder.timezone_at(lng=longitude, lat=latitude)
        except ValueError as e:
            # timezonefinder rejects out-of-range coordinates with ValueError
            raise TimezoneResolutionError(f"invalid coordinates {latitude}, {longitude}: {e}") from e
        if not name:
            raise TimezoneResolutionError(f"no timezone found for coordinates: {latitude}, {longitude}")
        return TimezoneName(name)
