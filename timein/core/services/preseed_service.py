"""Preseed Service: warm the lookup cache from an offline capitals list.

The capitals file is a JSON list of ``{"name", "country", "lat", "lng"}``
records. Coordinates are resolved locally, so no geocoding requests are made.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from timein.domain.interfaces.cache import TimezoneCache
from timein.domain.interfaces.timezone_finder import TimezoneFinder
from timein.domain.models.common import make_cache_key
from timein.domain.models.errors import PreseedError, TimezoneResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capital:
    name: str
    country: str
    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Capital":
        return cls(
            name=str(data["name"]),
            country=str(data.get("country", "")),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
        )


@dataclass
class PreseedReport:
    resolved: Dict[str, str] = field(default_factory=dict)  # cache key -> timezone
    failures: List[str] = field(default_factory=list)
    inserted: int = 0


def load_capitals(path: Union[str, Path]) -> List[Capital]:
    """Reads and validates the capitals file.

    Raises:
        PreseedError: If the file cannot be read or is not a list of records.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
        records = json.loads(raw)
    except OSError as e:
        raise PreseedError(f"Failed to read capitals data {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PreseedError(f"Failed to parse capitals data {path}: {e}") from e
    if not isinstance(records, list):
        raise PreseedError(f"Capitals data {path} must be a JSON list")

    capitals = []
    for index, record in enumerate(records):
        try:
            capitals.append(Capital.from_dict(record))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping capitals record #{index}: {e}")
    return capitals


class PreseedService:
    """Resolves capitals to timezones and pre-seeds them into the cache."""

    def __init__(self, timezone_finder: TimezoneFinder, cache: TimezoneCache):
        self.timezone_finder = timezone_finder
        self.cache = cache

    def seed(self, capitals: List[Capital]) -> PreseedReport:
        report = PreseedReport()
        for capital in capitals:
            try:
                name = self.timezone_finder.timezone_at(capital.lng, capital.lat)
            except TimezoneResolutionError as e:
                logger.warning(f"Failed to get timezone for {capital.name}: {e}")
                report.failures.append(capital.name)
                continue
            report.resolved[make_cache_key(capital.name)] = name
            logger.debug(f"{capital.name}, {capital.country} -> {name}")

        report.inserted = self.cache.pre_seed(report.resolved)
        logger.info(f"Pre-seeded {report.inserted} of {len(report.resolved)} resolved capitals")
        return report

    def seed_file(self, path: Union[str, Path]) -> PreseedReport:
        return self.seed(load_capitals(path))
