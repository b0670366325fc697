"""Validated geographic models: Location and Timezone."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timein.domain.models.common import TimezoneName
from timein.domain.models.errors import InvalidLocationError, InvalidTimezoneError


@dataclass(frozen=True)
class Location:
    """A named point on the globe."""
    name: str
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidLocationError("location name cannot be empty")
        if not -90 <= self.latitude <= 90:
            raise InvalidLocationError(f"invalid latitude: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise InvalidLocationError(f"invalid longitude: {self.longitude}")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Timezone:
    """An IANA timezone known to the local tz database.

    Build instances through ``Timezone.parse`` so the name is validated.
    """
    name: TimezoneName

    @classmethod
    def parse(cls, raw: str) -> "Timezone":
        name = raw.strip()
        if not name:
            raise InvalidTimezoneError("timezone name cannot be empty")
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            # ValueError covers malformed keys such as absolute paths
            raise InvalidTimezoneError(f"Invalid timezone: {name}") from None
        return cls(TimezoneName(name))

    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.name)

    @property
    def city(self) -> str:
        """Second path segment of the name, e.g. "New York" for America/New_York."""
        parts = self.name.split("/")
        if len(parts) > 1:
            return parts[1].replace("_", " ")
        return self.name

    def now(self, moment: Optional[datetime] = None) -> datetime:
        """Returns ``moment`` (default: the current instant) in this zone."""
        if moment is None:
            return datetime.now(self.zone())
        return moment.astimezone(self.zone())

    def abbreviation(self, moment: datetime) -> str:
        local = self.now(moment)
        return local.tzname() or local.strftime("%z")

    def __str__(self) -> str:
        return self.name
