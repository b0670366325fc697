"""Timein Service: IANA timezone -> current local time."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from timein.domain.models.errors import MissingArgumentError
from timein.domain.models.geo import Timezone


@dataclass(frozen=True)
class TimeInfo:
    timezone: Timezone
    moment: datetime  # already converted to the timezone
    city: str
    abbreviation: str


class TimeinService:
    """Computes the current time in a timezone.

    The clock is injectable so tests can pin the instant.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock

    def current_time(self, name: str) -> TimeInfo:
        """Validates ``name`` and returns the current time there.

        Raises:
            MissingArgumentError: If the name is blank.
            InvalidTimezoneError: If the name is not a known IANA timezone.
        """
        if not name or not name.strip():
            raise MissingArgumentError("IANA timezone argument required.")
        timezone = Timezone.parse(name)
        moment = timezone.now(self._clock() if self._clock else None)
        return TimeInfo(
            timezone=timezone,
            moment=moment,
            city=timezone.city,
            abbreviation=timezone.abbreviation(moment),
        )
