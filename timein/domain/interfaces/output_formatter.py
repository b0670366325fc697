"""Interface for rendering lookup results.

Formatters turn domain results into the text written to stdout, either
plain text for terminals or Script Filter JSON for Alfred.
"""

import abc
from datetime import datetime

from timein.domain.models.common import FormattedOutput
from timein.domain.models.geo import Timezone


class OutputFormatter(abc.ABC):
    """Abstract Base Class for output formatters."""

    @abc.abstractmethod
    def format_timezone_info(self, timezone: Timezone, city: str, cached: bool) -> FormattedOutput:
        """Renders the result of a city -> timezone lookup.

        Args:
            timezone: The resolved timezone.
            city: The city as the user typed it.
            cached: Whether the result came from the cache.
        """
        pass

    @abc.abstractmethod
    def format_time_info(self, timezone: Timezone, moment: datetime) -> FormattedOutput:
        """Renders the current local time in a timezone.

        Args:
            timezone: The timezone to show.
            moment: The instant to render, already converted to the zone.
        """
        pass

    @abc.abstractmethod
    def format_error(self, message: str) -> FormattedOutput:
        """Renders an error message."""
        pass

    @property
    def errors_to_stdout(self) -> bool:
        """Whether rendered errors belong on stdout rather than stderr."""
        return False
