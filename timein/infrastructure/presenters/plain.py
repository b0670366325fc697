"""Formats lookup results as plain text for terminals and scripts."""

from datetime import datetime

from timein.domain.interfaces.output_formatter import OutputFormatter
from timein.domain.models.common import FormattedOutput
from timein.domain.models.geo import Timezone


def format_human_time(moment: datetime) -> str:
    """'Monday, 02 January 2006, 3:04:05 PM'."""
    hour = moment.hour % 12 or 12
    return f"{moment:%A, %d %B %Y}, {hour}:{moment:%M:%S %p}"


class PlainFormatter(OutputFormatter):

    def format_timezone_info(self, timezone: Timezone, city: str, cached: bool) -> FormattedOutput:
        return FormattedOutput(timezone.name)

    def format_time_info(self, timezone: Timezone, moment: datetime) -> FormattedOutput:
        return FormattedOutput(format_human_time(timezone.now(moment)))

    def format_error(self, message: str) -> FormattedOutput:
        return FormattedOutput(f"Error: {message}")
