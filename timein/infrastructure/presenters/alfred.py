"""Formats lookup results as Alfred Script Filter JSON."""

from datetime import datetime

from timein.domain.interfaces.output_formatter import OutputFormatter
from timein.domain.models.common import FormattedOutput
from timein.domain.models.geo import Timezone
from timein.infrastructure.presenters.alfred_models import CacheConfig, Item, ScriptFilterOutput

TIMEZONE_CACHE_SECONDS = 604800  # 7 days; a city's timezone rarely changes
TIME_CACHE_SECONDS = 60


def format_short_time(moment: datetime) -> str:
    """'Mon, Jan 2, 3:04 PM' without zero padding on day and hour."""
    hour = moment.hour % 12 or 12
    return f"{moment:%a, %b} {moment.day}, {hour}:{moment:%M %p}"


class AlfredFormatter(OutputFormatter):
    """OutputFormatter producing Script Filter JSON for Alfred."""

    @property
    def errors_to_stdout(self) -> bool:
        # Alfred only shows what arrives on stdout
        return True

    def format_timezone_info(self, timezone: Timezone, city: str, cached: bool) -> FormattedOutput:
        subtitle = f"{city} (cached)" if cached else city
        out = ScriptFilterOutput(cache=CacheConfig(seconds=TIMEZONE_CACHE_SECONDS))
        out.add_item(Item(
            title=timezone.name,
            subtitle=subtitle,
            arg=timezone.name,
            variables={"city": city},
        ))
        return FormattedOutput(out.to_json())

    def format_time_info(self, timezone: Timezone, moment: datetime) -> FormattedOutput:
        local = timezone.now(moment)
        title = f"{timezone.name} - {format_short_time(local)}"
        subtitle = f"Current time in {timezone.city} ({timezone.abbreviation(local)})"
        out = ScriptFilterOutput(cache=CacheConfig(seconds=TIME_CACHE_SECONDS))
        out.add_item(Item(
            title=title,
            subtitle=subtitle,
            arg=title,
            variables={"timezone": timezone.name},
        ))
        return FormattedOutput(out.to_json())

    def format_error(self, message: str) -> FormattedOutput:
        out = ScriptFilterOutput()
        out.add_item(Item(title="Error", subtitle=message, valid=False))
        return FormattedOutput(out.to_json())
