"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the application services and renders results or errors with the
formatter chosen by the user. Every handler returns the process exit code.
"""

import logging
from pathlib import Path
from typing import Optional

from timein.core.services.geotz_service import GeotzService
from timein.core.services.preseed_service import PreseedService
from timein.core.services.timein_service import TimeinService
from timein.domain.interfaces.cache import TimezoneCache
from timein.domain.interfaces.output_formatter import OutputFormatter
from timein.domain.interfaces.user_interface import UserInterface
from timein.domain.models.common import OutputFormat
from timein.domain.models.errors import TimeinError
from timein.infrastructure.presenters import get_formatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        geotz_service: GeotzService,
        timein_service: TimeinService,
        preseed_service: PreseedService,
        cache: TimezoneCache,
        ui: UserInterface,
    ):
        """Initializes the CommandHandler with required services."""
        self.geotz_service = geotz_service
        self.timein_service = timein_service
        self.preseed_service = preseed_service
        self.cache = cache
        self.ui = ui

    def _report_error(self, message: str, formatter: OutputFormatter) -> int:
        rendered = formatter.format_error(message)
        if formatter.errors_to_stdout:
            self.ui.display_output(rendered)
        else:
            self.ui.display_error(rendered)
        return EXIT_FAILURE

    async def handle_geotz(self, city: str, output_format: OutputFormat = OutputFormat.PLAIN) -> int:
        """Handles the 'geotz' command."""
        formatter = get_formatter(output_format)
        logger.info(f"Handling 'geotz' command for: {city!r} (format={output_format.value})")
        try:
            result = await self.geotz_service.lookup(city)
        except TimeinError as e:
            logger.info(f"geotz failed: {e}")
            return self._report_error(str(e), formatter)
        except Exception as e:
            logger.error(f"Unexpected error in geotz: {e}", exc_info=True)
            return self._report_error(f"Unexpected error: {e}", formatter)

        self.ui.display_output(formatter.format_timezone_info(result.timezone, result.city, result.cached))
        return EXIT_OK

    def handle_timein(self, timezone_name: Optional[str], output_format: OutputFormat = OutputFormat.PLAIN) -> int:
        """Handles the 'timein' command."""
        formatter = get_formatter(output_format)
        logger.info(f"Handling 'timein' command for: {timezone_name!r} (format={output_format.value})")
        try:
            info = self.timein_service.current_time(timezone_name or "")
        except TimeinError as e:
            logger.info(f"timein failed: {e}")
            return self._report_error(str(e), formatter)
        except Exception as e:
            logger.error(f"Unexpected error in timein: {e}", exc_info=True)
            return self._report_error(f"Unexpected error: {e}", formatter)

        self.ui.display_output(formatter.format_time_info(info.timezone, info.moment))
        return EXIT_OK

    def handle_preseed(self, capitals_file: Path) -> int:
        """Handles the 'preseed' command."""
        logger.info(f"Handling 'preseed' command from: {capitals_file}")
        try:
            report = self.preseed_service.seed_file(capitals_file)
        except TimeinError as e:
            logger.error(f"Pre-seed failed: {e}")
            self.ui.display_error(str(e))
            return EXIT_FAILURE

        for name in report.failures:
            self.ui.display_warning(f"Failed to get timezone for {name}")
        self.ui.display_info(
            f"Pre-seeded {report.inserted} new of {len(report.resolved)} resolved cities"
            f" into {getattr(self.cache, 'path', 'cache')}"
        )
        return EXIT_OK

    def handle_clear_cache(self) -> int:
        """Handles the 'clear-cache' command."""
        logger.info("Handling 'clear-cache' command")
        self.cache.clear()
        self.ui.display_info("Cache cleared.")
        return EXIT_OK
