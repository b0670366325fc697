"""Main entry point for the timein CLI.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Coroutine, Dict, List, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from timein.core.command_handler import CommandHandler
from timein.core.services.geotz_service import GeotzService
from timein.core.services.preseed_service import PreseedService
from timein.core.services.timein_service import TimeinService

# --- Domain Layer ---
from timein.domain.models.common import OutputFormat

# --- Infrastructure Layer ---
from timein.infrastructure.cache.lru_cache_store import CacheStore
from timein.infrastructure.cli.display import ConsoleDisplay
from timein.infrastructure.config.settings import (
    get_cache_dir,
    get_cache_max_entries,
    get_cache_ttl,
    get_geocoder_base_url,
    get_geocoder_timeout,
    get_log_file,
    get_log_level,
    get_user_agent,
    load_configuration,
    set_config,
)
from timein.infrastructure.geocoding.nominatim_client import NominatimGeocoder
from timein.infrastructure.monitoring.logger_setup import setup_logging
from timein.infrastructure.timezones.tz_finder import TzFinder

logger = logging.getLogger(__name__)

DEFAULT_CAPITALS_FILE = Path("data") / "capitals.json"


# --- Dependency Injection Container (Manual) ---

def create_dependencies(cache_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one command.

    This acts as the Composition Root. Construction is cheap: the timezone
    polygons are only loaded when a lookup misses the cache.

    Args:
        cache_dir: Overrides the configured cache directory.
    """
    dependencies: Dict[str, Any] = {}

    dependencies['ui'] = ConsoleDisplay()
    dependencies['cache'] = CacheStore(
        directory=cache_dir or get_cache_dir(),
        capacity=get_cache_max_entries(),
        default_ttl=get_cache_ttl(),
    )
    dependencies['geocoder'] = NominatimGeocoder(
        user_agent=get_user_agent(),
        base_url=get_geocoder_base_url(),
        timeout=get_geocoder_timeout(),
    )
    dependencies['timezone_finder'] = TzFinder()

    dependencies['geotz_service'] = GeotzService(
        geocoder=dependencies['geocoder'],
        timezone_finder=dependencies['timezone_finder'],
        cache=dependencies['cache'],
    )
    dependencies['timein_service'] = TimeinService()
    dependencies['preseed_service'] = PreseedService(
        timezone_finder=dependencies['timezone_finder'],
        cache=dependencies['cache'],
    )

    dependencies['command_handler'] = CommandHandler(
        geotz_service=dependencies['geotz_service'],
        timein_service=dependencies['timein_service'],
        preseed_service=dependencies['preseed_service'],
        cache=dependencies['cache'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


def get_command_handler(cache_dir: Optional[Path] = None) -> CommandHandler:
    return create_dependencies(cache_dir)['command_handler']


# --- Typer App Definition ---
app = typer.Typer(
    name="timein",
    help="City -> timezone and timezone -> local time lookups, for the terminal and Alfred.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, int]) -> int:
    """Runs an async command handler from a sync Typer command."""
    return asyncio.run(coro)


def _exit(code: int) -> None:
    if code != 0:
        raise typer.Exit(code=code)


# --- CLI Commands ---

FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", case_sensitive=False, help="Output format: plain or alfred."),
]


@app.command()
def geotz(
    words: Annotated[Optional[List[str]], typer.Argument(help="City or landmark name.")] = None,
    output_format: FormatOption = OutputFormat.PLAIN,
):
    """Look up the IANA timezone of a city or landmark."""
    city = " ".join(words or [])
    handler = get_command_handler()
    _exit(run_async(handler.handle_geotz(city, output_format)))


@app.command()
def timein(
    timezone_name: Annotated[Optional[str], typer.Argument(metavar="TIMEZONE", help="IANA timezone; read from stdin if omitted.")] = None,
    output_format: FormatOption = OutputFormat.PLAIN,
):
    """Show the current local time in an IANA timezone."""
    if timezone_name is None and not sys.stdin.isatty():
        timezone_name = sys.stdin.readline().strip()
    handler = get_command_handler()
    _exit(handler.handle_timein(timezone_name, output_format))


@app.command()
def preseed(
    cache_dir: Annotated[Path, typer.Argument(file_okay=False, help="Directory that will hold geotz_cache.json.")],
    capitals: Annotated[Path, typer.Option("--capitals", "-c", help="JSON list of capitals with lat/lng.")] = DEFAULT_CAPITALS_FILE,
):
    """Pre-seed the cache with capital cities resolved offline."""
    handler = get_command_handler(cache_dir)
    _exit(handler.handle_preseed(capitals))


@app.command(name="clear-cache")
def clear_cache_command():
    """Remove every cached lookup."""
    handler = get_command_handler()
    _exit(handler.handle_clear_cache())


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
):
    """Load configuration and logging before any command runs."""
    load_configuration()
    if verbose:
        set_config("logging.level", "DEBUG")
    setup_logging(log_level=get_log_level(), log_file=get_log_file())


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
