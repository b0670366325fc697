"""Defines common Value Objects used across the lookup flows.

These objects represent simple values like cache keys, timezone names and
output formats, ensuring consistency and type safety.
"""

from enum import Enum
from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
CityQuery = NewType("CityQuery", str)          # City or landmark as typed by the user
TimezoneName = NewType("TimezoneName", str)    # IANA identifier, e.g. "Europe/London"
FormattedOutput = NewType("FormattedOutput", str)  # Rendered text or JSON ready for stdout

# === Caching Context ===
CacheKey = NewType("CacheKey", str)            # Normalized (lower-cased) lookup string


class OutputFormat(str, Enum):
    """Output flavours supported by the CLI."""
    PLAIN = "plain"
    ALFRED = "alfred"


def make_cache_key(query: str) -> CacheKey:
    """Normalizes a city query into its cache key."""
    return CacheKey(query.strip().lower())
