"""Provides functions for loading and accessing configuration settings.

Supports loading from a YAML config file (~/.timein/config.yaml), a .env
file and environment variables. Environment variables use the ``TIMEIN_``
prefix with dots turned into underscores, e.g. ``cache.dir`` is read from
``TIMEIN_CACHE_DIR``.
"""

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from timein import __version__

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".timein"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "TIMEIN_"

DEFAULT_CACHE_DIR = "."  # Alfred runs workflows from the workflow directory
DEFAULT_CACHE_MAX_ENTRIES = 1000
DEFAULT_CACHE_TTL_SECONDS = 30 * 24 * 60 * 60  # 30 days
DEFAULT_GEOCODER_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_GEOCODER_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"timein-cli/{__version__}"

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_overrides: Dict[str, Any] = {}  # set_config values, highest priority
_loaded = False


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from the YAML file and the .env file.

    Priority order (highest to lowest):
    1. Values set with set_config
    2. Environment variables (including those loaded from .env)
    3. YAML configuration file
    4. Defaults passed to get_config

    Args:
        config_file: Path to the YAML configuration file (default ~/.timein/config.yaml).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config.clear()
    config_file = config_file or DEFAULT_CONFIG_FILE

    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above the current directory.")

    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded and overridden values so the next load starts fresh."""
    global _loaded
    _config.clear()
    _overrides.clear()
    _loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ({'cache': {'dir': x}} -> {'cache.dir': x})."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def env_var_name(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_").replace("-", "_")


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Gets a configuration value by dotted key.

    Args:
        key: The configuration key, e.g. 'cache.dir'.
        default: Value returned if the key is not configured anywhere.

    Returns:
        The configuration value.
    """
    if key in _overrides:
        return _overrides[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def set_config(key: str, value: Any) -> None:
    """Overrides a configuration value for the rest of the process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _overrides[key] = value


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def _positive_int(key: str, default: int) -> int:
    value = get_config(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Config '{key}' is not an integer ({value!r}); using {default}.")
        return default
    if number < 1:
        logger.warning(f"Config '{key}' must be positive ({number}); using {default}.")
        return default
    return number


def get_cache_dir() -> Path:
    """Directory holding geotz_cache.json."""
    return Path(str(get_config("cache.dir", DEFAULT_CACHE_DIR))).expanduser()


def get_cache_max_entries() -> int:
    return _positive_int("cache.max_entries", DEFAULT_CACHE_MAX_ENTRIES)


def get_cache_ttl() -> timedelta:
    """Default TTL for looked-up entries."""
    return timedelta(seconds=_positive_int("cache.ttl_seconds", DEFAULT_CACHE_TTL_SECONDS))


def get_geocoder_base_url() -> str:
    return str(get_config("geocoder.base_url", DEFAULT_GEOCODER_BASE_URL)).rstrip("/")


def get_geocoder_timeout() -> float:
    value = get_config("geocoder.timeout", DEFAULT_GEOCODER_TIMEOUT)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Config 'geocoder.timeout' is not a number ({value!r}); using {DEFAULT_GEOCODER_TIMEOUT}.")
        return DEFAULT_GEOCODER_TIMEOUT


def get_user_agent() -> str:
    """User-Agent sent to Nominatim, which rejects anonymous clients."""
    return str(get_config("geocoder.user_agent", DEFAULT_USER_AGENT))


def get_log_level() -> int:
    name = str(get_config("logging.level", "WARNING")).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_log_file() -> Optional[str]:
    value = get_config("logging.file")
    return str(value) if value else None
