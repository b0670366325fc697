from datetime import datetime, timedelta, timezone

import pytest
from typer.testing import CliRunner

import timein.infrastructure.cache.lru_cache_store as store_mod
from timein.infrastructure.config import settings


class FakeClock:
    """Controllable stand-in for the cache store's clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def clock(monkeypatch):
    """Freezes the cache store's notion of 'now' and lets tests move it."""
    fake = FakeClock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(store_mod, "_now", fake)
    return fake


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the user's config file, .env and cache."""
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "no-config.yaml")
    monkeypatch.setattr(settings, "find_dotenv_path", lambda: None)
    monkeypatch.setenv("TIMEIN_CACHE_DIR", str(tmp_path / "cache"))
    settings.reset_configuration()
    yield
    settings.reset_configuration()
