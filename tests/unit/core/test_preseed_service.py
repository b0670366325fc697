import json
from unittest.mock import MagicMock

import pytest

from timein.core.services.preseed_service import Capital, PreseedService, load_capitals
from timein.domain.interfaces.cache import TimezoneCache
from timein.domain.interfaces.timezone_finder import TimezoneFinder
from timein.domain.models.errors import PreseedError, TimezoneResolutionError
from timein.infrastructure.cache.lru_cache_store import PRESEED_TTL, CacheStore

ZONES = {
    (51.5074, -0.1278): "Europe/London",
    (35.6762, 139.6503): "Asia/Tokyo",
}


def fake_timezone_at(longitude, latitude):
    try:
        return ZONES[(latitude, longitude)]
    except KeyError:
        raise TimezoneResolutionError("no timezone found") from None


@pytest.fixture
def mock_finder():
    finder = MagicMock(spec=TimezoneFinder)
    finder.timezone_at.side_effect = fake_timezone_at
    return finder


@pytest.fixture
def capitals_file(tmp_path):
    path = tmp_path / "capitals.json"
    path.write_text(json.dumps([
        {"name": "London", "country": "United Kingdom", "lat": 51.5074, "lng": -0.1278},
        {"name": "Tokyo", "country": "Japan", "lat": 35.6762, "lng": 139.6503},
        {"name": "Atlantis", "country": "Ocean", "lat": 0.0, "lng": 0.0},
    ]))
    return path


def test_load_capitals(capitals_file):
    capitals = load_capitals(capitals_file)
    assert [c.name for c in capitals] == ["London", "Tokyo", "Atlantis"]
    assert capitals[0] == Capital("London", "United Kingdom", 51.5074, -0.1278)


def test_load_capitals_skips_bad_records(tmp_path):
    path = tmp_path / "capitals.json"
    path.write_text(json.dumps([
        {"name": "Paris", "lat": 48.8566, "lng": 2.3522},
        {"name": "No coordinates"},
        {"name": "Bad", "lat": "north", "lng": 0},
        "just a string",
    ]))

    assert [c.name for c in load_capitals(path)] == ["Paris"]


def test_load_capitals_missing_file(tmp_path):
    with pytest.raises(PreseedError, match="Failed to read"):
        load_capitals(tmp_path / "missing.json")


@pytest.mark.parametrize("content", ["{broken", '{"name": "London"}'])
def test_load_capitals_bad_document(tmp_path, content):
    path = tmp_path / "capitals.json"
    path.write_text(content)
    with pytest.raises(PreseedError):
        load_capitals(path)


def test_seed_reports_failures_and_inserts_once(mock_finder, capitals_file):
    cache = MagicMock(spec=TimezoneCache)
    cache.pre_seed.return_value = 2

    report = PreseedService(mock_finder, cache).seed_file(capitals_file)

    assert report.resolved == {"london": "Europe/London", "tokyo": "Asia/Tokyo"}
    assert report.failures == ["Atlantis"]
    assert report.inserted == 2
    cache.pre_seed.assert_called_once_with({"london": "Europe/London", "tokyo": "Asia/Tokyo"})


def test_seed_into_real_store_keeps_existing_lookups(mock_finder, capitals_file, tmp_path, clock):
    store = CacheStore(tmp_path / "cache", capacity=10)
    store.set("london", "Europe/Paris")

    report = PreseedService(mock_finder, store).seed_file(capitals_file)

    assert report.inserted == 1
    assert store.get("london") == "Europe/Paris"
    assert store.get("tokyo") == "Asia/Tokyo"

    clock.now += PRESEED_TTL
    assert store.get("tokyo") == "Asia/Tokyo"
