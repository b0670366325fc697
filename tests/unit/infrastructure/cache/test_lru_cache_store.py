import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from unittest.mock import patch

import pytest

import timein.infrastructure.cache.lru_cache_store as store_mod
from timein.infrastructure.cache.lru_cache_store import CacheStore, PRESEED_TTL


@pytest.fixture
def make_store(tmp_path):
    def _make(capacity: int = 10, ttl: timedelta = timedelta(hours=1), **kwargs) -> CacheStore:
        return CacheStore(tmp_path / "cache", capacity=capacity, default_ttl=ttl, **kwargs)
    return _make


def test_get_missing_key_returns_none(make_store):
    store = make_store()
    assert store.get("nowhere") is None


def test_set_then_get(make_store):
    store = make_store()
    store.set("london", "Europe/London")
    assert store.get("london") == "Europe/London"
    assert len(store) == 1


def test_capacity_two_evicts_oldest(make_store, clock):
    store = make_store(capacity=2)
    store.set("a", "1")
    store.set("b", "2")
    store.set("c", "3")

    assert store.get("a") is None
    assert store.get("b") == "2"
    assert store.get("c") == "3"


def test_get_protects_key_from_eviction(make_store, clock):
    store = make_store(capacity=2)
    store.set("a", "1")
    store.set("b", "2")

    assert store.get("a") == "1"
    store.set("c", "3")

    assert store.get("a") == "1"
    assert store.get("b") is None
    assert store.get("c") == "3"


def test_updating_existing_key_never_evicts(make_store, clock):
    store = make_store(capacity=2)
    store.set("a", "1")
    store.set("b", "2")
    store.set("a", "updated")

    assert len(store) == 2
    assert store.get("a") == "updated"
    assert store.get("b") == "2"


def test_capacity_invariant_holds_after_every_set(make_store, clock):
    store = make_store(capacity=3)
    for i in range(25):
        store.set(f"k{i % 7}", str(i))
        keys = store.keys()
        assert len(store) <= 3
        assert len(keys) == len(set(keys)) == len(store)


def test_keys_are_most_recently_used_first(make_store, clock):
    store = make_store()
    store.set("a", "1")
    store.set("b", "2")
    store.set("c", "3")
    store.get("a")

    assert store.keys() == ["a", "c", "b"]


def test_default_ttl_expiry(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.set("x", "v")

    clock.advance(minutes=59)
    assert store.get("x") == "v"

    clock.advance(minutes=2)
    assert store.get("x") is None
    assert len(store) == 0


def test_entry_alive_at_exact_ttl_boundary(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.set("x", "v")
    clock.advance(hours=1)
    assert store.get("x") == "v"


def test_get_does_not_refresh_created_at(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.set("x", "v")
    clock.advance(minutes=40)
    assert store.get("x") == "v"
    clock.advance(minutes=40)
    assert store.get("x") is None


def test_explicit_ttl_longer_than_default(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.set_with_ttl("y", "v", timedelta(hours=3))

    clock.advance(hours=2)
    assert store.get("y") == "v"

    clock.advance(hours=2)
    assert store.get("y") is None


def test_explicit_ttl_shorter_than_default(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.set_with_ttl("y", "v", timedelta(minutes=10))
    store.set("z", "w")

    clock.advance(minutes=20)
    assert store.get("y") is None
    assert store.get("z") == "w"


def test_expired_entry_removed_after_real_sleep(make_store):
    store = make_store(capacity=10, ttl=timedelta(milliseconds=50))
    store.set("x", "v")

    time.sleep(0.07)

    assert store.get("x") is None
    assert len(store) == 0


def test_pre_seed_fills_missing_keys(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    added = store.pre_seed({"london": "Europe/London"})

    assert added == 1
    assert store.get("london") == "Europe/London"

    # Pre-seeded entries outlive the default TTL by a wide margin
    clock.advance(days=30)
    assert store.get("london") == "Europe/London"


def test_pre_seed_entry_expires_after_preseed_ttl(make_store, clock):
    store = make_store(ttl=timedelta(hours=1))
    store.pre_seed({"london": "Europe/London"})

    clock.now += PRESEED_TTL + timedelta(seconds=1)
    assert store.get("london") is None


def test_pre_seed_readable_after_short_real_delay(make_store):
    store = make_store()
    store.pre_seed({"london": "Europe/London"})
    assert store.get("london") == "Europe/London"
    time.sleep(0.01)
    assert store.get("london") == "Europe/London"


def test_user_value_wins_over_later_pre_seed(make_store, clock):
    store = make_store()
    store.set("k", "v1")

    added = store.pre_seed({"k": "v2"})

    assert added == 0
    assert store.get("k") == "v1"


def test_set_after_pre_seed_overwrites(make_store, clock):
    store = make_store()
    store.pre_seed({"k": "seeded"})
    store.set("k", "looked-up")
    assert store.get("k") == "looked-up"


def test_pre_seeded_keys_are_evicted_before_used_keys(make_store, clock):
    store = make_store(capacity=3)
    store.set("a", "1")
    store.pre_seed({"b": "2", "c": "3"})

    assert store.keys() == ["a", "b", "c"]

    store.set("d", "4")

    assert "c" not in store
    assert store.get("a") == "1"
    assert store.get("b") == "2"
    assert store.get("d") == "4"


def test_pre_seed_overflow_is_drained_by_next_insert(make_store, clock):
    store = make_store(capacity=2)
    added = store.pre_seed({"a": "1", "b": "2", "c": "3", "d": "4"})

    assert added == 4
    assert len(store) == 4

    store.set("e", "5")

    assert len(store) == 2
    assert store.keys() == ["e", "a"]


def test_pre_seed_persists_once_per_batch(make_store, clock, mocker):
    store = make_store()
    spy = mocker.spy(store, "_persist_unsafe")

    store.pre_seed({f"city{i}": "UTC" for i in range(5)})

    assert spy.call_count == 1


def test_get_persists_only_when_order_changes(make_store, clock, mocker):
    store = make_store()
    store.set("a", "1")
    store.set("b", "2")
    spy = mocker.spy(store, "_persist_unsafe")

    store.get("b")  # already most recently used
    assert spy.call_count == 0

    store.get("a")
    assert spy.call_count == 1


def test_clear_removes_entries_and_file(make_store, clock):
    store = make_store()
    store.set("a", "1")
    assert store.path.exists()

    store.clear()

    assert store.get("a") is None
    assert len(store) == 0
    assert not store.path.exists()


def test_clear_is_idempotent(make_store):
    store = make_store()
    store.clear()
    store.clear()
    assert store.last_error is None


def test_successful_clear_resets_last_error(make_store, clock):
    store = make_store()
    with patch.object(store_mod.os, "replace", side_effect=OSError("disk full")):
        store.set("a", "1")
    assert isinstance(store.last_error, OSError)

    store.clear()

    assert store.last_error is None


def test_rejects_non_positive_capacity(tmp_path):
    with pytest.raises(ValueError):
        CacheStore(tmp_path, capacity=0)


def test_persistence_failure_is_swallowed_and_reported(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    errors = []

    store = CacheStore(blocker / "sub", capacity=5, on_error=errors.append)
    store.set("a", "1")

    assert store.get("a") == "1"
    assert isinstance(store.last_error, OSError)
    assert errors and errors[0] is store.last_error


def test_failing_error_callback_does_not_escape(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    def explode(error):
        raise RuntimeError("callback broke")

    store = CacheStore(blocker / "sub", on_error=explode)
    store.set("a", "1")

    assert store.get("a") == "1"


def test_last_error_cleared_by_next_successful_write(make_store, clock):
    store = make_store()
    with patch.object(store_mod.os, "replace", side_effect=OSError("disk full")):
        store.set("a", "1")
    assert isinstance(store.last_error, OSError)
    assert not store.path.with_suffix(".tmp").exists()

    store.set("b", "2")

    assert store.last_error is None
    assert store.path.exists()


def test_concurrent_access_keeps_invariants(make_store):
    store = make_store(capacity=20, ttl=timedelta(hours=1))
    barrier = threading.Barrier(8)

    def worker(seed: int) -> None:
        barrier.wait()
        for i in range(150):
            key = f"k{(seed * 7 + i) % 40}"
            if i % 3:
                store.set(key, str(i))
            else:
                store.get(key)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(worker, range(8)))

    keys = store.keys()
    assert len(store) <= 20
    assert len(keys) == len(set(keys)) == len(store)
    for key in keys:
        assert store.get(key) is not None
