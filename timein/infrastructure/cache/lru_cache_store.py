"""Persistent LRU cache store for city -> timezone lookups.

Keeps entries in an OrderedDict (hash map threaded through a doubly linked
list) so promote-to-front and evict-tail are both O(1). The whole store is
rewritten to a single JSON file after every mutation and reloaded on start.

Persistence is fail-open: I/O problems are logged, recorded in ``last_error``
and forwarded to the optional ``on_error`` callback, but never raised.
"""

import json
import logging
import os
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Union

from timein.domain.interfaces.cache import TimezoneCache
from timein.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "geotz_cache.json"
DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL = timedelta(days=7)
PRESEED_TTL = timedelta(days=90)

_NANOS_PER_MICRO = 1000
# RFC 3339 allows any number of fractional digits; datetime keeps exactly six
_FRACTION_RE = re.compile(r"\.(\d+)")

ErrorCallback = Callable[[Exception], None]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(moment: datetime) -> str:
    return moment.isoformat()


def _parse_timestamp(raw: str) -> datetime:
    """Parses an RFC 3339 timestamp into an aware datetime.

    Raises:
        ValueError: If the string is not a timezone-aware timestamp.
    """
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw.strip(), count=1)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        raise ValueError(f"timestamp without offset: {raw!r}")
    return moment


def _ttl_to_nanos(ttl: timedelta) -> int:
    return (ttl // timedelta(microseconds=1)) * _NANOS_PER_MICRO


def _ttl_from_nanos(nanos: int) -> timedelta:
    return timedelta(microseconds=nanos // _NANOS_PER_MICRO)


@dataclass
class CacheEntry:
    """A cached value with its write time and optional own TTL."""
    value: str
    created_at: datetime
    ttl: timedelta = timedelta(0)  # zero means "use the store default"

    def to_json(self) -> Dict[str, Union[str, int]]:
        data: Dict[str, Union[str, int]] = {
            "value": self.value,
            "created_at": _format_timestamp(self.created_at),
        }
        if self.ttl > timedelta(0):
            data["ttl"] = _ttl_to_nanos(self.ttl)
        return data

    @classmethod
    def from_json(cls, data: object) -> "CacheEntry":
        """Builds an entry from its serialized form.

        Raises:
            ValueError: If any field is missing, has the wrong type or is out of range.
        """
        if not isinstance(data, dict):
            raise ValueError("entry is not an object")
        value = data.get("value")
        created_at = data.get("created_at")
        ttl = data.get("ttl", 0)
        if not isinstance(value, str) or not isinstance(created_at, str):
            raise ValueError("entry is missing 'value' or 'created_at'")
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
            raise ValueError(f"invalid ttl: {ttl!r}")
        try:
            entry_ttl = _ttl_from_nanos(ttl)
        except OverflowError:
            raise ValueError(f"ttl out of range: {ttl}") from None
        return cls(value=value, created_at=_parse_timestamp(created_at), ttl=entry_ttl)


class CacheStore(TimezoneCache):
    """Size-bounded, TTL-aware, file-backed LRU cache.

    The OrderedDict keeps the most recently used key at its end. The file
    lists entries most recently used first, so the order is reversed on
    write and on load.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        capacity: int = DEFAULT_MAX_ENTRIES,
        default_ttl: timedelta = DEFAULT_TTL,
        on_error: Optional[ErrorCallback] = None,
    ):
        """Creates the store and loads any live entries from disk.

        Args:
            directory: Directory holding the backing file.
            capacity: Maximum number of entries, must be positive.
            default_ttl: TTL applied to entries without their own TTL.
            on_error: Optional callback receiving swallowed persistence errors.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be a positive integer, got {capacity}")
        self._capacity = capacity
        self._default_ttl = default_ttl
        self._path = Path(directory) / CACHE_FILE_NAME
        self._on_error = on_error
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.last_error: Optional[Exception] = None
        self._load()
        logger.debug(f"CacheStore ready: path={self._path}, capacity={capacity}, entries={len(self._entries)}")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def default_ttl(self) -> timedelta:
        return self._default_ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def keys(self) -> List[str]:
        """Returns the keys ordered most recently used first."""
        with self._lock:
            return list(reversed(self._entries))

    # --- TimezoneCache Interface Implementation ---

    def get(self, key: CacheKey) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._is_expired(entry, _now()):
                logger.debug(f"Cache entry expired: {key}")
                del self._entries[key]
                self._persist_unsafe()
                return None

            # Only write back when the recency order actually changed
            if next(reversed(self._entries)) != key:
                self._entries.move_to_end(key)
                self._persist_unsafe()
            return entry.value

    def set(self, key: CacheKey, value: str) -> None:
        self.set_with_ttl(key, value, timedelta(0))

    def set_with_ttl(self, key: CacheKey, value: str, ttl: timedelta) -> None:
        with self._lock:
            if key not in self._entries:
                self._make_room_unsafe()
            self._entries[key] = CacheEntry(value=value, created_at=_now(), ttl=ttl)
            self._entries.move_to_end(key)
            self._persist_unsafe()

    def pre_seed(self, entries: Mapping[str, str]) -> int:
        with self._lock:
            created_at = _now()
            added = 0
            for key, value in entries.items():
                if key in self._entries:
                    continue
                self._entries[key] = CacheEntry(value=value, created_at=created_at, ttl=PRESEED_TTL)
                # Seeded keys rank below everything a lookup has touched
                self._entries.move_to_end(key, last=False)
                added += 1
            if len(self._entries) > self._capacity:
                logger.info(f"Pre-seed left {len(self._entries)} entries above capacity {self._capacity}")
            self._persist_unsafe()
            logger.debug(f"Pre-seeded {added} of {len(entries)} entries")
            return added

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            try:
                self._path.unlink(missing_ok=True)
            except OSError as e:
                self._report_unsafe(e, f"Failed to remove cache file {self._path}")
            else:
                self.last_error = None

    # --- Internals (caller must hold the lock) ---

    def _effective_ttl(self, entry: CacheEntry) -> timedelta:
        return entry.ttl if entry.ttl > timedelta(0) else self._default_ttl

    def _is_expired(self, entry: CacheEntry, now: datetime) -> bool:
        return now - entry.created_at > self._effective_ttl(entry)

    def _make_room_unsafe(self) -> None:
        # Loops so an over-capacity pre-seed batch drains on the next insert
        while self._entries and len(self._entries) >= self._capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted least recently used cache entry: {evicted}")

    def _persist_unsafe(self) -> None:
        document = {
            "max": self._capacity,
            "cache": [[key, self._entries[key].to_json()] for key in reversed(self._entries)],
        }
        temp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(temp_path, self._path)
        except OSError as e:
            self._report_unsafe(e, f"Failed to persist cache to {self._path}")
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass  # the original error is already reported
            return
        self.last_error = None

    def _report_unsafe(self, error: Exception, message: str) -> None:
        logger.warning(f"{message}: {error}")
        self.last_error = error
        if self._on_error is not None:
            try:
                self._on_error(error)
            except Exception as callback_error:
                logger.error(f"Cache error callback failed: {callback_error}", exc_info=True)

    def _load(self) -> None:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read cache file {self._path}: {e}")
            return

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Cache file {self._path} is not valid JSON, starting empty: {e}")
            return

        pairs = document.get("cache") if isinstance(document, dict) else None
        if not isinstance(pairs, list):
            logger.warning(f"Cache file {self._path} has no 'cache' list, starting empty")
            return

        now = _now()
        skipped = 0
        # File order is MRU first; insert from the LRU end so the last read is MRU
        for pair in reversed(pairs):
            try:
                if not isinstance(pair, list) or len(pair) != 2 or not isinstance(pair[0], str):
                    raise ValueError("pair is not [key, entry]")
                key = pair[0]
                entry = CacheEntry.from_json(pair[1])
                expired = self._is_expired(entry, now)
            except (ValueError, TypeError, OverflowError) as e:
                skipped += 1
                logger.debug(f"Skipping malformed cache pair: {e}")
                continue
            if expired:
                continue
            self._entries[key] = entry
            self._entries.move_to_end(key)

        if skipped:
            logger.warning(f"Skipped {skipped} malformed entries while loading {self._path}")
