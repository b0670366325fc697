"""Interface for the lookup cache.

Defines the contract for storing and retrieving resolved timezones keyed by
normalized city names, with per-entry TTLs and bulk pre-seeding.
"""

import abc
from datetime import timedelta
from typing import Mapping, Optional

from timein.domain.models.common import CacheKey


class TimezoneCache(abc.ABC):
    """Abstract Base Class for the city -> timezone cache.

    Implementations never raise from these methods: storage problems
    degrade to a miss or to a write that did not happen.
    """

    @abc.abstractmethod
    def get(self, key: CacheKey) -> Optional[str]:
        """Retrieves a live value and marks it most recently used.

        Args:
            key: The normalized cache key.

        Returns:
            The cached value, or None if absent or expired.
        """
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: str) -> None:
        """Stores a value using the cache's default TTL.

        Args:
            key: The normalized cache key.
            value: The value to store.
        """
        pass

    @abc.abstractmethod
    def set_with_ttl(self, key: CacheKey, value: str, ttl: timedelta) -> None:
        """Stores a value with its own TTL, overriding the default.

        Args:
            key: The normalized cache key.
            value: The value to store.
            ttl: Entry-specific time-to-live.
        """
        pass

    @abc.abstractmethod
    def pre_seed(self, entries: Mapping[str, str]) -> int:
        """Bulk-inserts long-lived entries without overwriting existing keys.

        Args:
            entries: Mapping of normalized key to value.

        Returns:
            The number of keys actually inserted.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every entry, including the persisted copy."""
        pass
