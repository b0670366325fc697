"""Cache Store Implementation.

Provides the persistent, TTL-aware LRU implementation of the TimezoneCache
interface.
Bounded Context: Cache Management
"""

from timein.infrastructure.cache.lru_cache_store import CacheStore, CacheEntry

__all__ = ["CacheStore", "CacheEntry"]
