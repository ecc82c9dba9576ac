"""On-disk cache for countryfetch.

This package provides :class:`CacheStore`, a small key/value layer that
persists the country dataset, the flag-art table and the last-synced
marker as individual files with atomic writes.

The store is consumed by :class:`~countryfetch.sync.Synchronizer` and its
location is controlled by :attr:`~countryfetch.models.Settings.cache_dir`.
"""

from countryfetch.cache.store import JSON_SUFFIX, TEXT_SUFFIX, CacheStore

__all__ = ["CacheStore", "JSON_SUFFIX", "TEXT_SUFFIX"]
