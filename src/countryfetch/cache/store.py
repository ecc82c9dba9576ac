"""File-based key/value store for the cached dataset.

Each entry is one file in the cache directory named ``<key><suffix>``:
JSON entries use ``.json`` and plain-text markers use ``.txt``. The
directory therefore looks like::

    ~/.cache/countryfetch/
        countries.json
        flags.json          (only after a sync with flag art)
        last-synced.txt

Writes go through :func:`~countryfetch.config.atomic_write`, so an entry
is either fully present or absent. Reads distinguish three outcomes: the
value, ``None`` when the entry does not exist, and
:class:`~countryfetch.exceptions.CorruptCacheError` when the file exists
but cannot be decoded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from countryfetch.config import atomic_write
from countryfetch.exceptions import CorruptCacheError

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"
TEXT_SUFFIX = ".txt"


class CacheStore:
    """Persist JSON blobs and text markers under a single directory.

    Args:
        cache_dir: Directory holding the entries. Created on first write.

    Example::

        from countryfetch.cache import CacheStore

        store = CacheStore("/tmp/countryfetch")
        store.save_json("countries", [{"name": {"common": "France"}}])
        store.read_json("countries")
        store.read_json("flags")  # None -- never written
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._cache_dir = Path(cache_dir)

    @property
    def directory(self) -> Path:
        return self._cache_dir

    def path_for(self, key: str, suffix: str) -> Path:
        """Return the file path that backs *key*."""
        return self._cache_dir / f"{key}{suffix}"

    def exists(self, key: str, suffix: str) -> bool:
        """Check whether an entry exists on disk.

        Args:
            key: Logical entry name (``"countries"``, ``"flags"``, ...).
            suffix: File suffix including the dot (``".json"`` or ``".txt"``).
        """
        return self.path_for(key, suffix).is_file()

    def read_json(self, key: str) -> Optional[Any]:
        """Read and decode a JSON entry.

        Returns:
            The decoded value, or ``None`` when the entry does not exist.

        Raises:
            CorruptCacheError: If the file exists but is not valid JSON or
                cannot be read.
        """
        path = self.path_for(key, JSON_SUFFIX)
        if not path.is_file():
            return None
        try:
            text = path.read_text(encoding="utf-8")
            return json.loads(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptCacheError(
                f"Cache entry '{key}' at {path} is unreadable: {exc}", key=key
            ) from exc

    def read_text(self, key: str) -> Optional[str]:
        """Read a plain-text entry.

        Returns:
            The file content, or ``None`` when the entry does not exist.

        Raises:
            CorruptCacheError: If the file exists but cannot be read.
        """
        path = self.path_for(key, TEXT_SUFFIX)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CorruptCacheError(
                f"Cache entry '{key}' at {path} is unreadable: {exc}", key=key
            ) from exc

    def save_json(self, key: str, value: Any) -> None:
        """Serialise *value* as JSON and write it atomically."""
        path = self.path_for(key, JSON_SUFFIX)
        atomic_write(path, json.dumps(value, ensure_ascii=False))
        logger.debug("Saved cache entry '%s' to %s", key, path)

    def save_text(self, key: str, value: str) -> None:
        """Write *value* as a plain-text entry atomically."""
        path = self.path_for(key, TEXT_SUFFIX)
        atomic_write(path, value)
        logger.debug("Saved cache entry '%s' to %s", key, path)

    def delete(self, key: str, suffix: str) -> bool:
        """Remove one entry. Returns ``True`` if a file was deleted."""
        path = self.path_for(key, suffix)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def clear(self) -> int:
        """Remove every cache entry and return how many files were deleted."""
        removed = 0
        for path in self._entries():
            path.unlink()
            removed += 1
        return removed

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``directory`` (str path) and ``entries``, a
            mapping of file name to size in bytes.
        """
        return {
            "directory": str(self._cache_dir),
            "entries": {p.name: p.stat().st_size for p in self._entries()},
        }

    def _entries(self) -> list[Path]:
        if not self._cache_dir.is_dir():
            return []
        return sorted(
            p
            for p in self._cache_dir.iterdir()
            if p.is_file()
            and p.suffix in (JSON_SUFFIX, TEXT_SUFFIX)
            and not p.name.startswith(".")
        )
