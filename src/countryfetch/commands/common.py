"""Wiring shared by the countryfetch sub-commands.

Every command needs the same collaborators: the resolved
:class:`~countryfetch.models.Settings` stored on the Typer context by
:func:`~countryfetch.app.main_callback`, a
:class:`~countryfetch.cache.CacheStore` rooted at the configured cache
directory, and an open :class:`~countryfetch.client.CountriesClient`.
:func:`open_synchronizer` builds them once per invocation.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

import typer

from countryfetch.cache import CacheStore
from countryfetch.client import CountriesClient
from countryfetch.config import resolve_cache_dir, resolve_settings
from countryfetch.flags import FlagRenderer
from countryfetch.index import CountryIndex
from countryfetch.models import Settings
from countryfetch.output import get_output
from countryfetch.sync import Synchronizer


def get_settings(ctx: typer.Context) -> Settings:
    """Return the settings resolved by the root callback, resolving them if absent."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and isinstance(obj.get("settings"), Settings):
        return obj["settings"]
    return resolve_settings()


def build_store(settings: Settings) -> CacheStore:
    return CacheStore(resolve_cache_dir(settings))


def format_synced_at(ms: Optional[int]) -> str:
    """Render a last-synced marker (epoch milliseconds) as a local ISO timestamp.

    Returns ``"unknown"`` when *ms* is ``None`` or outside the range the
    platform clock can represent.
    """
    if ms is None:
        return "unknown"
    try:
        return datetime.fromtimestamp(ms / 1000).isoformat(timespec="seconds")
    except (ValueError, OverflowError, OSError):
        return "unknown"


@contextmanager
def open_synchronizer(ctx: typer.Context) -> Iterator[Synchronizer]:
    """Yield a :class:`Synchronizer` backed by an open HTTP client.

    The client is closed when the block exits.
    """
    settings = get_settings(ctx)
    store = build_store(settings)
    with CountriesClient(settings) as client:
        yield Synchronizer(
            settings,
            store,
            client,
            renderer=FlagRenderer(client, width=settings.flag_width),
            reporter=get_output(),
        )


def load_index(ctx: typer.Context) -> CountryIndex:
    """Sync (re-fetching only when stale) and return an index over the result."""
    with open_synchronizer(ctx) as synchronizer:
        snapshot = synchronizer.sync()
    return CountryIndex(snapshot)
