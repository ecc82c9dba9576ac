"""Sync command -- refresh the local country dataset.

``countryfetch sync`` re-fetches the dataset when the cache is stale,
``--force`` re-fetches unconditionally, and ``--with-flags`` renders
flag art for every country after the dataset is saved.
"""

from __future__ import annotations

import typer

from countryfetch.commands.common import format_synced_at, open_synchronizer
from countryfetch.output import get_output, info, suggest


def sync_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Re-fetch even if the cache is fresh."
    ),
    with_flags: bool = typer.Option(
        False, "--with-flags", help="Render flag art for every country (slow)."
    ),
) -> None:
    """Synchronise the local country cache.

    Example::

        countryfetch sync
        countryfetch sync --force --with-flags
    """
    with open_synchronizer(ctx) as synchronizer:
        snapshot = synchronizer.sync(force=force, with_flag_art=with_flags)

    if not snapshot.fetched:
        info("Cache is up to date.")
        if with_flags:
            suggest("Flag art is only generated while fetching. Use: countryfetch sync --force --with-flags")

    get_output().format_response(
        {
            "countries": len(snapshot.countries),
            "flags": len(snapshot.flags),
            "synced_at": format_synced_at(snapshot.synced_at),
            "fetched": snapshot.fetched,
        }
    )
