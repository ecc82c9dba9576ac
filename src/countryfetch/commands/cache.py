"""Cache commands -- inspect and clear the local dataset cache.

Provides the ``countryfetch cache`` sub-command group.
"""

from __future__ import annotations

import typer

from countryfetch.commands.common import build_store, format_synced_at, get_settings
from countryfetch.output import format_response, info, success
from countryfetch.sync import LAST_SYNCED_KEY


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("info")
def cache_info(ctx: typer.Context) -> None:
    """Show the cache directory, its entries and the last sync time."""
    settings = get_settings(ctx)
    store = build_store(settings)
    stats = store.stats()

    raw = store.read_text(LAST_SYNCED_KEY)
    if raw is None:
        last_synced = "never"
    else:
        marker = raw.strip()
        last_synced = format_synced_at(int(marker) if marker.isdigit() else None)

    stats["last_synced"] = last_synced
    stats["sync_interval_days"] = settings.sync_interval_days
    format_response(stats)


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete every cached file. The next lookup re-fetches the dataset."""
    store = build_store(get_settings(ctx))
    if not yes:
        confirmed = typer.confirm(f"Delete all cached data in {store.directory}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    removed = store.clear()
    success(f"Removed {removed} cache file(s).")
