"""Typer application factory and CLI entry point for countryfetch.

This module wires together the top-level Typer application and registers
the lookup commands (``name``, ``capital``, ``region``, ``regions``,
``random``), the ``sync`` command and the ``cache`` and ``config``
sub-command groups.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~countryfetch.exceptions.CountryfetchError` instances exit with
their own exit code; any other exception is written to a crash log under
the data directory.

See Also:
    :mod:`countryfetch.config`: Settings resolution.
    :mod:`countryfetch.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from countryfetch import __version__
from countryfetch.commands.cache import cache_app
from countryfetch.commands.config import config_app
from countryfetch.commands.lookup import (
    capital_command,
    name_command,
    random_command,
    region_command,
    regions_command,
)
from countryfetch.commands.sync import sync_command
from countryfetch.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="countryfetch",
    help="Look up countries: capitals, currencies, languages, population and flags.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.command("sync")(sync_command)
app.command("name")(name_command)
app.command("capital")(capital_command)
app.command("region")(region_command)
app.command("regions")(regions_command)
app.command("random")(random_command)
app.add_typer(cache_app, name="cache", help="Inspect or clear the local cache.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"countryfetch {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the REST Countries API base URL."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Override the cache directory."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~countryfetch.output.OutputManager`
    from CLI flags, resolves :class:`~countryfetch.models.Settings` once,
    and stores them in ``ctx.obj`` for the sub-commands.
    """
    from countryfetch.config import resolve_settings
    from countryfetch.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = resolve_settings(cli_base_url=base_url, cli_cache_dir=cache_dir)
    ctx.obj["verbose"] = verbose


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr; DEBUG with --verbose, WARNING otherwise."""
    root = logging.getLogger("countryfetch")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Rebind on every call: sys.stderr may have been swapped since the last one.
    for old in list(root.handlers):
        root.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from countryfetch.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``countryfetch`` console script.

    Unhandled :class:`~countryfetch.exceptions.CountryfetchError`
    instances cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from countryfetch.exceptions import CountryfetchError
        from countryfetch.output import error

        if isinstance(exc, CountryfetchError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
