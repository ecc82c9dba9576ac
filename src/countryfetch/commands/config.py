"""Config commands -- view and modify persisted settings.

Provides the ``countryfetch config`` sub-command group for reading,
updating, and resetting the settings file
(:class:`~countryfetch.models.Settings`). Settings control the API base
URL, the sync interval, the cache directory and the flag art width.
"""

from __future__ import annotations

import typer

from countryfetch.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the persisted settings.

    Example::

        countryfetch config show
        countryfetch config show --json
    """
    from countryfetch.config import get_config_dir, load_settings

    settings = load_settings()
    info(f"Config directory: {get_config_dir()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'sync_interval_days'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to match the existing field's type (bool, int,
    or str) and the result is validated before saving.

    Raises:
        typer.Exit: With code 2 if the key is unknown, the value cannot
            be coerced, or validation fails.

    Example::

        countryfetch config set sync_interval_days 14
        countryfetch config set flag_width 60
    """
    from countryfetch.config import load_settings, save_settings
    from countryfetch.models import Settings

    data = load_settings().model_dump(mode="json")
    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = data[key]
    if isinstance(current, bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    data[key] = coerced
    try:
        new_settings = Settings.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_settings(new_settings)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset settings to defaults.

    Example::

        countryfetch config reset --yes
    """
    from countryfetch.config import save_settings
    from countryfetch.models import Settings

    if not yes:
        confirmed = typer.confirm("Reset all settings to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_settings(Settings())
    success("Configuration reset to defaults.")
