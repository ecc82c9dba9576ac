"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for countryfetch:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.countryfetch/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Settings file** -- A single :class:`~countryfetch.models.Settings`
  JSON file storing the endpoint, sync interval and flag width.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables and the settings file into one value that is
  built once at startup and passed to every component.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a truncated file behind.
The cache store relies on the same primitive.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from countryfetch.exceptions import ConfigError
from countryfetch.models import Settings

_APP_NAME = "countryfetch"
_CONFIG_FILENAME = "config.json"

ENV_BASE_URL = "COUNTRYFETCH_BASE_URL"
ENV_CACHE_DIR = "COUNTRYFETCH_CACHE_DIR"
ENV_SYNC_INTERVAL = "COUNTRYFETCH_SYNC_INTERVAL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/countryfetch/`` (default
    ``~/.config/countryfetch/``). On macOS/Windows: ``~/.countryfetch/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the default cache directory, creating it if necessary.

    Holds ``countries.json``, ``flags.json`` and ``last-synced.txt``.
    Everything in it can be deleted safely; the next run re-fetches.

    On Linux/BSD: ``$XDG_CACHE_HOME/countryfetch/`` (default
    ``~/.cache/countryfetch/``). On macOS/Windows: ``~/.countryfetch/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/countryfetch/`` (default
    ``~/.local/share/countryfetch/``). On macOS/Windows: ``~/.countryfetch/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_cache_dir(settings: Settings) -> Path:
    """Return the cache directory for *settings*, honouring ``cache_dir`` overrides."""
    if settings.cache_dir:
        path = Path(settings.cache_dir).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    return get_cache_dir()


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Includes KeyboardInterrupt: the half-written temp file must go.
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Settings file ---


def _settings_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> Settings:
    """Load settings from the XDG config directory.

    Returns:
        The deserialised :class:`~countryfetch.models.Settings`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _settings_path()
    if not path.is_file():
        return Settings()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return Settings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_settings(settings: Settings) -> None:
    """Persist settings atomically to disk."""
    data = settings.model_dump(mode="json")
    atomic_write(_settings_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_settings(
    cli_base_url: Optional[str] = None,
    cli_cache_dir: Optional[str] = None,
) -> Settings:
    """Resolve settings with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_cache_dir``)
        2. Environment variables (``COUNTRYFETCH_BASE_URL``,
           ``COUNTRYFETCH_CACHE_DIR``, ``COUNTRYFETCH_SYNC_INTERVAL``)
        3. User config (``~/.config/countryfetch/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or an environment
            variable holds a value of the wrong type.
    """
    # 4 + 3. File (fills in defaults automatically)
    settings = load_settings()

    # 2. Environment variables
    updates: dict[str, object] = {}
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        updates["base_url"] = env_base_url
    env_cache_dir = os.environ.get(ENV_CACHE_DIR)
    if env_cache_dir:
        updates["cache_dir"] = env_cache_dir
    env_interval = os.environ.get(ENV_SYNC_INTERVAL)
    if env_interval:
        try:
            updates["sync_interval_days"] = int(env_interval)
        except ValueError:
            raise ConfigError(
                f"{ENV_SYNC_INTERVAL} must be an integer number of days, got: {env_interval}"
            ) from None

    # 1. CLI flags (highest precedence)
    if cli_base_url is not None:
        updates["base_url"] = cli_base_url
    if cli_cache_dir is not None:
        updates["cache_dir"] = cli_cache_dir

    if not updates:
        return settings
    try:
        return Settings.model_validate({**settings.model_dump(), **updates})
    except ValueError as exc:
        raise ConfigError(f"Invalid settings override: {exc}") from exc
