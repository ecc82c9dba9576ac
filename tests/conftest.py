"""Shared test fixtures for countryfetch.

Provides a small but awkward country dataset, isolated config/cache
directories, output state management, and helpers for serving the
dataset through :class:`httpx.MockTransport`. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from countryfetch.cache import CacheStore
from countryfetch.models import Settings
from countryfetch.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

# Source order matters: "Nigeria" precedes "Niger", "Dominica" precedes
# "Dominican Republic", Antarctica only has an svg flag and Bouvet Island
# has no flag, population or timezones at all.
_RAW_COUNTRIES: list[dict[str, Any]] = [
    {
        "name": {"common": "Nigeria", "official": "Federal Republic of Nigeria"},
        "capital": ["Abuja"],
        "region": "Africa",
        "subregion": "Western Africa",
        "population": 206139587,
        "currencies": {"NGN": {"name": "Nigerian naira", "symbol": "₦"}},
        "languages": {"eng": "English"},
        "timezones": ["UTC+01:00"],
        "latlng": [10.0, 8.0],
        "flags": {"png": "https://flagcdn.com/w320/ng.png", "svg": "https://flagcdn.com/ng.svg"},
    },
    {
        "name": {"common": "Niger", "official": "Republic of Niger"},
        "capital": ["Niamey"],
        "region": "Africa",
        "subregion": "Western Africa",
        "population": 24206636,
        "currencies": {"XOF": {"name": "West African CFA franc", "symbol": "Fr"}},
        "languages": {"fra": "French"},
        "timezones": ["UTC+01:00"],
        "latlng": [16.0, 8.0],
        "flags": {"png": "https://flagcdn.com/w320/ne.png", "svg": "https://flagcdn.com/ne.svg"},
    },
    {
        "name": {"common": "France", "official": "French Republic"},
        "capital": ["Paris"],
        "region": "Europe",
        "subregion": "Western Europe",
        "population": 67391582,
        "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
        "languages": {"fra": "French"},
        "timezones": ["UTC-10:00", "UTC+01:00"],
        "latlng": [46.0, 2.0],
        "flags": {"png": "https://flagcdn.com/w320/fr.png", "svg": "https://flagcdn.com/fr.svg"},
    },
    {
        "name": {"common": "South Africa", "official": "Republic of South Africa"},
        "capital": ["Pretoria", "Bloemfontein", "Cape Town"],
        "region": "Africa",
        "subregion": "Southern Africa",
        "population": 59308690,
        "currencies": {"ZAR": {"name": "South African rand", "symbol": "R"}},
        "languages": {"eng": "English", "afr": "Afrikaans"},
        "timezones": ["UTC+02:00"],
        "latlng": [-29.0, 24.0],
        "flags": {"png": "https://flagcdn.com/w320/za.png", "svg": "https://flagcdn.com/za.svg"},
    },
    {
        "name": {"common": "Dominica", "official": "Commonwealth of Dominica"},
        "capital": ["Roseau"],
        "region": "Americas",
        "subregion": "Caribbean",
        "population": 71991,
        "currencies": {"XCD": {"name": "Eastern Caribbean dollar", "symbol": "$"}},
        "languages": {"eng": "English"},
        "timezones": ["UTC-04:00"],
        "latlng": [15.41666666, -61.33333333],
        "flags": {"png": "https://flagcdn.com/w320/dm.png", "svg": "https://flagcdn.com/dm.svg"},
    },
    {
        "name": {"common": "Dominican Republic", "official": "Dominican Republic"},
        "capital": ["Santo Domingo"],
        "region": "Americas",
        "subregion": "Caribbean",
        "population": 10847904,
        "currencies": {"DOP": {"name": "Dominican peso", "symbol": "$"}},
        "languages": {"spa": "Spanish"},
        "timezones": ["UTC-04:00"],
        "latlng": [19.0, -70.66666666],
        "flags": {"png": "https://flagcdn.com/w320/do.png", "svg": "https://flagcdn.com/do.svg"},
    },
    {
        "name": {"common": "Antarctica", "official": "Antarctica"},
        "capital": [],
        "region": "Antarctic",
        "population": 1000,
        "currencies": {},
        "languages": {},
        "timezones": ["UTC-03:00", "UTC+03:00"],
        "latlng": [-90.0, 0.0],
        "flags": {"svg": "https://flagcdn.com/aq.svg"},
    },
    {
        "name": {"common": "Bouvet Island", "official": "Bouvet Island"},
        "capital": [],
        "region": "Antarctic",
        "currencies": {},
        "languages": {},
    },
]


@pytest.fixture
def raw_countries() -> list[dict[str, Any]]:
    """A deep copy of the raw dataset, as the API would return it."""
    return copy.deepcopy(_RAW_COUNTRIES)


@pytest.fixture
def france_raw() -> dict[str, Any]:
    return {"name": {"common": "France"}, "capital": ["Paris"], "region": "Europe"}


# ---------------------------------------------------------------------------
# Settings, store and HTTP helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test cache directory."""
    return Settings(
        base_url="https://countries.test/v3.1/",
        cache_dir=str(tmp_path / "cache"),
        flag_width=10,
        timeout=5,
    )


@pytest.fixture
def store(settings: Settings) -> CacheStore:
    assert settings.cache_dir is not None
    return CacheStore(settings.cache_dir)


@pytest.fixture
def dataset_transport(raw_countries: list[dict[str, Any]]) -> Callable[..., httpx.MockTransport]:
    """Factory for a transport serving *raw_countries* from ``/v3.1/all``.

    The returned transport records every request on its ``requests`` list.
    Image URLs are answered with *image_bytes* when given, 404 otherwise.
    """

    def _factory(
        countries: list[dict[str, Any]] | None = None,
        status_code: int = 200,
        image_bytes: bytes | None = None,
    ) -> httpx.MockTransport:
        requests: list[httpx.Request] = []
        body = raw_countries if countries is None else countries

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path.endswith("/all"):
                if status_code != 200:
                    return httpx.Response(status_code, text="upstream exploded")
                return httpx.Response(200, json=body)
            if image_bytes is not None:
                return httpx.Response(200, content=image_bytes)
            return httpx.Response(404, text="no such image")

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _factory


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config, forces XDG path resolution, and clears all COUNTRYFETCH_*
    environment variables.
    """
    monkeypatch.setattr("countryfetch.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "COUNTRYFETCH_BASE_URL",
        "COUNTRYFETCH_CACHE_DIR",
        "COUNTRYFETCH_SYNC_INTERVAL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
