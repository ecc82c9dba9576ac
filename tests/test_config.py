"""Tests for countryfetch.config -- XDG paths, atomic writes, settings precedence."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from countryfetch.config import (
    atomic_write,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    load_settings,
    resolve_cache_dir,
    resolve_settings,
    save_settings,
)
from countryfetch.exceptions import ConfigError
from countryfetch.models import DEFAULT_BASE_URL, Settings


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    def test_cache_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("countryfetch.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_cache_dir()
        assert result == tmp_path / ".cache" / "countryfetch"
        assert result.is_dir()

    def test_cache_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("countryfetch.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
        assert get_cache_dir() == tmp_path / "xdg" / "countryfetch"

    def test_config_and_data_dirs(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "countryfetch"
        assert get_data_dir() == isolated_config / "data" / "countryfetch"


class TestFallbackPaths:
    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("countryfetch.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".countryfetch"
        assert get_cache_dir() == tmp_path / ".countryfetch" / "cache"
        assert get_data_dir() == tmp_path / ".countryfetch" / "logs"


class TestResolveCacheDir:
    def test_override_wins(self, tmp_path: Path, isolated_config: Path) -> None:
        target = tmp_path / "elsewhere"
        assert resolve_cache_dir(Settings(cache_dir=str(target))) == target
        assert target.is_dir()

    def test_default_is_xdg_cache(self, isolated_config: Path) -> None:
        assert resolve_cache_dir(Settings()) == isolated_config / "xdg-cache" / "countryfetch"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_temp_file_cleaned_up_on_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "file.txt"
        target.write_text("before")

        def _boom(src: str, dst: object) -> None:
            raise OSError("rename failed")

        monkeypatch.setattr(os, "replace", _boom)
        with pytest.raises(OSError):
            atomic_write(target, "after")
        monkeypatch.undo()

        assert target.read_text() == "before"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["file.txt"]


# ---------------------------------------------------------------------------
# Settings file
# ---------------------------------------------------------------------------


class TestSettingsFile:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        settings = load_settings()
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.sync_interval_days == 7
        assert settings.flag_width == 40

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_settings(Settings(sync_interval_days=14, flag_width=60))
        loaded = load_settings()
        assert loaded.sync_interval_days == 14
        assert loaded.flag_width == 60

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError):
            load_settings()

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text(json.dumps({"flag_width": 0}))
        with pytest.raises(ConfigError):
            load_settings()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveSettings:
    def test_file_values_used(self, isolated_config: Path) -> None:
        save_settings(Settings(base_url="https://file.test/"))
        assert resolve_settings().base_url == "https://file.test/"

    def test_env_overrides_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        save_settings(Settings(base_url="https://file.test/", sync_interval_days=3))
        monkeypatch.setenv("COUNTRYFETCH_BASE_URL", "https://env.test/")
        monkeypatch.setenv("COUNTRYFETCH_SYNC_INTERVAL", "30")
        monkeypatch.setenv("COUNTRYFETCH_CACHE_DIR", "/tmp/cf-env")

        settings = resolve_settings()
        assert settings.base_url == "https://env.test/"
        assert settings.sync_interval_days == 30
        assert settings.cache_dir == "/tmp/cf-env"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COUNTRYFETCH_BASE_URL", "https://env.test/")
        settings = resolve_settings(cli_base_url="https://cli.test/", cli_cache_dir="/tmp/cf-cli")
        assert settings.base_url == "https://cli.test/"
        assert settings.cache_dir == "/tmp/cf-cli"

    def test_non_integer_interval_raises(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COUNTRYFETCH_SYNC_INTERVAL", "weekly")
        with pytest.raises(ConfigError):
            resolve_settings()

    def test_negative_interval_raises(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COUNTRYFETCH_SYNC_INTERVAL", "-1")
        with pytest.raises(ConfigError):
            resolve_settings()
