"""Tests for paths, TOML config loading and logging setup."""

import logging
from pathlib import Path

import pytest

from jotter import config


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config" / "jotterxpress" / "config.toml"
    path.parent.mkdir(parents=True)
    path.write_text(text)
    return path


class TestPaths:
    def test_config_path_uses_xdg(self, tmp_path: Path) -> None:
        assert config.get_config_path() == tmp_path / "config" / "jotterxpress" / "config.toml"

    def test_env_home_wins(self, isolated_env: Path) -> None:
        assert config.get_jotter_home({"jotter": {"home": "/elsewhere"}}) == isolated_env
        assert config.get_notes_dir() == isolated_env / "notes"

    def test_config_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("JOTTER_HOME")
        home = tmp_path / "custom"
        assert config.get_jotter_home({"jotter": {"home": str(home)}}) == home

    def test_default_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JOTTER_HOME")
        assert config.get_jotter_home(config.get_default_config()) == config.DEFAULT_DATA_HOME


class TestLoadConfig:
    def test_defaults_without_file(self) -> None:
        assert config.load_config() == config.get_default_config()

    def test_partial_file_merges(self, tmp_path: Path) -> None:
        write_config(tmp_path, "[display]\ntruncate = 40\n")

        loaded = config.load_config()
        assert loaded["display"] == {"color": True, "truncate": 40}
        assert loaded["logging"]["level"] == "WARNING"


def configured_level(cfg: dict) -> int:
    """Run setup_logging on a bare root logger and return the level it set."""
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    root.handlers = []
    try:
        config.setup_logging(cfg)
        return root.level
    finally:
        root.handlers, root.level = saved


class TestLogging:
    def test_level_from_config(self) -> None:
        assert configured_level({"logging": {"level": "debug"}}) == logging.DEBUG

    def test_env_overrides_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JOTTER_LOG_LEVEL", "ERROR")
        assert configured_level({"logging": {"level": "DEBUG"}}) == logging.ERROR

    def test_unknown_level_falls_back(self) -> None:
        assert configured_level({"logging": {"level": "chatty"}}) == logging.WARNING
