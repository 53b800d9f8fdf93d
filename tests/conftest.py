"""Shared fixtures: every test gets its own notes directory and config home."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from jotter.service import NoteService
from jotter.store import NoteStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point JOTTER_HOME and XDG_CONFIG_HOME at temp dirs."""
    home = tmp_path / "jotter-home"
    monkeypatch.setenv("JOTTER_HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("JOTTER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    return home


@pytest.fixture()
def notes_dir(tmp_path: Path) -> Path:
    return tmp_path / "notes"


@pytest.fixture()
def store(notes_dir: Path) -> NoteStore:
    """Return a NoteStore backed by a temp directory."""
    return NoteStore(notes_dir)


@pytest.fixture()
def service(store: NoteStore) -> NoteService:
    return NoteService(store)


@pytest.fixture()
def clock():
    """Factory for aware timestamps a fixed number of minutes apart."""
    base = datetime(2025, 10, 14, 9, 0, 0).astimezone()

    def at(minutes: int) -> datetime:
        return base + timedelta(minutes=minutes)

    return at
