"""
Configuration management for JotterXpress.

Uses XDG base directories:
- Config: ~/.config/jotterxpress/config.toml
- Data: ~/.jotterxpress/ (notes live in ~/.jotterxpress/notes)
"""

import logging
import os
from pathlib import Path
from typing import Any

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / ".jotterxpress"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/jotterxpress)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "jotterxpress"


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_jotter_home(config: dict[str, Any] | None = None) -> Path:
    """Get the data directory (JOTTER_HOME, then config, then ~/.jotterxpress)."""
    if env_home := os.environ.get("JOTTER_HOME"):
        return Path(env_home).expanduser()
    if config:
        if home := config.get("jotter", {}).get("home"):
            return Path(home).expanduser()
    return DEFAULT_DATA_HOME


def get_notes_dir(config: dict[str, Any] | None = None) -> Path:
    """Get the directory holding one JSON file per day."""
    return get_jotter_home(config) / "notes"


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "jotter": {
            "home": None,
        },
        "display": {
            "color": True,
            "truncate": 20,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Each section of the file is merged over the defaults, so a partial
    file only overrides the keys it names. Returns the defaults if the
    file doesn't exist.
    """
    config = get_default_config()
    config_path = get_config_path()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        user_config = tomli.load(f)

    for section, values in user_config.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """Configure root logging on stderr (JOTTER_LOG_LEVEL overrides config)."""
    level_name = os.environ.get("JOTTER_LOG_LEVEL")
    if not level_name and config:
        level_name = config.get("logging", {}).get("level")
    level = getattr(logging, str(level_name or "WARNING").upper(), logging.WARNING)

    logging.basicConfig(format=LOG_FORMAT, level=level)
