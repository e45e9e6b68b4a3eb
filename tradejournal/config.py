"""Configuration loading for the trade journal.

Settings live in ``~/.config/tradejournal/config.toml``. Set
``TRADEJOURNAL_HOME`` to use a different directory.
"""

import os
from pathlib import Path
from typing import Optional

import toml

from tradejournal.errors import ConfigError

CONFIG_FILENAME = "config.toml"
DB_FILENAME = "tradejournal.db"


def get_config_dir() -> Path:
    """Directory holding the config file and default database."""
    override = os.environ.get("TRADEJOURNAL_HOME")
    if override:
        return Path(override)
    return Path.home() / ".config" / "tradejournal"


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def default_config() -> dict:
    """Template written on first login."""
    return {
        "user": {
            "id": "",
        },
        "analytics": {
            "metric_source": "pnl",  # pnl or r
            "heatmap_window": "trailing",  # trailing or year
            "show_weekends": True,
        },
        "database": {
            "path": "",  # empty uses the config directory
        },
    }


def load_config() -> Optional[dict]:
    """Load configuration.

    Returns:
        Config dict, or None if no config file exists.

    Raises:
        ConfigError: If the file exists but is not valid TOML.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e


def save_config(config: dict) -> Path:
    """Write configuration, creating the directory if needed."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        toml.dump(config, f)

    return config_path


def get_db_path(config: Optional[dict]) -> Path:
    """Resolve the SQLite database path from config."""
    configured = (config or {}).get("database", {}).get("path", "")
    if configured:
        return Path(configured).expanduser()
    return get_config_dir() / DB_FILENAME
