"""Centralized path management for chatstore.

All local state (config file, default SQLite database) lives under a single
base directory, overridable with the CHATSTORE_HOME environment variable.

Default location: ~/.chatstore
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "CHATSTORE_HOME"


@lru_cache(maxsize=1)
def get_chatstore_home() -> Path:
    """Get the base directory for all chatstore data.

    Resolution order:
    1. CHATSTORE_HOME environment variable (if set)
    2. ~/.chatstore
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".chatstore"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_chatstore_home() / "config.toml"


def get_database_path() -> Path:
    """Get the default SQLite database path."""
    return get_chatstore_home() / "data" / "chatstore.db"


def get_default_database_url() -> str:
    """SQLAlchemy async URL for the default SQLite database."""
    return f"sqlite+aiosqlite:///{get_database_path()}"
