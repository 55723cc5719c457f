"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from chatstore.config.models import ChatStoreConfig, ConfigError
from chatstore.config.paths import get_config_path

DATABASE_URL_ENV = "DATABASE_URL"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.chatstore/config.toml (or CHATSTORE_HOME)
        Path("/etc/chatstore/config.toml"),  # System-wide
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Let DATABASE_URL in the environment win over the config file."""
    if url := os.environ.get(DATABASE_URL_ENV):
        database = config.get("database") or {}
        database["url"] = url
        config["database"] = database
    return config


def _validate(raw_config: dict[str, Any], source: str) -> ChatStoreConfig:
    try:
        return ChatStoreConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def load_config(path: Path | None = None) -> ChatStoreConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated ChatStoreConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the config file is not valid TOML or fails validation.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        return get_default_config()

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    return _validate(raw_config, str(config_path))


def get_default_config() -> ChatStoreConfig:
    """Get the default configuration, honouring DATABASE_URL."""
    return _validate(_apply_env_overrides({}), "defaults")
