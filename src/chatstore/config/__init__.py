"""Configuration module."""

from chatstore.config.loader import get_default_config, load_config
from chatstore.config.models import (
    ChatStoreConfig,
    ConfigError,
    DatabaseConfig,
    LoggingConfig,
)
from chatstore.config.paths import (
    get_chatstore_home,
    get_config_path,
    get_database_path,
)

__all__ = [
    "ChatStoreConfig",
    "ConfigError",
    "DatabaseConfig",
    "LoggingConfig",
    "get_chatstore_home",
    "get_config_path",
    "get_database_path",
    "get_default_config",
    "load_config",
]
