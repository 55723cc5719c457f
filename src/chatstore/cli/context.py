"""Config and store helpers shared by CLI commands."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

import typer

from chatstore.cli.console import error
from chatstore.config import ChatStoreConfig, ConfigError, load_config
from chatstore.db.engine import Database
from chatstore.store import Store

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]


def get_config(config_path: Path | None = None) -> ChatStoreConfig:
    """Load configuration or exit with a readable error."""
    try:
        return load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None


def create_database(config: ChatStoreConfig) -> Database:
    """Build a (not yet connected) Database for one command."""
    return Database.from_config(config.database)


@asynccontextmanager
async def open_store(config: ChatStoreConfig) -> AsyncGenerator[Store, None]:
    """Connect a dedicated store for one command and dispose it afterwards."""
    store = Store(create_database(config))
    await store.connect()
    try:
        yield store
    finally:
        await store.close()
