"""Database management commands.

Provides commands for:
- create: create all tables directly from the models (development)
- drop: drop all tables
- migrate / rollback / status: manage schema migrations with alembic
"""

from __future__ import annotations

import asyncio
import os
import subprocess
import sys
from typing import Annotated, Literal

import typer

from chatstore.cli.console import confirm_or_cancel, console, error, success
from chatstore.cli.context import ConfigOption, create_database, get_config
from chatstore.config import ChatStoreConfig
from chatstore.config.loader import DATABASE_URL_ENV
from chatstore.logging import redact

RevisionOption = Annotated[
    str | None,
    typer.Option("--revision", "-r", help="Target revision"),
]


def _run_alembic(config: ChatStoreConfig, *args: str) -> int:
    """Run alembic against the configured database.

    migrations/env.py reads the URL back through load_config(), which
    honours DATABASE_URL.
    """
    env = {**os.environ, DATABASE_URL_ENV: config.database.url}
    result = subprocess.run([sys.executable, "-m", "alembic", *args], env=env)
    return result.returncode


async def _apply_schema(
    config: ChatStoreConfig, action: Literal["create", "drop"]
) -> None:
    database = create_database(config)
    await database.connect()
    try:
        if action == "create":
            await database.create_all()
        else:
            await database.drop_all()
    finally:
        await database.disconnect()


def register(app: typer.Typer) -> None:
    """Register the db command group."""
    db_app = typer.Typer(help="Database management commands")

    @db_app.command("create")
    def db_create(config_path: ConfigOption = None) -> None:
        """Create all tables that do not exist yet."""
        config = get_config(config_path)
        console.print(
            f"Creating tables in {redact(config.database.url)}", markup=False
        )
        try:
            asyncio.run(_apply_schema(config, "create"))
        except Exception as e:
            error(f"Failed to create tables: {redact(str(e))}")
            raise typer.Exit(1) from None
        success("Tables created")

    @db_app.command("drop")
    def db_drop(
        force: Annotated[
            bool, typer.Option("--force", help="Skip confirmation")
        ] = False,
        config_path: ConfigOption = None,
    ) -> None:
        """Drop all tables. Every record is lost."""
        config = get_config(config_path)
        prompt = f"Drop all tables in {redact(config.database.url)}?"
        if not confirm_or_cancel(prompt, force):
            raise typer.Exit(0)
        try:
            asyncio.run(_apply_schema(config, "drop"))
        except Exception as e:
            error(f"Failed to drop tables: {redact(str(e))}")
            raise typer.Exit(1) from None
        success("Tables dropped")

    @db_app.command("migrate")
    def db_migrate(
        revision: RevisionOption = None, config_path: ConfigOption = None
    ) -> None:
        """Upgrade the schema (default: to the latest revision)."""
        config = get_config(config_path)
        target = revision or "head"
        console.print(
            f"Upgrading {redact(config.database.url)} to {target}", markup=False
        )
        if _run_alembic(config, "upgrade", target) != 0:
            error("Migration failed")
            raise typer.Exit(1)
        success(f"Upgraded to {target}")

    @db_app.command("rollback")
    def db_rollback(
        revision: RevisionOption = None, config_path: ConfigOption = None
    ) -> None:
        """Downgrade the schema (default: one revision)."""
        config = get_config(config_path)
        target = revision or "-1"
        console.print(
            f"Downgrading {redact(config.database.url)} to {target}", markup=False
        )
        if _run_alembic(config, "downgrade", target) != 0:
            error("Rollback failed")
            raise typer.Exit(1)
        success(f"Downgraded to {target}")

    @db_app.command("status")
    def db_status(config_path: ConfigOption = None) -> None:
        """Show the current revision and the revision history."""
        config = get_config(config_path)
        console.print(f"Database: {redact(config.database.url)}", markup=False)
        for args in (("current",), ("history", "--indicate-current")):
            if _run_alembic(config, *args) != 0:
                error("Could not read migration status")
                raise typer.Exit(1)

    app.add_typer(db_app, name="db")
