"""Configuration commands: show and validate a config.toml."""

from pathlib import Path
from typing import Annotated

import click
import typer

from chatstore.cli.console import console, create_table, error, success
from chatstore.config import ChatStoreConfig, ConfigError, load_config
from chatstore.config.paths import get_config_path
from chatstore.logging import redact

ACTIONS = ("show", "validate")


def _show(path: Path) -> None:
    console.print(f"Config file: {path}\n", style="bold", markup=False)
    console.print(redact(path.read_text()), markup=False)


def _summary(config: ChatStoreConfig) -> None:
    table = create_table(
        "Configuration Summary", [("Setting", "cyan"), ("Value", "green")]
    )
    database = config.database
    table.add_row("Database", redact(database.url))
    table.add_row("Echo SQL", str(database.echo))
    table.add_row("Pool pre-ping", str(database.pool_pre_ping))
    table.add_row("Create tables", str(database.create_tables))
    table.add_row("Log level", config.logging.level)
    console.print(table)


def _validate(path: Path) -> None:
    try:
        config = load_config(path)
    except ConfigError as e:
        error("Configuration validation failed:")
        console.print(redact(str(e)), markup=False)
        raise typer.Exit(1) from None
    success("Configuration is valid!")
    console.print()
    _summary(config)


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None, typer.Argument(help="Action: show, validate")
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $CHATSTORE_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Show or validate the configuration file."""
        if action is None:
            click.echo(click.get_current_context().get_help())
            raise typer.Exit(0)
        if action not in ACTIONS:
            error(f"Unknown action: {action}")
            console.print(f"Valid actions: {', '.join(ACTIONS)}")
            raise typer.Exit(1)

        config_path = path.expanduser() if path else get_config_path()
        if not config_path.exists():
            error(f"Config file not found: {config_path}")
            raise typer.Exit(1)

        if action == "show":
            _show(config_path)
        else:
            _validate(config_path)
