"""Main CLI application."""

from typing import Annotated

import typer

from chatstore.cli.commands import chats, config, database, users

app = typer.Typer(
    name="chatstore",
    help="chatstore - persistence layer for chat applications",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level (DEBUG, INFO, WARNING, ERROR)",
        ),
    ] = None,
) -> None:
    """chatstore command line."""
    import os

    from chatstore.logging import configure_logging

    configure_logging(
        level=log_level or os.environ.get("CHATSTORE_LOG_LEVEL", "WARNING")
    )


config.register(app)
database.register(app)
users.register(app)
chats.register(app)


if __name__ == "__main__":
    app()
