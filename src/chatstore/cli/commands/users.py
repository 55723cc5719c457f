"""User account commands."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer

from chatstore.cli.console import console, dim, error, store_failure, success
from chatstore.cli.context import ConfigOption, get_config, open_store
from chatstore.config import ChatStoreConfig
from chatstore.errors import StoreError


async def _create_user(config: ChatStoreConfig, email: str, password: str) -> str:
    async with open_store(config) as store:
        user = await store.create_user(email, password)
        return user.id


async def _create_guest(config: ChatStoreConfig) -> tuple[str, str]:
    async with open_store(config) as store:
        guest = (await store.create_guest_user())[0]
        return guest.id, guest.email


async def _show_user(config: ChatStoreConfig, email: str) -> list[tuple[str, str]]:
    async with open_store(config) as store:
        return [(u.id, u.email) for u in await store.get_user(email)]


def register(app: typer.Typer) -> None:
    """Register the users command group."""
    users_app = typer.Typer(help="User account commands")

    @users_app.command("create")
    def users_create(
        email: Annotated[str, typer.Argument(help="Email address")],
        password: Annotated[
            str,
            typer.Option(
                "--password",
                "-p",
                prompt=True,
                hide_input=True,
                confirmation_prompt=True,
                help="Account password",
            ),
        ],
        config_path: ConfigOption = None,
    ) -> None:
        """Create a user account."""
        config = get_config(config_path)
        try:
            user_id = asyncio.run(_create_user(config, email, password))
        except StoreError as e:
            raise store_failure(e) from None
        success(f"Created user {email}")
        dim(f"id: {user_id}")

    @users_app.command("guest")
    def users_guest(config_path: ConfigOption = None) -> None:
        """Create a guest account."""
        config = get_config(config_path)
        try:
            user_id, email = asyncio.run(_create_guest(config))
        except StoreError as e:
            raise store_failure(e) from None
        success(f"Created guest {email}")
        dim(f"id: {user_id}")

    @users_app.command("show")
    def users_show(
        email: Annotated[str, typer.Argument(help="Email address")],
        config_path: ConfigOption = None,
    ) -> None:
        """Look up a user by email."""
        config = get_config(config_path)
        try:
            users = asyncio.run(_show_user(config, email))
        except StoreError as e:
            raise store_failure(e) from None
        if not users:
            error(f"User not found: {email}")
            raise typer.Exit(1)
        for user_id, user_email in users:
            console.print(f"{user_email}  [dim]{user_id}[/dim]")

    app.add_typer(users_app, name="users")
