"""Chat history commands."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer

from chatstore.cli.console import (
    confirm_or_cancel,
    console,
    create_table,
    dim,
    error,
    store_failure,
    success,
)
from chatstore.cli.context import ConfigOption, get_config, open_store
from chatstore.config import ChatStoreConfig
from chatstore.errors import StoreError
from chatstore.store import ChatPage


async def _list_chats(
    config: ChatStoreConfig,
    user_id: str,
    limit: int,
    after: str | None,
    before: str | None,
) -> ChatPage:
    async with open_store(config) as store:
        return await store.get_chats_by_user_id(
            user_id, limit, starting_after=after, ending_before=before
        )


async def _delete_chat(config: ChatStoreConfig, chat_id: str) -> str | None:
    async with open_store(config) as store:
        return await store.delete_chat_by_id(chat_id)


def register(app: typer.Typer) -> None:
    """Register the chats command group."""
    chats_app = typer.Typer(help="Chat history commands")

    @chats_app.command("list")
    def chats_list(
        user_id: Annotated[str, typer.Argument(help="Owner user id")],
        limit: Annotated[
            int, typer.Option("--limit", "-n", min=1, help="Page size")
        ] = 20,
        after: Annotated[
            str | None,
            typer.Option("--after", help="Only chats newer than this chat id"),
        ] = None,
        before: Annotated[
            str | None,
            typer.Option("--before", help="Only chats older than this chat id"),
        ] = None,
        config_path: ConfigOption = None,
    ) -> None:
        """List a user's chats, newest first."""
        config = get_config(config_path)
        try:
            page = asyncio.run(_list_chats(config, user_id, limit, after, before))
        except StoreError as e:
            raise store_failure(e) from None

        if not page.chats:
            dim("No chats found")
            return

        table = create_table(
            "Chats",
            [
                ("ID", {"style": "dim", "no_wrap": True}),
                ("Created", "cyan"),
                ("Visibility", "magenta"),
                ("Title", "white"),
            ],
        )
        for chat in page.chats:
            table.add_row(
                chat.id,
                chat.created_at.strftime("%Y-%m-%d %H:%M"),
                chat.visibility.value,
                chat.title,
            )
        console.print(table)
        if page.has_more:
            dim(f"More chats available: --before {page.chats[-1].id}")

    @chats_app.command("delete")
    def chats_delete(
        chat_id: Annotated[str, typer.Argument(help="Chat id")],
        force: Annotated[
            bool, typer.Option("--force", "-f", help="Skip confirmation")
        ] = False,
        config_path: ConfigOption = None,
    ) -> None:
        """Delete a chat with its messages, votes and streams."""
        config = get_config(config_path)
        if not confirm_or_cancel(f"Delete chat {chat_id}?", force):
            raise typer.Exit(0)
        try:
            deleted = asyncio.run(_delete_chat(config, chat_id))
        except StoreError as e:
            raise store_failure(e) from None

        if deleted is None:
            error(f"Chat not found: {chat_id}")
            raise typer.Exit(1)
        success(f"Deleted chat {chat_id}")

    app.add_typer(chats_app, name="chats")
