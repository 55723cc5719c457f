"""Chat operations mixin for Store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, or_, select, update

from chatstore.db.models import Chat, Message, Stream, Visibility, Vote, utc_now
from chatstore.errors import StoreError, database_errors
from chatstore.store.types import ChatPage

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)


class ChatOpsMixin:
    """Chat CRUD, cascading delete and history pagination."""

    async def save_chat(
        self: Store,
        id: str,
        user_id: str,
        title: str,
        visibility: Visibility | str = Visibility.PRIVATE,
        created_at: datetime | None = None,
    ) -> Chat:
        """Insert a chat. ``created_at`` defaults to now."""
        with database_errors("Failed to save chat"):
            chat = Chat(
                id=id,
                created_at=created_at or utc_now(),
                user_id=user_id,
                title=title,
                visibility=Visibility(visibility),
            )
            async with self._db.session() as session:
                session.add(chat)
                await session.flush()

        logger.debug("chat_saved", extra={"chat_id": id, "user_id": user_id})
        return chat

    async def delete_chat_by_id(self: Store, id: str) -> str | None:
        """Delete a chat with its votes, messages and streams.

        Steps run in order and are not atomic across each other.

        Returns:
            The chat id if the chat existed, otherwise None.
        """
        with database_errors("Failed to delete chat by id"):
            async with self._db.session() as session:
                chat_messages = select(Message.id).where(Message.chat_id == id)
                await session.execute(
                    delete(Vote)
                    .where(or_(Vote.chat_id == id, Vote.message_id.in_(chat_messages)))
                    .execution_options(synchronize_session=False)
                )
                await session.execute(delete(Message).where(Message.chat_id == id))
                await session.execute(delete(Stream).where(Stream.chat_id == id))
                result = await session.execute(delete(Chat).where(Chat.id == id))
                deleted = result.rowcount > 0

        logger.debug("chat_deleted", extra={"chat_id": id, "found": deleted})
        return id if deleted else None

    async def get_chats_by_user_id(
        self: Store,
        id: str,
        limit: int,
        starting_after: str | None = None,
        ending_before: str | None = None,
    ) -> ChatPage:
        """Page through a user's chats, newest first.

        Args:
            id: Owner user id.
            limit: Maximum number of chats to return.
            starting_after: Only chats created after this chat.
            ending_before: Only chats created before this chat. Ignored when
                ``starting_after`` is set.

        Raises:
            StoreError: ``not_found:database`` if the cursor chat is missing.
        """
        with database_errors("Failed to get chats by user id"):
            async with self._db.session() as session:
                stmt = select(Chat).where(Chat.user_id == id)

                cursor_id = starting_after or ending_before
                if cursor_id:
                    selected = await session.get(Chat, cursor_id)
                    if selected is None:
                        raise StoreError(
                            "not_found:database",
                            f"Chat with id {cursor_id} not found",
                        )
                    if starting_after:
                        stmt = stmt.where(Chat.created_at > selected.created_at)
                    else:
                        stmt = stmt.where(Chat.created_at < selected.created_at)

                stmt = stmt.order_by(Chat.created_at.desc()).limit(limit + 1)
                result = await session.execute(stmt)
                chats = list(result.scalars().all())

        has_more = len(chats) > limit
        return ChatPage(chats=chats[:limit] if has_more else chats, has_more=has_more)

    async def get_chat_by_id(self: Store, id: str) -> Chat | None:
        with database_errors("Failed to get chat by id"):
            async with self._db.session() as session:
                return await session.get(Chat, id)

    async def update_chat_visibility_by_id(
        self: Store, chat_id: str, visibility: Visibility | str
    ) -> int:
        """Set a chat's visibility.

        Returns:
            Number of chats updated (0 or 1).
        """
        with database_errors("Failed to update chat visibility by id"):
            async with self._db.session() as session:
                result = await session.execute(
                    update(Chat)
                    .where(Chat.id == chat_id)
                    .values(visibility=Visibility(visibility))
                )
                return result.rowcount
