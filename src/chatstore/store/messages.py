"""Message operations mixin for Store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select

from chatstore.db.models import Chat, Message, Vote, utc_now
from chatstore.errors import database_errors
from chatstore.store.types import NewMessage

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)

USER_ROLE = "user"


class MessageOpsMixin:
    """Message persistence, lookup, truncation and rate counting."""

    async def save_messages(
        self: Store, messages: Sequence[NewMessage]
    ) -> list[Message]:
        """Bulk insert messages."""
        with database_errors("Failed to save messages"):
            rows = [
                Message(
                    id=m.id,
                    chat_id=m.chat_id,
                    role=m.role,
                    parts=m.parts,
                    attachments=m.attachments,
                    created_at=m.created_at,
                )
                for m in messages
            ]
            async with self._db.session() as session:
                session.add_all(rows)
                await session.flush()

        logger.debug("messages_saved", extra={"count": len(rows)})
        return rows

    async def get_messages_by_chat_id(self: Store, id: str) -> list[Message]:
        """Get a chat's messages, oldest first."""
        with database_errors("Failed to get messages by chat id"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Message)
                    .where(Message.chat_id == id)
                    .order_by(Message.created_at.asc())
                )
                return list(result.scalars().all())

    async def get_message_by_id(self: Store, id: str) -> list[Message]:
        """Get a message by id as a zero- or one-element list."""
        with database_errors("Failed to get message by id"):
            async with self._db.session() as session:
                message = await session.get(Message, id)
                return [message] if message is not None else []

    async def delete_messages_by_chat_id_after_timestamp(
        self: Store, chat_id: str, timestamp: datetime
    ) -> int:
        """Delete a chat's messages created at or after ``timestamp``.

        Votes on those messages are deleted first.

        Returns:
            Number of messages deleted.
        """
        with database_errors("Failed to delete messages by chat id after timestamp"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Message.id).where(
                        Message.chat_id == chat_id,
                        Message.created_at >= timestamp,
                    )
                )
                message_ids = list(result.scalars().all())
                if not message_ids:
                    return 0

                await session.execute(
                    delete(Vote).where(Vote.message_id.in_(message_ids))
                )
                result = await session.execute(
                    delete(Message).where(
                        Message.chat_id == chat_id,
                        Message.id.in_(message_ids),
                    )
                )
                deleted = result.rowcount

        logger.debug(
            "messages_deleted", extra={"chat_id": chat_id, "count": deleted}
        )
        return deleted

    async def get_message_count_by_user_id(
        self: Store, id: str, difference_in_hours: float
    ) -> int:
        """Count the user's own messages in the last ``difference_in_hours``.

        Only messages with role ``user`` in chats owned by the user count.
        """
        cutoff = utc_now() - timedelta(hours=difference_in_hours)
        with database_errors("Failed to get message count by user id"):
            async with self._db.session() as session:
                user_chats = select(Chat.id).where(Chat.user_id == id)
                result = await session.execute(
                    select(func.count())
                    .select_from(Message)
                    .where(
                        Message.role == USER_ROLE,
                        Message.created_at >= cutoff,
                        Message.chat_id.in_(user_chats),
                    )
                )
                return result.scalar_one() or 0
