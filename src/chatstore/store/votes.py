"""Vote operations mixin for Store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select

from chatstore.db.models import Message, Vote
from chatstore.errors import StoreError, database_errors
from chatstore.store.types import VoteType

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)


class VoteOpsMixin:
    """Message votes."""

    async def vote_message(
        self: Store, chat_id: str, message_id: str, type: VoteType | str
    ) -> Vote:
        """Up- or downvote a message, replacing any earlier vote.

        The message must belong to the chat.

        Check-then-write, not atomic: two concurrent first votes on the same
        message can collide on the (chat_id, message_id) key.
        """
        with database_errors("Failed to vote message"):
            is_upvoted = VoteType(type) == VoteType.UP
            async with self._db.session() as session:
                message = await session.get(Message, message_id)
                if message is None or message.chat_id != chat_id:
                    raise StoreError(
                        "bad_request:database",
                        f"Message {message_id} is not part of chat {chat_id}",
                    )
                vote = await session.get(Vote, (chat_id, message_id))
                if vote is None:
                    vote = Vote(
                        chat_id=chat_id, message_id=message_id, is_upvoted=is_upvoted
                    )
                    session.add(vote)
                else:
                    vote.is_upvoted = is_upvoted
                await session.flush()

        logger.debug(
            "message_voted",
            extra={"chat_id": chat_id, "message_id": message_id, "up": is_upvoted},
        )
        return vote

    async def get_votes_by_chat_id(self: Store, id: str) -> list[Vote]:
        with database_errors("Failed to get votes by chat id"):
            async with self._db.session() as session:
                result = await session.execute(select(Vote).where(Vote.chat_id == id))
                return list(result.scalars().all())
