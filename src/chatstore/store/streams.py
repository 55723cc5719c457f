"""Resumable stream id operations mixin for Store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from chatstore.db.models import Stream, utc_now
from chatstore.errors import database_errors

if TYPE_CHECKING:
    from chatstore.store.store import Store


class StreamOpsMixin:
    """Stream ids per chat."""

    async def create_stream_id(self: Store, stream_id: str, chat_id: str) -> None:
        with database_errors("Failed to create stream id"):
            async with self._db.session() as session:
                session.add(Stream(id=stream_id, chat_id=chat_id, created_at=utc_now()))

    async def get_stream_ids_by_chat_id(self: Store, chat_id: str) -> list[str]:
        """Get a chat's stream ids, oldest first."""
        with database_errors("Failed to get stream ids by chat id"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Stream.id)
                    .where(Stream.chat_id == chat_id)
                    .order_by(Stream.created_at.asc())
                )
                return list(result.scalars().all())
