"""Suggestion operations mixin for Store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy import select

from chatstore.db.models import Suggestion
from chatstore.errors import database_errors
from chatstore.store.types import NewSuggestion

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)


class SuggestionOpsMixin:
    """Edit suggestions against document versions."""

    async def save_suggestions(
        self: Store, suggestions: Sequence[NewSuggestion]
    ) -> list[Suggestion]:
        """Bulk insert suggestions."""
        with database_errors("Failed to save suggestions"):
            rows = [
                Suggestion(
                    id=s.id,
                    document_id=s.document_id,
                    document_created_at=s.document_created_at,
                    original_text=s.original_text,
                    suggested_text=s.suggested_text,
                    description=s.description,
                    is_resolved=s.is_resolved,
                    user_id=s.user_id,
                    created_at=s.created_at,
                )
                for s in suggestions
            ]
            async with self._db.session() as session:
                session.add_all(rows)
                await session.flush()

        logger.debug("suggestions_saved", extra={"count": len(rows)})
        return rows

    async def get_suggestions_by_document_id(
        self: Store, document_id: str
    ) -> list[Suggestion]:
        with database_errors("Failed to get suggestions by document id"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Suggestion)
                    .where(Suggestion.document_id == document_id)
                    .order_by(Suggestion.created_at.asc())
                )
                return list(result.scalars().all())
