"""Document (artifact) operations mixin for Store.

Documents are versioned: every save inserts a new row under the same id with
a new ``created_at``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from chatstore.db.models import ArtifactKind, Document, Suggestion, utc_now
from chatstore.errors import database_errors

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)


class DocumentOpsMixin:
    """Document version CRUD."""

    async def save_document(
        self: Store,
        id: str,
        title: str,
        kind: ArtifactKind | str,
        content: str | None,
        user_id: str,
        created_at: datetime | None = None,
    ) -> Document:
        """Insert a new version of a document."""
        with database_errors("Failed to save document"):
            document = Document(
                id=id,
                title=title,
                kind=ArtifactKind(kind),
                content=content,
                user_id=user_id,
                created_at=created_at or utc_now(),
            )
            async with self._db.session() as session:
                session.add(document)
                await session.flush()

        logger.debug(
            "document_saved",
            extra={"document_id": id, "kind": document.kind.value},
        )
        return document

    async def get_documents_by_id(self: Store, id: str) -> list[Document]:
        """Get every version of a document, oldest first."""
        with database_errors("Failed to get documents by id"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Document)
                    .where(Document.id == id)
                    .order_by(Document.created_at.asc())
                )
                return list(result.scalars().all())

    async def get_document_by_id(self: Store, id: str) -> Document | None:
        """Get the latest version of a document."""
        with database_errors("Failed to get document by id"):
            async with self._db.session() as session:
                result = await session.execute(
                    select(Document)
                    .where(Document.id == id)
                    .order_by(Document.created_at.desc())
                    .limit(1)
                )
                return result.scalar_one_or_none()

    async def delete_documents_by_id_after_timestamp(
        self: Store, id: str, timestamp: datetime
    ) -> list[Document]:
        """Delete document versions created after ``timestamp``.

        Suggestions attached to those versions are deleted first.

        Returns:
            The deleted versions.
        """
        with database_errors("Failed to delete documents by id after timestamp"):
            async with self._db.session() as session:
                await session.execute(
                    delete(Suggestion).where(
                        Suggestion.document_id == id,
                        Suggestion.document_created_at > timestamp,
                    )
                )
                result = await session.execute(
                    select(Document)
                    .where(Document.id == id, Document.created_at > timestamp)
                    .order_by(Document.created_at.asc())
                )
                deleted = list(result.scalars().all())
                await session.execute(
                    delete(Document)
                    .where(Document.id == id, Document.created_at > timestamp)
                    .execution_options(synchronize_session=False)
                )

        logger.debug(
            "documents_deleted", extra={"document_id": id, "count": len(deleted)}
        )
        return deleted
