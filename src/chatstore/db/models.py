"""SQLAlchemy ORM models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime on every backend.

    SQLite drops tzinfo on the way in and hands back naive values, so naive
    values are treated as UTC in both directions.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(
        self, value: datetime | None, dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"


class ArtifactKind(StrEnum):
    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    SHEET = "sheet"


def _enum_column(enum_cls: type[StrEnum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        validate_strings=True,
        length=16,
        values_callable=lambda members: [m.value for m in members],
    )


class Base(DeclarativeBase):
    """Base class for all models."""

    type_annotation_map = {
        dict[str, Any]: JSON,
        datetime: UTCDateTime,
    }


class User(Base):
    """Account. Guests get a generated ``guest-<millis>`` email."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    password: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Chat(Base):
    """Conversation owned by a user."""

    __tablename__ = "chats"
    __table_args__ = (Index("ix_chats_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False
    )
    visibility: Mapped[Visibility] = mapped_column(
        _enum_column(Visibility, "visibility"),
        nullable=False,
        default=Visibility.PRIVATE,
    )

    def __repr__(self) -> str:
        return f"<Chat(id={self.id}, user_id={self.user_id}, title={self.title})>"


class Message(Base):
    """Message in a chat.

    ``parts`` and ``attachments`` are opaque JSON payloads owned by the
    caller.
    """

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    chat_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("chats.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    parts: Mapped[Any] = mapped_column(JSON, nullable=False)
    attachments: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, default=utc_now, index=True
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, role={self.role}, chat_id={self.chat_id})>"


class Vote(Base):
    """Up/down vote on a message, at most one per (chat, message)."""

    __tablename__ = "votes"

    chat_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("chats.id"), primary_key=True
    )
    message_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("messages.id"), primary_key=True
    )
    is_upvoted: Mapped[bool] = mapped_column(Boolean, nullable=False)


class Document(Base):
    """One version of a generated artifact.

    Versions share ``id`` and are told apart by ``created_at``.
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(primary_key=True, default=utc_now)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    kind: Mapped[ArtifactKind] = mapped_column(
        _enum_column(ArtifactKind, "artifact_kind"),
        nullable=False,
        default=ArtifactKind.TEXT,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, created_at={self.created_at}, kind={self.kind})>"


class Suggestion(Base):
    """Edit suggestion against a specific document version."""

    __tablename__ = "suggestions"
    __table_args__ = (
        ForeignKeyConstraint(
            ["document_id", "document_created_at"],
            ["documents.id", "documents.created_at"],
        ),
        Index("ix_suggestions_document", "document_id", "document_created_at"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    document_created_at: Mapped[datetime] = mapped_column(nullable=False)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_text: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)


class Stream(Base):
    """Resumable generation stream id for a chat."""

    __tablename__ = "streams"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    chat_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("chats.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
