"""Value types returned by or passed to the store."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from chatstore.db.models import Chat


class VoteType(StrEnum):
    UP = "up"
    DOWN = "down"


@dataclass
class ChatPage:
    """One page of a user's chat history, newest first."""

    chats: list[Chat] = field(default_factory=list)
    has_more: bool = False


@dataclass
class GuestUser:
    id: str
    email: str


@dataclass
class NewMessage:
    """Message to insert with Store.save_messages()."""

    id: str
    chat_id: str
    role: str
    parts: Any
    attachments: Any
    created_at: datetime


@dataclass
class NewSuggestion:
    """Suggestion to insert with Store.save_suggestions()."""

    id: str
    document_id: str
    document_created_at: datetime
    original_text: str
    suggested_text: str
    user_id: str
    created_at: datetime
    description: str | None = None
    is_resolved: bool = False
