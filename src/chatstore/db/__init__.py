"""Database layer."""

from chatstore.db.engine import Database, get_database, init_database
from chatstore.db.models import (
    ArtifactKind,
    Base,
    Chat,
    Document,
    Message,
    Stream,
    Suggestion,
    User,
    Visibility,
    Vote,
)

__all__ = [
    # Engine
    "Database",
    "get_database",
    "init_database",
    # Models
    "Base",
    "Chat",
    "Document",
    "Message",
    "Stream",
    "Suggestion",
    "User",
    "Vote",
    # Value sets
    "ArtifactKind",
    "Visibility",
]
