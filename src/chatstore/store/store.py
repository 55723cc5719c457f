"""Store facade over the database.

Implementation is split across focused mixin modules:
- users: Accounts, guests, password checks
- chats: Chat CRUD, cascading delete, history pagination
- messages: Message persistence, truncation, rate counting
- votes: Message votes
- documents: Versioned artifacts
- suggestions: Edit suggestions against document versions
- streams: Resumable stream ids

Every operation opens its own session and rethrows failures as StoreError.
"""

from __future__ import annotations

import logging

from chatstore.db.engine import Database
from chatstore.store.chats import ChatOpsMixin
from chatstore.store.documents import DocumentOpsMixin
from chatstore.store.messages import MessageOpsMixin
from chatstore.store.streams import StreamOpsMixin
from chatstore.store.suggestions import SuggestionOpsMixin
from chatstore.store.users import UserOpsMixin
from chatstore.store.votes import VoteOpsMixin

logger = logging.getLogger(__name__)


class Store(
    UserOpsMixin,
    ChatOpsMixin,
    MessageOpsMixin,
    VoteOpsMixin,
    DocumentOpsMixin,
    SuggestionOpsMixin,
    StreamOpsMixin,
):
    """Chat application persistence backed by a SQLAlchemy database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    async def connect(self) -> None:
        """Connect the underlying database (no-op if already connected)."""
        await self._db.connect()

    async def close(self) -> None:
        await self._db.disconnect()
