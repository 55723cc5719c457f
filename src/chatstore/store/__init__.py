"""Store: the query surface for accounts, chats, messages and artifacts.

Most callers share one lazily connected store per process::

    from chatstore.store import get_store

    store = await get_store()
    page = await store.get_chats_by_user_id(user_id, limit=20)
"""

from __future__ import annotations

import logging

from chatstore.config import ChatStoreConfig, load_config
from chatstore.db.engine import init_database, reset_database
from chatstore.store.store import Store
from chatstore.store.types import (
    ChatPage,
    GuestUser,
    NewMessage,
    NewSuggestion,
    VoteType,
)

logger = logging.getLogger(__name__)

_store: Store | None = None


async def get_store(config: ChatStoreConfig | None = None) -> Store:
    """Get the shared store, connecting on first use.

    Args:
        config: Configuration to use on first call. Loaded from the default
            locations when omitted. Ignored once the store exists.
    """
    global _store
    if _store is None:
        config = config or load_config()
        db = init_database(config.database)
        _store = Store(db)
        await _store.connect()
        if config.database.create_tables:
            await db.create_all()
            logger.info("database_tables_created")
    return _store


async def close_store() -> None:
    """Disconnect and forget the shared store."""
    global _store
    if _store is not None:
        await _store.close()
        _store = None
        reset_database()


__all__ = [
    "ChatPage",
    "GuestUser",
    "NewMessage",
    "NewSuggestion",
    "Store",
    "VoteType",
    "close_store",
    "get_store",
]
