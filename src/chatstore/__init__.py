"""chatstore - persistence layer for a chat application."""

from chatstore.errors import StoreError
from chatstore.store import Store, close_store, get_store

__version__ = "0.1.0"

__all__ = ["Store", "StoreError", "close_store", "get_store"]
