"""CLI command modules."""

from chatstore.cli.commands import chats, config, database, users

__all__ = ["chats", "config", "database", "users"]
