"""Async engine and session handling for the chatstore database."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from chatstore.config import DatabaseConfig

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _ensure_sqlite_parent(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


class Database:
    """One async engine plus the session factory built on it.

    Nothing touches the database until connect(). Each store operation then
    opens a short session with session().
    """

    def __init__(
        self,
        database_url: str | None = None,
        database_path: Path | None = None,
        *,
        echo: bool = False,
        pool_pre_ping: bool = True,
    ):
        """
        Args:
            database_url: SQLAlchemy async URL. Wins over ``database_path``.
            database_path: SQLite file, created with its parent directory.
            echo: Log every SQL statement.
            pool_pre_ping: Check pooled connections before handing them out.
        """
        if database_url:
            url = database_url
        elif database_path:
            url = f"sqlite+aiosqlite:///{database_path}"
        else:
            raise ValueError("Database needs a database_url or a database_path")
        _ensure_sqlite_parent(url)

        self._url = url
        self._echo = echo
        self._pool_pre_ping = pool_pre_ping
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> Database:
        return cls(
            database_url=config.url,
            echo=config.echo,
            pool_pre_ping=config.pool_pre_ping,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._sessions

    async def connect(self) -> None:
        """Create the engine. A second call keeps the existing engine."""
        if self._engine is not None:
            return

        engine = create_async_engine(
            self._url, echo=self._echo, pool_pre_ping=self._pool_pre_ping
        )
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        logger.info("database_connected", extra={"dialect": engine.dialect.name})

    async def disconnect(self) -> None:
        """Dispose the engine and its pool."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("database_disconnected")

    async def create_all(self) -> None:
        """Create every missing table (development databases)."""
        from chatstore.db.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        from chatstore.db.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that commits on exit and rolls back on error.

        Usage:
            async with db.session() as session:
                session.add(chat)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


_db: Database | None = None


def get_database() -> Database:
    """Return the process-wide database set up by init_database()."""
    if _db is None:
        raise RuntimeError("No shared database; call init_database() first")
    return _db


def init_database(config: DatabaseConfig) -> Database:
    """Replace the process-wide database with one built from ``config``."""
    global _db
    _db = Database.from_config(config)
    return _db


def reset_database() -> None:
    """Forget the process-wide database without disposing it."""
    global _db
    _db = None
