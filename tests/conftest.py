"""Shared test fixtures and factories."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from chatstore.config.paths import ENV_VAR, get_chatstore_home
from chatstore.db.engine import Database
from chatstore.db.models import Chat, Document, User
from chatstore.store import NewMessage, Store

# Fixed reference time for tests that need ordered timestamps
BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def at(minutes: int) -> datetime:
    """BASE_TIME shifted by a number of minutes."""
    return BASE_TIME + timedelta(minutes=minutes)


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point CHATSTORE_HOME at a temp dir and clear DATABASE_URL."""
    home = tmp_path / "home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CHATSTORE_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    get_chatstore_home.cache_clear()
    yield home
    get_chatstore_home.cache_clear()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Create a temporary test database."""
    db = Database(database_path=tmp_path / "test.db")
    await db.connect()
    await db.create_all()

    yield db

    await db.disconnect()


@pytest.fixture
async def store(database: Database) -> Store:
    return Store(database)


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
async def user(store: Store) -> User:
    return await store.create_user("alice@example.com", "correct horse")


@pytest.fixture
async def other_user(store: Store) -> User:
    return await store.create_user("bob@example.com", "battery staple")


@pytest.fixture
async def chat(store: Store, user: User) -> Chat:
    return await store.save_chat(
        id="chat-1", user_id=user.id, title="First chat", created_at=at(0)
    )


@pytest.fixture
async def document(store: Store, user: User) -> Document:
    return await store.save_document(
        id="doc-1",
        title="Draft",
        kind="text",
        content="v1",
        user_id=user.id,
        created_at=at(0),
    )


def make_message(
    message_id: str,
    chat_id: str,
    created_at: datetime,
    role: str = "user",
    text: str = "hello",
) -> NewMessage:
    """Build a NewMessage with a single text part."""
    return NewMessage(
        id=message_id,
        chat_id=chat_id,
        role=role,
        parts=[{"type": "text", "text": text}],
        attachments=[],
        created_at=created_at,
    )


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
