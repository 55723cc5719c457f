"""Tests for the database engine and the shared store lifecycle."""

import pytest
from sqlalchemy import text

from chatstore.config import ChatStoreConfig, DatabaseConfig, get_database_path
from chatstore.db.engine import Database, get_database
from chatstore.store import close_store, get_store


@pytest.fixture
async def shared_store_cleanup():
    yield
    await close_store()


class TestDatabase:
    def test_requires_url_or_path(self):
        with pytest.raises(ValueError):
            Database()

    def test_path_builds_sqlite_url(self, tmp_path):
        db = Database(database_path=tmp_path / "nested" / "chat.db")

        assert db.url == f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'chat.db'}"
        assert (tmp_path / "nested").is_dir()

    def test_from_config_creates_sqlite_parent(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'data' / 'chat.db'}"

        db = Database.from_config(DatabaseConfig(url=url, echo=True))

        assert db.url == url
        assert (tmp_path / "data").is_dir()

    def test_engine_before_connect(self, database_url):
        db = Database(database_url=database_url)

        assert not db.is_connected
        with pytest.raises(RuntimeError):
            _ = db.engine
        with pytest.raises(RuntimeError):
            _ = db.session_factory

    async def test_connect_is_idempotent(self, database_url):
        db = Database(database_url=database_url)
        await db.connect()
        engine = db.engine

        await db.connect()

        assert db.engine is engine
        await db.disconnect()
        assert not db.is_connected

    async def test_sqlite_foreign_keys_enabled(self, database: Database):
        async with database.session() as session:
            result = await session.execute(text("PRAGMA foreign_keys"))

        assert result.scalar_one() == 1

    async def test_session_rolls_back_on_error(self, database: Database, store):
        with pytest.raises(RuntimeError):
            async with database.session() as session:
                await session.execute(
                    text(
                        "INSERT INTO users (id, email, password) "
                        "VALUES ('u-1', 'x@example.com', NULL)"
                    )
                )
                raise RuntimeError("boom")

        assert await store.get_user("x@example.com") == []


@pytest.mark.usefixtures("shared_store_cleanup")
class TestSharedStore:
    async def test_get_store_is_shared(self, database_url):
        config = ChatStoreConfig(
            database=DatabaseConfig(url=database_url, create_tables=True)
        )

        first = await get_store(config)
        second = await get_store()

        assert first is second
        assert first.db is get_database()
        assert first.db.url == database_url

    async def test_create_tables_on_first_use(self, database_url):
        config = ChatStoreConfig(
            database=DatabaseConfig(url=database_url, create_tables=True)
        )
        store = await get_store(config)

        user = await store.create_user("carol@example.com", "pw")

        assert (await store.get_user("carol@example.com"))[0].id == user.id

    async def test_default_database_under_home(self):
        config = ChatStoreConfig(database=DatabaseConfig(create_tables=True))

        store = await get_store(config)
        await store.create_guest_user()

        assert get_database_path().exists()

    async def test_url_from_environment(self, database_url, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", database_url)

        store = await get_store()

        assert store.db.url == database_url

    async def test_close_store_resets(self, database_url):
        config = ChatStoreConfig(database=DatabaseConfig(url=database_url))
        first = await get_store(config)

        await close_store()

        assert not first.db.is_connected
        with pytest.raises(RuntimeError):
            get_database()
        second = await get_store(config)
        assert second is not first
