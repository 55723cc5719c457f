"""Tests for user account operations."""

import time

import pytest

from chatstore.errors import StoreError
from chatstore.security import verify_password
from chatstore.store import Store


class TestCreateUser:
    async def test_create_user_hashes_password(self, store: Store):
        user = await store.create_user("alice@example.com", "correct horse")

        assert user.id
        assert user.email == "alice@example.com"
        assert user.password != "correct horse"
        assert verify_password("correct horse", user.password)

    async def test_duplicate_email_fails(self, store: Store):
        await store.create_user("alice@example.com", "one")

        with pytest.raises(StoreError) as exc_info:
            await store.create_user("alice@example.com", "two")

        assert exc_info.value.code == "bad_request:database"
        assert exc_info.value.cause == "Failed to create user"
        assert exc_info.value.__cause__ is not None

        assert len(await store.get_user("alice@example.com")) == 1

    async def test_long_password_fails_as_store_error(self, store: Store):
        with pytest.raises(StoreError) as exc_info:
            await store.create_user("long@example.com", "x" * 100)

        assert exc_info.value.code == "bad_request:database"
        assert exc_info.value.cause == "Failed to create user"
        assert await store.get_user("long@example.com") == []

    async def test_users_get_distinct_ids(self, store: Store):
        first = await store.create_user("a@example.com", "pw")
        second = await store.create_user("b@example.com", "pw")

        assert first.id != second.id


class TestGetUser:
    async def test_get_user_by_email(self, store: Store, user):
        users = await store.get_user("alice@example.com")

        assert [u.id for u in users] == [user.id]

    async def test_get_user_unknown_email(self, store: Store):
        assert await store.get_user("nobody@example.com") == []

    async def test_get_user_by_id(self, store: Store, user):
        found = await store.get_user_by_id(user.id)

        assert found is not None
        assert found.email == user.email

    async def test_get_user_by_id_missing(self, store: Store):
        assert await store.get_user_by_id("missing") is None


class TestGuestUser:
    async def test_create_guest_user(self, store: Store):
        guests = await store.create_guest_user()

        assert len(guests) == 1
        guest = guests[0]
        assert guest.email.startswith("guest-")
        assert guest.email.removeprefix("guest-").isdigit()

        stored = await store.get_user_by_id(guest.id)
        assert stored is not None
        assert stored.email == guest.email
        assert stored.password

    async def test_guests_in_same_millisecond_get_distinct_emails(
        self, store: Store, monkeypatch
    ):
        monkeypatch.setattr(time, "time", lambda: 1_767_268_800.0)

        first = (await store.create_guest_user())[0]
        second = (await store.create_guest_user())[0]

        assert first.email == "guest-1767268800000"
        assert second.email == "guest-1767268800001"
        assert first.id != second.id


class TestVerifyUserPassword:
    async def test_correct_password(self, store: Store, user):
        verified = await store.verify_user_password(
            "alice@example.com", "correct horse"
        )

        assert verified is not None
        assert verified.id == user.id

    async def test_wrong_password(self, store: Store, user):
        assert await store.verify_user_password("alice@example.com", "nope") is None

    async def test_unknown_email(self, store: Store):
        assert await store.verify_user_password("nobody@example.com", "x") is None
