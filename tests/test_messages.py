"""Tests for message operations."""

from datetime import timedelta

import pytest

from chatstore.db.models import Vote, utc_now
from chatstore.errors import StoreError
from chatstore.store import Store
from tests.conftest import at, make_message


class TestSaveMessages:
    async def test_save_and_list_in_order(self, store: Store, chat):
        await store.save_messages(
            [
                make_message("m2", chat.id, at(2), role="assistant", text="hi!"),
                make_message("m1", chat.id, at(1), text="hi"),
                make_message("m3", chat.id, at(3), text="how are you"),
            ]
        )

        messages = await store.get_messages_by_chat_id(chat.id)

        assert [m.id for m in messages] == ["m1", "m2", "m3"]
        assert messages[1].role == "assistant"
        assert messages[1].parts == [{"type": "text", "text": "hi!"}]
        assert messages[1].attachments == []

    async def test_payloads_round_trip_structured_json(self, store: Store, chat):
        message = make_message("m1", chat.id, at(1))
        message.parts = [
            {"type": "text", "text": "see attached"},
            {"type": "tool-call", "args": {"n": 3, "tags": ["a", "b"]}},
        ]
        message.attachments = [{"url": "https://example.com/a.png", "name": "a.png"}]
        await store.save_messages([message])

        stored = (await store.get_message_by_id("m1"))[0]

        assert stored.parts == message.parts
        assert stored.attachments == message.attachments

    async def test_duplicate_id_fails_whole_batch(self, store: Store, chat):
        await store.save_messages([make_message("m1", chat.id, at(1))])

        with pytest.raises(StoreError) as exc_info:
            await store.save_messages(
                [
                    make_message("m2", chat.id, at(2)),
                    make_message("m1", chat.id, at(3)),
                ]
            )

        assert exc_info.value.cause == "Failed to save messages"
        assert [m.id for m in await store.get_messages_by_chat_id(chat.id)] == ["m1"]

    async def test_save_empty_batch(self, store: Store):
        assert await store.save_messages([]) == []


class TestGetMessageById:
    async def test_found(self, store: Store, chat):
        await store.save_messages([make_message("m1", chat.id, at(1))])

        result = await store.get_message_by_id("m1")

        assert [m.id for m in result] == ["m1"]

    async def test_missing(self, store: Store):
        assert await store.get_message_by_id("missing") == []


class TestDeleteMessagesAfterTimestamp:
    async def test_deletes_from_timestamp_inclusive(self, store: Store, chat):
        await store.save_messages(
            [make_message(f"m{i}", chat.id, at(i)) for i in range(1, 5)]
        )
        await store.vote_message(chat.id, "m1", "up")
        await store.vote_message(chat.id, "m3", "down")

        deleted = await store.delete_messages_by_chat_id_after_timestamp(
            chat.id, at(3)
        )

        assert deleted == 2
        remaining = await store.get_messages_by_chat_id(chat.id)
        assert [m.id for m in remaining] == ["m1", "m2"]
        votes = await store.get_votes_by_chat_id(chat.id)
        assert [v.message_id for v in votes] == ["m1"]

    async def test_nothing_to_delete(self, store: Store, chat):
        await store.save_messages([make_message("m1", chat.id, at(1))])

        deleted = await store.delete_messages_by_chat_id_after_timestamp(
            chat.id, at(10)
        )

        assert deleted == 0
        assert len(await store.get_messages_by_chat_id(chat.id)) == 1

    async def test_accepts_naive_utc_timestamp(self, store: Store, chat):
        await store.save_messages(
            [make_message("m1", chat.id, at(1)), make_message("m2", chat.id, at(2))]
        )

        deleted = await store.delete_messages_by_chat_id_after_timestamp(
            chat.id, at(2).replace(tzinfo=None)
        )

        assert deleted == 1

    async def test_other_chats_untouched(self, store: Store, user, chat):
        await store.save_chat(id="other", user_id=user.id, title="Other")
        await store.save_messages(
            [make_message("m1", chat.id, at(5)), make_message("o1", "other", at(5))]
        )

        await store.delete_messages_by_chat_id_after_timestamp(chat.id, at(0))

        assert [m.id for m in await store.get_messages_by_chat_id("other")] == ["o1"]

    async def test_removes_votes_filed_under_another_chat(
        self, store: Store, user, chat
    ):
        await store.save_chat(id="other", user_id=user.id, title="Other")
        await store.save_messages([make_message("m1", chat.id, at(5))])
        async with store.db.session() as session:
            session.add(Vote(chat_id="other", message_id="m1", is_upvoted=False))

        deleted = await store.delete_messages_by_chat_id_after_timestamp(
            chat.id, at(0)
        )

        assert deleted == 1
        assert await store.get_votes_by_chat_id("other") == []


class TestMessageCount:
    async def test_counts_recent_user_messages_across_chats(
        self, store: Store, user, other_user
    ):
        now = utc_now()
        await store.save_chat(id="a", user_id=user.id, title="A")
        await store.save_chat(id="b", user_id=user.id, title="B")
        await store.save_chat(id="theirs", user_id=other_user.id, title="Theirs")
        await store.save_messages(
            [
                # Counted
                make_message("a1", "a", now - timedelta(hours=1)),
                make_message("b1", "b", now - timedelta(hours=2)),
                make_message("b2", "b", now - timedelta(minutes=5)),
                # Assistant messages are not counted
                make_message("a2", "a", now - timedelta(hours=1), role="assistant"),
                # Outside the window
                make_message("a3", "a", now - timedelta(hours=30)),
                # Another user's chat
                make_message("t1", "theirs", now - timedelta(hours=1)),
            ]
        )

        count = await store.get_message_count_by_user_id(
            user.id, difference_in_hours=24
        )

        assert count == 3

    async def test_zero_when_no_chats(self, store: Store, user):
        assert await store.get_message_count_by_user_id(user.id, 24) == 0

    async def test_window_size_matters(self, store: Store, user, chat):
        now = utc_now()
        await store.save_messages(
            [
                make_message("m1", chat.id, now - timedelta(hours=3)),
                make_message("m2", chat.id, now - timedelta(minutes=30)),
            ]
        )

        assert await store.get_message_count_by_user_id(user.id, 1) == 1
        assert await store.get_message_count_by_user_id(user.id, 4) == 2
