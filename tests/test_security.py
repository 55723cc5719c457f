"""Tests for password hashing and id generation."""

import uuid

from chatstore.security import generate_uuid, hash_password, verify_password


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret")

        assert hashed.startswith("$2")
        assert len(hashed) == 60
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_generate_uuid():
    value = generate_uuid()

    assert str(uuid.UUID(value)) == value
    assert generate_uuid() != value
