"""Password hashing and id generation."""

import uuid

import bcrypt

BCRYPT_ROUNDS = 10


def generate_uuid() -> str:
    """Return a new random UUID string."""
    return str(uuid.uuid4())


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain text password.

    Returns:
        The bcrypt hash as text (60 characters).
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False
