"""User account operations mixin for Store."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from chatstore.db.models import User
from chatstore.errors import database_errors
from chatstore.security import generate_uuid, hash_password, verify_password
from chatstore.store.types import GuestUser

if TYPE_CHECKING:
    from chatstore.store.store import Store

logger = logging.getLogger(__name__)

GUEST_EMAIL_ATTEMPTS = 5


class UserOpsMixin:
    """User account CRUD operations."""

    async def get_user(self: Store, email: str) -> list[User]:
        """Get users by email (at most one, emails are unique)."""
        with database_errors("Failed to get user by email"):
            async with self._db.session() as session:
                result = await session.execute(select(User).where(User.email == email))
                return list(result.scalars().all())

    async def get_user_by_id(self: Store, user_id: str) -> User | None:
        with database_errors("Failed to get user by id"):
            async with self._db.session() as session:
                return await session.get(User, user_id)

    async def create_user(self: Store, email: str, password: str) -> User:
        """Create an account with a bcrypt-hashed password.

        Raises:
            StoreError: ``bad_request:database`` if the email is taken.
        """
        with database_errors("Failed to create user"):
            user = User(
                id=generate_uuid(), email=email, password=hash_password(password)
            )
            async with self._db.session() as session:
                session.add(user)
                await session.flush()

        logger.debug("user_created", extra={"user_id": user.id})
        return user

    async def create_guest_user(self: Store) -> list[GuestUser]:
        """Create a guest account with a random password.

        The email is ``guest-<epoch milliseconds>``. When another guest already
        took that millisecond the next free one is used.

        Returns:
            One-element list with the guest's id and generated email.
        """
        with database_errors("Failed to create guest user"):
            password = hash_password(generate_uuid())
            millis = int(time.time() * 1000)
            for attempt in range(GUEST_EMAIL_ATTEMPTS):
                user = User(
                    id=generate_uuid(), email=f"guest-{millis}", password=password
                )
                try:
                    async with self._db.session() as session:
                        session.add(user)
                        await session.flush()
                    break
                except IntegrityError:
                    if attempt == GUEST_EMAIL_ATTEMPTS - 1:
                        raise
                    millis = max(int(time.time() * 1000), millis + 1)

        logger.debug("guest_user_created", extra={"user_id": user.id})
        return [GuestUser(id=user.id, email=user.email)]

    async def verify_user_password(
        self: Store, email: str, password: str
    ) -> User | None:
        """Return the user when the password matches, otherwise None."""
        users = await self.get_user(email)
        if not users:
            return None
        user = users[0]
        if not user.password or not verify_password(password, user.password):
            return None
        return user
