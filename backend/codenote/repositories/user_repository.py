"""Persistence for the users table.

Emails are stored lower-cased; lookups lower-case their argument so a
mixed-case address finds the same row.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codenote.models.user import User


class UserRepository:
    """Static query helpers over ``User``; callers own the transaction."""

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, *, email: str) -> User:
        """Insert a user and flush so ``id`` and timestamps are loaded.

        Raises:
            sqlalchemy.exc.IntegrityError: The email is already registered.
        """
        user = User(email=email.lower())
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_or_create(db: AsyncSession, *, email: str) -> User:
        """Look up a user by email, registering it if it does not exist yet.

        Two first-time requests for one address can both miss the lookup.
        The second insert then violates the unique email; the session is
        rolled back and the row the other request created is returned.
        The rollback discards anything else pending, so call this before
        staging other writes.

        Args:
            db: Async database session.
            email: Address as submitted; lower-cased before use.

        Returns:
            The one User owning that address.
        """
        user = await UserRepository.get_by_email(db, email)
        if user is not None:
            return user

        try:
            return await UserRepository.create(db, email=email)
        except IntegrityError:
            await db.rollback()
            winner = await UserRepository.get_by_email(db, email)
            if winner is None:
                raise
            return winner
