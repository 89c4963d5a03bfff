"""Repository for LoginToken operations.

Single-use login codes stored as SHA-256 digests with a fixed expiry.
Consumption is a conditional UPDATE so two concurrent redemptions of the
same code can never both succeed.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from codenote.models.login_token import LoginToken


class LoginTokenRepository:
    """Stateless repository for LoginToken table operations.

    All methods are static; no instance state.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        code_hash: str,
        expires_at: datetime,
    ) -> LoginToken:
        """Store a new, unused login token.

        Args:
            db: Async database session.
            user_id: Owning user.
            code_hash: SHA-256 digest of the plain code.
            expires_at: Token expiry timestamp.

        Returns:
            Created LoginToken with its id assigned.
        """
        token = LoginToken(
            user_id=user_id,
            code_hash=code_hash,
            expires_at=expires_at,
            used=False,
        )
        db.add(token)
        await db.flush()
        await db.refresh(token)
        return token

    @staticmethod
    async def get_latest(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        code_hash: str,
    ) -> LoginToken | None:
        """Fetch the most recently created token for a user and digest.

        Args:
            db: Async database session.
            user_id: Owning user.
            code_hash: SHA-256 digest of the submitted code.

        Returns:
            Newest matching LoginToken, or None.
        """
        stmt = (
            select(LoginToken)
            .where(
                LoginToken.user_id == user_id,
                LoginToken.code_hash == code_hash,
            )
            .order_by(LoginToken.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def mark_used(db: AsyncSession, token_id: int) -> bool:
        """Consume a token if nobody else has.

        Only flips ``used`` when it is currently False, so of several
        concurrent callers exactly one sees True.

        Args:
            db: Async database session.
            token_id: Token primary key.

        Returns:
            True if this call consumed the token, False if it was already used.
        """
        stmt = (
            update(LoginToken)
            .where(LoginToken.id == token_id, LoginToken.used.is_(False))
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count == 1

    @staticmethod
    async def delete_expired(db: AsyncSession, *, now: datetime | None = None) -> int:
        """Delete all expired tokens (periodic cleanup).

        Args:
            db: Async database session.
            now: Reference time. Defaults to the current UTC time.

        Returns:
            Number of deleted rows.
        """
        stmt = (
            delete(LoginToken)
            .where(LoginToken.expires_at < (now or datetime.now(UTC)))
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
