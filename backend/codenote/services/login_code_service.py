"""One-time login code issuance and redemption.

Issue:
1. Find or create the user for the email
2. Draw a 6-digit code from the secrets CSPRNG
3. Store SHA-256(code) with a 15-minute expiry and used=False
4. Hand the plain code back to the caller for delivery

Verify:
1. Look up the user, then the newest token matching SHA-256(code)
2. Reject used or expired tokens
3. Consume the token with a conditional UPDATE (at most one winner)

The service never commits. Callers own the transaction and must commit
after issue (before sending the email) and after verify.
"""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from codenote.core.errors import (
    CodeAlreadyUsedError,
    CodeExpiredError,
    InvalidCodeError,
    UserNotFoundError,
)
from codenote.core.hashing import digest
from codenote.repositories.login_token_repository import LoginTokenRepository
from codenote.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

LOGIN_CODE_TTL = timedelta(minutes=15)

_CODE_MIN = 100_000
_CODE_MAX = 999_999


@dataclass(frozen=True)
class IssuedCode:
    """A freshly issued login code.

    Attributes:
        user_id: Owner of the code.
        email: Normalized email the code must be delivered to.
        code: Plain 6-digit code. Only ever sent by email, never stored.
        expires_at: Instant the code stops being accepted.
    """

    user_id: uuid.UUID
    email: str
    code: str
    expires_at: datetime


def _now() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def normalize_email(email: str) -> str:
    """Canonical form used for lookups and storage."""
    return email.strip().lower()


def generate_code() -> str:
    """Return a uniformly random 6-digit decimal code."""
    return str(_CODE_MIN + secrets.randbelow(_CODE_MAX - _CODE_MIN + 1))


async def issue_code(db: AsyncSession, email: str) -> IssuedCode:
    """Create and store a login code for an email.

    The user row is created on first request for an unseen email.

    Args:
        db: Async database session.
        email: Address requesting a code.

    Returns:
        IssuedCode holding the plain code for delivery.
    """
    normalized = normalize_email(email)
    user = await UserRepository.get_or_create(db, email=normalized)

    code = generate_code()
    expires_at = _now() + LOGIN_CODE_TTL
    await LoginTokenRepository.create(
        db,
        user_id=user.id,
        code_hash=digest(code),
        expires_at=expires_at,
    )

    logger.info("Login code issued for user %s", user.id)
    return IssuedCode(
        user_id=user.id,
        email=normalized,
        code=code,
        expires_at=expires_at,
    )


async def verify_code(db: AsyncSession, email: str, code: str) -> uuid.UUID:
    """Redeem a login code.

    Args:
        db: Async database session.
        email: Address the code was sent to.
        code: Code as typed by the user.

    Returns:
        ID of the user the code belongs to.

    Raises:
        UserNotFoundError: No user for this email.
        InvalidCodeError: No token matches the code.
        CodeAlreadyUsedError: The token was already redeemed, possibly by a
            concurrent request.
        CodeExpiredError: The token is past its expiry.
    """
    user = await UserRepository.get_by_email(db, normalize_email(email))
    if user is None:
        logger.info("Login code verification failed: unknown email")
        raise UserNotFoundError()

    token = await LoginTokenRepository.get_latest(
        db, user_id=user.id, code_hash=digest(code.strip())
    )
    if token is None:
        logger.info("Login code verification failed for user %s: invalid", user.id)
        raise InvalidCodeError()

    if token.used:
        logger.info("Login code verification failed for user %s: reused", user.id)
        raise CodeAlreadyUsedError()

    if _now() >= _as_utc(token.expires_at):
        logger.info("Login code verification failed for user %s: expired", user.id)
        raise CodeExpiredError()

    if not await LoginTokenRepository.mark_used(db, token.id):
        logger.info("Login code verification lost redemption race for user %s", user.id)
        raise CodeAlreadyUsedError()

    return user.id
