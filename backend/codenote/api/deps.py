"""Shared dependencies for API endpoints.

Identity resolution runs ahead of every protected endpoint: the session
cookie is decoded by SessionCodec against the current user row, and the
outcome (Resolved or ANONYMOUS) is attached to ``request.state.identity``.
Resolution itself never fails; endpoints that need a user depend on
``require_identity`` which turns ANONYMOUS into a 401.

WHY DEPENDENCY INJECTION:
- Consistent auth across all endpoints
- Secret comes from settings in one place, not read inside the codec
- Testable with dependency overrides
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from codenote.core.config import settings
from codenote.core.database import get_db
from codenote.core.errors import UnauthorizedError
from codenote.core.session_codec import (
    Anonymous,
    Resolved,
    SessionCodec,
    SessionResolution,
)
from codenote.models.user import User
from codenote.repositories.user_repository import UserRepository

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_session_codec() -> SessionCodec:
    """Build the codec with the configured server secret."""
    return SessionCodec(settings.session_secret.get_secret_value())


Codec = Annotated[SessionCodec, Depends(get_session_codec)]


async def resolve_identity(
    request: Request,
    db: DbSession,
    codec: Codec,
) -> SessionResolution:
    """Resolve the session cookie to an identity.

    Never raises: a missing, malformed, or tampered cookie, or one whose user
    no longer exists, resolves to ANONYMOUS.

    Args:
        request: HTTP request (injected by FastAPI).
        db: Database session for the user lookup (injected).
        codec: Session codec bound to the server secret (injected).

    Returns:
        Resolved identity or ANONYMOUS.
    """

    async def lookup(raw_id: str) -> User | None:
        try:
            user_id = uuid.UUID(raw_id)
        except ValueError:
            return None
        return await UserRepository.get_by_id(db, user_id)

    identity = await codec.decode(
        request.cookies.get(settings.session_cookie_name), lookup
    )
    request.state.identity = identity
    return identity


Identity = Annotated[SessionResolution, Depends(resolve_identity)]


async def require_identity(identity: Identity) -> Resolved:
    """Reject anonymous callers on protected endpoints.

    Args:
        identity: Outcome of resolve_identity (injected).

    Returns:
        The resolved identity.

    Raises:
        UnauthorizedError: If no valid session was presented.
    """
    if isinstance(identity, Anonymous):
        raise UnauthorizedError()
    return identity


# Reusable type alias for protected endpoints
CurrentIdentity = Annotated[Resolved, Depends(require_identity)]
