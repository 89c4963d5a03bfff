"""Session lifetime policy and cookie management.

Shared helpers used by the auth endpoints:
- SessionDuration / resolve_duration: user-chosen lifetime for the cookie
- set_session_cookie / clear_session_cookie: cookie attributes in one place
"""

import logging
from datetime import timedelta
from enum import StrEnum

from fastapi import Response

from codenote.core.config import settings

logger = logging.getLogger(__name__)


class SessionDuration(StrEnum):
    """Session lifetimes a user can pick after signing in."""

    ONE_DAY = "1day"
    SIXTY_DAYS = "60days"
    ALWAYS = "always"


_LIFETIMES: dict[SessionDuration, timedelta] = {
    SessionDuration.ONE_DAY: timedelta(days=1),
    SessionDuration.SIXTY_DAYS: timedelta(days=60),
    # "always" is approximated as ten years
    SessionDuration.ALWAYS: timedelta(days=3650),
}

# Lifetime of the cookie issued right after a code is verified, before the
# user has picked a duration.
DEFAULT_SESSION_DURATION = SessionDuration.ONE_DAY


def resolve_duration(choice: str) -> timedelta:
    """Map a duration choice to a concrete cookie lifetime.

    Unrecognized values fall back to the ``always`` lifetime. The HTTP
    boundary only admits known values; this fallback covers internal callers.

    Args:
        choice: One of ``"1day"``, ``"60days"``, ``"always"``.

    Returns:
        Lifetime to apply to the session cookie.
    """
    try:
        duration = SessionDuration(choice)
    except ValueError:
        logger.info("Unknown session duration %r, using 'always'", choice)
        duration = SessionDuration.ALWAYS
    return _LIFETIMES[duration]


def set_session_cookie(response: Response, credential: str, lifetime: timedelta) -> None:
    """Set the httpOnly session cookie on a response.

    Security: httpOnly prevents XSS cookie theft. Secure flag and SameSite
    are configured via settings for environment-appropriate security.

    Args:
        response: FastAPI response object.
        credential: Encoded session credential.
        lifetime: Max-Age of the cookie.
    """
    response.set_cookie(
        key=settings.session_cookie_name,
        value=credential,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        path="/",
        max_age=int(lifetime.total_seconds()),
        domain=settings.session_cookie_domain or None,
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie.

    Cookie attributes must match set_session_cookie() for the browser to
    delete it.
    """
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        domain=settings.session_cookie_domain or None,
    )
