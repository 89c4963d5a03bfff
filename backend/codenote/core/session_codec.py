"""Stateless session credential codec.

A credential is the URL-safe base64 encoding of ``{"id": ..., "h": ...}``
where ``h`` is ``digest(email + ":" + id + ":" + secret)``. Nothing is stored
server-side: the tag is recomputed from the user's current email on every
request and compared with the one in the cookie.

Consequences:
- Readable but not forgeable without the secret
- Changing the user's email invalidates that user's credentials
- Rotating the secret invalidates every credential at once

Decoding never raises. Every failure (missing cookie, bad base64, bad JSON,
unknown user, tag mismatch) resolves to ``ANONYMOUS``.
"""

import base64
import binascii
import hmac
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from codenote.core.hashing import digest

logger = logging.getLogger(__name__)


class _HasEmail(Protocol):
    id: Any
    email: str


@dataclass(frozen=True)
class Resolved:
    """A credential that verified against current user state.

    Attributes:
        id: User primary key as returned by the lookup.
        email: User email the tag was checked against.
    """

    id: Any
    email: str


@dataclass(frozen=True)
class Anonymous:
    """No identity could be established."""


ANONYMOUS = Anonymous()

SessionResolution = Resolved | Anonymous

UserLookup = Callable[[str], Awaitable[_HasEmail | None]]


class SessionCodec:
    """Build and verify session credentials bound to a server secret.

    The secret is injected at construction so callers decide where it comes
    from (settings in the app, a literal in tests).
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def tag(self, user_id: str, email: str) -> str:
        """Compute the integrity tag for a user id and email."""
        return digest(f"{email}:{user_id}:{self._secret}")

    def encode(self, user_id: Any, email: str) -> str:
        """Build the credential for a user.

        Args:
            user_id: User primary key (stringified into the payload).
            email: The user's current email.

        Returns:
            ASCII-safe credential suitable for a cookie value.
        """
        uid = str(user_id)
        payload = json.dumps({"id": uid, "h": self.tag(uid, email)}, separators=(",", ":"))
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")

    @staticmethod
    def _parse(credential: str) -> tuple[str, str] | None:
        """Reverse the transport encoding, returning (id, tag) or None."""
        padded = credential + "=" * (-len(credential) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError, RecursionError):
            # RecursionError: json.loads on deeply nested arrays
            return None

        if not isinstance(payload, dict):
            return None
        user_id = payload.get("id")
        tag = payload.get("h")
        if not isinstance(user_id, str) or not isinstance(tag, str):
            return None
        if not user_id or not tag:
            return None
        return user_id, tag

    async def decode(
        self, credential: str | None, lookup: UserLookup
    ) -> SessionResolution:
        """Resolve a credential to an identity.

        Args:
            credential: Raw cookie value, or None if the cookie was absent.
            lookup: Async callable returning the user for an id, or None.

        Returns:
            Resolved identity, or ANONYMOUS for any failure.
        """
        if not credential:
            return ANONYMOUS

        parsed = self._parse(credential)
        if parsed is None:
            logger.debug("Malformed session credential")
            return ANONYMOUS
        user_id, presented_tag = parsed

        user = await lookup(user_id)
        if user is None:
            return ANONYMOUS

        expected = self.tag(user_id, user.email)
        if not hmac.compare_digest(expected, presented_tag):
            logger.debug("Session credential tag mismatch")
            return ANONYMOUS

        return Resolved(id=user.id, email=user.email)
