"""Tests for the stateless session credential codec.

Credentials bind a user id to the user's current email and the server
secret. Decoding must never raise; every failure resolves to ANONYMOUS.
"""

import base64
import json
from dataclasses import dataclass

import pytest

from codenote.core.hashing import digest
from codenote.core.session_codec import ANONYMOUS, Resolved, SessionCodec

_SECRET = "codec-test-secret-with-enough-length-0123"
_OTHER_SECRET = "some-other-secret-with-enough-length-4567"
_USER_ID = "1"
_EMAIL = "user@example.com"


@dataclass
class _FakeUser:
    id: str
    email: str


def _lookup_for(*users: _FakeUser):
    """Build an async lookup over an in-memory user table."""
    table = {u.id: u for u in users}
    calls: list[str] = []

    async def lookup(user_id: str) -> _FakeUser | None:
        calls.append(user_id)
        return table.get(user_id)

    lookup.calls = calls  # type: ignore[attr-defined]
    return lookup


def _b64(payload: bytes) -> str:
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")


@pytest.fixture
def codec() -> SessionCodec:
    return SessionCodec(_SECRET)


@pytest.fixture
def user() -> _FakeUser:
    return _FakeUser(id=_USER_ID, email=_EMAIL)


class TestEncode:
    """Tests for SessionCodec.encode()."""

    def test_payload_carries_id_and_tag(self, codec):
        """Decoded payload holds the id and digest(email:id:secret)."""
        credential = codec.encode(_USER_ID, _EMAIL)
        padded = credential + "=" * (-len(credential) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded))

        assert payload == {
            "id": _USER_ID,
            "h": digest(f"{_EMAIL}:{_USER_ID}:{_SECRET}"),
        }

    def test_credential_is_cookie_safe(self, codec):
        """No padding, quotes, separators, or whitespace in the value."""
        credential = codec.encode("4f1b2c3d-0000-4000-8000-000000000abc", _EMAIL)
        assert credential.isascii()
        for forbidden in ("=", ";", ",", " ", '"', "\\", "+", "/"):
            assert forbidden not in credential

    def test_non_string_id_is_stringified(self, codec):
        """Integer ids are encoded the same as their string form."""
        assert codec.encode(1, _EMAIL) == codec.encode("1", _EMAIL)

    def test_tag_depends_on_email_and_secret(self, codec):
        """Changing the email or secret changes the tag."""
        assert codec.tag(_USER_ID, _EMAIL) != codec.tag(_USER_ID, "x@example.com")
        assert codec.tag(_USER_ID, _EMAIL) != SessionCodec(_OTHER_SECRET).tag(
            _USER_ID, _EMAIL
        )


class TestDecode:
    """Tests for SessionCodec.decode()."""

    async def test_round_trip_resolves_user(self, codec, user):
        """A freshly encoded credential resolves to its user."""
        credential = codec.encode(user.id, user.email)

        result = await codec.decode(credential, _lookup_for(user))

        assert result == Resolved(id=_USER_ID, email=_EMAIL)

    async def test_missing_credential_is_anonymous(self, codec, user):
        """None and empty string resolve to ANONYMOUS without a lookup."""
        lookup = _lookup_for(user)

        assert await codec.decode(None, lookup) is ANONYMOUS
        assert await codec.decode("", lookup) is ANONYMOUS
        assert lookup.calls == []

    async def test_wrong_secret_is_anonymous(self, user):
        """A credential minted under another secret is rejected."""
        credential = SessionCodec(_OTHER_SECRET).encode(user.id, user.email)

        result = await SessionCodec(_SECRET).decode(credential, _lookup_for(user))

        assert result is ANONYMOUS

    async def test_email_change_invalidates(self, codec, user):
        """After the user's email changes, old credentials stop resolving."""
        credential = codec.encode(user.id, user.email)
        user.email = "changed@example.com"

        assert await codec.decode(credential, _lookup_for(user)) is ANONYMOUS

    async def test_unknown_user_is_anonymous(self, codec):
        """A well-formed credential for a missing user is rejected."""
        credential = codec.encode("42", _EMAIL)

        assert await codec.decode(credential, _lookup_for()) is ANONYMOUS

    async def test_forged_tag_is_anonymous(self, codec, user):
        """A hand-built payload with a guessed tag is rejected."""
        forged = _b64(
            json.dumps({"id": _USER_ID, "h": digest(f"{_EMAIL}:{_USER_ID}:")}).encode()
        )

        assert await codec.decode(forged, _lookup_for(user)) is ANONYMOUS

    async def test_swapped_id_is_anonymous(self, codec, user):
        """Reusing one user's tag with another user's id is rejected."""
        other = _FakeUser(id="2", email="other@example.com")
        tag = codec.tag(_USER_ID, _EMAIL)
        forged = _b64(json.dumps({"id": "2", "h": tag}).encode())

        assert await codec.decode(forged, _lookup_for(user, other)) is ANONYMOUS

    @pytest.mark.parametrize(
        "credential",
        [
            "not base64 at all!!",
            "%%%%",
            _b64(b"\xff\xfe\xfd"),
            _b64(b"not json"),
            _b64(b"[1, 2, 3]"),
            _b64(b'"just a string"'),
            _b64(b"{}"),
            _b64(b'{"id": "1"}'),
            _b64(b'{"h": "abc"}'),
            _b64(b'{"id": 1, "h": "abc"}'),
            _b64(b'{"id": "1", "h": null}'),
            _b64(b'{"id": "", "h": ""}'),
            _b64(b"[" * 5000),
        ],
    )
    async def test_malformed_input_is_anonymous(self, codec, user, credential):
        """Garbage never raises and never reaches a valid identity."""
        assert await codec.decode(credential, _lookup_for(user)) is ANONYMOUS

    async def test_padded_credential_still_decodes(self, codec, user):
        """Re-adding stripped padding does not break decoding."""
        credential = codec.encode(user.id, user.email)
        padded = credential + "=" * (-len(credential) % 4)

        result = await codec.decode(padded, _lookup_for(user))

        assert isinstance(result, Resolved)
