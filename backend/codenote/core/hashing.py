"""One-way digest shared by login code storage and session integrity tags."""

import hashlib


def digest(value: str) -> str:
    """Return the SHA-256 hex digest of ``value``.

    The digest carries no key of its own. Callers that need a keyed tag
    concatenate the secret into ``value``.

    Args:
        value: Arbitrary text (encoded as UTF-8).

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
