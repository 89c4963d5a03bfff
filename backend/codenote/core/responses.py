"""JSON envelopes shared by every endpoint.

Successful responses wrap their payload in ``data`` (plus ``meta`` for
collections); failures wrap an ErrorDetail in ``error``. Clients can tell
the two apart by key alone.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class CollectionMeta(BaseModel):
    """Metadata returned next to a collection.

    Attributes:
        total: Number of items in ``data``. Note lists are not paginated.
    """

    total: int


class DataResponse(BaseModel, Generic[T]):
    """Envelope for a single object: ``{"data": ...}``."""

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Envelope for a collection: ``{"data": [...], "meta": {...}}``."""

    data: list[T]
    meta: CollectionMeta


class ErrorDetail(BaseModel):
    """Body of the ``error`` key.

    Attributes:
        code: Stable identifier such as ``CODE_EXPIRED`` or ``NOT_FOUND``.
        message: Text safe to show to the user.
        details: Field-level problems for validation failures, else None.
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Envelope for failures: ``{"error": {...}}``."""

    error: ErrorDetail
