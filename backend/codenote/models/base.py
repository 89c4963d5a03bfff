"""Declarative base and shared columns for codenote tables."""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Every ``datetime`` annotation maps to a timezone-aware column; all
    stored instants are UTC.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Database-maintained ``created_at`` / ``updated_at`` columns.

    Both default to ``now()`` on insert. ``updated_at`` is refreshed by the
    ORM on every UPDATE it issues (bulk statements bypass it).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
