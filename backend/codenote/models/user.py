"""User model - authentication foundation.

Users are created lazily on their first login code request and never
deleted by the auth flow.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codenote.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from codenote.models.login_token import LoginToken
    from codenote.models.note import Note

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class User(Base, TimestampMixin):
    """User account identified by email.

    Attributes:
        id: UUID primary key.
        email: Unique, lower-cased email address.
        created_at: Account creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    # Relationships
    login_tokens: Mapped[list["LoginToken"]] = relationship(
        "LoginToken",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )
    notes: Mapped[list["Note"]] = relationship(
        "Note",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )
