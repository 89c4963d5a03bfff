"""Note model - a user's private text note."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codenote.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from codenote.models.user import User


class Note(Base, TimestampMixin):
    """Text note owned by exactly one user.

    Every query on this table must filter by user_id.

    Attributes:
        id: Integer primary key.
        user_id: Owning user.
        content: Note body.
        created_at: Creation timestamp (from TimestampMixin).
        updated_at: Last edit timestamp (from TimestampMixin).
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="notes")
