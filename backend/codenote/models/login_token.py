"""Login token model - emailed one-time codes.

Stores the SHA-256 digest of each issued code, never the code itself.
Tokens are single-use and time-limited. Several may exist per user; the
one with the highest id wins when digests collide.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codenote.models.base import Base

if TYPE_CHECKING:
    from codenote.models.user import User


class LoginToken(Base):
    """One-time login code record.

    Attributes:
        id: Monotonic integer primary key (recency order).
        user_id: Owning user.
        code_hash: SHA-256 hex digest of the 6-digit code.
        expires_at: Instant after which the code is rejected.
        used: Flipped to True exactly once on redemption.
        created_at: Insert timestamp.
    """

    __tablename__ = "login_tokens"
    __table_args__ = (
        Index("idx_login_tokens_user_code_hash", "user_id", "code_hash"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    code_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    used: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="login_tokens")
