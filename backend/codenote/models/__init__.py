"""SQLAlchemy ORM models for codenote.

All models are exported from this module for convenient imports:
    from codenote.models import User, LoginToken, Note

Models:
- user.py: User
- login_token.py: LoginToken (hashed one-time codes)
- note.py: Note
"""

from codenote.models.base import Base, TimestampMixin
from codenote.models.login_token import LoginToken
from codenote.models.note import Note
from codenote.models.user import User

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Auth
    "User",
    "LoginToken",
    # Content
    "Note",
]
