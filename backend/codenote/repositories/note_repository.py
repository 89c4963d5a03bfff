"""Repository for Note CRUD operations.

Every method takes the owning user's id and filters on it, so a note id
belonging to another user behaves exactly like a missing one.
"""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codenote.models.note import Note


class NoteRepository:
    """Stateless repository for Note table operations.

    All methods are static; no instance state.
    """

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: uuid.UUID) -> list[Note]:
        """List a user's notes, newest first.

        Args:
            db: Async database session.
            user_id: Owning user.

        Returns:
            Notes owned by the user.
        """
        stmt = (
            select(Note)
            .where(Note.user_id == user_id)
            .order_by(Note.created_at.desc(), Note.id.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_for_user(
        db: AsyncSession, note_id: int, user_id: uuid.UUID
    ) -> Note | None:
        """Fetch a note only if the user owns it.

        Args:
            db: Async database session.
            note_id: Note primary key.
            user_id: Owning user.

        Returns:
            Note if found and owned, None otherwise.
        """
        stmt = select(Note).where(Note.id == note_id, Note.user_id == user_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, *, user_id: uuid.UUID, content: str) -> Note:
        """Create a note.

        Args:
            db: Async database session.
            user_id: Owning user.
            content: Note body.

        Returns:
            Created Note with database-generated fields populated.
        """
        note = Note(user_id=user_id, content=content)
        db.add(note)
        await db.flush()
        await db.refresh(note)
        return note

    @staticmethod
    async def update(
        db: AsyncSession, note_id: int, user_id: uuid.UUID, *, content: str
    ) -> Note | None:
        """Replace a note's content.

        Args:
            db: Async database session.
            note_id: Note primary key.
            user_id: Owning user.
            content: New note body.

        Returns:
            Updated Note, or None if not found or not owned.
        """
        note = await NoteRepository.get_for_user(db, note_id, user_id)
        if note is None:
            return None
        note.content = content
        await db.flush()
        await db.refresh(note)
        return note

    @staticmethod
    async def delete(db: AsyncSession, note_id: int, user_id: uuid.UUID) -> bool:
        """Delete a note.

        Args:
            db: Async database session.
            note_id: Note primary key.
            user_id: Owning user.

        Returns:
            True if a note was deleted, False if not found or not owned.
        """
        stmt = delete(Note).where(Note.id == note_id, Note.user_id == user_id)
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count == 1
