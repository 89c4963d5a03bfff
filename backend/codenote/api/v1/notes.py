"""Notes API router.

CRUD on the current user's notes. All queries are scoped by owner, so
another user's note id answers 404 exactly like a missing one.
"""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import Response

from codenote.api.deps import CurrentIdentity, DbSession
from codenote.core.errors import NotFoundError
from codenote.core.responses import CollectionMeta, DataResponse, ListResponse
from codenote.models.note import Note
from codenote.repositories.note_repository import NoteRepository

router = APIRouter()

_MAX_CONTENT_LENGTH = 100_000


# =============================================================================
# Request/Response Schemas
# =============================================================================


class NoteRequest(BaseModel):
    """Request body for creating or editing a note."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(max_length=_MAX_CONTENT_LENGTH)


# =============================================================================
# Helper Functions
# =============================================================================


def _note_to_dict(note: Note) -> dict:
    """Convert Note model to API response dict."""
    return {
        "id": note.id,
        "content": note.content,
        "created_at": note.created_at.isoformat(),
        "updated_at": note.updated_at.isoformat(),
    }


# =============================================================================
# Endpoints
# =============================================================================


@router.get("")
async def list_notes(
    identity: CurrentIdentity,
    db: DbSession,
) -> ListResponse[dict]:
    """List the current user's notes, newest first."""
    notes = await NoteRepository.list_for_user(db, identity.id)
    return ListResponse(
        data=[_note_to_dict(n) for n in notes],
        meta=CollectionMeta(total=len(notes)),
    )


@router.post("", status_code=201)
async def create_note(
    body: NoteRequest,
    identity: CurrentIdentity,
    db: DbSession,
) -> DataResponse[dict]:
    """Create a note for the current user."""
    note = await NoteRepository.create(db, user_id=identity.id, content=body.content)
    await db.commit()
    return DataResponse(data=_note_to_dict(note))


@router.patch("/{note_id}")
async def update_note(
    note_id: int,
    body: NoteRequest,
    identity: CurrentIdentity,
    db: DbSession,
) -> DataResponse[dict]:
    """Replace a note's content.

    Raises:
        NotFoundError: If the note does not exist or belongs to another user.
    """
    note = await NoteRepository.update(db, note_id, identity.id, content=body.content)
    if note is None:
        raise NotFoundError("Note", str(note_id))
    await db.commit()
    return DataResponse(data=_note_to_dict(note))


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: int,
    identity: CurrentIdentity,
    db: DbSession,
) -> Response:
    """Delete a note.

    Raises:
        NotFoundError: If the note does not exist or belongs to another user.
    """
    deleted = await NoteRepository.delete(db, note_id, identity.id)
    if not deleted:
        raise NotFoundError("Note", str(note_id))
    await db.commit()
    return Response(status_code=204)
