"""Note routes."""
from fastapi import APIRouter, status

from app.routers.deps import CurrentUser, DbSession, ensure_self_or_admin
from app.schemas.note import NoteCreateSchema, NoteOutSchema, NoteUpdateSchema
from app.schemas.user import MessageSchema
from app.services import notes as note_service

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("/{user_id}", response_model=list[NoteOutSchema])
async def list_notes(user_id: int, db: DbSession, current_user: CurrentUser):
    """Notes of one user, newest first."""
    ensure_self_or_admin(current_user, user_id)
    return await note_service.list_notes(db, user_id)


@router.post("", response_model=NoteOutSchema, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteCreateSchema, db: DbSession, current_user: CurrentUser):
    return await note_service.create_note(db, current_user.id, body)


@router.put("/{note_id}", response_model=NoteOutSchema)
async def update_note(note_id: int, body: NoteUpdateSchema, db: DbSession, current_user: CurrentUser):
    note = await note_service.get_note(db, note_id, current_user)
    return await note_service.update_note(db, note, body)


@router.delete("/{note_id}", response_model=MessageSchema)
async def delete_note(note_id: int, db: DbSession, current_user: CurrentUser):
    note = await note_service.get_note(db, note_id, current_user)
    await note_service.delete_note(db, note)
    return MessageSchema(message="Note deleted")
