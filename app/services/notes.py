"""Note persistence."""
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.note import Note
from app.models.user import User
from app.schemas.note import NoteCreateSchema, NoteUpdateSchema


async def list_notes(db: AsyncSession, user_id: int) -> list[Note]:
    result = await db.execute(
        select(Note).where(Note.user_id == user_id).order_by(Note.created_at.desc(), Note.id.desc())
    )
    return list(result.scalars().all())


async def get_note(db: AsyncSession, note_id: int, actor: User) -> Note:
    result = await db.execute(select(Note).where(Note.id == note_id))
    note = result.scalar_one_or_none()
    if note is None or (note.user_id != actor.id and not actor.is_admin):
        raise NotFound("Note not found")
    return note


async def create_note(db: AsyncSession, user_id: int, body: NoteCreateSchema) -> Note:
    note = Note(user_id=user_id, title=body.title, content=body.content)
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note


async def update_note(db: AsyncSession, note: Note, body: NoteUpdateSchema) -> Note:
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(note, field, value)
    note.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(note)
    return note


async def delete_note(db: AsyncSession, note: Note) -> None:
    await db.delete(note)
    await db.commit()
