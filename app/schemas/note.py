"""Pydantic schemas for notes."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NoteCreateSchema(BaseModel):
    title: str | None = None
    content: str | None = None


class NoteUpdateSchema(BaseModel):
    title: str | None = None
    content: str | None = None


class NoteOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str | None = None
    content: str | None = None
    created_at: datetime
    updated_at: datetime
