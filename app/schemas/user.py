"""Pydantic schemas for accounts and auth."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class CredentialsSchema(BaseModel):
    email: str
    password: str


class EmailSchema(BaseModel):
    email: str


class NewPasswordSchema(BaseModel):
    password: str


class UserOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str


class UserCreatedSchema(BaseModel):
    message: str
    user: UserOutSchema


class LoginOutSchema(BaseModel):
    message: str
    user: UserOutSchema
    access_token: str
    token_type: str = "bearer"


class AdminUserRowSchema(BaseModel):
    id: int
    email: str
    role: str
    created_at: datetime | None = None
    streak: int = 0
    last_completed_date: date | None = None
    tasks_count: int = 0
    notes_count: int = 0


class MessageSchema(BaseModel):
    message: str
