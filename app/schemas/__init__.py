from app.schemas.note import NoteCreateSchema, NoteOutSchema, NoteUpdateSchema
from app.schemas.reward import RewardOutSchema, StreakStatusSchema
from app.schemas.todo import TodoCreateSchema, TodoOutSchema, TodoUpdateSchema, TodoUpdatedSchema
from app.schemas.user import CredentialsSchema, LoginOutSchema, UserOutSchema

__all__ = [
    "CredentialsSchema",
    "LoginOutSchema",
    "NoteCreateSchema",
    "NoteOutSchema",
    "NoteUpdateSchema",
    "RewardOutSchema",
    "StreakStatusSchema",
    "TodoCreateSchema",
    "TodoOutSchema",
    "TodoUpdateSchema",
    "TodoUpdatedSchema",
    "UserOutSchema",
]
