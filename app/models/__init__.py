from app.models.user import User
from app.models.todo import Todo
from app.models.note import Note

__all__ = ["User", "Todo", "Note"]
