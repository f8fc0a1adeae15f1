"""Todo persistence: create, list, merge-update, delete."""
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.todo import Todo
from app.models.user import User
from app.schemas.todo import TodoCreateSchema, TodoUpdateSchema


async def list_todos(db: AsyncSession, user_id: int) -> list[Todo]:
    result = await db.execute(select(Todo).where(Todo.user_id == user_id).order_by(Todo.id.asc()))
    return list(result.scalars().all())


async def get_todo(db: AsyncSession, todo_id: int, actor: User) -> Todo:
    """Load a todo the actor may touch; other users' todos look absent unless the actor is an admin."""
    result = await db.execute(select(Todo).where(Todo.id == todo_id))
    todo = result.scalar_one_or_none()
    if todo is None or (todo.user_id != actor.id and not actor.is_admin):
        raise NotFound("Todo not found")
    return todo


async def create_todo(db: AsyncSession, user_id: int, body: TodoCreateSchema) -> Todo:
    todo = Todo(user_id=user_id, completed=False, **body.model_dump())
    db.add(todo)
    await db.commit()
    await db.refresh(todo)
    return todo


async def update_todo(db: AsyncSession, todo: Todo, body: TodoUpdateSchema) -> bool:
    """Apply the fields present in `body`; return True if this moved the todo to completed."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    completed = changes.pop("completed", None)
    for field, value in changes.items():
        setattr(todo, field, value)

    just_completed = False
    if completed is True and not todo.completed:
        todo.completed = True
        todo.completed_at = datetime.now(timezone.utc)
        just_completed = True
    elif completed is False and todo.completed:
        todo.completed = False
        todo.completed_at = None

    await db.commit()
    await db.refresh(todo)
    return just_completed


async def delete_todo(db: AsyncSession, todo: Todo) -> None:
    await db.delete(todo)
    await db.commit()
