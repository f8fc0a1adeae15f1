"""Todo routes. Completing the last open task of today claims the daily reward."""
import logging

from fastapi import APIRouter, status

from app.routers.deps import CurrentUser, DbSession, Today, ensure_self_or_admin
from app.schemas.reward import RewardOutSchema
from app.schemas.todo import TodoCreateSchema, TodoOutSchema, TodoUpdateSchema, TodoUpdatedSchema
from app.schemas.user import MessageSchema
from app.services import todos as todo_service
from app.services.streak import REWARD_MESSAGE, check_day_cleared

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("/{user_id}", response_model=list[TodoOutSchema])
async def list_todos(user_id: int, db: DbSession, current_user: CurrentUser):
    ensure_self_or_admin(current_user, user_id)
    return await todo_service.list_todos(db, user_id)


@router.post("", response_model=TodoOutSchema, status_code=status.HTTP_201_CREATED)
async def create_todo(body: TodoCreateSchema, db: DbSession, current_user: CurrentUser):
    return await todo_service.create_todo(db, current_user.id, body)


@router.put("/{todo_id}", response_model=TodoUpdatedSchema)
async def update_todo(
    todo_id: int,
    body: TodoUpdateSchema,
    db: DbSession,
    current_user: CurrentUser,
    today: Today,
):
    """Merge the provided fields into the todo, then run the day-cleared check."""
    todo = await todo_service.get_todo(db, todo_id, current_user)
    just_completed = await todo_service.update_todo(db, todo, body)

    out = TodoUpdatedSchema.model_validate(todo)
    streak = await check_day_cleared(db, todo, just_completed, today)
    if streak is not None:
        logger.info("User %s cleared all tasks for %s", todo.user_id, todo.date)
        out.reward = RewardOutSchema(streak=streak, message=REWARD_MESSAGE)
    return out


@router.delete("/{todo_id}", response_model=MessageSchema)
async def delete_todo(todo_id: int, db: DbSession, current_user: CurrentUser):
    todo = await todo_service.get_todo(db, todo_id, current_user)
    await todo_service.delete_todo(db, todo)
    return MessageSchema(message="Todo deleted")
