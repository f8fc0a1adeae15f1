"""Daily streak reward: the claim transition and the "all of today's tasks done" check.

A user's reward state is the pair (streak, last_completed_date) on the users row.
Claiming on a given day moves it as follows:

    never claimed            -> 1
    claimed yesterday        -> streak + 1
    already claimed today    -> streak (same-day re-claims are no-ops)
    anything else            -> 1 (a gap of two or more days, or a future date)

and last_completed_date becomes the claim day.
"""
import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import NotFound
from app.models.todo import Todo
from app.models.user import User

logger = logging.getLogger(__name__)

REWARD_MESSAGE = "Daily reward updated!"

# One lock per user id while claims for that user are in flight; claims for
# the same user run one at a time. Entries are dropped when the last claim leaves.
_claim_locks: dict[int, asyncio.Lock] = {}
_claim_waiters: dict[int, int] = {}


@asynccontextmanager
async def _user_lock(user_id: int) -> AsyncIterator[None]:
    lock = _claim_locks.setdefault(user_id, asyncio.Lock())
    _claim_waiters[user_id] = _claim_waiters.get(user_id, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _claim_waiters[user_id] -= 1
        if not _claim_waiters[user_id]:
            del _claim_waiters[user_id]
            del _claim_locks[user_id]


def current_date(settings: Settings) -> date:
    """Current calendar date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def next_streak(streak: int, last_completed_date: date | None, today: date) -> int:
    """Return the streak after claiming on `today`."""
    if last_completed_date is None:
        return 1
    if last_completed_date == today - timedelta(days=1):
        return (streak or 0) + 1
    if last_completed_date == today:
        return streak or 0
    return 1


async def claim_daily(db: AsyncSession, user_id: int, today: date) -> int:
    """Record today's claim for the user and return the resulting streak.

    Raises NotFound if the user does not exist.
    """
    async with _user_lock(user_id):
        # another claim may have committed while we waited on the lock
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound("User not found")

        previous = user.streak or 0
        user.streak = next_streak(previous, user.last_completed_date, today)
        user.last_completed_date = today
        await db.commit()

    logger.info("Daily claim for user %s on %s: streak %s -> %s", user_id, today, previous, user.streak)
    return user.streak


async def pending_count(db: AsyncSession, user_id: int, day: date) -> int:
    """Number of the user's todos scheduled for `day` that are not completed."""
    result = await db.execute(
        select(func.count(Todo.id)).where(
            Todo.user_id == user_id,
            Todo.date == day,
            Todo.completed == False,  # noqa: E712
        )
    )
    return result.scalar_one()


async def check_day_cleared(db: AsyncSession, todo: Todo, just_completed: bool, today: date) -> int | None:
    """Claim the daily reward if this update finished the owner's last pending task for today.

    Fires only when the update moved `todo` to completed, the todo is scheduled
    for `today`, nothing else is pending that day, and today has not been
    claimed yet. Returns the new streak when a claim was made, None otherwise.
    A user with no tasks today never gets here, so an empty day earns nothing.
    """
    if not just_completed or todo.date != today:
        return None
    result = await db.execute(select(User.last_completed_date).where(User.id == todo.user_id))
    if result.scalar_one_or_none() == today:
        return None
    if await pending_count(db, todo.user_id, todo.date) != 0:
        return None
    return await claim_daily(db, todo.user_id, todo.date)
