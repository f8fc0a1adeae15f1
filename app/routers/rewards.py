"""Reward routes: claim the daily streak, read the current one."""
from fastapi import APIRouter

from app.routers.deps import CurrentUser, DbSession, Today, ensure_self_or_admin
from app.schemas.reward import RewardOutSchema, StreakStatusSchema
from app.services.accounts import get_user
from app.services.streak import REWARD_MESSAGE, claim_daily

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.post("/daily/{user_id}", response_model=RewardOutSchema)
async def claim_daily_reward(user_id: int, db: DbSession, current_user: CurrentUser, today: Today):
    """Claim today's streak credit. Repeated claims on the same day leave the streak unchanged."""
    ensure_self_or_admin(current_user, user_id)
    streak = await claim_daily(db, user_id, today)
    return RewardOutSchema(streak=streak, message=REWARD_MESSAGE)


@router.get("/{user_id}", response_model=StreakStatusSchema)
async def get_streak(user_id: int, db: DbSession, current_user: CurrentUser):
    ensure_self_or_admin(current_user, user_id)
    user = await get_user(db, user_id)
    return StreakStatusSchema(
        user_id=user.id,
        streak=user.streak or 0,
        last_completed_date=user.last_completed_date,
    )
