"""Pydantic schemas for the daily streak reward."""
from datetime import date

from pydantic import BaseModel


class RewardOutSchema(BaseModel):
    streak: int
    message: str


class StreakStatusSchema(BaseModel):
    user_id: int
    streak: int
    last_completed_date: date | None = None
