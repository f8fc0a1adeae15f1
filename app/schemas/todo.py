"""Pydantic schemas for todos."""
import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.reward import RewardOutSchema

Importance = Literal["high", "normal", "low"]


class TodoCreateSchema(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    date: dt.date
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    importance: Importance = "normal"


class TodoUpdateSchema(BaseModel):
    """Every field is optional; only the ones sent are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    date: dt.date | None = None
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    importance: Importance | None = None
    completed: bool | None = None


class TodoOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: str | None = None
    date: dt.date
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    importance: str
    completed: bool
    completed_at: dt.datetime | None = None
    created_at: dt.datetime | None = None


class TodoUpdatedSchema(TodoOutSchema):
    # present when this update cleared the last pending task for today
    reward: RewardOutSchema | None = None
