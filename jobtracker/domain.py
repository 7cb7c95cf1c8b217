"""
Value types shared by the gamification engine.

All models are frozen: every engine call returns a fresh snapshot and
callers swap references instead of mutating in place.
"""
from enum import Enum
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from jobtracker.constants import (
    DEFAULT_RANKS,
    ACTION_CREATE_APPLICATION,
    ACTION_UPDATE_STATUS,
    ACTION_STREAK_BONUS,
    ACTION_BULK_IMPORT,
    ACTION_SESSION_START,
)


class StreakChange(str, Enum):
    START = "start"
    NO_CHANGE = "no_change"
    INCREMENT = "increment"
    RESET = "reset"


class GamificationState(BaseModel):
    points: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_activity: Optional[date] = None
    rank: str = DEFAULT_RANKS[0][0]

    class Config:
        frozen = True


class Action(BaseModel):
    """What happened. action_type is a plain string so unknown tags pass through."""
    action_type: str
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    count: int = 0

    class Config:
        frozen = True

    @classmethod
    def create_application(cls) -> "Action":
        return cls(action_type=ACTION_CREATE_APPLICATION)

    @classmethod
    def update_status(cls, old_status: Optional[str], new_status: Optional[str]) -> "Action":
        return cls(action_type=ACTION_UPDATE_STATUS, old_status=old_status, new_status=new_status)

    @classmethod
    def streak_bonus(cls) -> "Action":
        return cls(action_type=ACTION_STREAK_BONUS)

    @classmethod
    def bulk_import(cls, count: int) -> "Action":
        return cls(action_type=ACTION_BULK_IMPORT, count=count)

    @classmethod
    def session_start(cls) -> "Action":
        return cls(action_type=ACTION_SESSION_START)


class Milestone(BaseModel):
    type: str
    tier: str
    title: str
    message: str

    class Config:
        frozen = True


class NextRank(BaseModel):
    name: Optional[str] = None  # None at the top rank
    points_needed: int = 0

    class Config:
        frozen = True


class RankSummary(BaseModel):
    rank: str
    points: int
    streak: int
    progress_percent: int
    next_rank: Optional[str] = None
    points_to_next: int = 0

    class Config:
        frozen = True
