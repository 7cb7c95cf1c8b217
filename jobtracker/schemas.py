from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import Optional, List

from jobtracker.constants import APPLICATION_STATUSES, STATUS_APPLIED
from jobtracker.domain import GamificationState, Milestone, RankSummary


def _check_status(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in APPLICATION_STATUSES:
        raise ValueError(f"status must be one of {', '.join(APPLICATION_STATUSES)}")
    return value


def _check_not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value.strip() if value is not None else value


# User schemas
class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class UserResponse(BaseModel):
    id: int
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserCreatedResponse(UserResponse):
    api_key: str


# Application schemas
class ApplicationBase(BaseModel):
    company: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    date_applied: Optional[date] = None  # Defaults to today
    contact_person: Optional[str] = None
    status: str = Field(default=STATUS_APPLIED)  # applied, interview, offered, rejected, accepted
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value):
        return _check_status(value)

    @field_validator("company", "position")
    @classmethod
    def validate_not_blank(cls, value):
        return _check_not_blank(value)


class ApplicationCreate(ApplicationBase):
    pass


class ApplicationUpdate(BaseModel):
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    position: Optional[str] = Field(None, min_length=1, max_length=200)
    date_applied: Optional[date] = None
    contact_person: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value):
        return _check_status(value)

    @field_validator("company", "position")
    @classmethod
    def validate_not_blank(cls, value):
        return _check_not_blank(value)


class ApplicationImportItem(BaseModel):
    """Lenient import row: missing fields fall back to defaults"""
    company: str = ""
    position: str = ""
    date_applied: Optional[date] = None
    contact_person: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value):
        return _check_status(value)


class ApplicationResponse(BaseModel):
    id: int
    company: str
    position: str
    date_applied: Optional[date]
    contact_person: Optional[str]
    status: str
    notes: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationStatsResponse(BaseModel):
    total: int
    applied: int = 0
    interview: int = 0
    offered: int = 0
    rejected: int = 0
    accepted: int = 0


# Gamification schemas
class GamificationOutcomeResponse(BaseModel):
    """State after an action plus the milestones it triggered"""
    state: GamificationState
    summary: RankSummary
    milestones: List[Milestone] = []


class ApplicationActionResponse(BaseModel):
    application: ApplicationResponse
    gamification: Optional[GamificationOutcomeResponse] = None


class ApplicationImportResponse(BaseModel):
    imported: int
    applications: List[ApplicationResponse]
    gamification: GamificationOutcomeResponse


class CurrentMilestoneResponse(BaseModel):
    milestone: Optional[Milestone] = None
    pending: int = 0
