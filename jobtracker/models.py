from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey
from datetime import datetime, date

from jobtracker.database import Base
from jobtracker.constants import STATUS_APPLIED, DEFAULT_RANKS
from jobtracker.domain import GamificationState


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    api_key = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    company = Column(String, nullable=False)
    position = Column(String, nullable=False)
    date_applied = Column(Date, default=date.today)
    contact_person = Column(String, nullable=True)
    status = Column(String, default=STATUS_APPLIED)  # applied, interview, offered, rejected, accepted
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class GamificationStateRecord(Base):
    """Persisted gamification state, one row per user"""
    __tablename__ = "gamification_state"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    points = Column(Integer, default=0)
    streak_days = Column(Integer, default=0)
    last_activity = Column(Date, nullable=True)
    rank = Column(String, default=DEFAULT_RANKS[0][0])
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_domain(self) -> GamificationState:
        """Snapshot of this row as an immutable engine state"""
        return GamificationState(
            points=self.points or 0,
            streak_days=self.streak_days or 0,
            last_activity=self.last_activity,
            rank=self.rank,
        )

    def apply_domain(self, state: GamificationState) -> None:
        """Copy an engine state onto this row (caller commits)"""
        self.points = state.points
        self.streak_days = state.streak_days
        self.last_activity = state.last_activity
        self.rank = state.rank
