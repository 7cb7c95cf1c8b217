"""
Gamification state repository - Data access layer for GamificationStateRecord.
"""
from typing import Optional
from sqlalchemy.orm import Session

from jobtracker.models import GamificationStateRecord


class GamificationStateRepository:
    """Repository for GamificationStateRecord data access"""

    @staticmethod
    def get_by_user(
        db: Session,
        user_id: int,
        for_update: bool = False
    ) -> Optional[GamificationStateRecord]:
        """Get the state row for a user, optionally locking it until commit"""
        query = db.query(GamificationStateRecord).filter(
            GamificationStateRecord.user_id == user_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def create(db: Session, record: GamificationStateRecord) -> GamificationStateRecord:
        """Create the state row for a user"""
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
