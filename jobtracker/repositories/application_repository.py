"""
Application repository - Data access layer for Application model.
Every query is scoped to the owning user.
"""
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobtracker.models import Application


class ApplicationRepository:
    """Repository for Application data access"""

    @staticmethod
    def get_by_id(db: Session, user_id: int, application_id: int) -> Optional[Application]:
        """Get a user's application by ID"""
        return db.query(Application).filter(
            Application.id == application_id,
            Application.user_id == user_id
        ).first()

    @staticmethod
    def get_all(db: Session, user_id: int, status: Optional[str] = None) -> List[Application]:
        """Get a user's applications, newest first, optionally filtered by status"""
        query = db.query(Application).filter(Application.user_id == user_id)
        if status:
            query = query.filter(Application.status == status)
        return query.order_by(Application.date_applied.desc(), Application.id.desc()).all()

    @staticmethod
    def count_by_status(db: Session, user_id: int) -> dict:
        """Map of status -> number of applications"""
        rows = db.query(Application.status, func.count(Application.id)).filter(
            Application.user_id == user_id
        ).group_by(Application.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def add(db: Session, application: Application) -> Application:
        """Stage a new application (caller commits)"""
        db.add(application)
        db.flush()
        return application

    @staticmethod
    def add_all(db: Session, applications: List[Application]) -> List[Application]:
        """Stage several applications (caller commits)"""
        db.add_all(applications)
        db.flush()
        return applications

    @staticmethod
    def delete(db: Session, application: Application) -> None:
        """Delete an application"""
        db.delete(application)
        db.commit()
