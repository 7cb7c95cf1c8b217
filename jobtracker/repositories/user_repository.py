"""
User repository - Data access layer for User model.
"""
from typing import Optional
from sqlalchemy.orm import Session

from jobtracker.models import User


class UserRepository:
    """Repository for User data access"""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_by_api_key(db: Session, api_key: str) -> Optional[User]:
        return db.query(User).filter(User.api_key == api_key).first()

    @staticmethod
    def create(db: Session, user: User) -> User:
        """Create new user"""
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
