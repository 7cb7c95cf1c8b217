"""
User registration and API key lookup.
"""
import logging
import secrets
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobtracker.exceptions import DuplicateUserException
from jobtracker.models import User
from jobtracker.repositories.user_repository import UserRepository

logger = logging.getLogger("job_tracker.users")


class UserService:
    """Service for user accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, email: str) -> User:
        """
        Create a user with a freshly issued API key.

        Raises:
            DuplicateUserException: If the email is already registered
        """
        email = email.strip().lower()
        if self.repo.get_by_email(self.db, email):
            raise DuplicateUserException(email)

        user = User(email=email, api_key=secrets.token_urlsafe(32))
        try:
            user = self.repo.create(self.db, user)
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUserException(email)

        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, api_key: Optional[str]) -> Optional[User]:
        """User owning the API key, or None"""
        if not api_key:
            return None
        return self.repo.get_by_api_key(self.db, api_key)
