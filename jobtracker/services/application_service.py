"""
Application record service.
CRUD over a user's job applications; scored changes go through the
gamification service so the record and the new state commit together.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobtracker.constants import APPLICATION_STATUSES, STATUS_APPLIED, STATUS_FILTER_ALL
from jobtracker.domain import Action, GamificationState, Milestone
from jobtracker.exceptions import (
    ApplicationNotFoundException,
    DatabaseException,
    ValidationException,
)
from jobtracker.models import Application, User
from jobtracker.repositories.application_repository import ApplicationRepository
from jobtracker.schemas import ApplicationCreate, ApplicationImportItem, ApplicationUpdate
from jobtracker.services.gamification_service import GamificationService

logger = logging.getLogger("job_tracker.applications")

Outcome = Tuple[GamificationState, List[Milestone]]


class ApplicationService:
    """Service for managing job application records"""

    def __init__(self, db: Session, gamification: Optional[GamificationService] = None):
        self.db = db
        self.repo = ApplicationRepository()
        self.gamification = gamification or GamificationService(db)

    def list(self, user: User, status_filter: Optional[str] = None) -> List[Application]:
        """
        Get a user's applications.

        Args:
            user: Owner
            status_filter: None or "all" for everything, otherwise one status

        Raises:
            ValidationException: If the filter is not a known status
        """
        if status_filter in (None, "", STATUS_FILTER_ALL):
            return self.repo.get_all(self.db, user.id)

        if status_filter not in APPLICATION_STATUSES:
            raise ValidationException("status", f"unknown status filter '{status_filter}'")
        return self.repo.get_all(self.db, user.id, status_filter)

    def get(self, user: User, application_id: int) -> Application:
        application = self.repo.get_by_id(self.db, user.id, application_id)
        if not application:
            raise ApplicationNotFoundException(application_id)
        return application

    def create(
        self,
        user: User,
        data: ApplicationCreate,
        today: Optional[date] = None
    ) -> Tuple[Application, Outcome]:
        """Create an application and score it"""
        if today is None:
            today = self.gamification.today()

        # State must exist before the new row is staged, or the
        # retroactive seed would count it as pre-existing history
        self.gamification.load_or_create_state(user)

        values = data.model_dump()
        values["date_applied"] = values["date_applied"] or today
        application = Application(user_id=user.id, **values)
        self.repo.add(self.db, application)

        outcome = self.gamification.apply(user, Action.create_application(), today)
        logger.info(f"User {user.id} created application {application.id} ({application.company})")
        return application, outcome

    def update(
        self,
        user: User,
        application_id: int,
        data: ApplicationUpdate,
        today: Optional[date] = None
    ) -> Tuple[Application, Optional[Outcome]]:
        """
        Update an application.

        A status change is scored as update_status with the old and new
        status; any other edit is saved without touching the state.
        """
        application = self.get(user, application_id)
        old_status = application.status

        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("company", "position", "status") and value is None:
                continue
            setattr(application, field, value)

        if application.status != old_status:
            outcome = self.gamification.apply(
                user, Action.update_status(old_status, application.status), today
            )
            logger.info(
                f"User {user.id} moved application {application.id} "
                f"from {old_status} to {application.status}"
            )
            return application, outcome

        self._commit("update")
        self.db.refresh(application)
        return application, None

    def delete(self, user: User, application_id: int) -> None:
        """Delete an application (points already earned are kept)"""
        application = self.get(user, application_id)
        try:
            self.repo.delete(self.db, application)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete application {application_id}: {e}")
            raise DatabaseException("delete", str(e))
        logger.info(f"User {user.id} deleted application {application_id}")

    def bulk_import(
        self,
        user: User,
        rows: List[ApplicationImportItem],
        today: Optional[date] = None
    ) -> Tuple[List[Application], Outcome]:
        """
        Insert many applications at once.

        Missing fields fall back to defaults: status "applied", today's
        date. The import is recorded as a single bulk_import action.
        """
        if today is None:
            today = self.gamification.today()

        self.gamification.load_or_create_state(user)

        applications = [
            Application(
                user_id=user.id,
                company=row.company or "",
                position=row.position or "",
                date_applied=row.date_applied or today,
                contact_person=row.contact_person or "",
                status=row.status or STATUS_APPLIED,
                notes=row.notes or "",
            )
            for row in rows
        ]
        self.repo.add_all(self.db, applications)

        outcome = self.gamification.apply(user, Action.bulk_import(len(applications)), today)
        logger.info(f"User {user.id} imported {len(applications)} applications")
        return applications, outcome

    def get_stats(self, user: User) -> dict:
        """Total plus a count for every status"""
        counts = self.repo.count_by_status(self.db, user.id)
        stats = {status: counts.get(status, 0) for status in APPLICATION_STATUSES}
        stats["total"] = sum(counts.values())
        return stats

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Application {operation} failed: {e}")
            raise DatabaseException(operation, str(e))
