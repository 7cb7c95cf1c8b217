"""
Tests for ApplicationService.

Tests cover:
1. Create / update / delete with scoring
2. Status filtering and stats
3. Bulk import defaults
4. Ten-applications milestone across deletes
5. Rollback of staged rows when the scored commit fails
"""
import pytest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from jobtracker.exceptions import (
    ApplicationNotFoundException,
    DatabaseException,
    ValidationException,
)
from jobtracker.models import Application
from jobtracker.schemas import ApplicationCreate, ApplicationImportItem, ApplicationUpdate
from jobtracker.services.application_service import ApplicationService
from jobtracker.tests.conftest import create_application


@pytest.fixture
def service(db_session, gamification):
    return ApplicationService(db_session, gamification)


def new_application(company="Acme", status="applied"):
    return ApplicationCreate(company=company, position="Backend Engineer", status=status)


class TestCreate:
    """Tests for create"""

    def test_first_application_scores_and_fires_milestone(self, service, user, today):
        application, (state, milestones) = service.create(user, new_application(), today)

        assert application.id is not None
        assert application.date_applied == today
        assert state.points == 10
        assert state.streak_days == 1
        assert [m.type for m in milestones] == ["first_application"]

    def test_existing_history_is_seeded_before_insert(self, service, user, db_session, today):
        create_application(db_session, user, status="interview")

        _, (state, milestones) = service.create(user, new_application(), today)

        # 35 retroactive + 10 for the new one
        assert state.points == 45
        assert milestones == []

    def test_tenth_application_refires_after_delete(self, service, user, today):
        created = []
        for i in range(10):
            application, (_, milestones) = service.create(user, new_application(f"Company {i}"), today)
            created.append(application)
        assert "ten_applications" in [m.type for m in milestones]

        _, (_, milestones) = service.create(user, new_application("Company 10"), today)
        assert "ten_applications" not in [m.type for m in milestones]

        service.delete(user, created[0].id)
        service.delete(user, created[1].id)
        _, (_, milestones) = service.create(user, new_application("Company 11"), today)
        assert "ten_applications" in [m.type for m in milestones]


class TestUpdate:
    """Tests for update"""

    def test_status_change_is_scored(self, service, user, today):
        application, _ = service.create(user, new_application(), today)

        updated, outcome = service.update(
            user, application.id, ApplicationUpdate(status="interview"), today
        )

        state, milestones = outcome
        assert updated.status == "interview"
        assert state.points == 35
        assert [m.type for m in milestones] == ["first_interview"]

    def test_other_edits_are_not_scored(self, service, user, today):
        application, _ = service.create(user, new_application(), today)

        updated, outcome = service.update(
            user, application.id, ApplicationUpdate(notes="Recruiter called"), today
        )

        assert outcome is None
        assert updated.notes == "Recruiter called"
        assert service.gamification.get_state(user).points == 10

    def test_unknown_application(self, service, user, today):
        with pytest.raises(ApplicationNotFoundException):
            service.update(user, 999, ApplicationUpdate(status="offered"), today)


class TestQueries:
    """Tests for list, get, delete and stats"""

    def test_filter_by_status(self, service, user, db_session):
        create_application(db_session, user, status="applied")
        create_application(db_session, user, status="interview")
        create_application(db_session, user, status="interview")

        assert len(service.list(user)) == 3
        assert len(service.list(user, "all")) == 3
        assert [a.status for a in service.list(user, "interview")] == ["interview", "interview"]

    def test_unknown_filter_rejected(self, service, user):
        with pytest.raises(ValidationException):
            service.list(user, "ghosted")

    def test_other_users_records_are_hidden(self, service, user, db_session):
        from jobtracker.models import User

        other = User(email="other@example.com", api_key="other-key")
        db_session.add(other)
        db_session.commit()
        application = create_application(db_session, other)

        assert service.list(user) == []
        with pytest.raises(ApplicationNotFoundException):
            service.get(user, application.id)

    def test_delete_keeps_points(self, service, user, today):
        application, _ = service.create(user, new_application(), today)

        service.delete(user, application.id)

        assert service.list(user) == []
        assert service.gamification.get_state(user).points == 10

    def test_stats(self, service, user, db_session):
        for status in ("applied", "applied", "offered", "rejected"):
            create_application(db_session, user, status=status)

        stats = service.get_stats(user)

        assert stats["total"] == 4
        assert stats["applied"] == 2
        assert stats["offered"] == 1
        assert stats["interview"] == 0


class TestBulkImport:
    """Tests for bulk_import"""

    def test_defaults_and_no_points(self, service, user, today):
        rows = [
            ApplicationImportItem(company="Acme", position="Engineer"),
            ApplicationImportItem(company="Globex", position="SRE", status="interview"),
        ]

        applications, (state, milestones) = service.bulk_import(user, rows, today)

        assert len(applications) == 2
        assert applications[0].status == "applied"
        assert applications[0].date_applied == today
        # Import itself scores nothing; only the streak starts
        assert state.points == 0
        assert state.streak_days == 1
        assert "first_interview" in [m.type for m in milestones]


class TestFailedCommit:
    """Tests for rollback when the scored commit fails"""

    @staticmethod
    def failing_commit(db_session):
        return patch.object(
            db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("disk full"))
        )

    def test_create_leaves_no_row_and_no_milestone(self, service, user, db_session, today):
        service.gamification.load_or_create_state(user)

        with self.failing_commit(db_session):
            with pytest.raises(DatabaseException):
                service.create(user, new_application(), today)

        assert db_session.query(Application).count() == 0
        assert service.gamification.current_milestone(user) is None
        assert service.gamification.get_state(user).points == 0

    def test_bulk_import_leaves_no_rows(self, service, user, db_session, today):
        service.gamification.load_or_create_state(user)
        rows = [
            ApplicationImportItem(company="Acme", position="Engineer"),
            ApplicationImportItem(company="Globex", position="SRE", status="interview"),
        ]

        with self.failing_commit(db_session):
            with pytest.raises(DatabaseException):
                service.bulk_import(user, rows, today)

        assert db_session.query(Application).count() == 0
        assert service.gamification.current_milestone(user) is None
        assert service.gamification.get_state(user).streak_days == 0
