"""
Tests for GamificationService.

Tests cover:
1. First-load state creation with retroactive points
2. Applying actions and persisting the result
3. Session start streak tick and sign-out
4. Milestone queueing and failed commits
"""
import threading
import pytest
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from jobtracker.domain import Action
from jobtracker.exceptions import DatabaseException
from jobtracker.repositories.gamification_repository import GamificationStateRepository
from jobtracker.services import gamification_service
from jobtracker.tests.conftest import create_application


class TestLoadOrCreateState:
    """Tests for load_or_create_state"""

    def test_new_user_without_history(self, gamification, user, db_session):
        state = gamification.load_or_create_state(user)

        assert state.points == 0
        assert state.rank == "Newcomer"
        assert GamificationStateRepository.get_by_user(db_session, user.id) is not None

    def test_new_user_with_history_gets_retroactive_points(self, gamification, user, db_session):
        for status in ("applied", "interview", "offered", "accepted", "rejected"):
            create_application(db_session, user, status=status)

        state = gamification.load_or_create_state(user)

        # 5 * 10 + 3 * 25 + 2 * 50
        assert state.points == 225
        assert state.rank == "Interviewer"
        assert state.streak_days == 0
        assert state.last_activity is None

    def test_existing_state_is_not_reseeded(self, gamification, user, db_session):
        gamification.load_or_create_state(user)
        create_application(db_session, user, status="offered")

        assert gamification.load_or_create_state(user).points == 0


class TestApply:
    """Tests for apply"""

    def test_persists_new_state(self, gamification, user, db_session, today):
        create_application(db_session, user)
        gamification.load_or_create_state(user)

        state, _ = gamification.apply(user, Action.create_application(), today)

        record = GamificationStateRepository.get_by_user(db_session, user.id)
        db_session.refresh(record)
        assert record.points == state.points == 20  # 10 seeded + 10
        assert record.streak_days == 1
        assert record.last_activity == today

    def test_consecutive_days_build_streak(self, gamification, user, today):
        gamification.load_or_create_state(user)
        start = today - timedelta(days=4)

        for offset in range(5):
            state, milestones = gamification.apply(
                user, Action.streak_bonus(), start + timedelta(days=offset)
            )

        assert state.streak_days == 5
        assert "five_day_streak" in [m.type for m in milestones]
        # day 1: 5, days 2-5: 5 bonus + 5 action each
        assert state.points == 45

    def test_milestones_are_queued(self, gamification, user, db_session, queues, today):
        gamification.load_or_create_state(user)
        create_application(db_session, user)

        _, milestones = gamification.apply(user, Action.create_application(), today)

        assert [m.type for m in milestones] == ["first_application"]
        assert gamification.current_milestone(user).type == "first_application"
        assert gamification.dismiss_milestone(user) is None

    def test_failed_commit_raises_and_queues_nothing(self, gamification, user, db_session, today):
        gamification.load_or_create_state(user)
        create_application(db_session, user)

        with patch.object(
            db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("disk full"))
        ):
            with pytest.raises(DatabaseException):
                gamification.apply(user, Action.create_application(), today)

        assert gamification.current_milestone(user) is None
        record = GamificationStateRepository.get_by_user(db_session, user.id)
        assert record.points == 0


class TestStartSession:
    """Tests for start_session"""

    def test_first_session_starts_streak_without_points(self, gamification, user, today):
        state, milestones = gamification.start_session(user, today)

        assert state.streak_days == 1
        assert state.points == 0
        assert state.last_activity == today
        assert milestones == []

    def test_repeat_sessions_same_day_change_nothing(self, gamification, user, today):
        gamification.start_session(user, today)

        for _ in range(20):
            state, milestones = gamification.start_session(user, today)

        assert state.streak_days == 1
        assert state.points == 0
        assert milestones == []

    def test_next_day_session_earns_bonus_once(self, gamification, user, today, yesterday):
        gamification.start_session(user, yesterday)

        state, _ = gamification.start_session(user, today)
        assert state.streak_days == 2
        assert state.points == 5

        state, _ = gamification.start_session(user, today)
        assert state.points == 5

    def test_session_after_gap_resets_streak(self, gamification, user, today):
        gamification.start_session(user, today - timedelta(days=2))
        gamification.start_session(user, today - timedelta(days=1))

        state, _ = gamification.start_session(user, today + timedelta(days=2))

        assert state.streak_days == 1
        assert state.points == 5

    def test_session_then_first_application_fires_milestone(
        self, gamification, user, db_session, today
    ):
        gamification.start_session(user, today)
        create_application(db_session, user)

        state, milestones = gamification.apply(user, Action.create_application(), today)

        assert state.points == 10
        assert [m.type for m in milestones] == ["first_application"]

    def test_summary_reflects_state(self, gamification, user, today, yesterday):
        gamification.start_session(user, yesterday)
        gamification.start_session(user, today)

        summary = gamification.get_summary(user)

        assert summary.points == 5
        assert summary.streak == 2
        assert summary.next_rank == "Applicant"
        assert summary.points_to_next == 45
        assert summary.progress_percent == 10


class TestEndSession:
    """Tests for end_session"""

    def test_discards_queued_milestones(self, gamification, user, db_session, today):
        gamification.load_or_create_state(user)
        create_application(db_session, user)
        gamification.apply(user, Action.create_application(), today)
        assert gamification.current_milestone(user) is not None

        gamification.end_session(user)

        assert gamification.current_milestone(user) is None
        assert gamification.get_state(user).points == 10

    def test_evicts_user_lock(self, gamification, user, today):
        gamification.start_session(user, today)
        assert user.id in gamification_service._user_locks

        gamification.end_session(user)

        assert user.id not in gamification_service._user_locks

    def test_lock_held_elsewhere_is_kept(self, gamification, user):
        lock = gamification_service._lock_for(user.id)
        acquired = threading.Event()
        release = threading.Event()

        def hold():
            with lock:
                acquired.set()
                release.wait(timeout=5)

        holder = threading.Thread(target=hold)
        holder.start()
        acquired.wait(timeout=5)
        try:
            gamification.end_session(user)
            assert gamification_service._user_locks.get(user.id) is lock
        finally:
            release.set()
            holder.join()
