"""
Gamification orchestration service.
Loads a user's persisted state, runs the pure engine against the live
application list, persists the result and only then queues milestones.
"""
import logging
import os
import threading
from collections import defaultdict
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobtracker.domain import Action, GamificationState, Milestone, RankSummary, StreakChange
from jobtracker.exceptions import DatabaseException
from jobtracker.models import GamificationStateRecord, User
from jobtracker.repositories.application_repository import ApplicationRepository
from jobtracker.repositories.gamification_repository import GamificationStateRepository
from jobtracker.services.date_service import DateService
from jobtracker.services.gamification_engine import apply_action, format_summary, initial_state
from jobtracker.services.milestone_queue import MilestoneQueueRegistry, milestone_queues
from jobtracker.services.rank_service import DEFAULT_RANK_TABLE, RankTable
from jobtracker.services.streak_service import StreakService

logger = logging.getLogger("job_tracker.gamification")

DAY_START_TIME = os.getenv("JOB_TRACKER_DAY_START_TIME")

# Serializes read-modify-write of a user's state within this process.
# Reentrant so start_session can hold it across its call to apply.
_user_locks = defaultdict(threading.RLock)
_user_locks_guard = threading.Lock()


def _lock_for(user_id: int):
    with _user_locks_guard:
        return _user_locks[user_id]


def _evict_lock(user_id: int) -> None:
    """Forget a user's lock unless some thread is holding it"""
    with _user_locks_guard:
        lock = _user_locks.get(user_id)
        if lock is not None and lock.acquire(blocking=False):
            try:
                del _user_locks[user_id]
            finally:
                lock.release()


class GamificationService:
    """Service for applying scored actions to a user's gamification state"""

    def __init__(
        self,
        db: Session,
        queues: MilestoneQueueRegistry = milestone_queues,
        rank_table: RankTable = DEFAULT_RANK_TABLE,
        day_start_time: Optional[str] = DAY_START_TIME
    ):
        self.db = db
        self.queues = queues
        self.rank_table = rank_table
        self.day_start_time = day_start_time
        self.state_repo = GamificationStateRepository()
        self.application_repo = ApplicationRepository()

    def today(self) -> date:
        """Effective calendar date for streak purposes"""
        return DateService.get_effective_date(self.day_start_time)

    def load_or_create_state(self, user: User) -> GamificationState:
        """
        Get the user's state, creating it on first load.

        A new state is seeded with retroactive points for every application
        the user already has.
        """
        record = self.state_repo.get_by_user(self.db, user.id)
        if record:
            return record.to_domain()

        applications = self.application_repo.get_all(self.db, user.id)
        state = initial_state(applications, self.rank_table)
        record = GamificationStateRecord(user_id=user.id)
        record.apply_domain(state)

        try:
            self.state_repo.create(self.db, record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create gamification state for user {user.id}: {e}")
            raise DatabaseException("insert", str(e))

        logger.info(
            f"Created gamification state for user {user.id}: "
            f"{len(applications)} existing applications, "
            f"{state.points} retroactive points, rank {state.rank}"
        )
        return state

    def apply(
        self,
        user: User,
        action: Action,
        today: Optional[date] = None
    ) -> Tuple[GamificationState, List[Milestone]]:
        """
        Score an action for a user.

        Pending changes in the session (e.g. a just-added application) are
        committed together with the new state. Milestones are queued only
        after that commit succeeds.

        Raises:
            DatabaseException: If persisting fails (nothing is queued)
        """
        if today is None:
            today = self.today()

        self.load_or_create_state(user)

        with _lock_for(user.id):
            record = self.state_repo.get_by_user(self.db, user.id, for_update=True)
            old_state = record.to_domain()
            applications = self.application_repo.get_all(self.db, user.id)

            new_state, milestones = apply_action(
                old_state, action, applications, today, self.rank_table
            )
            record.apply_domain(new_state)

            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Failed to persist gamification state for user {user.id} "
                    f"after {action.action_type}: {e}"
                )
                raise DatabaseException("update", str(e))

        gained = new_state.points - old_state.points
        logger.info(
            f"User {user.id} {action.action_type}: +{gained} points, "
            f"total {new_state.points}, rank {new_state.rank}, streak {new_state.streak_days}"
        )
        if milestones:
            logger.info(f"User {user.id} milestones: {[m.type for m in milestones]}")
            self.queues.get(user.id).push(milestones)

        return new_state, milestones

    def start_session(
        self,
        user: User,
        today: Optional[date] = None
    ) -> Tuple[GamificationState, List[Milestone]]:
        """
        Record a visit for streak purposes.

        The visit itself scores nothing. The first visit of a consecutive
        day earns the engine's streak bonus; a first-ever visit or one
        after a gap restarts the streak at 1. A repeat visit on the same
        day changes nothing and is not persisted.
        """
        if today is None:
            today = self.today()

        with _lock_for(user.id):
            state = self.load_or_create_state(user)
            change = StreakService.streak_delta(state.last_activity, today)

            if change == StreakChange.NO_CHANGE:
                return state, []
            return self.apply(user, Action.session_start(), today)

    def end_session(self, user: User) -> None:
        """Drop the user's in-memory milestone queue and lock (sign-out)"""
        self.queues.discard(user.id)
        _evict_lock(user.id)
        logger.info(f"Ended session for user {user.id}")

    def get_state(self, user: User) -> GamificationState:
        return self.load_or_create_state(user)

    def get_summary(self, user: User) -> RankSummary:
        return format_summary(self.load_or_create_state(user), self.rank_table)

    def current_milestone(self, user: User) -> Optional[Milestone]:
        return self.queues.get(user.id).current()

    def pending_milestones(self, user: User) -> List[Milestone]:
        return self.queues.get(user.id).pending()

    def dismiss_milestone(self, user: User) -> Optional[Milestone]:
        """Acknowledge the displayed milestone; returns the next one"""
        return self.queues.get(user.id).dismiss()
