"""
Milestone display queue.

Milestones are transient: they are never persisted, only queued until the
user has seen them. One milestone is active at a time; it auto-dismisses
after a fixed interval and the next one is promoted from the backlog.
"""
import logging
import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from jobtracker.constants import MILESTONE_DISPLAY_SECONDS
from jobtracker.domain import Milestone

logger = logging.getLogger("job_tracker.milestones")


class MilestoneQueue:
    """FIFO backlog plus a single active slot"""

    def __init__(self, display_seconds: float = MILESTONE_DISPLAY_SECONDS):
        self.display_seconds = display_seconds
        self._backlog = deque()
        self._active: Optional[Milestone] = None
        self._shown_at: Optional[datetime] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._backlog) + (1 if self._active else 0)

    def push(self, milestones: Iterable[Milestone], now: Optional[datetime] = None) -> None:
        """Append milestones; the first one becomes active if nothing is shown"""
        now = now or datetime.now()
        with self._lock:
            self._backlog.extend(milestones)
            if self._active is None:
                self._promote(now)

    def current(self, now: Optional[datetime] = None) -> Optional[Milestone]:
        """Active milestone, after expiring it if its display time is over"""
        now = now or datetime.now()
        with self._lock:
            if self._active is not None and self._expired(now):
                logger.debug(f"Milestone {self._active.type} auto-dismissed")
                self._promote(now)
            return self._active

    def dismiss(self, now: Optional[datetime] = None) -> Optional[Milestone]:
        """Acknowledge the active milestone and return the next one, if any"""
        now = now or datetime.now()
        with self._lock:
            self._promote(now)
            return self._active

    def pending(self) -> List[Milestone]:
        """Milestones waiting behind the active one"""
        with self._lock:
            return list(self._backlog)

    def clear(self) -> None:
        with self._lock:
            self._backlog.clear()
            self._active = None
            self._shown_at = None

    def _expired(self, now: datetime) -> bool:
        return now - self._shown_at >= timedelta(seconds=self.display_seconds)

    def _promote(self, now: datetime) -> None:
        if self._backlog:
            self._active = self._backlog.popleft()
            self._shown_at = now
        else:
            self._active = None
            self._shown_at = None


class MilestoneQueueRegistry:
    """In-memory milestone queues keyed by user id"""

    def __init__(self, display_seconds: float = MILESTONE_DISPLAY_SECONDS):
        self.display_seconds = display_seconds
        self._queues: Dict[int, MilestoneQueue] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> MilestoneQueue:
        with self._lock:
            queue = self._queues.get(user_id)
            if queue is None:
                queue = MilestoneQueue(self.display_seconds)
                self._queues[user_id] = queue
            return queue

    def discard(self, user_id: int) -> None:
        """Drop a user's queue (e.g. on sign-out)"""
        with self._lock:
            self._queues.pop(user_id, None)

    def reset(self) -> None:
        with self._lock:
            self._queues.clear()


milestone_queues = MilestoneQueueRegistry()
