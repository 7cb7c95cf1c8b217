"""
Points calculation service.
Maps actions onto point deltas and back-calculates points for existing history.
"""
from typing import Iterable

from jobtracker.constants import (
    POINTS_APPLICATION,
    POINTS_INTERVIEW,
    POINTS_OFFER,
    POINTS_STREAK_BONUS,
    STATUS_APPLIED,
    STATUS_INTERVIEW,
    STATUS_OFFERED,
    INTERVIEW_OR_BETTER,
    OFFER_OR_BETTER,
    ACTION_CREATE_APPLICATION,
    ACTION_UPDATE_STATUS,
    ACTION_STREAK_BONUS,
)
from jobtracker.domain import Action


class PointsService:
    """Service for points calculation"""

    @staticmethod
    def points_for(action: Action) -> int:
        """
        Calculate points earned from an action.

        - create_application: 10
        - update_status applied -> interview: 25
        - update_status applied/interview -> offered: 50
        - streak_bonus: 5
        - anything else (other transitions, bulk_import, session_start, unknown tags): 0
        """
        if action.action_type == ACTION_CREATE_APPLICATION:
            return POINTS_APPLICATION

        if action.action_type == ACTION_UPDATE_STATUS:
            return PointsService._status_change_points(action.old_status, action.new_status)

        if action.action_type == ACTION_STREAK_BONUS:
            return POINTS_STREAK_BONUS

        return 0

    @staticmethod
    def _status_change_points(old_status, new_status) -> int:
        if old_status == STATUS_APPLIED and new_status == STATUS_INTERVIEW:
            return POINTS_INTERVIEW
        if old_status in (STATUS_APPLIED, STATUS_INTERVIEW) and new_status == STATUS_OFFERED:
            return POINTS_OFFER
        return 0

    @staticmethod
    def retroactive_points(applications: Iterable) -> int:
        """
        Back-calculate points for applications that existed before the
        user's gamification state was created.

        10 per application, +25 per interview-or-better status,
        +50 per offer-or-better status.

        Args:
            applications: Records exposing a ``status`` attribute

        Returns:
            Seed point total
        """
        points = 0
        for application in applications:
            points += POINTS_APPLICATION
            if application.status in INTERVIEW_OR_BETTER:
                points += POINTS_INTERVIEW
            if application.status in OFFER_OR_BETTER:
                points += POINTS_OFFER
        return points
