"""
Daily activity streak tracking.
"""
from datetime import date, datetime
from typing import Optional, Union

from jobtracker.domain import StreakChange
from jobtracker.services.date_service import DateService


class StreakService:
    """Service for streak calculation"""

    @staticmethod
    def streak_delta(
        last_activity: Optional[Union[date, datetime]],
        today: Union[date, datetime]
    ) -> StreakChange:
        """
        Classify today's activity against the last recorded activity.

        - No previous activity: START (caller sets streak to 1)
        - Same calendar day: NO_CHANGE
        - Exactly one day later: INCREMENT
        - Any other gap: RESET

        Time-of-day is ignored; both values are reduced to calendar dates.
        """
        if last_activity is None:
            return StreakChange.START

        gap = DateService.days_between(last_activity, today)

        if gap == 0:
            return StreakChange.NO_CHANGE
        if gap == 1:
            return StreakChange.INCREMENT
        return StreakChange.RESET
