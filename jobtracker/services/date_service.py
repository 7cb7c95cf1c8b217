"""
Date calculation service.
Handles effective dates, day start time logic and calendar-day differences.
"""
from datetime import datetime, timedelta, date
from typing import Optional, Union

from jobtracker.exceptions import InvalidTimeFormatException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def get_effective_date(
        day_start_time: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> date:
        """
        Get the effective current date based on a shifted day start.

        If day_start_time is set and the current time is before it,
        returns yesterday's date. Otherwise returns today's date.

        Example: If day_start_time = "06:00" and current time is 03:00,
        the effective date is still yesterday because the user hasn't
        started their "new day" yet.

        Args:
            day_start_time: "HH:MM" day boundary, or None for midnight
            now: Current moment (defaults to datetime.now())

        Returns:
            Effective date (today or yesterday)
        """
        if now is None:
            now = datetime.now()
        today = now.date()

        if not day_start_time:
            return today

        try:
            day_start_hour, day_start_minute = DateService.parse_time(day_start_time)
        except InvalidTimeFormatException:
            return today

        current_minutes = now.hour * 60 + now.minute
        start_minutes = day_start_hour * 60 + day_start_minute

        if current_minutes < start_minutes:
            return today - timedelta(days=1)

        return today

    @staticmethod
    def parse_time(time_str: str) -> tuple[int, int]:
        """
        Parse time string into hour and minute.

        Accepts "HH:MM" and the compact "HHMM" form.

        Raises:
            InvalidTimeFormatException: If time string is invalid
        """
        try:
            t_str = time_str.replace(":", "").zfill(4)
            hour = int(t_str[:2])
            minute = int(t_str[2:])
        except (ValueError, AttributeError):
            raise InvalidTimeFormatException(str(time_str))

        if len(t_str) != 4 or not (0 <= hour < 24 and 0 <= minute < 60):
            raise InvalidTimeFormatException(time_str)
        return hour, minute

    @staticmethod
    def normalize_to_date(value: Union[date, datetime]) -> date:
        """Drop the time-of-day component, keeping the calendar date"""
        if isinstance(value, datetime):
            return value.date()
        return value

    @staticmethod
    def days_between(earlier: Union[date, datetime], later: Union[date, datetime]) -> int:
        """Whole calendar days from earlier to later (negative if reversed)"""
        return (DateService.normalize_to_date(later) - DateService.normalize_to_date(earlier)).days
