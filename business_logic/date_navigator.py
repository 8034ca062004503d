"""Date navigation and parsing logic for the timeline."""
import re
from datetime import date, timedelta
from typing import Optional

from business_logic.day_partition import partition_day
from config import config
from task_store import TaskStore


class DateNavigator:
    """Handles date-based navigation operations."""

    def __init__(self, store: TaskStore, start_hour: int):
        """
        Initialize DateNavigator.

        Args:
            store: TaskStore holding the tasks
            start_hour: Hour at which the visual day begins
        """
        self.store = store
        self.start_hour = start_hour

    def has_tasks(self, day: date) -> bool:
        """Check if any timed or all-day task is visible on a visual day."""
        day_tasks = partition_day(self.store.all(), day.isoformat(), self.start_hour)
        return bool(day_tasks.timed or day_tasks.all_day)

    def find_prev_day_with_tasks(
        self, start_date: date, max_days: Optional[int] = None
    ) -> Optional[date]:
        """
        Find the previous visual day that has tasks.

        Args:
            start_date: Date to start searching from
            max_days: Maximum number of days to search backwards (uses config.max_search_days if None)

        Returns:
            Date of previous day with tasks, or None if not found
        """
        return self._search(start_date, -1, max_days)

    def find_next_day_with_tasks(
        self, start_date: date, max_days: Optional[int] = None
    ) -> Optional[date]:
        """
        Find the next visual day that has tasks.

        Args:
            start_date: Date to start searching from
            max_days: Maximum number of days to search forward (uses config.max_search_days if None)

        Returns:
            Date of next day with tasks, or None if not found
        """
        return self._search(start_date, 1, max_days)

    def _search(self, start_date: date, step: int, max_days: Optional[int]) -> Optional[date]:
        if max_days is None:
            max_days = config.max_search_days
        if not self.store.all():
            return None

        check_date = start_date + timedelta(days=step)
        for _ in range(max_days):
            if self.has_tasks(check_date):
                return check_date
            check_date += timedelta(days=step)
        return None


class NaturalDateParser:
    """Parse natural language date inputs."""

    DAY_NAMES = {
        "monday": 0, "mon": 0,
        "tuesday": 1, "tue": 1, "tues": 1,
        "wednesday": 2, "wed": 2,
        "thursday": 3, "thu": 3, "thurs": 3,
        "friday": 4, "fri": 4,
        "saturday": 5, "sat": 5,
        "sunday": 6, "sun": 6
    }

    MONTH_NAMES = {
        "jan": 1, "january": 1,
        "feb": 2, "february": 2,
        "mar": 3, "march": 3,
        "apr": 4, "april": 4,
        "may": 5,
        "jun": 6, "june": 6,
        "jul": 7, "july": 7,
        "aug": 8, "august": 8,
        "sep": 9, "sept": 9, "september": 9,
        "oct": 10, "october": 10,
        "nov": 11, "november": 11,
        "dec": 12, "december": 12
    }

    @staticmethod
    def parse(input_str: str, from_date: date, today: Optional[date] = None) -> Optional[date]:
        """
        Parse natural language date input.

        Supports:
        - Relative offsets: +1, -1, +7, etc. (relative to from_date, the viewed date)
        - ISO format: YYYY-MM-DD (absolute)
        - Absolute words: today, tomorrow, yesterday (relative to today)
        - Day names: monday, tuesday, etc. (next occurrence after today)
        - Relative weeks: next week, last week (relative to today)
        - Month + day: nov 10, december 25 (next occurrence on or after today)

        Args:
            input_str: Natural language date string
            from_date: Reference date for relative offsets
            today: The visual today (defaults to date.today())

        Returns:
            Parsed date or None if parsing failed
        """
        input_str = input_str.strip().lower()
        if today is None:
            today = date.today()

        # Try relative offset (+1, -1, etc.)
        if input_str.startswith('+') or input_str.startswith('-'):
            try:
                days = int(input_str)
                return from_date + timedelta(days=days)
            except ValueError:
                pass

        # Try ISO format (YYYY-MM-DD)
        try:
            return date.fromisoformat(input_str)
        except ValueError:
            pass

        relative_words = {
            "today": 0,
            "tomorrow": 1,
            "yesterday": -1,
            "next week": 7,
            "last week": -7,
        }
        if input_str in relative_words:
            return today + timedelta(days=relative_words[input_str])

        # Day names (next occurrence)
        if input_str in NaturalDateParser.DAY_NAMES:
            days_ahead = NaturalDateParser.DAY_NAMES[input_str] - today.weekday()
            if days_ahead <= 0:  # Target day already happened this week
                days_ahead += 7
            return today + timedelta(days=days_ahead)

        # Month + day (e.g., "nov 10", "december 25")
        match = re.match(r'^(\w+)\s+(\d{1,2})$', input_str)
        if match:
            month_str, day_str = match.groups()
            if month_str in NaturalDateParser.MONTH_NAMES:
                try:
                    month = NaturalDateParser.MONTH_NAMES[month_str]
                    target_date = date(today.year, month, int(day_str))
                    # If the date is in the past, use next year
                    if target_date < today:
                        target_date = date(today.year + 1, month, int(day_str))
                    return target_date
                except ValueError:
                    pass

        return None
