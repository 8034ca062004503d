"""Time parsing and formatting utilities for ttimeline.

The parse_* functions are the input-validation layer: they return None for
malformed input instead of raising, and everything past them assumes
well-formed "HH:MM" and "YYYY-MM-DD" strings.
"""

import re
from datetime import date, timedelta
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')
_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_clock_time(time_str: str) -> Optional[str]:
    """
    Parse and normalize a clock time.

    Supports formats:
    - "HH:MM": "09:05" -> "09:05"
    - "H:MM": "9:05" -> "09:05"

    Args:
        time_str: Time string to parse

    Returns:
        Normalized "HH:MM" string, or None if parse fails
    """
    match = _TIME_PATTERN.match(time_str.strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    return f"{hours:02d}:{minutes:02d}"


def parse_iso_date(date_str: str) -> Optional[str]:
    """
    Parse a calendar date in YYYY-MM-DD form.

    Args:
        date_str: Date string to parse

    Returns:
        The same date string, or None if it is not a real date
    """
    date_str = date_str.strip()
    if not _DATE_PATTERN.match(date_str):
        return None
    try:
        return date.fromisoformat(date_str).isoformat()
    except ValueError:
        return None


def parse_deadline(deadline_str: str) -> Optional[str]:
    """
    Parse a deadline, either "YYYY-MM-DD" or "YYYY-MM-DDTHH:MM".

    Args:
        deadline_str: Deadline string to parse

    Returns:
        Normalized deadline string, or None if parse fails
    """
    date_part, sep, time_part = deadline_str.strip().partition("T")
    parsed_date = parse_iso_date(date_part)
    if parsed_date is None:
        return None
    if not sep:
        return parsed_date

    parsed_time = parse_clock_time(time_part)
    if parsed_time is None:
        return None
    return f"{parsed_date}T{parsed_time}"


def time_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes to "HH:MM", wrapping into a single day."""
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_days(date_str: str, days: int) -> str:
    """Shift an ISO date string by a number of days."""
    return (date.fromisoformat(date_str) + timedelta(days=days)).isoformat()


def format_duration(minutes: int) -> str:
    """
    Format a duration in minutes into a human-readable string.

    Returns format like "1h30m", "45m" or "0m".

    Args:
        minutes: Number of minutes to format

    Returns:
        Formatted duration string
    """
    if minutes <= 0:
        return "0m"

    hours = minutes // 60
    mins = minutes % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0:
        parts.append(f"{mins}m")

    return "".join(parts)
