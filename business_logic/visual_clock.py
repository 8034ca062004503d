"""Visual day arithmetic.

A visual day starts at start_hour:00 instead of midnight. An instant whose
clock hour is earlier than start_hour belongs to the previous calendar date's
visual day.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from utils.time_utils import MINUTES_PER_DAY, add_days, minutes_to_time, time_to_minutes

DEFAULT_TIMED_DURATION_MINUTES = 60


def visual_date_of(instant: datetime, start_hour: int) -> date:
    """Return the date of the day window containing instant."""
    if instant.hour < start_hour:
        return instant.date() - timedelta(days=1)
    return instant.date()


def visual_today(start_hour: int, now: Optional[datetime] = None) -> str:
    """ISO date of the visual day containing now."""
    if now is None:
        now = datetime.now()
    return visual_date_of(now, start_hour).isoformat()


def start_of_day_time(start_hour: int) -> str:
    """Implicit start time of a visual day, e.g. "05:00"."""
    return f"{start_hour:02d}:00"


def end_of_day_time(start_hour: int) -> str:
    """Implicit end time of a visual day: (start_hour - 1):59, wrapping to 23:59."""
    end_hour = start_hour - 1
    if end_hour < 0:
        end_hour = 23
    return f"{end_hour:02d}:59"


def visual_start_date(start_date: str, start_time: Optional[str], start_hour: int) -> str:
    """Visual date a task starts on.

    A timed start before start_hour belongs to the previous visual day.
    Untimed tasks keep their calendar date.
    """
    if not start_time:
        return start_date
    if time_to_minutes(start_time) < start_hour * 60:
        return add_days(start_date, -1)
    return start_date


def to_datetime(date_str: str, time_str: str) -> datetime:
    return datetime.fromisoformat(f"{date_str}T{time_str}")


def minutes_from(reference_date: str, date_str: str, time_str: str) -> int:
    """Minutes from reference_date's midnight to the given instant."""
    delta = to_datetime(date_str, time_str) - to_datetime(reference_date, "00:00")
    return int(delta.total_seconds() // 60)


def instant_at(reference_date: str, minutes: int) -> Tuple[str, str]:
    """Inverse of minutes_from: (date, time) lying minutes after reference_date's midnight."""
    day_offset = minutes // MINUTES_PER_DAY
    time_of_day = minutes % MINUTES_PER_DAY
    return add_days(reference_date, day_offset), minutes_to_time(time_of_day)


def duration_minutes(
    start_date: str,
    start_time: Optional[str],
    end_date: Optional[str],
    end_time: Optional[str],
    start_hour: int,
) -> int:
    """
    Duration of a task in minutes.

    Resolved in priority order:
    1. end_time holds a full "YYYY-MM-DDTHH:MM" timestamp: literal difference.
    2. end_time only: paired with end_date (or start_date); an end strictly
       before the start moves to the following day. End equal to start is
       zero minutes, not 24 hours.
    3. No end time but a different end_date: ends at (start_hour - 1):59 of end_date.
    4. Nothing: 60 minutes for a timed start, otherwise until
       (start_hour - 1):59 of the next date.

    A missing start_time is taken as start_hour:00.

    Args:
        start_date: YYYY-MM-DD
        start_time: HH:MM or None
        end_date: YYYY-MM-DD or None
        end_time: HH:MM, YYYY-MM-DDTHH:MM or None
        start_hour: Hour at which the visual day begins

    Returns:
        Duration in minutes
    """
    start_dt = to_datetime(start_date, start_time or start_of_day_time(start_hour))

    if end_time:
        if "T" in end_time:
            end_dt = datetime.fromisoformat(end_time)
        else:
            end_dt = to_datetime(end_date or start_date, end_time)
            if end_dt < start_dt:
                end_dt += timedelta(days=1)
    elif end_date and end_date != start_date:
        end_dt = to_datetime(end_date, end_of_day_time(start_hour))
    elif start_time:
        end_dt = start_dt + timedelta(minutes=DEFAULT_TIMED_DURATION_MINUTES)
    else:
        end_dt = to_datetime(add_days(start_date, 1), end_of_day_time(start_hour))

    return int((end_dt - start_dt).total_seconds() // 60)


def is_all_day(
    start_date: str,
    start_time: Optional[str],
    end_date: Optional[str],
    end_time: Optional[str],
    start_hour: int,
) -> bool:
    """True if the task has no start time or lasts at least a whole day."""
    if not start_time:
        return True
    return duration_minutes(start_date, start_time, end_date, end_time, start_hour) >= MINUTES_PER_DAY


def is_past_instant(
    date_str: str,
    time_str: Optional[str],
    start_hour: int,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check if a date/time lies in the past of the visual today.

    The date is compared with the visual date of now, not the calendar date.
    A bare date is never past on its own visual day.

    Args:
        date_str: YYYY-MM-DD - The date to check
        time_str: HH:MM or None
        start_hour: Hour at which the visual day begins
        now: Current instant (defaults to datetime.now())

    Returns:
        True if the date/time is in the past
    """
    if now is None:
        now = datetime.now()
    today = visual_today(start_hour, now)

    if date_str < today:
        return True
    if date_str > today or not time_str:
        return False

    return to_datetime(date_str, time_str) < now.replace(second=0, microsecond=0)


def is_past_deadline(deadline: str, start_hour: int, now: Optional[datetime] = None) -> bool:
    """Check a "YYYY-MM-DD" or "YYYY-MM-DDTHH:MM" deadline against the visual today."""
    date_part, _, time_part = deadline.partition("T")
    return is_past_instant(date_part, time_part or None, start_hour, now)
