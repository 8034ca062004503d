"""Tests for visual day arithmetic."""
import pytest
from datetime import date, datetime
from business_logic.visual_clock import (
    duration_minutes,
    end_of_day_time,
    instant_at,
    is_all_day,
    is_past_deadline,
    is_past_instant,
    minutes_from,
    start_of_day_time,
    visual_date_of,
    visual_start_date,
    visual_today,
)


class TestVisualDate:
    """Test suite for mapping instants to visual days."""

    def test_before_start_hour_belongs_to_previous_day(self):
        """Test 04:30 is still the previous visual day when the day starts at 05:00."""
        assert visual_date_of(datetime(2024, 1, 10, 4, 30), 5) == date(2024, 1, 9)

    def test_start_hour_begins_new_day(self):
        """Test 05:00 opens the new visual day."""
        assert visual_date_of(datetime(2024, 1, 10, 5, 0), 5) == date(2024, 1, 10)

    def test_midnight_start_hour(self):
        """Test start_hour 0 matches calendar dates."""
        assert visual_date_of(datetime(2024, 1, 10, 0, 0), 0) == date(2024, 1, 10)

    def test_visual_today_uses_now(self):
        """Test visual_today at 02:00 reports yesterday."""
        assert visual_today(5, datetime(2024, 1, 10, 2, 0)) == "2024-01-09"

    def test_visual_start_date_of_early_task(self):
        """Test a timed start before start_hour belongs to the previous visual day."""
        assert visual_start_date("2024-01-10", "01:00", 5) == "2024-01-09"
        assert visual_start_date("2024-01-10", "09:00", 5) == "2024-01-10"
        assert visual_start_date("2024-01-10", None, 5) == "2024-01-10"


class TestDayBoundaryTimes:
    """Test suite for implicit day start and end times."""

    def test_start_of_day(self):
        """Test start time is start_hour:00."""
        assert start_of_day_time(5) == "05:00"

    def test_end_of_day(self):
        """Test end time is one minute before the next day starts."""
        assert end_of_day_time(5) == "04:59"

    def test_end_of_day_wraps_at_midnight(self):
        """Test start_hour 0 ends the day at 23:59."""
        assert end_of_day_time(0) == "23:59"


class TestMinuteOffsets:
    """Test suite for minute offsets from a reference date."""

    def test_minutes_from_next_day(self):
        """Test offsets continue past midnight."""
        assert minutes_from("2024-01-10", "2024-01-11", "01:30") == 1530

    def test_instant_at_negative(self):
        """Test negative offsets land on the previous date."""
        assert instant_at("2024-01-10", -60) == ("2024-01-09", "23:00")

    def test_instant_at_inverts_minutes_from(self):
        """Test instant_at is the inverse of minutes_from."""
        minutes = minutes_from("2024-01-10", "2024-01-12", "07:15")
        assert instant_at("2024-01-10", minutes) == ("2024-01-12", "07:15")


class TestDuration:
    """Test suite for duration_minutes."""

    def test_full_timestamp_end(self):
        """Test a timestamp end is a literal difference."""
        assert duration_minutes("2024-01-10", "22:00", None, "2024-01-12T22:00", 5) == 2 * 1440

    def test_end_time_same_day(self):
        """Test an end time later on the same day."""
        assert duration_minutes("2024-01-10", "09:00", None, "10:30", 5) == 90

    def test_end_time_before_start_rolls_over(self):
        """Test an end time before the start means the next day."""
        assert duration_minutes("2024-01-10", "23:00", None, "01:30", 5) == 150

    def test_end_time_equal_to_start_is_zero(self):
        """Test equal start and end is zero, not a full day."""
        assert duration_minutes("2024-01-10", "09:00", None, "09:00", 5) == 0

    def test_end_time_uses_end_date(self):
        """Test an end time is paired with end_date when given."""
        assert duration_minutes("2024-01-10", "09:00", "2024-01-11", "09:00", 5) == 1440

    def test_end_date_without_time(self):
        """Test a different end date ends at (start_hour - 1):59 of that date."""
        assert duration_minutes("2024-01-10", "05:00", "2024-01-12", None, 5) == 2 * 1440 - 1

    def test_timed_without_end_is_one_hour(self):
        """Test the default duration of a timed task."""
        assert duration_minutes("2024-01-10", "09:00", None, None, 5) == 60

    def test_untimed_without_end_is_one_day(self):
        """Test an untimed task runs to the end of its visual day."""
        assert duration_minutes("2024-01-10", None, None, None, 5) == 1439

    def test_is_all_day(self):
        """Test all-day detection."""
        assert is_all_day("2024-01-10", None, None, None, 5)
        assert not is_all_day("2024-01-10", "09:00", None, None, 5)
        assert is_all_day("2024-01-10", "09:00", "2024-01-11", "09:00", 5)


class TestPastChecks:
    """Test suite for is_past_instant and is_past_deadline."""

    def test_earlier_date_is_past(self, fixed_now):
        """Test dates before the visual today are past."""
        assert is_past_instant("2024-01-09", None, 5, fixed_now)

    def test_later_date_is_not_past(self, fixed_now):
        """Test future dates are not past."""
        assert not is_past_instant("2024-01-11", "00:00", 5, fixed_now)

    def test_bare_date_today_is_not_past(self, fixed_now):
        """Test a date without time is never past on its own day."""
        assert not is_past_instant("2024-01-10", None, 5, fixed_now)

    def test_time_today(self, fixed_now):
        """Test times on the visual today compare with now."""
        assert is_past_instant("2024-01-10", "13:59", 5, fixed_now)
        assert not is_past_instant("2024-01-10", "14:01", 5, fixed_now)

    def test_after_midnight_uses_visual_today(self):
        """Test at 02:00 the previous calendar date is still today."""
        now = datetime(2024, 1, 11, 2, 0)
        assert not is_past_instant("2024-01-10", None, 5, now)

    @pytest.mark.parametrize("deadline,expected", [
        ("2024-01-09", True),
        ("2024-01-10", False),
        ("2024-01-10T12:00", True),
        ("2024-01-10T18:00", False),
    ])
    def test_deadline(self, fixed_now, deadline, expected):
        """Test deadlines with and without a time."""
        assert is_past_deadline(deadline, 5, fixed_now) is expected
