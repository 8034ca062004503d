"""Resolve a task's effective start, end and deadline.

Tasks may leave any part of their timing unspecified. The resolver fills the
gaps from the explicit_* flags so every task has a concrete start and end to
display, and records which parts were derived so the renderer can show them
differently.

Period rules:
- explicit start and end: the authored values
- start date only: start_hour:00 until (start_hour - 1):59 of the next day
- start time only: one hour from the start
- no start: the anchor date (left edge of the view, or the visual today)
"""
from typing import Dict, Optional

from business_logic.visual_clock import (
    DEFAULT_TIMED_DURATION_MINUTES,
    end_of_day_time,
    start_of_day_time,
    visual_today,
)
from models import ResolvedProperty, Task
from utils.time_utils import MINUTES_PER_DAY, add_days, minutes_to_time, time_to_minutes


class PropertyResolver:
    """Derives display values for start, end and deadline. Stateless."""

    @staticmethod
    def _anchor(start_hour: int, anchor_date: Optional[str]) -> str:
        return anchor_date or visual_today(start_hour)

    @staticmethod
    def calculate_start(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> ResolvedProperty:
        """
        Resolve the start property.

        Args:
            task: Task to resolve
            start_hour: Hour at which the visual day begins
            anchor_date: Date used when the task has no start date
                (defaults to the visual today)

        Returns:
            ResolvedProperty with the effective start
        """
        implicit_date = PropertyResolver._anchor(start_hour, anchor_date)

        if task.explicit_start_date:
            if task.explicit_start_time:
                return ResolvedProperty(task.start_date, task.start_time, False, False)
            return ResolvedProperty(task.start_date, start_of_day_time(start_hour), False, True)

        if task.explicit_start_time:
            # Time-only notation: the date is inherited
            return ResolvedProperty(task.start_date or implicit_date, task.start_time, True, False)

        return ResolvedProperty(implicit_date, start_of_day_time(start_hour), True, True)

    @staticmethod
    def calculate_end(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> ResolvedProperty:
        """
        Resolve the end property. The first matching rule wins.

        Args:
            task: Task to resolve
            start_hour: Hour at which the visual day begins
            anchor_date: Date used when the task has no start date
                (defaults to the visual today)

        Returns:
            ResolvedProperty with the effective end
        """
        effective_start_date = task.start_date or PropertyResolver._anchor(start_hour, anchor_date)

        if task.explicit_end_date:
            if task.explicit_end_time:
                return ResolvedProperty(task.end_date, task.end_time, False, False)
            return ResolvedProperty(task.end_date, end_of_day_time(start_hour), False, True)

        if task.explicit_end_time:
            return ResolvedProperty(effective_start_date, task.end_time, True, False)

        if task.explicit_start_time:
            end_minutes = time_to_minutes(task.start_time) + DEFAULT_TIMED_DURATION_MINUTES
            end_date = effective_start_date
            if end_minutes >= MINUTES_PER_DAY:
                end_date = add_days(effective_start_date, 1)
            return ResolvedProperty(end_date, minutes_to_time(end_minutes), True, True)

        return ResolvedProperty(add_days(effective_start_date, 1), end_of_day_time(start_hour), True, True)

    @staticmethod
    def calculate_deadline(task: Task) -> ResolvedProperty:
        """Resolve the deadline property; deadlines are never implicit."""
        if not task.deadline:
            return ResolvedProperty(is_unset=True)

        if "T" in task.deadline:
            date_part, time_part = task.deadline.split("T", 1)
            return ResolvedProperty(date_part, time_part, False, False)

        return ResolvedProperty(task.deadline, None, False, False)


def calculate_start(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> ResolvedProperty:
    """Module-level convenience function. See PropertyResolver.calculate_start."""
    return PropertyResolver.calculate_start(task, start_hour, anchor_date)


def calculate_end(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> ResolvedProperty:
    """Module-level convenience function. See PropertyResolver.calculate_end."""
    return PropertyResolver.calculate_end(task, start_hour, anchor_date)


def calculate_deadline(task: Task) -> ResolvedProperty:
    """Module-level convenience function. See PropertyResolver.calculate_deadline."""
    return PropertyResolver.calculate_deadline(task)


def resolve_task(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> Dict[str, ResolvedProperty]:
    """Resolve start, end and deadline together.

    Returns:
        Dict with keys "start", "end" and "deadline"
    """
    return {
        "start": calculate_start(task, start_hour, anchor_date),
        "end": calculate_end(task, start_hour, anchor_date),
        "deadline": calculate_deadline(task),
    }


def format_property(label: str, prop: ResolvedProperty) -> str:
    """
    Format a resolved property as Rich markup.

    Implicit parts are shown dim and italic, e.g. "Start: 2026-02-06 [dim italic]13:00[/dim italic]".
    An unset property shows "-".
    """
    if prop.is_unset:
        return f"{label}-"

    def styled(text: str, implicit: bool) -> str:
        return f"[dim italic]{text}[/dim italic]" if implicit else text

    parts = []
    if prop.date:
        parts.append(styled(prop.date, prop.date_implicit))
    if prop.date and prop.time:
        parts.append(styled(" ", prop.date_implicit))
    if prop.time:
        parts.append(styled(prop.time, prop.time_implicit))

    return label + "".join(parts)
