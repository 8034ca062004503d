"""Assign tasks to visual days.

Timed tasks shorter than a day are placed in the day window where they start.
A timed task that crosses the start_hour boundary is split into a 'before'
and an 'after' fragment so each window renders only its own part; both
fragments keep the original task id so a drag on either moves the whole task.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from business_logic.property_resolver import calculate_start
from business_logic.visual_clock import (
    duration_minutes,
    is_all_day,
    start_of_day_time,
    to_datetime,
    visual_date_of,
    visual_start_date,
)
from models import DayTasks, Task, TaskFragment
from utils.time_utils import add_days

logger = logging.getLogger(__name__)


def task_span(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> Tuple[datetime, datetime]:
    """Effective start and end instants of a task."""
    start = calculate_start(task, start_hour, anchor_date)
    start_dt = to_datetime(start.date, start.time)
    minutes = duration_minutes(start.date, task.start_time, task.end_date, task.end_time, start_hour)
    return start_dt, start_dt + timedelta(minutes=minutes)


def _visual_end_date(start_dt: datetime, end_dt: datetime, start_hour: int) -> str:
    # An end exactly on the boundary belongs to the window it closes
    if end_dt <= start_dt:
        return visual_date_of(start_dt, start_hour).isoformat()
    return visual_date_of(end_dt - timedelta(minutes=1), start_hour).isoformat()


def is_all_day_task(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> bool:
    """True for untimed tasks and tasks lasting a whole day or longer."""
    start = calculate_start(task, start_hour, anchor_date)
    return is_all_day(start.date, task.start_time, task.end_date, task.end_time, start_hour)


def should_split(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> bool:
    """True when a timed, shorter-than-a-day task crosses the day boundary."""
    if is_all_day_task(task, start_hour, anchor_date):
        return False
    start_dt, end_dt = task_span(task, start_hour, anchor_date)
    return visual_date_of(start_dt, start_hour).isoformat() != _visual_end_date(start_dt, end_dt, start_hour)


def _fragment(task: Task, start_dt: datetime, end_dt: datetime, segment: Optional[str]) -> TaskFragment:
    return TaskFragment(
        task=task,
        original_task_id=task.id,
        start_date=start_dt.date().isoformat(),
        start_time=start_dt.strftime("%H:%M"),
        end_date=end_dt.date().isoformat(),
        end_time=end_dt.strftime("%H:%M"),
        segment=segment,
    )


def split_at_boundary(
    task: Task, start_hour: int, anchor_date: Optional[str] = None
) -> Tuple[TaskFragment, TaskFragment]:
    """
    Split a task into two fragments at the day boundary after its start.

    Args:
        task: Timed task that crosses the boundary (see should_split)
        start_hour: Hour at which the visual day begins
        anchor_date: Date used when the task has no start date

    Returns:
        Tuple of (before, after) fragments

    Raises:
        ValueError: If the task has no start time
    """
    if not task.is_timed:
        raise ValueError(f"Task {task.id} has no start time to split")

    start_dt, end_dt = task_span(task, start_hour, anchor_date)
    boundary_date = add_days(visual_date_of(start_dt, start_hour).isoformat(), 1)
    boundary = to_datetime(boundary_date, start_of_day_time(start_hour))

    return (
        _fragment(task, start_dt, boundary, "before"),
        _fragment(task, boundary, end_dt, "after"),
    )


def fragments_for_task(task: Task, start_hour: int, anchor_date: Optional[str] = None) -> List[TaskFragment]:
    """Renderable fragments of a timed task (one, or two when split)."""
    if should_split(task, start_hour, anchor_date):
        return list(split_at_boundary(task, start_hour, anchor_date))
    start_dt, end_dt = task_span(task, start_hour, anchor_date)
    return [_fragment(task, start_dt, end_dt, None)]


def partition_day(
    tasks: Iterable[Task], day: str, start_hour: int, anchor_date: Optional[str] = None
) -> DayTasks:
    """
    Collect what is visible on one visual day.

    Args:
        tasks: All tasks
        day: Visual date (YYYY-MM-DD)
        start_hour: Hour at which the visual day begins
        anchor_date: Date for tasks without a start date (defaults to day)

    Returns:
        DayTasks with timed fragments starting in this day window and
        all-day tasks whose span covers it
    """
    anchor = anchor_date or day
    result = DayTasks(date=day)

    for task in tasks:
        if is_all_day_task(task, start_hour, anchor):
            start = calculate_start(task, start_hour, anchor)
            start_dt, end_dt = task_span(task, start_hour, anchor)
            first = visual_start_date(start.date, task.start_time, start_hour)
            last = _visual_end_date(start_dt, end_dt, start_hour)
            if first <= day <= last:
                result.all_day.append(task)
            continue

        for fragment in fragments_for_task(task, start_hour, anchor):
            fragment_start = to_datetime(fragment.start_date, fragment.start_time)
            if visual_date_of(fragment_start, start_hour).isoformat() == day:
                result.timed.append(fragment)

    logger.debug("Day %s: %d timed fragments, %d all-day tasks", day, len(result.timed), len(result.all_day))
    return result
