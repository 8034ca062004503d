"""Drag-to-reschedule engine for timeline tasks.

A gesture is press (begin), any number of moves (update) and a release
(end). All state for one gesture lives in an immutable DragSession; every
pointer sample produces a new session computed from scratch, so replaying
the same sample (for example from the auto-scroll timer) gives the same
result.

Minutes in this module are counted from midnight of the session's
reference date, the day column under the pointer.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from business_logic.property_resolver import calculate_start
from business_logic.visual_clock import duration_minutes, instant_at, minutes_from
from models import DayWindowHit, DragOutcome, GhostSegment, GrabTarget, PointerSample, Task, TimeRange
from utils.time_utils import MINUTES_PER_DAY, add_days

logger = logging.getLogger(__name__)

MODE_MOVE = "move"
MODE_RESIZE_START = "resize-start"
MODE_RESIZE_END = "resize-end"

ANCHOR_START = "start"
ANCHOR_END = "end"

# Handle pressed -> gesture mode
HANDLE_MODES = {
    "move": MODE_MOVE,
    "move-end": MODE_MOVE,
    "resize-start": MODE_RESIZE_START,
    "resize-end": MODE_RESIZE_END,
}

# Handles on the trailing edge of a card
TRAILING_HANDLES = ("move-end", "resize-end")


@dataclass(frozen=True)
class DragSession:
    """State of one drag gesture.

    Only reference_date, last_window, has_moved, pending and segments change
    after begin; each change produces a new DragSession.
    """
    task: Task
    mode: str
    anchor_type: str
    reference_date: str
    duration_minutes: int
    pointer_time_offset_minutes: float
    snap_interval_minutes: int
    start_hour: int
    origin: PointerSample
    last_window: DayWindowHit
    drag_threshold: float = 1
    anchor_date: Optional[str] = None
    has_moved: bool = False
    pending: Optional[TimeRange] = None
    segments: Tuple[GhostSegment, ...] = ()


def pointer_minutes(sample: PointerSample, window: DayWindowHit, start_hour: int) -> float:
    """Minutes from the window date's midnight to the instant under the pointer."""
    return start_hour * 60 + (sample.y - window.window_top_pixel) / window.pixels_per_minute


def snap_minutes(minutes: float, interval: int) -> int:
    """Round to the nearest multiple of interval, halves rounding up."""
    return int(math.floor(minutes / interval + 0.5)) * interval


def task_start_minutes(task: Task, reference_date: str, start_hour: int,
                       anchor_date: Optional[str] = None) -> int:
    """Start of the task in reference_date minutes. Undated tasks sit on anchor_date."""
    start = calculate_start(task, start_hour, anchor_date or reference_date)
    return minutes_from(reference_date, start.date, start.time)


def task_duration_minutes(task: Task, reference_date: str, start_hour: int,
                          anchor_date: Optional[str] = None) -> int:
    """Duration of the full logical task, whatever fragment is on screen."""
    start = calculate_start(task, start_hour, anchor_date or reference_date)
    return duration_minutes(start.date, task.start_time, task.end_date, task.end_time, start_hour)


def window_segments(start: int, end: int, reference_date: str, start_hour: int) -> Tuple[GhostSegment, ...]:
    """
    Cut [start, end) into the parts visible in each day window.

    Windows one day before, at and after the reference date are checked.
    A range inside one window (which extends past midnight when
    start_hour > 0) gives one segment; a range crossing start_hour:00 gives
    two or three.

    Args:
        start: Range start, minutes from reference_date's midnight
        end: Range end, minutes from reference_date's midnight
        reference_date: Date of the window under the pointer
        start_hour: Hour at which the visual day begins

    Returns:
        Tuple of GhostSegment in time order
    """
    segments = []
    for offset_days in (-1, 0, 1):
        window_start = start_hour * 60 + offset_days * MINUTES_PER_DAY
        window_end = window_start + MINUTES_PER_DAY
        overlap_start = max(start, window_start)
        overlap_end = min(end, window_end)
        if overlap_start < overlap_end:
            segments.append(GhostSegment(
                date=add_days(reference_date, offset_days),
                top_offset_minutes=overlap_start - window_start,
                height_minutes=overlap_end - overlap_start,
            ))
    return tuple(segments)


def _range_from_minutes(reference_date: str, start: int, end: int) -> TimeRange:
    start_date, start_time = instant_at(reference_date, start)
    end_date, end_time = instant_at(reference_date, end)
    return TimeRange(start_date, start_time, end_date, end_time)


def begin_session(
    task: Task,
    grab: GrabTarget,
    sample: PointerSample,
    hit: DayWindowHit,
    start_hour: int,
    snap_interval_minutes: int,
    drag_threshold: float = 1,
    anchor_date: Optional[str] = None,
) -> Optional[DragSession]:
    """
    Start a gesture on a task.

    Args:
        task: The full logical task (not the fragment that was pressed)
        grab: Which handle of which card was pressed
        sample: Pointer position at press time
        hit: Day window under the pointer at press time
        start_hour: Hour at which the visual day begins
        snap_interval_minutes: Snap granularity
        drag_threshold: Pointer travel needed before the press counts as a drag
        anchor_date: Date an undated task is drawn on (defaults to the
            pressed column's date)

    Returns:
        New DragSession, or None if the press cannot start a gesture
        (unknown handle, or resizing the cut edge of a split fragment)
    """
    mode = HANDLE_MODES.get(grab.handle)
    if mode is None:
        logger.warning("Unknown drag handle %r on task %s", grab.handle, task.id)
        return None

    # The cut edge of a split fragment is the day boundary, not a task edge
    if (mode == MODE_RESIZE_START and grab.fragment == "after") or \
            (mode == MODE_RESIZE_END and grab.fragment == "before"):
        logger.debug("Blocked %s on %s fragment of task %s", mode, grab.fragment, task.id)
        return None

    anchor_type = ANCHOR_START
    if grab.handle in TRAILING_HANDLES or (mode == MODE_MOVE and grab.fragment == "after"):
        anchor_type = ANCHOR_END

    reference_date = hit.date
    snapshot = replace(task)
    duration = task_duration_minutes(snapshot, reference_date, start_hour, anchor_date)
    start = task_start_minutes(snapshot, reference_date, start_hour, anchor_date)
    anchor = start if anchor_type == ANCHOR_START else start + duration
    pointer = pointer_minutes(sample, hit, start_hour)

    if anchor_type == ANCHOR_START:
        offset = anchor - pointer
    else:
        offset = pointer - anchor

    return DragSession(
        task=snapshot,
        mode=mode,
        anchor_type=anchor_type,
        reference_date=reference_date,
        duration_minutes=duration,
        pointer_time_offset_minutes=offset,
        snap_interval_minutes=snap_interval_minutes,
        start_hour=start_hour,
        origin=sample,
        last_window=hit,
        drag_threshold=drag_threshold,
        anchor_date=anchor_date,
    )


def _anchor_minutes(session: DragSession, pointer: float) -> int:
    if session.anchor_type == ANCHOR_START:
        raw = pointer + session.pointer_time_offset_minutes
    else:
        raw = pointer - session.pointer_time_offset_minutes
    return snap_minutes(raw, session.snap_interval_minutes)


def _stored_start(task: Task, reference_date: str, start_hour: int,
                  anchor_date: Optional[str]) -> Tuple[int, Optional[Tuple[str, str]]]:
    minutes = task_start_minutes(task, reference_date, start_hour, anchor_date)
    if task.start_date and task.start_time:
        return minutes, (task.start_date, task.start_time)
    return minutes, None


def _stored_end(task: Task, reference_date: str, start_hour: int,
                anchor_date: Optional[str]) -> Tuple[int, Optional[Tuple[str, str]]]:
    minutes = task_start_minutes(task, reference_date, start_hour, anchor_date) + \
        task_duration_minutes(task, reference_date, start_hour, anchor_date)
    if task.end_date and task.end_time and "T" not in task.end_time:
        return minutes, (task.end_date, task.end_time)
    return minutes, None


def _resize_range(session: DragSession, reference_date: str, anchor: int) -> Tuple[int, int, TimeRange]:
    task, start_hour, snap = session.task, session.start_hour, session.snap_interval_minutes

    if session.mode == MODE_RESIZE_END:
        start, stored = _stored_start(task, reference_date, start_hour, session.anchor_date)
        end = max(anchor, start + snap)
        start_date, start_time = stored or instant_at(reference_date, start)
        end_date, end_time = instant_at(reference_date, end)
    else:
        end, stored = _stored_end(task, reference_date, start_hour, session.anchor_date)
        start = min(anchor, end - snap)
        start_date, start_time = instant_at(reference_date, start)
        end_date, end_time = stored or instant_at(reference_date, end)

    return start, end, TimeRange(start_date, start_time, end_date, end_time)


def advance(session: DragSession, sample: PointerSample, hit: Optional[DayWindowHit]) -> DragSession:
    """
    Recompute the gesture for a pointer sample.

    Pure: the result depends only on the arguments. When the locator
    missed (hit is None) the last known window geometry is extrapolated and
    no ghost segments are produced.

    Args:
        session: Current session
        sample: Pointer position
        hit: Day window under the pointer, or None

    Returns:
        Updated session with pending range and ghost segments
    """
    window = hit if hit is not None else session.last_window
    reference_date = window.date if hit is not None else session.reference_date

    has_moved = session.has_moved or (
        abs(sample.x - session.origin.x) >= session.drag_threshold
        or abs(sample.y - session.origin.y) >= session.drag_threshold
    )

    anchor = _anchor_minutes(session, pointer_minutes(sample, window, session.start_hour))

    if session.mode == MODE_MOVE:
        if session.anchor_type == ANCHOR_START:
            start, end = anchor, anchor + session.duration_minutes
        else:
            start, end = anchor - session.duration_minutes, anchor
        pending = _range_from_minutes(reference_date, start, end)
    else:
        start, end, pending = _resize_range(session, reference_date, anchor)

    segments: Tuple[GhostSegment, ...] = ()
    if hit is not None and has_moved:
        segments = window_segments(start, end, reference_date, session.start_hour)

    return replace(
        session,
        reference_date=reference_date,
        last_window=window,
        has_moved=has_moved,
        pending=pending,
        segments=segments,
    )


def finish(session: DragSession, sample: PointerSample, hit: Optional[DayWindowHit]) -> DragOutcome:
    """Close a gesture. A press that never moved past the threshold is a click."""
    final = advance(session, sample, hit)
    if not final.has_moved or final.pending is None:
        return DragOutcome(task_id=session.task.id)
    return DragOutcome(task_id=session.task.id, time_range=final.pending)


class DragRescheduler:
    """Drives at most one drag gesture at a time.

    The day-window locator translates screen positions into a day column
    and its geometry; task lookups go to the task store so that a drag on
    any fragment acts on the whole task.
    """

    def __init__(
        self,
        get_task: Callable[[str], Optional[Task]],
        locate: Callable[[float, float], Optional[DayWindowHit]],
        start_hour: int,
        snap_interval_minutes: int,
        drag_threshold: float = 1,
    ):
        """
        Initialize DragRescheduler.

        Args:
            get_task: Returns the stored task for an id, or None
            locate: Day-window locator for a screen position
            start_hour: Hour at which the visual day begins
            snap_interval_minutes: Snap granularity
            drag_threshold: Pointer travel needed before a press counts as a drag
        """
        self.get_task = get_task
        self.locate = locate
        self.start_hour = start_hour
        self.snap_interval_minutes = snap_interval_minutes
        self.drag_threshold = drag_threshold
        # First visible date; undated tasks are drawn there
        self.anchor_date: Optional[str] = None
        self.session: Optional[DragSession] = None
        self.last_sample: Optional[PointerSample] = None

    @property
    def is_active(self) -> bool:
        return self.session is not None

    def begin(self, sample: PointerSample, grab: GrabTarget) -> bool:
        """
        Start a gesture.

        Returns:
            True if a session started, False if one is already active or the
            press cannot start a gesture
        """
        if self.session is not None:
            logger.debug("Ignoring press on %s: a drag is already active", grab.task_id)
            return False

        task = self.get_task(grab.task_id)
        if task is None:
            logger.warning("Drag started on unknown task %s", grab.task_id)
            return False

        hit = self.locate(sample.x, sample.y)
        if hit is None:
            logger.debug("Press on task %s outside any day column", grab.task_id)
            return False

        self.session = begin_session(
            task, grab, sample, hit, self.start_hour, self.snap_interval_minutes, self.drag_threshold,
            self.anchor_date,
        )
        if self.session is not None:
            self.last_sample = sample
        return self.session is not None

    def update(self, sample: PointerSample) -> Tuple[GhostSegment, ...]:
        """Track the pointer. Returns the ghost segments to draw."""
        if self.session is None:
            return ()
        self.last_sample = sample
        self.session = advance(self.session, sample, self.locate(sample.x, sample.y))
        return self.session.segments

    def replay(self) -> Tuple[GhostSegment, ...]:
        """Re-run update with the last sample, e.g. after the viewport scrolled."""
        if self.session is None or self.last_sample is None:
            return ()
        return self.update(self.last_sample)

    def end(self, sample: PointerSample) -> Optional[DragOutcome]:
        """
        Release the pointer and close the session.

        Returns:
            DragOutcome (a click when the pointer barely moved), or None if no
            gesture was active
        """
        if self.session is None:
            return None

        session = self.session
        self.session = None
        self.last_sample = None
        outcome = finish(session, sample, self.locate(sample.x, sample.y))
        if outcome.is_click:
            logger.debug("Task %s clicked", outcome.task_id)
        else:
            logger.info("Task %s rescheduled to %s", outcome.task_id, outcome.time_range)
        return outcome

    def cancel(self) -> None:
        """Abort the active gesture without producing a result."""
        self.session = None
        self.last_sample = None
