"""Data models for timeline scheduling."""
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional


# Field names written atomically by a reschedule
TIME_RANGE_FIELDS = ("start_date", "start_time", "end_date", "end_time")

# Flag recording whether each temporal field was authored explicitly
_EXPLICIT_FLAGS = {
    "start_date": "explicit_start_date",
    "start_time": "explicit_start_time",
    "end_date": "explicit_end_date",
    "end_time": "explicit_end_time",
}


@dataclass
class Task:
    """Represents a single task and its temporal data.

    Dates are ISO strings (YYYY-MM-DD) and times are HH:MM strings. Any of them
    may be missing; the explicit_* flags record whether a field was authored
    by the user or is absent/inherited. The deadline is either a date or a
    date and time joined by "T".
    """
    id: str
    content: str = ""
    start_date: Optional[str] = None
    start_time: Optional[str] = None
    end_date: Optional[str] = None
    end_time: Optional[str] = None
    deadline: Optional[str] = None
    explicit_start_date: bool = False
    explicit_start_time: bool = False
    explicit_end_date: bool = False
    explicit_end_time: bool = False

    @property
    def is_timed(self) -> bool:
        """True if the task has a start time."""
        return self.start_time is not None

    def apply_updates(self, updates: Dict[str, Optional[str]]) -> None:
        """Replace fields in place, marking written temporal fields explicit.

        Args:
            updates: Mapping of field name to new value

        Raises:
            KeyError: If a field name is not a Task field
        """
        known = {f.name for f in fields(self)}
        for name, value in updates.items():
            if name not in known or name == "id":
                raise KeyError(f"Unknown task field: {name}")
            setattr(self, name, value)
            flag = _EXPLICIT_FLAGS.get(name)
            if flag is not None:
                setattr(self, flag, value is not None)

    def to_dict(self) -> dict:
        """Convert task to a JSON-serializable dict, omitting unset fields."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def from_dict(cls, data: dict) -> 'Task':
        """Build a task from a dict produced by to_dict().

        Explicit flags that are not stored default to whether the matching
        field is present.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for field_name, flag in _EXPLICIT_FLAGS.items():
            if flag not in values:
                values[flag] = values.get(field_name) is not None
        return cls(**values)


@dataclass(frozen=True)
class ResolvedProperty:
    """Effective display value of a start, end or deadline property."""
    date: Optional[str] = None
    time: Optional[str] = None
    date_implicit: bool = False
    time_implicit: bool = False
    is_unset: bool = False


@dataclass(frozen=True)
class TaskFragment:
    """The part of a task shown inside one visual day window.

    Unsplit tasks produce a single fragment whose segment is None. A task
    that crosses the day boundary produces a 'before' and an 'after' fragment
    that share original_task_id.
    """
    task: Task
    original_task_id: str
    start_date: str
    start_time: str
    end_date: Optional[str]
    end_time: Optional[str]
    segment: Optional[str] = None

    @property
    def id(self) -> str:
        if self.segment is None:
            return self.original_task_id
        return f"{self.original_task_id}:{self.segment}"


@dataclass(frozen=True)
class LayoutSlot:
    """Horizontal placement of a task inside its day column."""
    task_id: str
    width_percent: int
    left_percent: int
    z_index: int


@dataclass(frozen=True)
class PointerSample:
    """Pointer position in screen coordinates."""
    x: float
    y: float


@dataclass(frozen=True)
class DayWindowHit:
    """Day column under the pointer, as reported by the day-window locator."""
    date: str
    pixels_per_minute: float
    window_top_pixel: float


@dataclass(frozen=True)
class GrabTarget:
    """What the pointer pressed on.

    handle is one of 'move', 'move-end', 'resize-start', 'resize-end'.
    fragment is None for an unsplit task, or 'before'/'after' when the
    pressed card is one piece of a task split at the day boundary.
    """
    task_id: str
    handle: str = "move"
    fragment: Optional[str] = None


@dataclass(frozen=True)
class GhostSegment:
    """Portion of a dragged range visible in one day window."""
    date: str
    top_offset_minutes: int
    height_minutes: int


@dataclass(frozen=True)
class TimeRange:
    """Concrete start and end of a task."""
    start_date: str
    start_time: str
    end_date: Optional[str]
    end_time: Optional[str]

    def as_fields(self) -> Dict[str, Optional[str]]:
        """All four fields, for a single atomic replacement."""
        return {name: getattr(self, name) for name in TIME_RANGE_FIELDS}


@dataclass(frozen=True)
class DragOutcome:
    """Result of releasing a drag.

    time_range is None when the gesture was a selection click.
    """
    task_id: str
    time_range: Optional[TimeRange] = None

    @property
    def is_click(self) -> bool:
        return self.time_range is None


@dataclass
class DayTasks:
    """Tasks visible on one visual day."""
    date: str
    timed: List[TaskFragment] = field(default_factory=list)
    all_day: List[Task] = field(default_factory=list)
