"""Multi-day timeline grid widget.

Each visible day is a column of rows_per_hour rows per hour, starting at
start_hour:00. Timed task fragments are drawn as cards placed by the overlap
layout engine; while a drag is in progress the ghost segments of the pending
range are drawn over them.

The widget is the day-window locator for the drag rescheduler: it turns
screen positions into the day column under the pointer and that column's
vertical geometry.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from business_logic.auto_scroller import AutoScroller
from business_logic.day_partition import partition_day
from business_logic.drag_rescheduler import DragRescheduler
from business_logic.overlap_layout import calculate_layout
from business_logic.visual_clock import minutes_from
from config import config
from models import (
    DayTasks,
    DayWindowHit,
    DragOutcome,
    GhostSegment,
    GrabTarget,
    LayoutSlot,
    PointerSample,
    Task,
    TaskFragment,
)
from utils.time_utils import add_days

logger = logging.getLogger(__name__)

GUTTER_WIDTH = 6  # "HH:MM "
COLUMN_GAP = 1


@dataclass
class TimelineGeometry:
    """Cell geometry of the timeline grid, in widget content coordinates.

    Row 0 of every column is start_hour:00 of that column's date.
    """
    first_date: str
    days: int
    start_hour: int
    rows_per_hour: int = 4
    column_width: int = 24
    gutter_width: int = GUTTER_WIDTH

    @property
    def dates(self) -> List[str]:
        return [add_days(self.first_date, offset) for offset in range(self.days)]

    @property
    def pixels_per_minute(self) -> float:
        return self.rows_per_hour / 60

    @property
    def total_rows(self) -> int:
        return 24 * self.rows_per_hour

    @property
    def total_width(self) -> int:
        return self.gutter_width + self.days * (self.column_width + COLUMN_GAP)

    def column_left(self, index: int) -> int:
        """First cell of a day column."""
        return self.gutter_width + index * (self.column_width + COLUMN_GAP)

    def column_at(self, x: float) -> Optional[int]:
        """Index of the day column at content x, or None over the gutter or past the last day.

        The gap after a column counts as part of that column.
        """
        offset = math.floor(x) - self.gutter_width
        if offset < 0:
            return None
        index = offset // (self.column_width + COLUMN_GAP)
        if index >= self.days:
            return None
        return index

    def locate(self, x: float, y: float, origin_x: float = 0, origin_y: float = 0) -> Optional[DayWindowHit]:
        """
        Day window under a screen position.

        Args:
            x: Screen x
            y: Screen y
            origin_x: Screen x of content column 0
            origin_y: Screen y of content row 0 (start_hour:00)

        Returns:
            DayWindowHit, or None when x is outside every day column.
            Positions above or below the grid still hit the column so the
            caller can extrapolate.
        """
        index = self.column_at(x - origin_x)
        if index is None:
            return None
        return DayWindowHit(
            date=self.dates[index],
            pixels_per_minute=self.pixels_per_minute,
            window_top_pixel=origin_y,
        )

    def row_span(self, top_offset_minutes: float, height_minutes: float) -> Tuple[int, int]:
        """First and last row (inclusive) covered by a range inside one window. Never empty."""
        first = math.floor(top_offset_minutes * self.pixels_per_minute)
        last = math.ceil((top_offset_minutes + height_minutes) * self.pixels_per_minute) - 1
        first = min(max(first, 0), self.total_rows - 1)
        last = min(max(last, first), self.total_rows - 1)
        return first, last

    def slot_cells(self, slot: LayoutSlot) -> Tuple[int, int]:
        """Left cell offset and width in cells of a layout slot inside a column."""
        left = round(self.column_width * slot.left_percent / 100)
        left = min(left, self.column_width - 1)
        width = max(1, round(self.column_width * slot.width_percent / 100))
        return left, min(width, self.column_width - left)

    def time_label(self, row: int) -> str:
        """Gutter label for a row: the hour on full-hour rows, blank otherwise."""
        if row % self.rows_per_hour:
            return ""
        hour = (self.start_hour + row // self.rows_per_hour) % 24
        return f"{hour:02d}:00"


@dataclass(frozen=True)
class Card:
    """A fragment placed on the grid."""
    fragment: TaskFragment
    day_index: int
    top_row: int
    bottom_row: int
    left: int
    width: int
    z_index: int

    def contains(self, day_index: int, cell: int, row: int) -> bool:
        return (
            day_index == self.day_index
            and self.top_row <= row <= self.bottom_row
            and self.left <= cell < self.left + self.width
        )

    def handle_at(self, cell: int, row: int, ctrl: bool = False) -> str:
        """Which drag handle a press at (cell, row) inside the card grabs.

        The top and bottom rows of cards at least three rows tall resize. The
        bottom-right cell, or any press with ctrl held, moves the task by its
        end.
        """
        if ctrl or (row == self.bottom_row and cell == self.left + self.width - 1):
            return "move-end"
        if self.bottom_row - self.top_row >= 2:
            if row == self.top_row:
                return "resize-start"
            if row == self.bottom_row:
                return "resize-end"
        return "move"


def partition_visible_days(tasks: Sequence[Task], geometry: TimelineGeometry) -> List[DayTasks]:
    """Partition tasks into the visible days. Undated tasks go to the first column."""
    return [
        partition_day(tasks, day, geometry.start_hour, geometry.first_date)
        for day in geometry.dates
    ]


def build_cards(
    geometry: TimelineGeometry,
    days: Sequence[DayTasks],
    layouts: Sequence[Dict[str, LayoutSlot]],
) -> List[Card]:
    """Place every timed fragment of the visible days, lowest z_index first."""
    cards = []
    window_start = geometry.start_hour * 60
    for day_index, (day, layout) in enumerate(zip(days, layouts)):
        for fragment in day.timed:
            slot = layout.get(fragment.id)
            if slot is None:
                continue
            top = minutes_from(day.date, fragment.start_date, fragment.start_time) - window_start
            height = 0
            if fragment.end_date and fragment.end_time:
                height = minutes_from(day.date, fragment.end_date, fragment.end_time) - window_start - top
            top_row, bottom_row = geometry.row_span(top, height)
            left, width = geometry.slot_cells(slot)
            cards.append(Card(fragment, day_index, top_row, bottom_row, left, width, slot.z_index))
    cards.sort(key=lambda card: card.z_index)
    return cards


def grab_at(
    geometry: TimelineGeometry, cards: Sequence[Card], x: float, y: float, ctrl: bool = False
) -> Optional[GrabTarget]:
    """
    Hit-test a press in content coordinates.

    Returns:
        GrabTarget for the topmost card under the press, or None
    """
    day_index = geometry.column_at(x)
    if day_index is None:
        return None
    cell = math.floor(x) - geometry.column_left(day_index)
    row = math.floor(y)

    for card in reversed(cards):
        if card.contains(day_index, cell, row):
            return GrabTarget(
                task_id=card.fragment.original_task_id,
                handle=card.handle_at(cell, row, ctrl),
                fragment=card.fragment.segment,
            )
    return None


def render_grid(
    geometry: TimelineGeometry,
    cards: Sequence[Card],
    ghosts: Sequence[GhostSegment] = (),
    selected_task_id: Optional[str] = None,
) -> Text:
    """Draw the grid, cards and ghost segments as Rich text."""
    line_style = f"{config.color_bg_medium}"
    card_style = f"{config.color_text} on {config.color_bg_medium}"
    selected_style = f"bold {config.color_text} on {config.color_accent}"
    ghost_style = f"{config.color_secondary}"

    canvas: List[List[Tuple[str, str]]] = []
    for row in range(geometry.total_rows):
        fill = "┈" if row % geometry.rows_per_hour == 0 else " "
        cells = [(" ", "")] * geometry.gutter_width
        for _ in range(geometry.days):
            cells.extend([(fill, line_style)] * geometry.column_width)
            cells.append(("│", line_style))
        label = geometry.time_label(row)
        for offset, char in enumerate(label):
            cells[offset] = (char, f"dim {config.color_primary}")
        canvas.append(cells)

    for card in cards:
        style = selected_style if card.fragment.original_task_id == selected_task_id else card_style
        start = geometry.column_left(card.day_index) + card.left
        title = f"{card.fragment.start_time} {card.fragment.task.content}"
        for row in range(card.top_row, card.bottom_row + 1):
            text = title if row == card.top_row else ""
            for offset in range(card.width):
                if offset == 0:
                    char = "▌"
                elif offset - 1 < len(text):
                    char = text[offset - 1]
                else:
                    char = " "
                canvas[row][start + offset] = (char, style)

    dates = geometry.dates
    for segment in ghosts:
        if segment.date not in dates:
            continue
        day_index = dates.index(segment.date)
        first, last = geometry.row_span(segment.top_offset_minutes, segment.height_minutes)
        start = geometry.column_left(day_index)
        for row in range(first, last + 1):
            for offset in range(geometry.column_width):
                canvas[row][start + offset] = ("░", ghost_style)

    text = Text(no_wrap=True, overflow="crop")
    for index, cells in enumerate(canvas):
        if index:
            text.append("\n")
        for char, style in cells:
            text.append(char, style)
    return text


class TimelineWidget(Static):
    """Timeline grid that reschedules tasks by mouse drag.

    Must be mounted inside a scrollable container; the container's scroll
    offset is part of the locator geometry and is driven by auto-scroll.
    """

    class TaskClicked(Message):
        """A card was pressed and released without dragging."""

        def __init__(self, task_id: str) -> None:
            super().__init__()
            self.task_id = task_id

    class TaskRescheduled(Message):
        """A drag finished with a new time range for a task."""

        def __init__(self, outcome: DragOutcome) -> None:
            super().__init__()
            self.outcome = outcome

    DEFAULT_CSS = """
    TimelineWidget {
        width: auto;
        height: auto;
    }
    """

    def __init__(
        self,
        geometry: TimelineGeometry,
        get_task: Callable[[str], Optional[Task]],
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.geometry = geometry
        self.days: List[DayTasks] = []
        self.layouts: List[Dict[str, LayoutSlot]] = []
        self.cards: List[Card] = []
        self.ghosts: Tuple[GhostSegment, ...] = ()
        self.selected_task_id: Optional[str] = None
        self.rescheduler = DragRescheduler(
            get_task,
            self.locate,
            geometry.start_hour,
            config.snap_interval_minutes,
            config.drag_threshold,
        )
        self.auto_scroller = AutoScroller(
            self._scroll_container_by,
            self._on_auto_scrolled,
            config.auto_scroll_band,
            config.auto_scroll_max_speed,
        )
        self._scroll_timer = None

    def show_tasks(self, tasks: Sequence[Task], first_date: str) -> None:
        """Partition and lay out tasks for the visible days starting at first_date."""
        self.geometry.first_date = first_date
        self.rescheduler.anchor_date = first_date
        start_hour = self.geometry.start_hour
        self.days = partition_visible_days(tasks, self.geometry)
        self.layouts = [calculate_layout(day.timed, day.date, start_hour) for day in self.days]
        self.cards = build_cards(self.geometry, self.days, self.layouts)
        logger.debug("Showing %d days from %s: %d cards", self.geometry.days, first_date, len(self.cards))
        self.refresh(layout=True)

    def render(self) -> Text:
        return render_grid(self.geometry, self.cards, self.ghosts, self.selected_task_id)

    def _content_origin(self) -> Tuple[float, float]:
        # Screen position of content cell (0, 0), including scroll
        container = self.parent
        if container is None or not hasattr(container, "scroll_offset"):
            return self.region.x, self.region.y
        region = container.content_region
        return region.x - container.scroll_x, region.y - container.scroll_y

    def locate(self, x: float, y: float) -> Optional[DayWindowHit]:
        """Day-window locator for screen coordinates."""
        origin_x, origin_y = self._content_origin()
        return self.geometry.locate(x, y, origin_x, origin_y)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        """Press on a card starts a drag."""
        grab = grab_at(self.geometry, self.cards, event.x, event.y, event.ctrl)
        if grab is None:
            return
        sample = PointerSample(event.screen_x, event.screen_y)
        if self.rescheduler.begin(sample, grab):
            self.capture_mouse()
            event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        """Track the pointer during a drag."""
        if not self.rescheduler.is_active:
            return
        sample = PointerSample(event.screen_x, event.screen_y)
        self.ghosts = self.rescheduler.update(sample)
        self._update_auto_scroll(sample.y)
        self.refresh()
        event.stop()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        """Release finishes the drag and reports the result."""
        if not self.rescheduler.is_active:
            return
        self.release_mouse()
        self._stop_auto_scroll()
        outcome = self.rescheduler.end(PointerSample(event.screen_x, event.screen_y))
        self.ghosts = ()
        self.refresh()
        event.stop()
        if outcome is None:
            return
        if outcome.is_click:
            self.selected_task_id = outcome.task_id
            self.post_message(self.TaskClicked(outcome.task_id))
        else:
            self.post_message(self.TaskRescheduled(outcome))

    def cancel_drag(self) -> bool:
        """Abort an active drag. Returns True if there was one."""
        if not self.rescheduler.is_active:
            return False
        self.rescheduler.cancel()
        self.release_mouse()
        self._stop_auto_scroll()
        self.ghosts = ()
        self.refresh()
        return True

    def _update_auto_scroll(self, pointer_y: float) -> None:
        container = self.parent
        if container is None or not hasattr(container, "scroll_offset"):
            return
        region = container.content_region
        if self.auto_scroller.handle(pointer_y, region.y, region.bottom):
            if self._scroll_timer is None:
                self._scroll_timer = self.set_interval(config.auto_scroll_interval, self.auto_scroller.tick)
        else:
            self._stop_auto_scroll()

    def _stop_auto_scroll(self) -> None:
        self.auto_scroller.stop()
        if self._scroll_timer is not None:
            self._scroll_timer.stop()
            self._scroll_timer = None

    def _scroll_container_by(self, delta: int) -> int:
        container = self.parent
        if container is None or not hasattr(container, "scroll_offset"):
            return 0
        before = container.scroll_y
        container.scroll_to(y=before + delta, animate=False, immediate=True)
        return round(container.scroll_y - before)

    def _on_auto_scrolled(self, moved: int) -> None:
        # Same pointer, new content under it
        self.ghosts = self.rescheduler.replay()
        self.refresh()
