"""Column layout for overlapping timed tasks in one day window.

Overlapping tasks are cascaded: each additional column is 10% narrower and
right-aligned, so the leading edge of every task stays visible and clickable.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from business_logic.visual_clock import duration_minutes
from models import LayoutSlot
from utils.time_utils import MINUTES_PER_DAY, time_to_minutes

CASCADE_STEP_PERCENT = 10
MIN_WIDTH_PERCENT = 50


@dataclass
class _Placed:
    task_id: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: '_Placed') -> bool:
        return not (self.start >= other.end or self.end <= other.start)


class OverlapLayoutEngine:
    """Assigns width, offset and stacking order to a day's timed tasks."""

    @staticmethod
    def minute_range(item: Any, day: str, start_hour: int) -> _Placed:
        """
        Start and end of a task in minutes from the day's midnight.

        Times before start_hour belong to the next calendar day of this
        window and are shifted by 24 hours. A missing end means one hour.

        Args:
            item: Task or TaskFragment (needs id, start_date, start_time, end_date, end_time)
            day: Visual date of the window
            start_hour: Hour at which the visual day begins
        """
        start = time_to_minutes(item.start_time)
        if start < start_hour * 60:
            start += MINUTES_PER_DAY
        length = duration_minutes(
            item.start_date or day, item.start_time, item.end_date, item.end_time, start_hour
        )
        return _Placed(item.id, start, start + length)

    @staticmethod
    def build_clusters(placed: Sequence[_Placed]) -> List[List[_Placed]]:
        """Group sorted tasks into maximal runs of transitively overlapping tasks."""
        clusters: List[List[_Placed]] = []
        current: List[_Placed] = []
        cluster_max_end = -1

        for item in placed:
            if current and item.start >= cluster_max_end:
                clusters.append(current)
                current = []
            if not current:
                cluster_max_end = item.end
            current.append(item)
            cluster_max_end = max(cluster_max_end, item.end)

        if current:
            clusters.append(current)
        return clusters

    @staticmethod
    def assign_columns(cluster: Sequence[_Placed]) -> Dict[str, int]:
        """First-fit: each task goes into the lowest column it overlaps nothing in."""
        columns: List[List[_Placed]] = []
        assigned: Dict[str, int] = {}

        for item in cluster:
            for index, members in enumerate(columns):
                if not any(item.overlaps(member) for member in members):
                    members.append(item)
                    assigned[item.task_id] = index
                    break
            else:
                columns.append([item])
                assigned[item.task_id] = len(columns) - 1

        return assigned

    @staticmethod
    def slot_for_column(task_id: str, column: int) -> LayoutSlot:
        width = max(MIN_WIDTH_PERCENT, 100 - CASCADE_STEP_PERCENT * column)
        return LayoutSlot(task_id=task_id, width_percent=width, left_percent=100 - width, z_index=column + 1)

    @staticmethod
    def calculate(items: Sequence[Any], day: str, start_hour: int) -> Dict[str, LayoutSlot]:
        """
        Lay out a day's timed tasks.

        Args:
            items: Timed tasks or fragments already filtered to this day window
            day: Visual date (YYYY-MM-DD)
            start_hour: Hour at which the visual day begins

        Returns:
            Dict of task id to LayoutSlot, in start-time order
        """
        placed = [OverlapLayoutEngine.minute_range(item, day, start_hour) for item in items]
        placed.sort(key=lambda p: (p.start, -p.length))

        layout: Dict[str, LayoutSlot] = {}
        for cluster in OverlapLayoutEngine.build_clusters(placed):
            columns = OverlapLayoutEngine.assign_columns(cluster)
            for item in cluster:
                layout[item.task_id] = OverlapLayoutEngine.slot_for_column(item.task_id, columns[item.task_id])
        return layout


def calculate_layout(items: Sequence[Any], day: str, start_hour: int) -> Dict[str, LayoutSlot]:
    """Module-level convenience function. See OverlapLayoutEngine.calculate."""
    return OverlapLayoutEngine.calculate(items, day, start_hour)
