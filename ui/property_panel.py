"""Side panel showing the resolved timing of the selected task."""
from typing import List, Optional

from textual.widgets import Static

from business_logic.property_resolver import format_property, resolve_task
from business_logic.visual_clock import duration_minutes, is_past_deadline
from config import config
from models import Task
from utils.time_utils import format_duration


def describe_task(task: Optional[Task], start_hour: int, anchor_date: Optional[str] = None) -> str:
    """
    Rich markup describing a task's start, end, duration and deadline.

    Values derived rather than authored are shown dim and italic. A deadline
    already in the past of the visual today is shown red.
    """
    if task is None:
        return "[dim]Click a task to see its details.[/dim]"

    resolved = resolve_task(task, start_hour, anchor_date)
    start, end = resolved["start"], resolved["end"]

    lines: List[str] = [f"[bold]{task.content or task.id}[/bold]", ""]
    lines.append(format_property("Start     ", start))
    lines.append(format_property("End       ", end))

    if task.is_timed:
        minutes = duration_minutes(start.date, task.start_time, task.end_date, task.end_time, start_hour)
        lines.append(f"Duration  {format_duration(minutes)}")
    else:
        lines.append("Duration  [dim italic]all day[/dim italic]")

    deadline_line = format_property("Deadline  ", resolved["deadline"])
    if task.deadline and is_past_deadline(task.deadline, start_hour):
        deadline_line = f"[red]{deadline_line}[/red]"
    lines.append(deadline_line)
    return "\n".join(lines)


class PropertyPanel(Static):
    """Shows the selected task's resolved properties."""

    DEFAULT_CSS = """
    PropertyPanel {
        width: 36;
        height: 1fr;
        padding: 1 2;
        background: #2d2d44;
        color: #e2e8f0;
    }
    """

    def show_task(self, task: Optional[Task], anchor_date: Optional[str] = None) -> None:
        self.update(describe_task(task, config.start_hour, anchor_date))
