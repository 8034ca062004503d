"""Custom UI widgets for the timeline."""
from datetime import date
from typing import Optional, Sequence

from rich.text import Text
from textual.widgets import Static

from config import config
from models import DayTasks

FOOTER_HINTS = (
    "[bold]←/→[/bold] [dim]Day[/dim]  •  [bold]G[/bold] [dim]Today[/dim]  •  "
    "[bold]M[/bold] [dim]Jump[/dim]  •  [dim]Press[/dim] [bold]H[/bold] [dim]for Help  •  [/dim]"
    "[bold]Q[/bold] [dim]to Quit[/dim]"
)


class CenteredFooter(Static):
    """Custom footer with centered content."""

    def __init__(self):
        super().__init__()
        self.update(FOOTER_HINTS)

    def show_message(self, message: Optional[str] = None) -> None:
        """Show a status message, or the key hints when message is None."""
        self.update(message if message is not None else FOOTER_HINTS)

    DEFAULT_CSS = """
    CenteredFooter {
        background: transparent;
        color: #0abdc6;
        dock: bottom;
        height: 1;
        text-align: center;
        border: thick #0abdc6;
    }
    """


def render_day_header(
    days: Sequence[DayTasks],
    gutter_width: int,
    column_width: int,
    today: Optional[str] = None,
) -> Text:
    """
    Date labels and all-day tasks, aligned with the timeline columns.

    Args:
        days: Visible days in column order
        gutter_width: Width of the time gutter left of the first column
        column_width: Width of one day column (a one-cell gap follows each)
        today: Visual today, highlighted when visible
    """
    labels = Text(" " * gutter_width, no_wrap=True)
    all_day = Text(" " * gutter_width, no_wrap=True)

    for day in days:
        label = date.fromisoformat(day.date).strftime("%a %b %d")
        style = f"bold {config.color_accent}" if day.date == today else f"bold {config.color_primary}"
        labels.append(label[:column_width].ljust(column_width + 1), style)

        names = ", ".join(task.content or task.id for task in day.all_day)
        if len(names) > column_width:
            names = names[:column_width - 1] + "…"
        all_day.append(names.ljust(column_width + 1), f"italic {config.color_secondary}")

    return Text("\n").join([labels, all_day])


class DayHeader(Static):
    """Column headers above the timeline."""

    DEFAULT_CSS = """
    DayHeader {
        height: 2;
        background: #1a1a2e;
    }
    """

    def show_days(self, days: Sequence[DayTasks], gutter_width: int, column_width: int,
                  today: Optional[str] = None) -> None:
        self.update(render_day_header(days, gutter_width, column_width, today))
