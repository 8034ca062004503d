"""Help screen widget showing keyboard and mouse shortcuts."""
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Static
from textual.containers import VerticalScroll
from textual.binding import Binding
from textual import events

from config import config


class HelpScreen(Screen):
    """Modal screen showing keyboard and mouse shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
    ]

    CSS = """
    HelpScreen {
        align: center middle;
        background: rgba(26, 26, 46, 0.9);
    }

    #help_container {
        width: 80;
        height: auto;
        max-height: 90%;
        background: #2d2d44;
        border: thick #0abdc6;
        padding: 1 2;
    }

    #help_title {
        text-align: center;
        text-style: bold;
        color: #0abdc6;
        margin-bottom: 1;
    }

    #help_content {
        height: auto;
        overflow-y: auto;
        color: #e2e8f0;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the help screen."""
        with VerticalScroll(id="help_container"):
            yield Static("Shortcuts", id="help_title")
            yield Static(self.get_help_text(), id="help_content")

    def get_help_text(self) -> str:
        """Get formatted help text."""
        return f"""[bold]Navigation[/bold]
←/→ or j/l    Previous/next day
Shift+←       Previous day with tasks (skip empty days)
Shift+→       Next day with tasks (skip empty days)
g             Jump to today
m             Jump to a date
              • Natural language: tomorrow, yesterday, monday
              • Relative: +1, -1, +7, next week, last week
              • Month + day: nov 10, december 25
              • ISO format: YYYY-MM-DD

[bold]Mouse[/bold]
Click         Select a task and show its times
Drag          Move a task (snaps to {config.snap_interval_minutes} minutes)
Drag top row  Change the start time
Drag bottom   Change the end time
Ctrl+Drag     Move a task by its end
              • Dragging near the top or bottom edge scrolls
              • A task crossing {config.start_hour:02d}:00 is shown in both days
Esc           Cancel the current drag

[bold]Task Details[/bold]
              • [dim italic]Dim italic[/dim italic] values are derived, not set
              • A past deadline is shown [red]red[/red]

[bold]General[/bold]
h             Show this help
q             Quit

[dim]Press Esc to close this help[/dim]"""

    def on_key(self, event: events.Key) -> None:
        """Handle key events - block all except Esc and arrow keys."""
        # Allow Esc (handled by binding) and arrow keys (for scrolling)
        if event.key not in ("escape", "up", "down"):
            event.prevent_default()
            event.stop()

    def action_dismiss(self) -> None:
        """Close the help screen."""
        self.dismiss()
