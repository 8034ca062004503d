"""Main TUI application for the task timeline."""
import logging
from datetime import date, timedelta
from typing import Optional

from textual.app import App, ComposeResult
from textual.widgets import Header, Input
from textual.containers import Container, Horizontal, VerticalScroll
from textual.binding import Binding
from textual.logging import TextualHandler
from textual import events

from business_logic.date_navigator import DateNavigator, NaturalDateParser
from business_logic.visual_clock import visual_today
from config import config
from task_store import TaskStore
from ui.help_screen import HelpScreen
from ui.property_panel import PropertyPanel
from ui.timeline_widget import TimelineGeometry, TimelineWidget
from ui.widgets import CenteredFooter, DayHeader

logger = logging.getLogger(__name__)


class TimelineApp(App):
    """A terminal timeline for scheduling tasks by dragging them."""

    TITLE = "tTimeline"

    CSS = """
    Screen {
        background: #1a1a2e;
    }

    Header {
        background: #2d2d44;
        color: #0abdc6;
    }

    #main {
        height: 1fr;
    }

    #timeline_column {
        width: 1fr;
    }

    #timeline_scroll {
        height: 1fr;
        padding: 0;
        overflow-x: auto;
        overflow-y: auto;
        background: #1a1a2e;
    }

    #input_container {
        height: auto;
        padding: 1;
        background: #1a1a2e;
    }

    Input {
        margin: 0 1;
        background: #2d2d44;
        color: #ffffff;
        border: tall #8b5cf6;
    }

    Input:focus {
        border: tall #0abdc6;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("h", "show_help", "Help", show=False),
        Binding("left", "prev_day", "Prev Day", show=False),
        Binding("right", "next_day", "Next Day", show=False),
        Binding("j", "prev_day", "Prev Day", show=False),
        Binding("l", "next_day", "Next Day", show=False),
        Binding("shift+left", "prev_day_with_tasks", "S-← Skip", show=False),
        Binding("shift+right", "next_day_with_tasks", "S-→ Skip", show=False),
        Binding("g", "today", "Today", show=False),
        Binding("m", "jump_to_date", "Jump", show=False),
    ]

    def __init__(self, store: Optional[TaskStore] = None):
        super().__init__()
        self.store = store if store is not None else TaskStore()
        self.date_navigator = DateNavigator(self.store, config.start_hour)
        self.current_date = date.fromisoformat(visual_today(config.start_hour))
        self.selected_task_id: Optional[str] = None
        self.jumping_to_date = False
        self.file_watch_interval = None

    def compose(self) -> ComposeResult:
        """Compose the UI."""
        geometry = TimelineGeometry(
            first_date=self.current_date.isoformat(),
            days=config.days_to_show,
            start_hour=config.start_hour,
            rows_per_hour=config.rows_per_hour,
            column_width=config.column_width,
        )
        yield Header()
        with Horizontal(id="main"):
            with Container(id="timeline_column"):
                yield DayHeader(id="date_header")
                with VerticalScroll(id="timeline_scroll"):
                    yield TimelineWidget(geometry, self.store.get, id="timeline")
            yield PropertyPanel(id="property_panel")
        yield Container(id="input_container")
        yield CenteredFooter()

    def on_mount(self) -> None:
        """Set up the app after mounting."""
        self.refresh_timeline()
        self.update_property_panel()
        # Start file watcher for external changes (every second)
        self.file_watch_interval = self.set_interval(1.0, self._check_file_changes)

    def _check_file_changes(self) -> None:
        """Reload the store if the data file was modified externally."""
        # Timeline is not queryable while a modal screen is on top
        if len(self.screen_stack) > 1:
            return
        timeline = self.query_one(TimelineWidget)
        if timeline.rescheduler.is_active:
            return
        if self.store.reload_if_changed():
            if self.selected_task_id and self.store.get(self.selected_task_id) is None:
                self.selected_task_id = None
            self.refresh_timeline()
            self.update_property_panel()

    def refresh_timeline(self) -> None:
        """Redraw the visible days from the store."""
        timeline = self.query_one(TimelineWidget)
        timeline.selected_task_id = self.selected_task_id
        timeline.show_tasks(self.store.all(), self.current_date.isoformat())

        header = self.query_one(DayHeader)
        header.show_days(
            timeline.days,
            timeline.geometry.gutter_width,
            timeline.geometry.column_width,
            visual_today(config.start_hour),
        )

    def update_property_panel(self) -> None:
        """Show the selected task's resolved properties."""
        try:
            panel = self.query_one(PropertyPanel)
        except Exception:
            # Panel not accessible (modal is open or transitioning)
            return
        task = self.store.get(self.selected_task_id) if self.selected_task_id else None
        panel.show_task(task, self.current_date.isoformat())

    def on_timeline_widget_task_clicked(self, message: TimelineWidget.TaskClicked) -> None:
        """Select the clicked task."""
        self.selected_task_id = message.task_id
        self.refresh_timeline()
        self.update_property_panel()

    async def on_timeline_widget_task_rescheduled(self, message: TimelineWidget.TaskRescheduled) -> None:
        """Persist the new time range of a dragged task."""
        outcome = message.outcome
        try:
            await self.store.update(outcome.task_id, outcome.time_range.as_fields())
        except IOError as e:
            logger.error("Could not save task %s: %s", outcome.task_id, e)
            self.notify(str(e), title="Save failed", severity="error")
        except KeyError as e:
            # Task removed by an external edit while it was dragged
            logger.warning("Rescheduled task disappeared: %s", e)
        self.selected_task_id = outcome.task_id
        self.refresh_timeline()
        self.update_property_panel()

    def _navigate_to_date(self, new_date: date) -> None:
        """Navigate to a new date.

        Args:
            new_date: The first visible date
        """
        self.query_one(TimelineWidget).cancel_drag()
        self.current_date = new_date
        self.refresh_timeline()
        self.update_property_panel()

    def action_next_day(self) -> None:
        """Navigate to next day."""
        self._navigate_to_date(self.current_date + timedelta(days=1))

    def action_prev_day(self) -> None:
        """Navigate to previous day."""
        self._navigate_to_date(self.current_date - timedelta(days=1))

    def action_prev_day_with_tasks(self) -> None:
        """Navigate to previous day that has tasks."""
        prev_date = self.date_navigator.find_prev_day_with_tasks(self.current_date)
        if prev_date:
            self._navigate_to_date(prev_date)

    def action_next_day_with_tasks(self) -> None:
        """Navigate to next day that has tasks."""
        next_date = self.date_navigator.find_next_day_with_tasks(self.current_date)
        if next_date:
            self._navigate_to_date(next_date)

    def action_today(self) -> None:
        """Navigate to the visual today."""
        self._navigate_to_date(date.fromisoformat(visual_today(config.start_hour)))

    def action_show_help(self) -> None:
        """Show the help screen."""
        self.push_screen(HelpScreen())

    def action_jump_to_date(self) -> None:
        """Show input to jump to another date."""
        if self.jumping_to_date:
            return
        self.jumping_to_date = True
        container = self.query_one("#input_container")
        input_widget = Input(placeholder="Jump to (tomorrow, +3, monday, nov 10, YYYY-MM-DD)...")
        container.mount(input_widget)
        input_widget.focus()

    def _handle_jump_input(self, value: str) -> None:
        today = date.fromisoformat(visual_today(config.start_hour))
        target = NaturalDateParser.parse(value, self.current_date, today)
        if target is None:
            self.query_one(CenteredFooter).show_message(f"[red]Could not parse date:[/red] {value}")
            self.set_timer(3.0, lambda: self.query_one(CenteredFooter).show_message())
            return
        self._navigate_to_date(target)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submission by dispatching to appropriate handler."""
        value = event.value.strip()

        if self.jumping_to_date and value:
            self._handle_jump_input(value)

        # Remove input widget
        self.jumping_to_date = False
        event.input.remove()

    def on_key(self, event: events.Key) -> None:
        """Handle special keys."""
        # Check if we're in an input widget - if so, don't intercept
        focused = self.focused
        if isinstance(focused, Input):
            if event.key == "escape":
                focused.remove()
                self.jumping_to_date = False
                event.prevent_default()
            return

        if event.key == "escape":
            # Don't handle escape if a modal screen is active
            if len(self.screen_stack) > 1:
                return
            if self.query_one(TimelineWidget).cancel_drag():
                event.prevent_default()
                event.stop()


def main():
    """Run the application."""
    logging.basicConfig(level=logging.DEBUG, handlers=[TextualHandler()])
    app = TimelineApp()
    app.run()


if __name__ == "__main__":
    main()
