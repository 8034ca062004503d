"""Tests for the property panel and day header text."""
from datetime import datetime
from models import DayTasks, Task
from ui.property_panel import describe_task
from ui.widgets import render_day_header


class TestDescribeTask:
    """Test suite for describe_task."""

    def test_no_selection(self, start_hour):
        """Test the placeholder when nothing is selected."""
        assert "Click a task" in describe_task(None, start_hour)

    def test_explicit_times(self, timed_task, start_hour):
        """Test authored values and the duration are shown plainly."""
        text = describe_task(timed_task, start_hour)
        assert "Start     2024-01-10 09:00" in text
        assert "End       2024-01-10 10:00" in text
        assert "Duration  1h" in text
        assert "Deadline  -" in text

    def test_implicit_values_dimmed(self, start_hour):
        """Test derived values are wrapped in dim italic markup."""
        task = Task.from_dict({"id": "t", "content": "Late", "start_time": "23:30"})
        text = describe_task(task, start_hour, "2024-03-01")
        assert "End       [dim italic]2024-03-02[/dim italic]" in text
        assert "[dim italic]00:30[/dim italic]" in text

    def test_all_day(self, all_day_task, start_hour):
        """Test untimed tasks show an all-day duration."""
        assert "all day" in describe_task(all_day_task, start_hour)

    def test_past_deadline_is_red(self, start_hour):
        """Test a deadline before today is highlighted."""
        task = Task(id="t", deadline="2000-01-01")
        assert "[red]Deadline  2000-01-01[/red]" in describe_task(task, start_hour)

    def test_future_deadline_not_red(self, start_hour):
        """Test a future deadline is shown normally."""
        year = datetime.now().year + 5
        task = Task(id="t", deadline=f"{year}-01-01T10:00")
        text = describe_task(task, start_hour)
        assert "[red]" not in text
        assert f"Deadline  {year}-01-01 10:00" in text


class TestDayHeader:
    """Test suite for render_day_header."""

    def test_labels_align_with_columns(self):
        """Test each date label starts above its column."""
        days = [DayTasks("2024-01-10"), DayTasks("2024-01-11")]
        labels, _ = render_day_header(days, gutter_width=6, column_width=20).plain.split("\n")
        assert labels.index("Wed Jan 10") == 6
        assert labels.index("Thu Jan 11") == 27

    def test_all_day_tasks_listed(self, all_day_task):
        """Test all-day task names appear under their day."""
        days = [DayTasks("2024-01-10", all_day=[all_day_task])]
        _, all_day = render_day_header(days, gutter_width=6, column_width=20).plain.split("\n")
        assert all_day.strip() == "Offsite"

    def test_long_names_truncated(self):
        """Test names wider than the column are cut with an ellipsis."""
        tasks = [Task(id=f"t{i}", content="Conference") for i in range(4)]
        days = [DayTasks("2024-01-10", all_day=tasks)]
        _, all_day = render_day_header(days, gutter_width=0, column_width=12).plain.split("\n")
        assert all_day.rstrip().endswith("…")
        assert len(all_day) == 13
