"""Tests for timeline geometry, hit-testing and rendering."""
import pytest
from models import GhostSegment, LayoutSlot, Task
from business_logic.overlap_layout import calculate_layout
from ui.timeline_widget import (
    Card,
    TimelineGeometry,
    TimelineWidget,
    build_cards,
    grab_at,
    partition_visible_days,
    render_grid,
)


@pytest.fixture
def geometry(start_hour):
    """Two 20-cell columns after a 6-cell gutter, four rows per hour."""
    return TimelineGeometry(
        first_date="2024-01-10", days=2, start_hour=start_hour, rows_per_hour=4, column_width=20
    )


@pytest.fixture
def cards(geometry, timed_task, overnight_task):
    tasks = [timed_task, overnight_task]
    days = partition_visible_days(tasks, geometry)
    layouts = [calculate_layout(day.timed, day.date, geometry.start_hour) for day in days]
    return build_cards(geometry, days, layouts)


class TestTimelineGeometry:
    """Test suite for TimelineGeometry."""

    def test_dates(self, geometry):
        """Test one date per column."""
        assert geometry.dates == ["2024-01-10", "2024-01-11"]

    def test_column_at(self, geometry):
        """Test columns, gaps, the gutter and the area past the last day."""
        assert geometry.column_at(2) is None
        assert geometry.column_at(6) == 0
        assert geometry.column_at(26) == 0
        assert geometry.column_at(27) == 1
        assert geometry.column_at(48) is None

    def test_locate(self, geometry):
        """Test the locator reports the column date and window geometry."""
        hit = geometry.locate(37, 50, origin_x=10, origin_y=40)
        assert hit.date == "2024-01-11"
        assert hit.window_top_pixel == 40
        assert hit.pixels_per_minute == pytest.approx(4 / 60)

    def test_locate_miss(self, geometry):
        """Test the gutter is not a day window."""
        assert geometry.locate(12, 50, origin_x=10, origin_y=40) is None

    def test_locate_above_grid_still_hits(self, geometry):
        """Test positions above row 0 hit the column for extrapolation."""
        assert geometry.locate(10, -30).date == "2024-01-10"

    def test_row_span(self, geometry):
        """Test a 09:00-10:00 range covers four rows starting at row 16."""
        assert geometry.row_span(240, 60) == (16, 19)

    def test_row_span_zero_length(self, geometry):
        """Test an empty range still occupies one row."""
        assert geometry.row_span(240, 0) == (16, 16)

    def test_row_span_clamped(self, geometry):
        """Test ranges running past the window end stop at the last row."""
        assert geometry.row_span(1380, 180) == (92, 95)

    def test_slot_cells(self, geometry):
        """Test percentages map to cells inside the column."""
        assert geometry.slot_cells(LayoutSlot("a", 100, 0, 1)) == (0, 20)
        assert geometry.slot_cells(LayoutSlot("b", 90, 10, 2)) == (2, 18)

    def test_time_labels(self, geometry):
        """Test hour labels start at start_hour and wrap past midnight."""
        assert geometry.time_label(0) == "05:00"
        assert geometry.time_label(1) == ""
        assert geometry.time_label(4) == "06:00"
        assert geometry.time_label(76) == "00:00"


class TestBuildCards:
    """Test suite for build_cards."""

    def test_positions(self, cards):
        """Test rows follow start time and duration."""
        by_id = {card.fragment.id: card for card in cards}
        assert (by_id["standup"].top_row, by_id["standup"].bottom_row) == (16, 19)
        assert (by_id["deploy:after"].top_row, by_id["deploy:after"].bottom_row) == (0, 3)
        assert by_id["deploy:after"].day_index == 0

    def test_before_fragment_not_visible(self, cards):
        """Test the 'before' piece belongs to 2024-01-09, which is not shown."""
        assert "deploy:before" not in {card.fragment.id for card in cards}

    def test_undated_task_only_in_first_column(self, geometry):
        """Test a time-only task is drawn once, in the first visible day."""
        task = Task.from_dict({"id": "call", "start_time": "09:00", "end_time": "09:30"})
        days = partition_visible_days([task], geometry)
        assert [len(day.timed) for day in days] == [1, 0]
        layouts = [calculate_layout(day.timed, day.date, geometry.start_hour) for day in days]
        cards = build_cards(geometry, days, layouts)
        assert [card.day_index for card in cards] == [0]

    def test_undated_task_follows_first_date(self, geometry):
        """Test scrolling the view moves a time-only task with the first column."""
        task = Task.from_dict({"id": "call", "start_time": "09:00"})
        geometry.first_date = "2024-01-11"
        days = partition_visible_days([task], geometry)
        assert days[0].timed[0].start_date == "2024-01-11"
        assert not days[1].timed


class TestGrabAt:
    """Test suite for hit-testing presses."""

    def test_middle_moves(self, geometry, cards):
        """Test the body of a card moves the task."""
        grab = grab_at(geometry, cards, 11, 17)
        assert (grab.task_id, grab.handle, grab.fragment) == ("standup", "move", None)

    def test_edges_resize(self, geometry, cards):
        """Test the top and bottom rows resize."""
        assert grab_at(geometry, cards, 11, 16).handle == "resize-start"
        assert grab_at(geometry, cards, 11, 19).handle == "resize-end"

    def test_bottom_right_moves_by_end(self, geometry, cards):
        """Test the last cell of the bottom row anchors the end."""
        assert grab_at(geometry, cards, 25, 19).handle == "move-end"

    def test_ctrl_moves_by_end(self, geometry, cards):
        """Test ctrl turns any press into a move by the end."""
        assert grab_at(geometry, cards, 11, 17, ctrl=True).handle == "move-end"

    def test_fragment_identity(self, geometry, cards):
        """Test a press on a split piece reports the original task and its segment."""
        grab = grab_at(geometry, cards, 11, 1)
        assert (grab.task_id, grab.fragment) == ("deploy", "after")

    def test_empty_cell(self, geometry, cards):
        """Test a press on empty grid grabs nothing."""
        assert grab_at(geometry, cards, 11, 50) is None
        assert grab_at(geometry, cards, 2, 17) is None

    def test_topmost_card_wins(self, geometry, cards):
        """Test the highest z_index is picked where cards overlap."""
        base = cards[0]
        top = Card(cards[1].fragment, base.day_index, base.top_row, base.bottom_row, 0, 20, 9)
        grab = grab_at(geometry, [base, top], 11, base.top_row + 1)
        assert grab.task_id == "deploy"


class TestCardHandles:
    """Test suite for Card.handle_at on short cards."""

    def test_single_row_card_only_moves(self, cards):
        """Test a one-row card has no resize handles."""
        card = Card(cards[0].fragment, 0, 10, 10, 0, 20, 1)
        assert card.handle_at(3, 10) == "move"
        assert card.handle_at(19, 10) == "move-end"


class TestRenderGrid:
    """Test suite for render_grid and TimelineWidget.render."""

    def test_grid_size(self, geometry, cards):
        """Test one line per row, each as wide as the grid."""
        lines = render_grid(geometry, cards).plain.split("\n")
        assert len(lines) == 96
        assert all(len(line) == geometry.total_width for line in lines)

    def test_cards_drawn(self, geometry, cards):
        """Test a card shows its start time and content on its first row."""
        lines = render_grid(geometry, cards).plain.split("\n")
        assert "09:00 Standup" in lines[16]
        assert lines[16].startswith("09:00")

    def test_ghost_segments_drawn(self, geometry, cards):
        """Test ghost segments fill their rows of the matching column."""
        ghosts = (GhostSegment("2024-01-11", 240, 60),)
        lines = render_grid(geometry, cards, ghosts).plain.split("\n")
        assert lines[16][27:47] == "░" * 20
        assert "░" not in lines[15]

    def test_ghost_for_hidden_day_ignored(self, geometry, cards):
        """Test segments on days outside the view are skipped."""
        ghosts = (GhostSegment("2024-01-09", 0, 60),)
        assert "░" not in render_grid(geometry, cards, ghosts).plain

    def test_widget_render(self, geometry, cards, store):
        """Test the widget renders its current cards."""
        widget = TimelineWidget(geometry, store.get)
        widget.cards = cards
        assert "Standup" in widget.render().plain
        assert not widget.rescheduler.is_active
