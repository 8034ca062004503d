"""Tests for edge auto-scrolling."""
import pytest
from business_logic.auto_scroller import AutoScroller


class FakeViewport:
    """Scrollable range of 0..max_scroll rows."""

    def __init__(self, scroll=10, max_scroll=20):
        self.scroll = scroll
        self.max_scroll = max_scroll
        self.replayed = []

    def scroll_by(self, delta):
        before = self.scroll
        self.scroll = min(max(self.scroll + delta, 0), self.max_scroll)
        return self.scroll - before

    def on_scrolled(self, moved):
        self.replayed.append(moved)


@pytest.fixture
def viewport():
    return FakeViewport()


@pytest.fixture
def scroller(viewport):
    return AutoScroller(viewport.scroll_by, viewport.on_scrolled, band=2, max_speed=4)


class TestSpeed:
    """Test suite for speed_for."""

    def test_middle_is_idle(self, scroller):
        """Test no scrolling away from the edges."""
        assert scroller.speed_for(10, 0, 20) == 0

    def test_top_band_scrolls_up(self, scroller):
        """Test speed is negative near the top and grows toward the edge."""
        assert scroller.speed_for(1.5, 0, 20) == -1
        assert scroller.speed_for(0, 0, 20) == -4

    def test_bottom_band_scrolls_down(self, scroller):
        """Test speed is positive near the bottom."""
        assert scroller.speed_for(19, 0, 20) == 2
        assert scroller.speed_for(25, 0, 20) == 4


class TestTick:
    """Test suite for handle and tick."""

    def test_tick_scrolls_and_replays(self, scroller, viewport):
        """Test a tick moves the viewport and reports the actual delta."""
        assert scroller.handle(20, 0, 20)
        assert scroller.tick() == 4
        assert viewport.scroll == 14
        assert viewport.replayed == [4]

    def test_tick_at_end_of_content(self, scroller, viewport):
        """Test nothing is replayed when the viewport cannot move."""
        viewport.scroll = viewport.max_scroll
        scroller.handle(20, 0, 20)
        assert scroller.tick() == 0
        assert viewport.replayed == []

    def test_clamped_scroll_reports_actual_delta(self, scroller, viewport):
        """Test the replay gets the distance actually scrolled."""
        viewport.scroll = 1
        scroller.handle(0, 0, 20)
        assert scroller.tick() == -1
        assert viewport.replayed == [-1]

    def test_leaving_band_stops(self, scroller, viewport):
        """Test moving back to the middle deactivates scrolling."""
        scroller.handle(0, 0, 20)
        assert not scroller.handle(10, 0, 20)
        assert scroller.tick() == 0
        assert viewport.scroll == 10

    def test_stop(self, scroller):
        """Test stop clears the speed."""
        scroller.handle(0, 0, 20)
        scroller.stop()
        assert not scroller.active
