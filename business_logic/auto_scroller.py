"""Edge auto-scroll during a drag.

While the pointer rests in a band near the top or bottom of the viewport,
a periodic tick scrolls the viewport and replays the last pointer sample so
the dragged task keeps tracking the pointer's fixed screen position while the
timeline moves underneath it.
"""
import logging
import math
from typing import Callable

logger = logging.getLogger(__name__)


class AutoScroller:
    """Computes scroll speed from pointer position and performs scroll ticks.

    The caller owns the timer: start it when handle() returns True and stop
    it when it returns False.
    """

    def __init__(
        self,
        scroll_by: Callable[[int], int],
        on_scrolled: Callable[[int], None],
        band: int = 2,
        max_speed: int = 2,
    ):
        """
        Initialize AutoScroller.

        Args:
            scroll_by: Scrolls the viewport by a delta and returns how far it actually moved
            on_scrolled: Called with the actual delta after the viewport moved
            band: Distance from an edge (in rows) where scrolling starts
            max_speed: Rows per tick at the very edge
        """
        self.scroll_by = scroll_by
        self.on_scrolled = on_scrolled
        self.band = band
        self.max_speed = max_speed
        self.speed = 0

    @property
    def active(self) -> bool:
        return self.speed != 0

    def speed_for(self, pointer_y: float, viewport_top: float, viewport_bottom: float) -> int:
        """
        Scroll speed for a pointer position.

        Negative scrolls up, positive scrolls down, 0 outside the edge bands.
        Speed grows linearly with depth into the band and is at least one row.
        """
        if pointer_y < viewport_top + self.band:
            distance = viewport_top + self.band - pointer_y
            ratio = min(1.0, distance / self.band)
            return -max(1, math.ceil(self.max_speed * ratio))
        if pointer_y > viewport_bottom - self.band:
            distance = pointer_y - (viewport_bottom - self.band)
            ratio = min(1.0, distance / self.band)
            return max(1, math.ceil(self.max_speed * ratio))
        return 0

    def handle(self, pointer_y: float, viewport_top: float, viewport_bottom: float) -> bool:
        """Update the speed for a new pointer position. Returns whether scrolling is active."""
        self.speed = self.speed_for(pointer_y, viewport_top, viewport_bottom)
        return self.active

    def tick(self) -> int:
        """
        Scroll one step.

        Returns:
            Rows actually scrolled (0 at the end of the content or when idle)
        """
        if not self.active:
            return 0
        moved = self.scroll_by(self.speed)
        if moved:
            self.on_scrolled(moved)
        return moved

    def stop(self) -> None:
        self.speed = 0
