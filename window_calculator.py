"""
Window Calculator
Maps scroll geometry to the [start, end) slice of the ordered view that is
materialized when virtual scrolling is active.
"""

import logging
import math
from typing import Optional, Tuple
from errors import ValidationError

logger = logging.getLogger(__name__)


def relative_scroll(page_offset: float, container_top: float) -> float:
    """Scroll offset measured from the top of the list container."""
    return max(0.0, page_offset - container_top)


def visible_count(item_height: int, buffer_size: int, viewport_height: float) -> int:
    return math.ceil(viewport_height / item_height) + 2 * buffer_size


def compute_window(
    total_items: int,
    item_height: int,
    buffer_size: int,
    scroll_offset: float,
    viewport_height: float,
) -> Tuple[int, int]:
    """
    Compute the window bounds.

    Args:
        total_items: Length of the ordered view
        item_height: Fixed card height in pixels (> 0)
        buffer_size: Extra cards kept above and below the viewport (>= 0)
        scroll_offset: Offset from the container top; negatives count as 0
        viewport_height: Visible height in pixels (> 0)

    Returns:
        (start, end) with 0 <= start <= end <= total_items
    """
    if item_height <= 0:
        raise ValidationError(f"item_height must be positive, got {item_height}")
    if buffer_size < 0:
        raise ValidationError(f"buffer_size must not be negative, got {buffer_size}")
    if viewport_height <= 0:
        raise ValidationError(f"viewport_height must be positive, got {viewport_height}")
    if total_items <= 0:
        return 0, 0

    count = visible_count(item_height, buffer_size, viewport_height)
    start = max(0, math.floor(max(0, scroll_offset) / item_height) - buffer_size)
    if start >= total_items:
        # Scrolled past the end of a list that shrank underneath us
        start = max(0, total_items - count)
    end = min(total_items, start + count)
    return start, end


class WindowTracker:
    """Remembers the last window so unchanged ranges skip re-rendering."""

    def __init__(self, item_height: int, buffer_size: int):
        self.item_height = item_height
        self.buffer_size = buffer_size
        self.bounds: Optional[Tuple[int, int]] = None

    def reset(self) -> None:
        self.bounds = None

    def update(
        self, total_items: int, scroll_offset: float, viewport_height: float
    ) -> Optional[Tuple[int, int]]:
        """Return the new bounds, or None when they match the previous ones."""
        bounds = compute_window(
            total_items, self.item_height, self.buffer_size, scroll_offset, viewport_height
        )
        if bounds == self.bounds:
            return None
        logger.debug(f"Window moved {self.bounds} -> {bounds}")
        self.bounds = bounds
        return bounds
