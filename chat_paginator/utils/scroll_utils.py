"""Scroll math shared by the controller and the chat list widget.

The trigger threshold shrinks as pages accumulate, and scroll-to-bottom
durations grow linearly with the distance travelled.
"""

# Distance (px) beyond which scroll-to-bottom is animated instead of jumped
PIXEL_THRESHOLD = 500.0
# Distance (px) that maps to the maximum animation duration
MAX_DISTANCE = 2000.0
MIN_DURATION_MS = 200
MAX_DURATION_MS = 1200

# Trigger threshold (px) for page 0; each loaded page takes TRIGGER_STEP_PER_PAGE off
BASE_TRIGGER_OFFSET = 600.0
TRIGGER_STEP_PER_PAGE = 50.0


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def scroll_duration_ms(distance: float) -> int:
    """Return the animation duration for scrolling the given distance.

    Args:
        distance: Pixels between the current offset and the target

    Returns:
        Duration in milliseconds within [MIN_DURATION_MS, MAX_DURATION_MS]
    """
    scaled = (abs(distance) / MAX_DISTANCE) * MAX_DURATION_MS
    return int(round(clamp(scaled, MIN_DURATION_MS, MAX_DURATION_MS)))


def should_animate(distance: float, animated: bool = True) -> bool:
    """Whether a scroll over distance should animate rather than jump."""
    return animated and abs(distance) > PIXEL_THRESHOLD


def trigger_threshold(current_page: int, min_offset: float, max_offset: float) -> float:
    """Return the scroll offset under which the next page is requested.

    Args:
        current_page: Index of the last advanced page
        min_offset: Lower bound of the threshold (px)
        max_offset: Upper bound of the threshold (px)
    """
    return clamp(BASE_TRIGGER_OFFSET - current_page * TRIGGER_STEP_PER_PAGE, min_offset, max_offset)
