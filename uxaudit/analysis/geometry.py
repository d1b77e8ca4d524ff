import math

from uxaudit.analysis.models import BoundingBox


def clamp_int(value: float, low: int, high: int) -> int:
    """Round value to the nearest integer, halves up, and clamp it into [low, high]."""
    rounded = math.floor(value + 0.5)
    return max(low, min(high, rounded))


def clamp_box(
    x: float,
    y: float,
    width: float,
    height: float,
    image_width: int,
    image_height: int,
) -> BoundingBox | None:
    """Clamp a box into image bounds.

    Returns None when the image has no area, since no box can satisfy
    x + width <= image_width with width >= 1 in that case.
    """
    if image_width <= 0 or image_height <= 0:
        return None
    cx = clamp_int(x, 0, image_width - 1)
    cy = clamp_int(y, 0, image_height - 1)
    cw = clamp_int(width, 1, image_width - cx)
    ch = clamp_int(height, 1, image_height - cy)
    if cw <= 0 or ch <= 0:
        return None
    return BoundingBox(x=cx, y=cy, width=cw, height=ch)
