"""Normalized-space geometry: box sanitizing, anchors, side classification, projection."""

from __future__ import annotations

import logging
import math

from evidencemark.types import (
    NORMALIZED_EXTENT,
    AnchorPoint,
    HorizontalSide,
    LabelPlacement,
    Side,
    VerticalSide,
)

logger = logging.getLogger(__name__)

Box = tuple[float, float, float, float]


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* to ``[lo, hi]``. NaN maps to *lo*."""
    if math.isnan(value):
        return lo
    return max(lo, min(value, hi))


def distance(a: AnchorPoint, b: AnchorPoint) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------


def sanitize_box(box: Box, extent: float = NORMALIZED_EXTENT) -> Box:
    """Clamp every coordinate of a ``(y_min, x_min, y_max, x_max)`` box into ``[0, extent]``.

    Inverted bounds are kept as-is; see anchor_of.
    """
    clamped = tuple(clamp(float(v), 0.0, extent) for v in box)
    if clamped != tuple(box):
        logger.warning("Box %s out of range, clamped to %s", box, clamped)
    y_min, x_min, y_max, x_max = clamped
    return (y_min, x_min, y_max, x_max)


def box_extent(box: Box) -> tuple[float, float, float, float]:
    """Ordered ``(x_min, y_min, x_max, y_max)`` rectangle of a box, inverted or not."""
    y1, x1, y2, x2 = box
    return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))


def anchor_of(box: Box, extent: float = NORMALIZED_EXTENT) -> AnchorPoint:
    """Center of the sanitized box. A zero-area box anchors at its single point.

    Inverted bounds still have a well-defined center. They are logged at
    debug level; load_detection_result warns once per file.
    """
    y_min, x_min, y_max, x_max = sanitize_box(box, extent)
    if y_min > y_max or x_min > x_max:
        logger.debug("Inverted box bounds %s, rendering as degenerate", box)
    return AnchorPoint(x=(x_min + x_max) / 2, y=(y_min + y_max) / 2)


def side_of(point: AnchorPoint, extent: float = NORMALIZED_EXTENT) -> Side:
    """Classify which half of the canvas *point* is in on each axis.

    The split is at ``extent / 2``; a point exactly on it resolves to
    right/bottom.
    """
    mid = extent / 2
    horizontal = HorizontalSide.right if point.x >= mid else HorizontalSide.left
    vertical = VerticalSide.bottom if point.y >= mid else VerticalSide.top
    return Side(horizontal=horizontal, vertical=vertical)


def rects_overlap(a: LabelPlacement, b: LabelPlacement) -> bool:
    """AABB overlap test between two label rectangles."""
    return a.overlaps(b)


# ---------------------------------------------------------------------------
# Projection to display pixels
# ---------------------------------------------------------------------------


def to_pixels(value: float, displayed: float, extent: float = NORMALIZED_EXTENT) -> float:
    """Map a normalized coordinate to pixels for a displayed length."""
    return value / extent * displayed


def project_point(
    point: AnchorPoint, width: float, height: float, extent: float = NORMALIZED_EXTENT
) -> tuple[float, float]:
    """Map a normalized point to ``(px, py)`` for an image displayed at width x height."""
    return (to_pixels(point.x, width, extent), to_pixels(point.y, height, extent))


def project_rect(
    x: float, y: float, w: float, h: float,
    width: float, height: float, extent: float = NORMALIZED_EXTENT,
) -> tuple[float, float, float, float]:
    """Map a normalized ``(x, y, w, h)`` rectangle to pixel space."""
    return (
        to_pixels(x, width, extent),
        to_pixels(y, height, extent),
        to_pixels(w, width, extent),
        to_pixels(h, height, extent),
    )
