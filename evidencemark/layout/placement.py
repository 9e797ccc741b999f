"""Label placement for evidence markers.

Each label is placed with a single deterministic pass: classify which half of
the canvas the anchor is in, offset away from the nearer edges, then clamp the
rectangle inside the padded canvas. Labels of nearby findings may overlap;
an optional second pass stacks colliding labels vertically.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from evidencemark.config import PlacementConfig
from evidencemark.types import (
    NORMALIZED_EXTENT,
    AnchorPoint,
    Finding,
    HorizontalSide,
    LabelPlacement,
    Side,
    VerticalSide,
)
from evidencemark.utils.geometry import anchor_of, clamp, side_of

logger = logging.getLogger(__name__)


def directional_offset(side: Side, config: PlacementConfig) -> tuple[float, float]:
    """Offset from the anchor to the label's top-left corner.

    Negative (toward left/top) when the anchor is on the right/bottom half,
    positive otherwise.
    """
    dx = -config.offset_x if side.horizontal == HorizontalSide.right else config.offset_x
    dy = -config.offset_y if side.vertical == VerticalSide.bottom else config.offset_y
    return dx, dy


def clamp_label_origin(value: float, size: float, padding: float, extent: float) -> float:
    """Clamp one coordinate of a label origin to ``[padding, extent - size - padding]``.

    When the label plus both paddings does not fit, the origin is pinned at
    *padding*.
    """
    hi = extent - size - padding
    if hi < padding:
        return padding
    return clamp(value, padding, hi)


def place_label(anchor: AnchorPoint, config: PlacementConfig | None = None) -> LabelPlacement:
    """Compute the label rectangle for one anchor."""
    if config is None:
        config = PlacementConfig()

    side = side_of(anchor)
    dx, dy = directional_offset(side, config)
    x = clamp_label_origin(anchor.x + dx, config.label_width, config.padding, NORMALIZED_EXTENT)
    y = clamp_label_origin(anchor.y + dy, config.label_height, config.padding, NORMALIZED_EXTENT)
    return LabelPlacement(x=x, y=y, width=config.label_width, height=config.label_height)


def place_labels(
    anchors: Sequence[AnchorPoint], config: PlacementConfig | None = None
) -> list[LabelPlacement]:
    """Place one label per anchor, in the same order.

    Identical anchors get identical placements unless
    ``config.resolve_overlaps`` is set.
    """
    if config is None:
        config = PlacementConfig()

    placements = [place_label(a, config) for a in anchors]
    if config.resolve_overlaps:
        placements = resolve_overlaps(placements, config)
    return placements


def resolve_overlaps(
    placements: Sequence[LabelPlacement], config: PlacementConfig | None = None
) -> list[LabelPlacement]:
    """Stack colliding labels vertically.

    Labels are processed in list order; earlier labels keep their position.
    A label that collides with an earlier one is moved just below it, or just
    above it when below would leave the canvas. Every move stays inside the
    padded canvas, so a crowded canvas can still end with some overlap.
    """
    if config is None:
        config = PlacementConfig()

    resolved: list[LabelPlacement] = []
    for placement in placements:
        candidate = placement
        y_lo = config.padding
        y_hi = NORMALIZED_EXTENT - candidate.height - config.padding

        for _ in range(len(resolved) + 1):
            blocker = next((r for r in resolved if candidate.overlaps(r)), None)
            if blocker is None:
                break
            below = blocker.bottom + config.stack_gap
            above = blocker.y - config.stack_gap - candidate.height
            if below <= y_hi:
                new_y = below
            elif above >= y_lo:
                new_y = above
            else:
                new_y = clamp_label_origin(below, candidate.height, config.padding, NORMALIZED_EXTENT)
            if new_y == candidate.y:
                break
            candidate = replace(candidate, y=new_y)

        if candidate is not placement:
            logger.debug("Moved label from y=%.1f to y=%.1f", placement.y, candidate.y)
        resolved.append(candidate)

    return resolved


def count_overlaps(placements: Sequence[LabelPlacement]) -> int:
    """Number of overlapping label pairs."""
    n = 0
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            if placements[i].overlaps(placements[j]):
                n += 1
    return n


def layout_findings(
    findings: Sequence[Finding], config: PlacementConfig | None = None
) -> list[LabelPlacement]:
    """Anchor and place every finding's label."""
    if config is None:
        config = PlacementConfig()
    anchors = [anchor_of(f.box) for f in findings]
    return place_labels(anchors, config)
