"""Connector segments from region anchors to their labels."""

from __future__ import annotations

import math
from typing import Sequence

from evidencemark.types import AnchorPoint, Connector, LabelPlacement


def label_center(placement: LabelPlacement) -> AnchorPoint:
    """Center of a label rectangle."""
    return placement.center


def build_connector(anchor: AnchorPoint, placement: LabelPlacement) -> Connector:
    """Segment from *anchor* to the center of *placement*."""
    return Connector(start=anchor, end=label_center(placement))


def build_connectors(
    anchors: Sequence[AnchorPoint], placements: Sequence[LabelPlacement]
) -> list[Connector]:
    """Pair anchors with placements index by index."""
    if len(anchors) != len(placements):
        raise ValueError(
            f"Got {len(anchors)} anchors but {len(placements)} placements"
        )
    return [build_connector(a, p) for a, p in zip(anchors, placements)]


def dash_segments(
    start: tuple[float, float],
    end: tuple[float, float],
    dash: float,
    gap: float,
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Split the segment start-end into dashes of length *dash* separated by *gap*.

    Works in whatever space the endpoints are in. The last dash is cut at
    *end*. A zero-length segment has no dashes; a non-positive *dash* yields
    the whole segment as one piece.
    """
    (x1, y1), (x2, y2) = start, end
    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0:
        return []
    if dash <= 0:
        return [(start, end)]

    ux, uy = (x2 - x1) / length, (y2 - y1) / length
    step = dash + max(gap, 0.0)
    pieces = []
    pos = 0.0
    while pos < length:
        stop = min(pos + dash, length)
        pieces.append(((x1 + ux * pos, y1 + uy * pos), (x1 + ux * stop, y1 + uy * stop)))
        pos += step
    return pieces
