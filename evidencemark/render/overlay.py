"""Overlay composition: project the normalized layout into display pixels and draw it.

Layout is computed once per call in normalized space, then every coordinate
is mapped to the displayed image size. Pixel values are never stored apart
from the scene they were composed for; a resize composes a new scene.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import cv2
import numpy as np

from evidencemark.config import EvidenceMarkConfig, OverlayConfig
from evidencemark.interaction.highlight import HighlightState
from evidencemark.layout.connectors import build_connector, dash_segments
from evidencemark.layout.placement import place_labels
from evidencemark.types import NORMALIZED_EXTENT, AnchorPoint, Connector, Finding, LabelPlacement
from evidencemark.utils.geometry import anchor_of, box_extent, project_point, project_rect, sanitize_box
from evidencemark.utils.image import hex_to_bgr

logger = logging.getLogger(__name__)

PixelRect = tuple[float, float, float, float]  # (x, y, w, h)
PixelPoint = tuple[float, float]


# ---------------------------------------------------------------------------
# Scene types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MarkerStyle:
    """Per-item drawing parameters, in display pixels."""

    color: str
    stroke_width: float
    marker_radius: float
    opacity: float


@dataclass(frozen=True)
class SceneItem:
    """Everything needed to draw one finding's marker, connector and label."""

    index: int
    finding: Finding
    anchor: AnchorPoint
    placement: LabelPlacement
    connector: Connector
    box_px: PixelRect
    anchor_px: PixelPoint
    label_px: PixelRect
    connector_px: tuple[PixelPoint, PixelPoint]
    active: bool
    expanded: bool
    style: MarkerStyle

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "label": self.finding.label,
            "anchor": {"x": self.anchor.x, "y": self.anchor.y},
            "placement": {
                "x": self.placement.x,
                "y": self.placement.y,
                "width": self.placement.width,
                "height": self.placement.height,
            },
            "box_px": list(self.box_px),
            "anchor_px": list(self.anchor_px),
            "label_px": list(self.label_px),
            "connector_px": [list(p) for p in self.connector_px],
            "active": self.active,
            "expanded": self.expanded,
        }


@dataclass
class OverlayScene:
    """A composed overlay for one result at one display size."""

    display_width: float
    display_height: float
    items: list[SceneItem] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    state: HighlightState = field(default_factory=HighlightState)
    config: EvidenceMarkConfig = field(default_factory=EvidenceMarkConfig)
    is_likely_ai: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def active_item(self) -> SceneItem | None:
        return next((item for item in self.items if item.active), None)

    def resize(self, display_width: float, display_height: float) -> OverlayScene:
        """Compose the same findings and state for a new display size."""
        return compose_scene(
            self.findings, display_width, display_height,
            state=self.state, config=self.config, is_likely_ai=self.is_likely_ai,
        )

    def with_state(self, state: HighlightState) -> OverlayScene:
        """Compose the same findings at the same size for a new highlight state."""
        return compose_scene(
            self.findings, self.display_width, self.display_height,
            state=state, config=self.config, is_likely_ai=self.is_likely_ai,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "display": {"width": self.display_width, "height": self.display_height},
            "active_index": self.state.active_index,
            "expanded_indices": sorted(self.state.expanded_indices),
            "items": [item.to_dict() for item in self.items],
        }


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def _style_for(active: bool, is_likely_ai: bool, overlay: OverlayConfig, scale: float) -> MarkerStyle:
    return MarkerStyle(
        color=overlay.alert_color if is_likely_ai else overlay.safe_color,
        stroke_width=(overlay.active_stroke_width if active else overlay.stroke_width) * scale,
        marker_radius=(overlay.active_marker_radius if active else overlay.marker_radius) * scale,
        opacity=overlay.active_opacity if active else overlay.opacity,
    )


def compose_scene(
    findings: Sequence[Finding],
    display_width: float,
    display_height: float,
    state: HighlightState | None = None,
    config: EvidenceMarkConfig | None = None,
    is_likely_ai: bool = False,
) -> OverlayScene:
    """Build the renderable overlay for *findings* over an image shown at the given size.

    Args:
        findings: Ordered findings; list position is the finding's index.
        display_width: Displayed image width in pixels.
        display_height: Displayed image height in pixels.
        state: Current highlight state; defaults to nothing active or expanded.
        config: Placement and overlay settings.
        is_likely_ai: Picks the alert palette instead of the safe one.

    Returns:
        An OverlayScene with one SceneItem per finding, in order.
    """
    if config is None:
        config = EvidenceMarkConfig()
    if state is None:
        state = HighlightState()
    width = max(0.0, float(display_width))
    height = max(0.0, float(display_height))

    boxes = [sanitize_box(f.box) for f in findings]
    anchors = [anchor_of(b) for b in boxes]
    placements = place_labels(anchors, config.placement)

    # Stroke sizes are normalized units; scale by the shorter displayed side
    scale = min(width, height) / NORMALIZED_EXTENT

    items: list[SceneItem] = []
    for i, (finding, box, anchor, placement) in enumerate(zip(findings, boxes, anchors, placements)):
        connector = build_connector(anchor, placement)
        x1, y1, x2, y2 = box_extent(box)
        active = state.is_active(i)
        items.append(SceneItem(
            index=i,
            finding=finding,
            anchor=anchor,
            placement=placement,
            connector=connector,
            box_px=project_rect(x1, y1, x2 - x1, y2 - y1, width, height),
            anchor_px=project_point(anchor, width, height),
            label_px=project_rect(
                placement.x, placement.y, placement.width, placement.height,
                width, height,
            ),
            connector_px=(
                project_point(connector.start, width, height),
                project_point(connector.end, width, height),
            ),
            active=active,
            expanded=state.is_expanded(i),
            style=_style_for(active, is_likely_ai, config.overlay, scale),
        ))

    return OverlayScene(
        display_width=width,
        display_height=height,
        items=items,
        findings=list(findings),
        state=state,
        config=config,
        is_likely_ai=is_likely_ai,
    )


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------


def _pt(p: PixelPoint) -> tuple[int, int]:
    return (int(round(p[0])), int(round(p[1])))


def _blend(canvas: np.ndarray, layer: np.ndarray, alpha: float) -> None:
    """Alpha-blend *layer* onto *canvas* in place. Pixels equal in both stay unchanged."""
    if alpha >= 1.0:
        np.copyto(canvas, layer)
        return
    canvas[:] = cv2.addWeighted(layer, alpha, canvas, 1 - alpha, 0)


def _blend_rect(
    canvas: np.ndarray,
    top_left: tuple[int, int],
    bottom_right: tuple[int, int],
    color: tuple[int, int, int],
    thickness: int,
    alpha: float,
    line_type: int = cv2.LINE_8,
) -> None:
    """Draw a rectangle at *alpha* opacity, blending only the region it covers."""
    pad = max(thickness, 1)
    h, w = canvas.shape[:2]
    x0 = max(0, min(top_left[0], bottom_right[0]) - pad)
    y0 = max(0, min(top_left[1], bottom_right[1]) - pad)
    x1 = min(w, max(top_left[0], bottom_right[0]) + pad + 1)
    y1 = min(h, max(top_left[1], bottom_right[1]) + pad + 1)
    if x0 >= x1 or y0 >= y1:
        return

    roi = canvas[y0:y1, x0:x1]
    layer = roi.copy()
    cv2.rectangle(
        layer,
        (top_left[0] - x0, top_left[1] - y0),
        (bottom_right[0] - x0, bottom_right[1] - y0),
        color, thickness, line_type,
    )
    _blend(roi, layer, alpha)


def _draw_item(canvas: np.ndarray, item: SceneItem, overlay: OverlayConfig, scale: float) -> None:
    color = hex_to_bgr(item.style.color)
    thickness = max(1, int(round(item.style.stroke_width)))

    # Box outline, faded unless active
    x, y, w, h = item.box_px
    _blend_rect(canvas, _pt((x, y)), _pt((x + w, y + h)), color, thickness,
                item.style.opacity, cv2.LINE_AA)

    # Dashed connector
    line_width = max(1, int(round(overlay.connector_width * scale)))
    start, end = item.connector_px
    for a, b in dash_segments(start, end, overlay.dash_length * scale, overlay.dash_gap * scale):
        cv2.line(canvas, _pt(a), _pt(b), color, line_width, cv2.LINE_AA)

    # Center marker
    radius = max(1, int(round(item.style.marker_radius)))
    cv2.circle(canvas, _pt(item.anchor_px), radius, color, -1, cv2.LINE_AA)

    # Label box with text
    lx, ly, lw, lh = item.label_px
    _blend_rect(canvas, _pt((lx, ly)), _pt((lx + lw, ly + lh)), color, -1,
                overlay.label_background_alpha)

    font_scale = max(overlay.font_scale * scale, 0.3)
    font_thick = max(1, int(round(font_scale * 1.5)))
    text = item.finding.label
    (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thick)
    tx = int(lx + max((lw - tw) / 2, 2))
    ty = int(ly + (lh + th) / 2)
    cv2.putText(
        canvas, text, (tx, ty), cv2.FONT_HERSHEY_SIMPLEX, font_scale,
        hex_to_bgr(overlay.label_text_color), font_thick, cv2.LINE_AA,
    )


def render_overlay(
    image: np.ndarray, scene: OverlayScene, config: OverlayConfig | None = None
) -> np.ndarray:
    """Draw *scene* over a copy of a BGR image sized to the scene's display size.

    The active item is drawn last so it sits on top of the others.
    """
    if config is None:
        config = scene.config.overlay

    h, w = image.shape[:2]
    if (w, h) != (int(round(scene.display_width)), int(round(scene.display_height))):
        raise ValueError(
            f"Image is {w}x{h} but scene was composed for "
            f"{scene.display_width:g}x{scene.display_height:g}; resize one of them first"
        )

    canvas = image.copy()
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)
    if scene.is_empty:
        return canvas

    scale = min(scene.display_width, scene.display_height) / NORMALIZED_EXTENT
    ordered = sorted(scene.items, key=lambda item: item.active)
    for item in ordered:
        _draw_item(canvas, item, config, scale)

    logger.debug("Drew %d markers at %dx%d", len(ordered), w, h)
    return canvas
