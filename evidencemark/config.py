"""Configuration models for EvidenceMark.

Pydantic v2 models with sensible defaults — works without a config file.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class PlacementConfig(BaseModel):
    """Configuration for label placement. All lengths are in normalized units (0-1000)."""

    label_width: float = Field(320.0, description="Label rectangle width")
    label_height: float = Field(100.0, description="Label rectangle height")
    padding: float = Field(20.0, description="Margin kept free along every canvas edge")
    offset_x: float = Field(40.0, description="Horizontal offset magnitude from the anchor")
    offset_y: float = Field(40.0, description="Vertical offset magnitude from the anchor")

    # Second pass: stack colliding labels vertically
    resolve_overlaps: bool = Field(False, description="Run the de-overlap stacking pass")
    stack_gap: float = Field(10.0, description="Vertical gap between stacked labels")


class OverlayConfig(BaseModel):
    """Visual parameters for drawing a composed scene.

    Stroke widths, radii and dash lengths are in normalized units and are
    scaled to the display size at render time.
    """

    safe_color: str = Field("#06b6d4", description="Marker color when the media looks authentic")
    alert_color: str = Field("#f43f5e", description="Marker color when the media looks AI-generated")
    label_text_color: str = Field("#ffffff", description="Label text color")
    label_background_alpha: float = Field(0.75, description="Opacity of the label background")

    stroke_width: float = 3.0
    active_stroke_width: float = 6.0
    marker_radius: float = 8.0
    active_marker_radius: float = 12.0
    opacity: float = 0.6
    active_opacity: float = 1.0

    connector_width: float = Field(2.0, description="Connector line width")
    dash_length: float = Field(12.0, description="Length of each connector dash")
    dash_gap: float = Field(8.0, description="Gap between connector dashes")

    font_scale: float = Field(0.5, description="cv2.putText font scale at 1000 px display height")


class EvidenceMarkConfig(BaseModel):
    """Top-level configuration for EvidenceMark."""

    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> EvidenceMarkConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def default(cls) -> EvidenceMarkConfig:
        """Return configuration with all defaults."""
        return cls()
