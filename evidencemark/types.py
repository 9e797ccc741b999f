"""Core data types for EvidenceMark.

Every module in the library produces/consumes these types. Coordinates are
expressed in a fixed normalized space of 0-1000 on both axes, independent of
the resolution the image is displayed at.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any

from evidencemark.errors import ResultFormatError

# Size of the normalized coordinate space on each axis
NORMALIZED_EXTENT = 1000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class HorizontalSide(str, enum.Enum):
    """Which half of the canvas a point falls in horizontally."""

    left = "left"
    right = "right"


class VerticalSide(str, enum.Enum):
    """Which half of the canvas a point falls in vertically."""

    top = "top"
    bottom = "bottom"


# ---------------------------------------------------------------------------
# Geometry types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnchorPoint:
    """A point in normalized space. Used for box centers and connector ends."""

    x: float
    y: float


@dataclass(frozen=True)
class Side:
    """Quadrant classification of a point: one of the four left/right x top/bottom combinations."""

    horizontal: HorizontalSide
    vertical: VerticalSide


@dataclass(frozen=True)
class LabelPlacement:
    """Rectangle where a finding's label is drawn, top-left origin, normalized space."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> AnchorPoint:
        return AnchorPoint(self.x + self.width / 2, self.y + self.height / 2)

    def overlaps(self, other: LabelPlacement) -> bool:
        """Strict AABB intersection. Rectangles that only touch do not overlap."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class Connector:
    """Two-point line segment from a region's anchor to its label center."""

    start: AnchorPoint
    end: AnchorPoint

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)


# ---------------------------------------------------------------------------
# Findings and detection results
# ---------------------------------------------------------------------------


def _parse_box(raw: Any) -> tuple[float, float, float, float]:
    """Coerce a backend box value into a 4-tuple of floats.

    Only the shape is checked here. Out-of-range and NaN values pass through
    and are sanitized later by the geometry layer.
    """
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__len__"):
        raise ResultFormatError(f"Expected a sequence of 4 numbers for box, got {raw!r}")
    if len(raw) != 4:
        raise ResultFormatError(f"Expected 4 box coordinates, got {len(raw)}: {raw!r}")
    try:
        y_min, x_min, y_max, x_max = (float(v) for v in raw)
    except (TypeError, ValueError) as e:
        raise ResultFormatError(f"Non-numeric box coordinate in {raw!r}") from e
    return (y_min, x_min, y_max, x_max)


@dataclass(frozen=True)
class Finding:
    """One detected region of interest.

    ``box`` is ``(y_min, x_min, y_max, x_max)`` in normalized 0-1000 space.
    A finding's identity is its index in the ordered list it arrived in.
    """

    label: str
    description: str
    box: tuple[float, float, float, float]

    @property
    def y_min(self) -> float:
        return self.box[0]

    @property
    def x_min(self) -> float:
        return self.box[1]

    @property
    def y_max(self) -> float:
        return self.box[2]

    @property
    def x_max(self) -> float:
        return self.box[3]

    @property
    def is_inverted(self) -> bool:
        """True if either pair of bounds is reversed."""
        return self.y_min > self.y_max or self.x_min > self.x_max

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "box_2d": list(self.box),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        """Build a Finding from a backend artifact object.

        Accepts ``box_2d`` (backend key) or ``box``.
        """
        if not isinstance(data, dict):
            raise ResultFormatError(f"Expected an object for finding, got {type(data).__name__}")
        raw_box = data.get("box_2d", data.get("box"))
        if raw_box is None:
            raise ResultFormatError(f"Finding has no box_2d: {data!r}")
        return cls(
            label=str(data.get("label", "")),
            description=str(data.get("description", "")),
            box=_parse_box(raw_box),
        )


@dataclass
class DetectionResult:
    """Analysis result returned by the inference backend for one media item.

    Only ``annotated_artifacts`` feeds the layout engine; the other fields are
    carried for the report views.
    """

    is_likely_ai: bool
    confidence_score: float
    verdict: str
    reasoning: str
    annotated_artifacts: list[Finding] = field(default_factory=list)
    artifacts_found: list[str] = field(default_factory=list)
    technical_analysis: str = ""
    suggested_title: str = ""

    @property
    def findings(self) -> list[Finding]:
        return self.annotated_artifacts

    @property
    def has_findings(self) -> bool:
        return len(self.annotated_artifacts) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "isLikelyAI": self.is_likely_ai,
            "confidenceScore": self.confidence_score,
            "verdict": self.verdict,
            "reasoning": self.reasoning,
            "suggestedTitle": self.suggested_title,
            "artifactsFound": list(self.artifacts_found),
            "annotatedArtifacts": [f.to_dict() for f in self.annotated_artifacts],
            "technicalAnalysis": self.technical_analysis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DetectionResult:
        """Parse the backend's camelCase JSON object."""
        if not isinstance(data, dict):
            raise ResultFormatError(f"Expected a JSON object, got {type(data).__name__}")

        artifacts = data.get("annotatedArtifacts", [])
        if artifacts is None:
            artifacts = []
        if not isinstance(artifacts, list):
            raise ResultFormatError(
                f"annotatedArtifacts must be a list, got {type(artifacts).__name__}"
            )
        found = data.get("artifactsFound") or []
        if not isinstance(found, list):
            raise ResultFormatError(
                f"artifactsFound must be a list, got {type(found).__name__}"
            )

        is_likely_ai = data.get("isLikelyAI", False)
        if not isinstance(is_likely_ai, bool):
            raise ResultFormatError(f"isLikelyAI must be a boolean, got {is_likely_ai!r}")

        try:
            confidence = float(data.get("confidenceScore", 0.0))
        except (TypeError, ValueError) as e:
            raise ResultFormatError(
                f"confidenceScore is not a number: {data.get('confidenceScore')!r}"
            ) from e

        return cls(
            is_likely_ai=is_likely_ai,
            confidence_score=confidence,
            verdict=str(data.get("verdict", "")),
            reasoning=str(data.get("reasoning", "")),
            annotated_artifacts=[Finding.from_dict(a) for a in artifacts],
            artifacts_found=[str(a) for a in found],
            technical_analysis=str(data.get("technicalAnalysis", "")),
            suggested_title=str(data.get("suggestedTitle", "")),
        )
