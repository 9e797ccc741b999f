"""EvidenceMark — evidence marker layout and interaction engine for image findings."""

__version__ = "0.1.0"

from evidencemark.types import (
    AnchorPoint,
    DetectionResult,
    Finding,
    LabelPlacement,
    NORMALIZED_EXTENT,
)

__all__ = [
    "AnchorPoint",
    "DetectionResult",
    "Finding",
    "LabelPlacement",
    "NORMALIZED_EXTENT",
    "__version__",
]
