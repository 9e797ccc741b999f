"""Detection result loader — reads a saved backend response into a DetectionResult."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from evidencemark.errors import ResultFormatError
from evidencemark.types import DetectionResult

logger = logging.getLogger(__name__)


def load_detection_result(path: Path) -> DetectionResult:
    """Parse a JSON file holding one backend response.

    Raises:
        FileNotFoundError: *path* does not exist.
        ResultFormatError: the file is not valid JSON or has the wrong shape.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Result file not found: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ResultFormatError(f"Invalid JSON: {e}", source=str(path)) from e

    try:
        result = DetectionResult.from_dict(data)
    except ResultFormatError as e:
        raise ResultFormatError(str(e), source=str(path)) from e

    inverted = sum(1 for f in result.annotated_artifacts if f.is_inverted)
    if inverted:
        logger.warning("%d of %d findings in %s have inverted bounds",
                       inverted, len(result.annotated_artifacts), path)
    logger.info("Loaded %d findings from %s", len(result.annotated_artifacts), path)
    return result
