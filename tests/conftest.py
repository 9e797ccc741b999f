"""Shared test fixtures for EvidenceMark."""

from __future__ import annotations

import json
from pathlib import Path

import cv2
import numpy as np
import pytest

from evidencemark.types import Finding


@pytest.fixture
def sample_finding() -> Finding:
    """A single finding in the top-left quadrant."""
    return Finding(
        label="Warped Texture",
        description="Fabric pattern melts into the background.",
        box=(100, 100, 300, 300),
    )


@pytest.fixture
def sample_findings() -> list[Finding]:
    """Findings covering every quadrant plus the exact canvas midpoint."""
    return [
        # Top-left
        Finding(label="Extra Finger", description="Six fingers on left hand.",
                box=(100, 100, 300, 300)),
        # Top-right
        Finding(label="Garbled Text", description="Sign lettering is unreadable.",
                box=(50, 700, 150, 950)),
        # Bottom-left
        Finding(label="Lighting Mismatch", description="Shadow falls toward the light.",
                box=(700, 50, 900, 250)),
        # Bottom-right
        Finding(label="Smooth Skin", description="No pores or grain.",
                box=(800, 800, 950, 950)),
        # Full canvas, anchors on the midpoint
        Finding(label="Global Haze", description="Uniform plastic sheen.",
                box=(0, 0, 1000, 1000)),
    ]


@pytest.fixture
def sample_result_dict(sample_findings) -> dict:
    """A backend response in its camelCase wire shape."""
    return {
        "isLikelyAI": True,
        "confidenceScore": 87,
        "verdict": "Likely AI",
        "reasoning": "Several anatomical and text artifacts.",
        "suggestedTitle": "Portrait at a market stall",
        "artifactsFound": ["anatomy", "text"],
        "annotatedArtifacts": [f.to_dict() for f in sample_findings],
        "technicalAnalysis": "Hands and signage show typical diffusion errors.",
    }


@pytest.fixture
def result_json_path(tmp_path, sample_result_dict) -> Path:
    path = tmp_path / "result.json"
    path.write_text(json.dumps(sample_result_dict))
    return path


@pytest.fixture
def sample_image_path(tmp_path) -> Path:
    """A small 200x100 (w x h) test image."""
    img = np.full((100, 200, 3), 90, dtype=np.uint8)
    path = tmp_path / "photo.png"
    cv2.imwrite(str(path), img)
    return path
