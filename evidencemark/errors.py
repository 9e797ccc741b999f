"""Error types for EvidenceMark."""

from __future__ import annotations


class EvidenceMarkError(Exception):
    """Base exception for EvidenceMark."""


class ResultFormatError(EvidenceMarkError, ValueError):
    """Raised when a detection result payload does not have the expected shape."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        prefix = f"[{source}] " if source else ""
        super().__init__(f"{prefix}{message}")
