"""Shared highlight state for the list and canvas views."""

from evidencemark.interaction.highlight import (
    HighlightEvent,
    HighlightEventType,
    HighlightState,
    HighlightSynchronizer,
)

__all__ = ["HighlightEvent", "HighlightEventType", "HighlightState", "HighlightSynchronizer"]
