"""Row models for the findings list that sits next to the overlay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from evidencemark.interaction.highlight import HighlightState
from evidencemark.types import Finding

EMPTY_LIST_MESSAGE = "No obvious AI markers detected."


@dataclass(frozen=True)
class ListRow:
    """One list row. ``highlighted`` follows the same active index as the canvas."""

    index: int
    label: str
    description: str
    highlighted: bool
    expanded: bool

    @property
    def visible_description(self) -> str | None:
        """Description text when the row is expanded, else None."""
        return self.description if self.expanded else None


def build_list_rows(findings: Sequence[Finding], state: HighlightState | None = None) -> list[ListRow]:
    """Build one row per finding from the shared highlight state."""
    if state is None:
        state = HighlightState()
    return [
        ListRow(
            index=i,
            label=f.label,
            description=f.description,
            highlighted=state.is_active(i),
            expanded=state.is_expanded(i),
        )
        for i, f in enumerate(findings)
    ]
