"""Highlight state shared by the findings list and the canvas overlay.

Both views render from one ``HighlightState`` value owned by a
``HighlightSynchronizer``. Pointer and click events from either view go
through the synchronizer, which replaces the state and notifies every
subscriber, so the two views can never hold diverging hover flags.

Two independent axes:
    active_index      — at most one finding hovered at a time (or None)
    expanded_indices  — any number of findings with their details open
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Sized

logger = logging.getLogger(__name__)


class HighlightEventType(str, enum.Enum):
    """Events that change highlight state."""

    pointer_enter = "pointer_enter"
    pointer_leave = "pointer_leave"
    toggle = "toggle"
    reset = "reset"


@dataclass(frozen=True)
class HighlightState:
    """Immutable snapshot of the highlight state for one displayed result."""

    active_index: int | None = None
    expanded_indices: frozenset[int] = field(default_factory=frozenset)

    def is_active(self, index: int) -> bool:
        return self.active_index == index

    def is_expanded(self, index: int) -> bool:
        return index in self.expanded_indices


@dataclass(frozen=True)
class HighlightEvent:
    """Notification sent to subscribers after a state change."""

    event_type: HighlightEventType
    index: int | None
    state: HighlightState


Listener = Callable[[HighlightEvent], None]


class HighlightSynchronizer:
    """Owns the highlight state for one result view and broadcasts changes.

    Subscribers are called synchronously, in subscription order, only when an
    event actually changes the state (``reset`` always notifies). Events for
    indices outside the loaded finding list are ignored.
    """

    def __init__(self, finding_count: int = 0) -> None:
        self._count = max(0, finding_count)
        self._state = HighlightState()
        self._listeners: list[Listener] = []

    # -- properties ---------------------------------------------------------

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def finding_count(self) -> int:
        return self._count

    @property
    def active_index(self) -> int | None:
        return self._state.active_index

    @property
    def expanded_indices(self) -> frozenset[int]:
        return self._state.expanded_indices

    # -- subscriptions ------------------------------------------------------

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register *callback*; returns a function that unsubscribes it."""
        self._listeners.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # -- lifecycle ----------------------------------------------------------

    def load(self, findings: Sized | int) -> HighlightState:
        """Reset for a newly displayed finding list.

        Accepts the finding list itself or its length. Subscribers see the
        cleared state before anything from the new result is painted.
        """
        count = findings if isinstance(findings, int) else len(findings)
        self._count = max(0, count)
        self._state = HighlightState()
        self._notify(HighlightEventType.reset, None)
        return self._state

    def teardown(self) -> None:
        """Drop all subscribers and clear state when the result view goes away."""
        self._listeners.clear()
        self._state = HighlightState()
        self._count = 0

    # -- events -------------------------------------------------------------

    def pointer_enter(self, index: int) -> HighlightState:
        if not self._valid(index, HighlightEventType.pointer_enter):
            return self._state
        return self._apply(
            HighlightEventType.pointer_enter, index,
            replace(self._state, active_index=index),
        )

    def pointer_leave(self, index: int) -> HighlightState:
        # A leave for a row that is no longer active comes from a stale
        # pointer sequence and must not clear the newer hover.
        if self._state.active_index != index:
            logger.debug("Ignoring pointer_leave(%s), active is %s", index, self._state.active_index)
            return self._state
        return self._apply(
            HighlightEventType.pointer_leave, index,
            replace(self._state, active_index=None),
        )

    def toggle(self, index: int) -> HighlightState:
        if not self._valid(index, HighlightEventType.toggle):
            return self._state
        expanded = self._state.expanded_indices ^ {index}
        return self._apply(
            HighlightEventType.toggle, index,
            replace(self._state, expanded_indices=frozenset(expanded)),
        )

    def dispatch(self, event_type: HighlightEventType | str, index: int | None = None) -> HighlightState:
        """Route an event by name, as forwarded by a display surface or list widget."""
        event_type = HighlightEventType(event_type)
        if event_type == HighlightEventType.reset:
            return self.load(self._count)
        if index is None:
            raise ValueError(f"{event_type.value} requires a finding index")
        handler = {
            HighlightEventType.pointer_enter: self.pointer_enter,
            HighlightEventType.pointer_leave: self.pointer_leave,
            HighlightEventType.toggle: self.toggle,
        }[event_type]
        return handler(index)

    # -- internals ----------------------------------------------------------

    def _valid(self, index: int, event_type: HighlightEventType) -> bool:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self._count:
            logger.debug("Ignoring %s for index %r (have %d findings)", event_type.value, index, self._count)
            return False
        return True

    def _apply(
        self, event_type: HighlightEventType, index: int, new_state: HighlightState
    ) -> HighlightState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        self._notify(event_type, index)
        return self._state

    def _notify(self, event_type: HighlightEventType, index: int | None) -> None:
        event = HighlightEvent(event_type=event_type, index=index, state=self._state)
        for callback in list(self._listeners):
            callback(event)
