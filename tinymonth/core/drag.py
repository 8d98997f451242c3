"""Pointer-drag range selection over calendar days."""

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from .state import StateManager


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def dates_between(first: date, last: date) -> List[str]:
    """Every date from ``min`` to ``max`` of the two, inclusive, ascending."""
    start, end = min(first, last), max(first, last)
    days = []
    current = start
    while current <= end:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


class DragSelector:
    def __init__(self):
        self.state = DragState.IDLE
        self.anchor: Optional[str] = None
        self.current: Optional[str] = None
        self.calendar_id: Optional[str] = None

    @property
    def is_dragging(self) -> bool:
        return self.state == DragState.DRAGGING

    def start_drag(self, day: str, calendar_id: str) -> None:
        date.fromisoformat(day)  # reject malformed dates up front
        self.state = DragState.DRAGGING
        self.anchor = day
        self.current = day
        self.calendar_id = calendar_id

    def update_drag(self, day: str) -> None:
        """Move the free endpoint. Ignored while idle."""
        if not self.is_dragging:
            return
        date.fromisoformat(day)
        self.current = day

    def compute_range(self) -> List[str]:
        if not self.is_dragging:
            return []
        return dates_between(date.fromisoformat(self.anchor), date.fromisoformat(self.current))

    def end_drag(self) -> None:
        self.state = DragState.IDLE
        self.anchor = None
        self.current = None
        self.calendar_id = None

    def pointer_released(self) -> None:
        """Global release signal, wherever the pointer is."""
        if self.is_dragging:
            self.end_drag()

    def commit(self, manager: StateManager) -> List[str]:
        """Apply the gesture to ``manager`` and end the drag.

        A one-day range is a plain toggle; longer ranges toggle as one
        batch whose direction is decided by the earliest date.
        """
        days = self.compute_range()
        calendar_id = self.calendar_id
        self.end_drag()

        if len(days) == 1:
            manager.toggle_assignment(days[0], calendar_id)
        elif len(days) > 1:
            manager.toggle_multiple_assignments(days, calendar_id)
        return days
