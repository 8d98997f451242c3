"""TinyMonth - tag the days of a year with color-coded calendars."""

__version__ = "0.1.0"
__description__ = "Personal calendar tagging with whole-document JSON persistence"

from .core.state import StateManager
from .core.drag import DragSelector

__all__ = ["StateManager", "DragSelector"]
