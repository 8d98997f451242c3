"""Core TinyMonth components - state, persistence contract and date logic."""

from .document import Calendar, Document, Holiday
from .drag import DragSelector
from .registry import StoreRegistry, create_store
from .state import StateManager
from .store import DocumentStore, StoreError

__all__ = [
    "Calendar", "Document", "Holiday", "DragSelector", "StoreRegistry",
    "create_store", "StateManager", "DocumentStore", "StoreError",
]
