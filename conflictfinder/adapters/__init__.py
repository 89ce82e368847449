"""
Adapters layer - Event storage and event file loading.
"""

from .json_event_source import JsonEventSource
from .memory_store import Event, InMemoryEventStore

__all__ = ["Event", "InMemoryEventStore", "JsonEventSource"]
