"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .conflict_service import ConflictService, EventSource, find_conflicts
from .scheduler import EventScheduler, ScheduleOutcome

__all__ = [
    "ConflictService",
    "EventSource",
    "find_conflicts",
    "EventScheduler",
    "ScheduleOutcome",
]
