"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    BusyInterval,
    CandidateRequest,
    ConflictResult,
    SuggestionPolicy,
    TimeRange,
    overlaps,
)
from .slot_search import SlotSearch, suggest_slots

__all__ = [
    "BusyInterval",
    "CandidateRequest",
    "ConflictResult",
    "SuggestionPolicy",
    "TimeRange",
    "overlaps",
    "SlotSearch",
    "suggest_slots",
]
