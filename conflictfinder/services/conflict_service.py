"""
Application service for detecting conflicts and proposing alternatives.

The service composes the overlap predicate and the slot search. Event data
is handed in as a snapshot, either directly or through any object satisfying
``EventSource``, so storage stays outside the domain.
"""

from __future__ import annotations

import logging
from typing import Hashable, List, Optional, Protocol, Sequence

from ..domain.models import (
    BusyInterval,
    CandidateRequest,
    ConflictResult,
    SuggestionPolicy,
    TimeRange,
    overlaps,
)
from ..domain.slot_search import SlotSearch

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Protocol describing where existing events come from."""

    def list_busy_intervals(self) -> List[BusyInterval]:
        """Return every existing event as a busy interval."""


def _without_excluded(
    existing: Sequence[BusyInterval],
    exclude_id: Optional[Hashable],
) -> List[BusyInterval]:
    if exclude_id is None:
        return list(existing)
    return [busy for busy in existing if busy.id != exclude_id]


def find_conflicts(
    candidate: TimeRange,
    existing: Sequence[BusyInterval],
    exclude_id: Optional[Hashable] = None,
) -> List[BusyInterval]:
    """
    Return existing events that overlap the candidate, in input order.

    The entry whose id equals ``exclude_id`` is never reported, so an event
    being edited does not conflict with itself. An ``exclude_id`` matching
    nothing is ignored.
    """
    return [
        busy
        for busy in _without_excluded(existing, exclude_id)
        if overlaps(candidate, busy.range)
    ]


class ConflictService:
    """
    Orchestrates conflict detection and slot suggestion.

    Suggestions are only searched for when the candidate actually conflicts.
    """

    def __init__(
        self,
        policy: SuggestionPolicy | None = None,
        slot_search: SlotSearch | None = None,
    ) -> None:
        self.policy = policy or SuggestionPolicy()
        self._slot_search = slot_search or SlotSearch(policy=self.policy)

    def find_conflicts(
        self,
        candidate: TimeRange,
        existing: Sequence[BusyInterval],
        exclude_id: Optional[Hashable] = None,
    ) -> List[BusyInterval]:
        return find_conflicts(candidate, existing, exclude_id)

    def check(
        self,
        request: CandidateRequest,
        existing: Sequence[BusyInterval],
    ) -> ConflictResult:
        """
        Check a candidate against a snapshot of existing events.

        Args:
            request: Candidate range plus the optional id to ignore
            existing: Every existing event, in source order

        Returns:
            ConflictResult with conflicts in source order and, only when
            there are conflicts, suggested start times
        """
        remaining = _without_excluded(existing, request.exclude_id)
        conflicts = find_conflicts(request.range, remaining)

        if not conflicts:
            logger.debug("No conflicts for %s", request.range)
            return ConflictResult()

        logger.info(
            "Candidate %s conflicts with %d event(s)",
            request.range,
            len(conflicts),
        )

        suggestions = self._slot_search.suggest_slots(
            preferred_start=request.range.start,
            duration=request.range.duration(),
            busy=[busy.range for busy in remaining],
        )

        return ConflictResult(conflicts=tuple(conflicts), suggestions=tuple(suggestions))

    def check_source(self, request: CandidateRequest, source: EventSource) -> ConflictResult:
        """Take one snapshot from ``source`` and check the candidate against it."""
        return self.check(request, source.list_busy_intervals())
