"""
Event create/update/delete flow with conflict reporting.

Events are saved even when they conflict; the caller receives the saved
event together with the conflicts and suggested alternative start times.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..adapters.memory_store import Event, InMemoryEventStore
from ..domain.exceptions import EventNotFoundError
from ..domain.models import CandidateRequest, ConflictResult, TimeRange
from .conflict_service import ConflictService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "description", "location"})


@dataclass(frozen=True)
class ScheduleOutcome:
    """A saved event plus the conflict check made before saving it."""
    event: Event
    result: ConflictResult


class EventScheduler:
    """
    Checks events for conflicts as they are written to the store.
    """

    def __init__(
        self,
        store: InMemoryEventStore,
        conflict_service: ConflictService | None = None,
    ) -> None:
        self._store = store
        self._conflict_service = conflict_service or ConflictService()

    def create_event(
        self,
        *,
        title: str,
        start: datetime,
        end: datetime,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> ScheduleOutcome:
        """
        Check a new event against the store, then save it.

        Raises:
            InvalidTimeRangeError: If start is not before end
        """
        time_range = TimeRange.checked(start, end)
        result = self._conflict_service.check_source(
            CandidateRequest(range=time_range),
            self._store,
        )

        event = self._store.create(
            title=title,
            time_range=time_range,
            description=description,
            location=location,
        )
        self._log_outcome("Created", event, result)
        return ScheduleOutcome(event=event, result=result)

    def update_event(
        self,
        event_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        **changes,
    ) -> ScheduleOutcome:
        """
        Move or edit an existing event, checking the new time range.

        The event is excluded from its own conflict check. Omitted start or
        end keep their current values.

        Only ``title``, ``description`` and ``location`` may be passed as
        other changes.

        Raises:
            ValueError: If any other field is passed
            EventNotFoundError: If no event has this id
            InvalidTimeRangeError: If the resulting start is not before end
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        existing = self._store.get(event_id)
        if existing is None:
            raise EventNotFoundError(event_id)

        time_range = TimeRange.checked(
            start if start is not None else existing.time_range.start,
            end if end is not None else existing.time_range.end,
        )
        result = self._conflict_service.check_source(
            CandidateRequest(range=time_range, exclude_id=event_id),
            self._store,
        )

        event = self._store.update(event_id, time_range=time_range, **changes)
        self._log_outcome("Updated", event, result)
        return ScheduleOutcome(event=event, result=result)

    def delete_event(self, event_id: int) -> None:
        """
        Raises:
            EventNotFoundError: If no event has this id
        """
        if not self._store.delete(event_id):
            raise EventNotFoundError(event_id)

    @staticmethod
    def _log_outcome(action: str, event: Event, result: ConflictResult) -> None:
        if result.has_conflicts:
            logger.info(
                "%s event %d with %d conflict(s), %d suggestion(s)",
                action,
                event.id,
                len(result.conflicts),
                len(result.suggestions),
            )
        else:
            logger.info("%s event %d without conflicts", action, event.id)
