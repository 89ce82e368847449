"""
In-memory event storage keyed by monotonically allocated integer ids.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from ..domain.exceptions import EventNotFoundError
from ..domain.models import BusyInterval, TimeRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """
    A stored calendar event.
    """
    id: int
    title: str
    time_range: TimeRange
    description: Optional[str] = None
    location: Optional[str] = None

    def to_busy_interval(self) -> BusyInterval:
        return BusyInterval(id=self.id, range=self.time_range)


class InMemoryEventStore:
    """
    Dict-backed store for Event instances.

    Ids start at 1 and are never reused, even after a delete. Insertion order
    is the order events are listed in.
    """

    def __init__(self) -> None:
        self._events: Dict[int, Event] = {}
        self._next_id = 1

    def next_id(self) -> int:
        """Allocate the next identifier."""
        event_id = self._next_id
        self._next_id += 1
        return event_id

    def list_events(self) -> List[Event]:
        return list(self._events.values())

    def list_busy_intervals(self) -> List[BusyInterval]:
        return [event.to_busy_interval() for event in self._events.values()]

    def get(self, event_id: int) -> Event | None:
        return self._events.get(event_id)

    def create(
        self,
        title: str,
        time_range: TimeRange,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Event:
        event = Event(
            id=self.next_id(),
            title=title,
            time_range=time_range,
            description=description,
            location=location,
        )
        self._events[event.id] = event
        logger.debug("Created event %d (%s)", event.id, event.title)
        return event

    def update(self, event_id: int, **changes) -> Event:
        """
        Replace fields of an existing event.

        Raises:
            EventNotFoundError: If no event has this id
        """
        if "id" in changes:
            raise ValueError("Event ids cannot be changed")

        existing = self._events.get(event_id)
        if existing is None:
            raise EventNotFoundError(event_id)

        updated = replace(existing, **changes)
        self._events[event_id] = updated
        logger.debug("Updated event %d", event_id)
        return updated

    def delete(self, event_id: int) -> bool:
        """Remove an event; returns False if it did not exist."""
        removed = self._events.pop(event_id, None)
        if removed is not None:
            logger.debug("Deleted event %d", event_id)
        return removed is not None
