"""
Core business logic for suggesting alternative start times.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O).
"""

import logging
from datetime import datetime, timedelta
from typing import List, Sequence

from pendulum import DateTime

from .models import SuggestionPolicy, TimeRange, localize, overlaps

logger = logging.getLogger(__name__)


class SlotSearch:
    """
    Scans forward from a preferred start for free slots inside working hours.

    Algorithm:
    1. Sort busy ranges by start time
    2. Step a cursor forward from the preferred start by the slot granularity
    3. Keep every cursor that starts inside working hours and whose slot
       overlaps no busy range
    4. When the cursor reaches the end of the working day, jump to the start
       of the next day's working window
    5. Stop at the horizon or once enough suggestions are collected
    """

    def __init__(self, policy: SuggestionPolicy):
        self.policy = policy

    def suggest_slots(
        self,
        preferred_start: datetime,
        duration: timedelta,
        busy: Sequence[TimeRange],
    ) -> List[DateTime]:
        """
        Find up to ``max_suggestions`` free start times, earliest first.

        Args:
            preferred_start: Where the scan begins; it is the first candidate
            duration: Length of the slot to place
            busy: Time ranges the slot must not overlap

        Returns:
            Start times localized to the policy time zone. May be shorter
            than ``max_suggestions`` or empty if the horizon runs out.
        """
        if duration <= timedelta(0):
            logger.warning("Refusing to search for a slot of non-positive duration %s", duration)
            return []

        policy = self.policy
        sorted_busy = sorted(
            (self._localize_range(r) for r in busy),
            key=lambda r: r.start,
        )

        cursor = localize(preferred_start, policy.timezone)
        horizon_end = cursor + policy.search_horizon
        granularity = policy.slot_granularity_minutes

        suggestions: List[DateTime] = []
        examined = 0

        while cursor < horizon_end and len(suggestions) < policy.max_suggestions:
            examined += 1
            if self._is_valid_slot(cursor, cursor + duration, sorted_busy):
                suggestions.append(cursor)

            cursor = cursor.add(minutes=granularity)

            if cursor.hour >= policy.workday_end_hour:
                cursor = self._next_workday_start(cursor)

        logger.debug(
            "Examined %d candidate(s) from %s, found %d suggestion(s)",
            examined,
            preferred_start,
            len(suggestions),
        )
        return suggestions

    def _is_valid_slot(
        self,
        start: DateTime,
        end: DateTime,
        sorted_busy: Sequence[TimeRange],
    ) -> bool:
        """Only the slot's start is held to working hours."""
        if not self.policy.is_working_hour(start):
            return False

        candidate = TimeRange(start=start, end=end)
        for busy in sorted_busy:
            # Sorted by start, so nothing further can overlap.
            if busy.start >= end:
                break
            if overlaps(candidate, busy):
                return False
        return True

    def _localize_range(self, time_range: TimeRange) -> TimeRange:
        tz = self.policy.timezone
        return TimeRange(start=localize(time_range.start, tz), end=localize(time_range.end, tz))

    def _next_workday_start(self, moment: DateTime) -> DateTime:
        """Opening of the working window on the calendar day after ``moment``."""
        return moment.start_of("day").add(days=1).set(hour=self.policy.workday_start_hour)


def suggest_slots(
    preferred_start: datetime,
    duration: timedelta,
    busy: Sequence[TimeRange],
    policy: SuggestionPolicy,
) -> List[DateTime]:
    """Convenience wrapper around ``SlotSearch(policy).suggest_slots``."""
    return SlotSearch(policy).suggest_slots(preferred_start, duration, busy)
