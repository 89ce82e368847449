"""
Domain models for time ranges, busy intervals and conflict results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Hashable, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidTimeRangeError


def localize(moment: datetime, timezone: str) -> DateTime:
    """
    Express an instant as a pendulum DateTime in the given zone.

    Naive datetimes are read as wall-clock time in ``timezone``; aware ones
    are converted.
    """
    if moment.tzinfo is None:
        return pendulum.instance(moment, tz=timezone)
    return pendulum.instance(moment).in_timezone(timezone)


def parse_instant(value: str, timezone: str) -> DateTime:
    """
    Parse an ISO-8601 date-time; strings without an offset are read in ``timezone``.

    Raises:
        ValueError: If the text is not a date-time (durations and intervals
            are rejected too)
    """
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"'{value}' is not a date-time")
    return parsed


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    A range whose start is not before its end is malformed. Malformed ranges
    never overlap anything; use ``TimeRange.checked`` to reject them.
    """
    start: datetime
    end: datetime

    @classmethod
    def checked(cls, start: datetime, end: datetime) -> "TimeRange":
        """Build a range, raising InvalidTimeRangeError if it is malformed."""
        if start >= end:
            raise InvalidTimeRangeError(f"Start time {start} must be before end time {end}")
        return cls(start=start, end=end)

    @property
    def is_valid(self) -> bool:
        return self.start < self.end

    def duration(self) -> timedelta:
        """Return the duration as a timedelta."""
        return self.end - self.start

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration().total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return overlaps(self, other)

    def __str__(self) -> str:
        start = pendulum.instance(self.start)
        end = pendulum.instance(self.end)
        return f"{start.format('DD.MM.YYYY HH:mm')} - {end.format('HH:mm')}"


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    """
    Decide whether two half-open ranges intersect.

    Ranges that only touch (``a.end == b.start``) do not overlap, so
    back-to-back events are allowed. A malformed operand never overlaps.
    """
    if not (a.is_valid and b.is_valid):
        return False
    return a.start < b.end and a.end > b.start


@dataclass(frozen=True)
class BusyInterval:
    """An existing event reduced to its id and time range."""
    id: Hashable
    range: TimeRange


@dataclass(frozen=True)
class CandidateRequest:
    """A proposed time range, optionally excluding the event being edited."""
    range: TimeRange
    exclude_id: Optional[Hashable] = None


@dataclass(frozen=True)
class SuggestionPolicy:
    """
    Rules for generating alternative start times.

    Hours are evaluated as wall-clock hours in ``timezone``. The window opens
    at ``workday_start_hour`` (inclusive) and closes at ``workday_end_hour``
    (exclusive).
    """
    workday_start_hour: int = 9
    workday_end_hour: int = 17
    slot_granularity_minutes: int = 30
    search_horizon: timedelta = field(default_factory=lambda: timedelta(days=7))
    max_suggestions: int = 3
    timezone: str = "UTC"

    def __post_init__(self):
        for name in ("workday_start_hour", "workday_end_hour"):
            hour = getattr(self, name)
            if not 0 <= hour <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {hour}")
        if self.workday_end_hour <= self.workday_start_hour:
            raise ValueError("workday_end_hour must be later than workday_start_hour")
        if self.slot_granularity_minutes <= 0:
            raise ValueError("slot_granularity_minutes must be greater than zero")
        if self.search_horizon <= timedelta(0):
            raise ValueError("search_horizon must be positive")
        if self.max_suggestions <= 0:
            raise ValueError("max_suggestions must be greater than zero")

    def is_working_hour(self, moment: DateTime) -> bool:
        """Check whether a localized instant starts inside working hours."""
        return self.workday_start_hour <= moment.hour < self.workday_end_hour


def _isoformat(moment: datetime) -> str:
    return moment.isoformat()


@dataclass(frozen=True)
class ConflictResult:
    """
    Outcome of a conflict check.

    ``conflicts`` keeps the order of the source collection; ``suggestions``
    is ascending. Suggestions are only ever present alongside conflicts.
    """
    conflicts: Tuple[BusyInterval, ...] = ()
    suggestions: Tuple[DateTime, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "conflicts": [
                {
                    "id": busy.id,
                    "start": _isoformat(busy.range.start),
                    "end": _isoformat(busy.range.end),
                }
                for busy in self.conflicts
            ],
            "suggestions": [_isoformat(moment) for moment in self.suggestions],
        }
