"""
Tests for the in-memory store and the EventScheduler.
"""

import pendulum
import pytest

from conflictfinder.adapters.memory_store import InMemoryEventStore
from conflictfinder.domain.exceptions import EventNotFoundError, InvalidTimeRangeError
from conflictfinder.domain.models import SuggestionPolicy, TimeRange
from conflictfinder.services.conflict_service import ConflictService
from conflictfinder.services.scheduler import EventScheduler


def _at(value: str) -> pendulum.DateTime:
    return pendulum.parse(value, tz="UTC")


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def scheduler(store) -> EventScheduler:
    return EventScheduler(store=store, conflict_service=ConflictService(policy=SuggestionPolicy()))


class TestInMemoryEventStore:
    """Tests for InMemoryEventStore."""

    def test_ids_are_monotonic_and_not_reused(self, store):
        tr = TimeRange(start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        first = store.create(title="First", time_range=tr)
        second = store.create(title="Second", time_range=tr)
        store.delete(second.id)
        third = store.create(title="Third", time_range=tr)

        assert (first.id, second.id, third.id) == (1, 2, 3)
        assert [e.id for e in store.list_events()] == [1, 3]

    def test_busy_intervals_follow_insertion_order(self, store):
        late = TimeRange(start=_at("2024-01-01 15:00"), end=_at("2024-01-01 16:00"))
        early = TimeRange(start=_at("2024-01-01 09:00"), end=_at("2024-01-01 10:00"))
        store.create(title="Late", time_range=late)
        store.create(title="Early", time_range=early)

        busy = store.list_busy_intervals()

        assert [b.id for b in busy] == [1, 2]
        assert busy[0].range == late

    def test_update_unknown_event_raises(self, store):
        with pytest.raises(EventNotFoundError):
            store.update(42, title="Nope")

    def test_update_cannot_change_id(self, store):
        tr = TimeRange(start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))
        event = store.create(title="First", time_range=tr)

        with pytest.raises(ValueError):
            store.update(event.id, id=99)

    def test_delete_reports_missing(self, store):
        assert store.delete(1) is False


class TestEventScheduler:
    """Tests for EventScheduler."""

    def test_create_without_conflicts(self, scheduler):
        outcome = scheduler.create_event(
            title="Standup",
            start=_at("2024-01-01 09:00"),
            end=_at("2024-01-01 09:15"),
            location="Room 1",
        )

        assert outcome.event.id == 1
        assert outcome.event.location == "Room 1"
        assert not outcome.result.has_conflicts
        assert outcome.result.suggestions == ()

    def test_create_reports_conflicts_and_still_saves(self, scheduler, store):
        scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        outcome = scheduler.create_event(
            title="Lunch",
            start=_at("2024-01-01 10:30"),
            end=_at("2024-01-01 11:30"),
        )

        assert [c.id for c in outcome.result.conflicts] == [1]
        assert outcome.result.suggestions[0] == _at("2024-01-01 11:00")
        assert store.get(outcome.event.id) is not None

    def test_create_rejects_inverted_range(self, scheduler, store):
        with pytest.raises(InvalidTimeRangeError):
            scheduler.create_event(title="Broken", start=_at("2024-01-01 11:00"), end=_at("2024-01-01 10:00"))

        assert store.list_events() == []

    def test_update_does_not_conflict_with_itself(self, scheduler):
        created = scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        outcome = scheduler.update_event(
            created.event.id,
            start=_at("2024-01-01 10:30"),
            end=_at("2024-01-01 11:30"),
        )

        assert not outcome.result.has_conflicts
        assert outcome.event.time_range.start == _at("2024-01-01 10:30")

    def test_update_reports_other_conflicts(self, scheduler):
        scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))
        moved = scheduler.create_event(title="Sync", start=_at("2024-01-01 14:00"), end=_at("2024-01-01 15:00"))

        outcome = scheduler.update_event(moved.event.id, start=_at("2024-01-01 10:30"), end=_at("2024-01-01 11:30"))

        assert [c.id for c in outcome.result.conflicts] == [1]

    def test_update_keeps_omitted_bound_and_other_fields(self, scheduler):
        created = scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        outcome = scheduler.update_event(created.event.id, end=_at("2024-01-01 12:00"), title="Long review")

        assert outcome.event.time_range == TimeRange(start=_at("2024-01-01 10:00"), end=_at("2024-01-01 12:00"))
        assert outcome.event.title == "Long review"

    def test_update_unknown_event_raises(self, scheduler):
        with pytest.raises(EventNotFoundError):
            scheduler.update_event(7, start=_at("2024-01-01 10:00"))

    def test_update_rejects_inverted_range(self, scheduler):
        created = scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        with pytest.raises(InvalidTimeRangeError):
            scheduler.update_event(created.event.id, start=_at("2024-01-01 12:00"))

    def test_delete(self, scheduler, store):
        created = scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        scheduler.delete_event(created.event.id)

        assert store.get(created.event.id) is None
        with pytest.raises(EventNotFoundError):
            scheduler.delete_event(created.event.id)

    @pytest.mark.parametrize("field", ["time_range", "colour", "id"])
    def test_update_rejects_non_editable_fields(self, scheduler, store, field):
        created = scheduler.create_event(title="Review", start=_at("2024-01-01 10:00"), end=_at("2024-01-01 11:00"))

        with pytest.raises(ValueError, match="Cannot update field"):
            scheduler.update_event(created.event.id, **{field: "x"})

        assert store.get(created.event.id) == created.event

    def test_update_field_check_runs_before_lookup(self, scheduler):
        with pytest.raises(ValueError, match="Cannot update field"):
            scheduler.update_event(99, colour="red")
