"""Tests for the event query facade.

Covers:
- Denormalization: organizer and attendee ids joined onto each event
- Ordering by date, soonest first
- Batching: one organizer query and one attendee query per read
- Empty primary result skips the batch queries
- Attending query excludes events the user organizes
- Degraded batch lookups leave the field empty instead of failing
"""
import datetime as dt
import logging

import pytest
from sqlalchemy.exc import OperationalError

from eventhub.errors import EventNotFoundError, PersistenceError
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.profile import Profile
from eventhub.services import event_queries
from tests.conftest import count_from, make_event, make_profile, rsvp


class _BrokenQuery:
    """Query stand-in that builds fine and fails when executed."""

    def __getattr__(self, name):
        return lambda *args, **kwargs: self

    def all(self):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    first = all


class _FailingSession:
    """Session proxy whose queries touching ``target`` fail like a dropped connection."""

    def __init__(self, db, target):
        self._db = db
        self._target = target

    def query(self, *entities):
        if any(e is self._target for e in entities):
            return _BrokenQuery()
        return self._db.query(*entities)

    def rollback(self):
        self._db.rollback()


def _populate(db):
    alice = make_profile(db, "Alice")
    bob = make_profile(db, "Bob")
    carol = make_profile(db, "Carol")
    picnic = make_event(db, alice, "Picnic", dt.date(2025, 7, 1))
    concert = make_event(db, bob, "Concert", dt.date(2025, 6, 1))
    hike = make_event(db, carol, "Hike", dt.date(2025, 8, 1))
    private = make_event(db, alice, "Board Meeting", dt.date(2025, 5, 1), is_public=False)
    rsvp(db, picnic, bob)
    rsvp(db, picnic, carol)
    rsvp(db, concert, alice)
    return alice, bob, carol, picnic, concert, hike, private


class TestFetchPublicEvents:

    def test_public_only_and_ordered_by_date(self, db):
        _populate(db)
        events = event_queries.fetch_public_events(db)
        assert [e.title for e in events] == ["Concert", "Picnic", "Hike"]

    def test_denormalizes_organizer_and_attendees(self, db):
        alice, bob, carol, picnic, *_ = _populate(db)
        events = {e.id: e for e in event_queries.fetch_public_events(db)}
        out = events[picnic.id]
        assert out.organizer is not None
        assert out.organizer.id == alice.id
        assert out.organizer.name == "Alice"
        assert set(out.attendees) == {bob.id, carol.id}

    def test_event_without_attendees_gets_empty_list(self, db):
        *_, hike, _ = _populate(db)
        events = {e.id: e for e in event_queries.fetch_public_events(db)}
        assert events[hike.id].attendees == []

    def test_batches_lookups_regardless_of_event_count(self, db, statements):
        organizers = [make_profile(db, f"Organizer {i}") for i in range(4)]
        guest = make_profile(db, "Guest")
        for i in range(12):
            ev = make_event(db, organizers[i % 4], f"Event {i}", dt.date(2025, 6, 1) + dt.timedelta(days=i))
            rsvp(db, ev, guest)

        statements.clear()
        events = event_queries.fetch_public_events(db)

        assert len(events) == 12
        assert count_from(statements, "events") == 1
        assert count_from(statements, "profiles") == 1
        assert count_from(statements, "attendees") == 1

    def test_empty_result_skips_batch_queries(self, db, statements):
        alice = make_profile(db, "Alice")
        make_event(db, alice, "Private", is_public=False)

        statements.clear()
        events = event_queries.fetch_public_events(db)

        assert events == []
        assert count_from(statements, "events") == 1
        assert count_from(statements, "profiles") == 0
        assert count_from(statements, "attendees") == 0


class TestFetchUserEvents:

    def test_only_events_organized_by_user(self, db):
        alice, *_ = _populate(db)
        events = event_queries.fetch_user_events(db, alice.id)
        assert [e.title for e in events] == ["Board Meeting", "Picnic"]
        assert all(e.organizer_id == alice.id for e in events)

    def test_unknown_user_gets_empty_list(self, db, statements):
        _populate(db)
        statements.clear()
        assert event_queries.fetch_user_events(db, "nobody") == []
        assert count_from(statements, "profiles") == 0


class TestFetchAttendingEvents:

    def test_returns_rsvped_events(self, db):
        alice, bob, carol, picnic, concert, *_ = _populate(db)
        assert [e.id for e in event_queries.fetch_attending_events(db, bob.id)] == [picnic.id]
        assert [e.id for e in event_queries.fetch_attending_events(db, alice.id)] == [concert.id]

    def test_excludes_events_the_user_organizes(self, db):
        alice, bob, carol, picnic, concert, hike, private = _populate(db)
        # Attendance row on her own event, inserted without the toggle guard
        rsvp(db, private, alice)

        events = event_queries.fetch_attending_events(db, alice.id)

        assert [e.id for e in events] == [concert.id]
        for e in events:
            assert alice.id in e.attendees
            assert e.organizer_id != alice.id

    def test_includes_private_events(self, db):
        alice, bob, carol, picnic, concert, hike, private = _populate(db)
        rsvp(db, private, bob)
        ids = [e.id for e in event_queries.fetch_attending_events(db, bob.id)]
        assert ids == [private.id, picnic.id]

    def test_batches_lookups(self, db, statements):
        alice, bob, carol, *_ = _populate(db)
        statements.clear()
        event_queries.fetch_attending_events(db, bob.id)
        assert count_from(statements, "profiles") == 1
        assert count_from(statements, "attendees") == 1


class TestDegradedLookups:

    def test_organizer_lookup_failure_leaves_organizer_unset(self, db, caplog):
        _, bob, carol, picnic, *_ = _populate(db)
        with caplog.at_level(logging.WARNING, logger="eventhub.services.event_queries"):
            events = event_queries.fetch_public_events(_FailingSession(db, Profile))

        assert len(events) == 3
        assert all(e.organizer is None for e in events)
        picnic_out = next(e for e in events if e.id == picnic.id)
        assert set(picnic_out.attendees) == {bob.id, carol.id}
        assert "Organizer lookup failed" in caplog.text

    def test_attendee_lookup_failure_leaves_attendees_empty(self, db):
        alice, *_ = _populate(db)
        events = event_queries.fetch_user_events(_FailingSession(db, Attendee.event_id), alice.id)

        assert len(events) == 2
        assert all(e.attendees == [] for e in events)
        assert all(e.organizer.id == alice.id for e in events)

    def test_failed_organizer_lookup_does_not_reload_events(self, db, statements):
        organizer = make_profile(db, "Organizer")
        for i in range(8):
            make_event(db, organizer, f"Event {i}", dt.date(2025, 6, 1) + dt.timedelta(days=i))

        statements.clear()
        events = event_queries.fetch_public_events(_FailingSession(db, Profile))

        assert len(events) == 8
        assert count_from(statements, "events") == 1
        assert count_from(statements, "attendees") == 1

    def test_failed_attendee_lookup_does_not_reload_rows(self, db, statements):
        organizers = [make_profile(db, f"Organizer {i}") for i in range(3)]
        for i in range(6):
            make_event(db, organizers[i % 3], f"Event {i}", dt.date(2025, 6, 1) + dt.timedelta(days=i))

        statements.clear()
        events = event_queries.fetch_public_events(_FailingSession(db, Attendee.event_id))

        assert len(events) == 6
        assert all(e.organizer is not None for e in events)
        assert count_from(statements, "events") == 1
        assert count_from(statements, "profiles") == 1

    def test_primary_failure_raises_persistence_error(self, db):
        _populate(db)
        with pytest.raises(PersistenceError) as exc_info:
            event_queries.fetch_public_events(_FailingSession(db, Event))
        assert "connection lost" in exc_info.value.message


class TestGetEvent:

    def test_single_event_denormalized(self, db):
        alice, bob, carol, picnic, *_ = _populate(db)
        out = event_queries.get_event(db, picnic.id)
        assert out.title == "Picnic"
        assert out.organizer.id == alice.id
        assert set(out.attendees) == {bob.id, carol.id}

    def test_missing_event_raises(self, db):
        with pytest.raises(EventNotFoundError):
            event_queries.get_event(db, "does-not-exist")
