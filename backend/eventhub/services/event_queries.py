"""Event query facade — builds denormalized EventOut objects.

Every read runs in three stages:
1. Fetch the primary event rows matching the predicate.
2. Batch-fetch organizer profiles for the distinct organizer ids (one query).
3. Batch-fetch attendee rows for the event ids (one query).

The joins happen in memory. No per-event sub-queries are issued. When the
primary fetch is empty the batch queries are skipped entirely.

A failing primary fetch raises PersistenceError. A failing batch lookup is
logged and degrades the affected field (organizer None, attendees []).
"""
import logging
from collections import defaultdict
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, Query

from eventhub.errors import EventNotFoundError, PersistenceError
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.profile import Profile
from eventhub.schemas.event import EventOut
from eventhub.schemas.profile import ProfileOut

logger = logging.getLogger(__name__)


def to_event_out(
    event: Event,
    attendee_ids: list[str],
    organizer: Profile | ProfileOut | None = None,
) -> EventOut:
    """Map an event row plus its joined data to the app-level Event."""
    return EventOut(
        id=event.id,
        title=event.title,
        description=event.description,
        date=event.date,
        time=event.time,
        location=event.location,
        image_url=event.image_url or None,
        organizer_id=event.organizer_id,
        organizer=ProfileOut.model_validate(organizer) if organizer is not None else None,
        attendees=list(attendee_ids),
        capacity=event.capacity,
        tags=list(event.tags or []),
        is_public=event.is_public,
        created_at=event.created_at,
    )


def _load_primary(db: Session, query: Query, what: str) -> list[Event]:
    try:
        return query.order_by(Event.date.asc(), Event.time.asc()).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error fetching %s: %s", what, exc)
        raise PersistenceError(str(exc)) from exc


def _load_organizers(db: Session, organizer_ids: Iterable[str]) -> dict[str, ProfileOut]:
    """One query for all organizer profiles; {} if the lookup fails."""
    ids = sorted(set(organizer_ids))
    try:
        rows = db.query(Profile).filter(Profile.id.in_(ids)).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Organizer lookup failed for %d profiles: %s", len(ids), exc)
        return {}
    return {p.id: ProfileOut.model_validate(p) for p in rows}


def _load_attendee_ids(db: Session, event_ids: Iterable[str]) -> dict[str, list[str]]:
    """One query for the attendee relation of all events; {} if the lookup fails."""
    ids = list(event_ids)
    try:
        rows = (
            db.query(Attendee.event_id, Attendee.user_id)
            .filter(Attendee.event_id.in_(ids))
            .order_by(Attendee.created_at.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Attendee lookup failed for %d events: %s", len(ids), exc)
        return {}
    by_event: dict[str, list[str]] = defaultdict(list)
    for event_id, user_id in rows:
        by_event[event_id].append(user_id)
    return by_event


def denormalize(db: Session, events: list[Event]) -> list[EventOut]:
    """Join organizers and attendee ids onto a list of event rows.

    The rows are copied out before the batch lookups run, since a failed
    lookup rolls back the session and expires them.
    """
    if not events:
        return []
    shells = [to_event_out(e, []) for e in events]
    organizers = _load_organizers(db, (s.organizer_id for s in shells))
    attendees = _load_attendee_ids(db, [s.id for s in shells])
    return [
        s.model_copy(update={
            "organizer": organizers.get(s.organizer_id),
            "attendees": attendees.get(s.id, []),
        })
        for s in shells
    ]


def fetch_public_events(db: Session) -> list[EventOut]:
    """All public events, soonest first."""
    query = db.query(Event).filter(Event.is_public.is_(True))
    return denormalize(db, _load_primary(db, query, "public events"))


def fetch_user_events(db: Session, user_id: str) -> list[EventOut]:
    """Events organized by ``user_id``, soonest first."""
    query = db.query(Event).filter(Event.organizer_id == user_id)
    return denormalize(db, _load_primary(db, query, "user events"))


def fetch_attending_events(db: Session, user_id: str) -> list[EventOut]:
    """Events ``user_id`` has RSVP'd to, excluding the ones they organize."""
    query = (
        db.query(Event)
        .join(Attendee, Attendee.event_id == Event.id)
        .filter(Attendee.user_id == user_id, Event.organizer_id != user_id)
    )
    return denormalize(db, _load_primary(db, query, "attending events"))


def get_event(db: Session, event_id: str) -> EventOut:
    """A single event with organizer and attendees joined in."""
    try:
        event = db.query(Event).filter(Event.id == event_id).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error fetching event %s: %s", event_id, exc)
        raise PersistenceError(str(exc)) from exc
    if event is None:
        raise EventNotFoundError(event_id)
    return denormalize(db, [event])[0]
