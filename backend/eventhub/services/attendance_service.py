"""Attendance service — toggles a user's RSVP on an event.

The attendees table is the system of record; EventOut.attendees is only a
projection of it, re-read after every toggle.

The toggle is keyed on the (event_id, user_id) unique constraint instead of
a check-then-act: a DELETE that removes a row means the user was attending,
otherwise an INSERT is attempted and a unique violation means a concurrent
request already inserted the pair. Capacity is not enforced.
"""
import logging

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.errors import (
    EventNotFoundError,
    OrganizerAttendanceError,
    PersistenceError,
    UserNotFoundError,
)
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.profile import Profile

logger = logging.getLogger(__name__)

GOING_MESSAGE = "You're going!"
CANCELLED_MESSAGE = "RSVP cancelled"


def attendance_message(attending: bool) -> str:
    """Notification copy for the result of a toggle."""
    return GOING_MESSAGE if attending else CANCELLED_MESSAGE


def _load_targets(db: Session, event_id: str, user_id: str) -> Event:
    try:
        event = db.query(Event).filter(Event.id == event_id).first()
        user_exists = event is not None and (
            db.query(Profile.id).filter(Profile.id == user_id).first() is not None
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error loading event %s for attendance toggle: %s", event_id, exc)
        raise PersistenceError(str(exc)) from exc
    if event is None:
        raise EventNotFoundError(event_id)
    if not user_exists:
        raise UserNotFoundError(user_id)
    return event


def toggle_attendance(db: Session, event_id: str, user_id: str) -> bool:
    """Flip ``user_id``'s RSVP on ``event_id`` and return whether they now attend.

    Organizers cannot RSVP to their own events.
    """
    event = _load_targets(db, event_id, user_id)
    if event.organizer_id == user_id:
        raise OrganizerAttendanceError(event_id)

    try:
        removed = db.execute(
            delete(Attendee).where(
                Attendee.event_id == event_id,
                Attendee.user_id == user_id,
            )
        ).rowcount
        if removed:
            db.commit()
            logger.info("User %s cancelled RSVP to event %s", user_id, event_id)
            return False

        db.add(Attendee(event_id=event_id, user_id=user_id))
        try:
            db.commit()
        except IntegrityError:
            # Pair inserted by a concurrent request; the user is attending either way.
            db.rollback()
            logger.info("User %s already attending event %s", user_id, event_id)
            return True
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error toggling attendance of %s on event %s: %s", user_id, event_id, exc)
        raise PersistenceError(str(exc)) from exc

    logger.info("User %s RSVP'd to event %s", user_id, event_id)
    return True
