"""Event creation service.

Steps:
- Required-field validation (never reaches the database on failure)
- Organizer profile read-before-write
- Insert of the event row
- Denormalized EventOut with no attendees and the organizer joined in

Each failing step raises its own DomainError; no step returns None.
"""
import logging
import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.errors import EventValidationError, OrganizerNotFoundError, PersistenceError
from eventhub.models.event import Event
from eventhub.models.profile import Profile
from eventhub.schemas.event import EventCreate, EventOut
from eventhub.services.event_queries import to_event_out

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "date", "time", "location", "organizer_id")
_CLOCK_TIME = re.compile(r"^(\d{1,2}):(\d{2})$")


def missing_fields(draft: EventCreate) -> list[str]:
    """Names of required fields that are absent or blank."""
    missing = []
    for field in REQUIRED_FIELDS:
        value = getattr(draft, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def normalize_time(value: str) -> str:
    """Zero-pad 24-hour clock times ("9:00" -> "09:00") so they sort as text.

    Anything else the organizer typed is kept as entered.
    """
    value = value.strip()
    match = _CLOCK_TIME.match(value)
    if match and int(match.group(1)) < 24 and int(match.group(2)) < 60:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return value


def create_event(db: Session, draft: EventCreate) -> EventOut:
    """Validate, persist and return a new event."""
    missing = missing_fields(draft)
    if missing:
        raise EventValidationError(missing)

    try:
        organizer = db.query(Profile).filter(Profile.id == draft.organizer_id).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error fetching organizer %s: %s", draft.organizer_id, exc)
        raise PersistenceError(str(exc)) from exc
    if organizer is None:
        logger.error("Organizer profile %s not found", draft.organizer_id)
        raise OrganizerNotFoundError(draft.organizer_id)

    event = Event(
        title=draft.title.strip(),
        description=draft.description.strip(),
        date=draft.date,
        time=normalize_time(draft.time),
        location=draft.location.strip(),
        image_url=draft.image_url or None,
        organizer_id=organizer.id,
        capacity=draft.capacity,
        tags=list(draft.tags),
        is_public=draft.is_public,
    )
    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error creating event '%s': %s", draft.title, exc)
        raise PersistenceError(str(exc)) from exc

    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.id, organizer.id)
    return to_event_out(event, [], organizer)
