"""Pure helpers over denormalized events. None of them touch the database."""
from __future__ import annotations
import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, Optional

import pytz

from eventhub.schemas.event import EventDetailsOut, EventOut


@dataclass
class EventFilters:
    search_term: str = ""
    tags: list[str] = field(default_factory=list)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


def today_in(tz_name: str) -> dt.date:
    """Current calendar date in the IANA timezone ``tz_name``."""
    return dt.datetime.now(pytz.timezone(tz_name)).date()


def is_user_attending(event: EventOut, user_id: str) -> bool:
    return user_id in event.attendees


def is_user_organizer(event: EventOut, user_id: str) -> bool:
    return event.organizer_id == user_id


def organizer_name(event: EventOut) -> str:
    """Display name of the organizer, "Unknown" when it was not joined in."""
    return event.organizer.name if event.organizer is not None else "Unknown"


def _matches(filters: EventFilters, event: EventOut) -> bool:
    if filters.search_term:
        term = filters.search_term.lower()
        if term not in event.title.lower() and term not in event.description.lower():
            return False
    if filters.tags and not any(tag in event.tags for tag in filters.tags):
        return False
    if filters.start_date and event.date < filters.start_date:
        return False
    if filters.end_date and event.date > filters.end_date:
        return False
    return True


def filter_events(events: Iterable[EventOut], filters: EventFilters) -> list[EventOut]:
    """Search (title or description), any-tag match and inclusive date range."""
    return [e for e in events if _matches(filters, e)]


def upcoming_events(
    events: Iterable[EventOut],
    today: dt.date,
    limit: Optional[int] = None,
) -> list[EventOut]:
    """Events dated ``today`` or later, soonest first, optionally truncated."""
    upcoming = sorted((e for e in events if e.date >= today), key=lambda e: (e.date, e.time))
    return upcoming[:limit] if limit else upcoming


def days_remaining(event: EventOut, today: dt.date) -> int:
    """Whole days from ``today`` until the event; negative once it has passed."""
    return (event.date - today).days


def spots_left(event: EventOut) -> int:
    return max(event.capacity - len(event.attendees), 0)


def event_details(event: EventOut, today: dt.date, viewer_id: Optional[str] = None) -> EventDetailsOut:
    """Everything the detail view shows for ``event``, from ``viewer_id``'s point of view."""
    return EventDetailsOut(
        event=event,
        organizer_name=organizer_name(event),
        spots_left=spots_left(event),
        days_remaining=days_remaining(event, today),
        is_attending=bool(viewer_id) and is_user_attending(event, viewer_id),
        is_organizer=bool(viewer_id) and is_user_organizer(event, viewer_id),
    )
