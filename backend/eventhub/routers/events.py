"""Event API routes — delegates to the query facade and creation service."""
import datetime as dt
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.config import settings
from eventhub.database import get_db
from eventhub.schemas.event import EventCreate, EventDetailsOut, EventOut
from eventhub.services import event_helpers, event_queries, event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create an event. New events start with no attendees."""
    return event_service.create_event(db, payload)


@router.get("/", response_model=list[EventOut])
def list_public_events(
    search: Optional[str] = Query(None),
    tags: Optional[list[str]] = Query(None),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    db: Session = Depends(get_db),
):
    """List public events with optional search, tag and date-range filters."""
    events = event_queries.fetch_public_events(db)
    filters = event_helpers.EventFilters(
        search_term=search or "",
        tags=tags or [],
        start_date=start_date,
        end_date=end_date,
    )
    return event_helpers.filter_events(events, filters)


@router.get("/upcoming", response_model=list[EventOut])
def list_upcoming_events(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """Public events from today on, in the configured timezone."""
    today = event_helpers.today_in(settings.TIMEZONE)
    return event_helpers.upcoming_events(event_queries.fetch_public_events(db), today, limit)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event with organizer and attendees."""
    return event_queries.get_event(db, event_id)


@router.get("/{event_id}/details", response_model=EventDetailsOut)
def get_event_details(
    event_id: str,
    viewer_id: Optional[str] = Query(None, description="ID of the signed-in user, if any"),
    db: Session = Depends(get_db),
):
    """Single event plus organizer name, spots left, countdown and the viewer's RSVP state."""
    today = event_helpers.today_in(settings.TIMEZONE)
    return event_helpers.event_details(event_queries.get_event(db, event_id), today, viewer_id)
