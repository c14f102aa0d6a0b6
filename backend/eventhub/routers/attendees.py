"""Attendee / RSVP API routes."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.schemas.event import AttendanceOut
from eventhub.services import attendance_service, event_queries

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/attendance", response_model=AttendanceOut, status_code=status.HTTP_200_OK)
def toggle_attendance(
    event_id: str,
    actor_user_id: str = Query(..., description="ID of the user toggling their RSVP"),
    db: Session = Depends(get_db),
):
    """Toggle the acting user's RSVP and return the re-read event."""
    attending = attendance_service.toggle_attendance(db, event_id, actor_user_id)
    return AttendanceOut(
        attending=attending,
        message=attendance_service.attendance_message(attending),
        event=event_queries.get_event(db, event_id),
    )
