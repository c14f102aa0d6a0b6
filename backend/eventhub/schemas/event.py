"""Pydantic schemas for Events.

EventOut is the denormalized read model handed back to callers: the
organizer profile and the attendee ids are joined in at read time.
"""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from eventhub.schemas.profile import ProfileOut


class EventCreate(BaseModel):
    """An event draft. Required-field checks happen in the creation service."""

    title: str = ""
    description: str = ""
    date: Optional[dt.date] = None
    time: str = ""
    location: str = ""
    image_url: Optional[str] = None
    organizer_id: str = ""
    capacity: int = Field(10, gt=0)
    tags: list[str] = []
    is_public: bool = True


class EventOut(BaseModel):
    id: str
    title: str
    description: str
    date: dt.date
    time: str
    location: str
    image_url: Optional[str] = None
    organizer_id: str
    organizer: Optional[ProfileOut] = None
    attendees: list[str] = []
    capacity: int
    tags: list[str] = []
    is_public: bool
    created_at: Optional[dt.datetime] = None


class AttendanceOut(BaseModel):
    attending: bool
    message: str
    event: EventOut


class EventDetailsOut(BaseModel):
    """An event as seen by one viewer, with the display figures the detail page shows."""

    event: EventOut
    organizer_name: str
    spots_left: int
    days_remaining: int
    is_attending: bool = False
    is_organizer: bool = False
