"""Event ORM model.

Attendees and the organizer are not stored on the row; they are joined in
at read time by the query services.
"""
import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, Integer, Boolean, JSON, ForeignKey
from sqlalchemy.sql import func
from eventhub.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(20), nullable=False)
    location = Column(String(500), nullable=False)
    image_url = Column(String(1000), nullable=True)
    organizer_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    capacity = Column(Integer, nullable=False, default=10)
    tags = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
