"""Profile API routes.

Profiles are normally provisioned by the auth provider right after
sign-up; these routes cover the rest of their lifecycle.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.errors import PersistenceError, UserNotFoundError
from eventhub.models.profile import Profile
from eventhub.schemas.event import EventOut
from eventhub.schemas.profile import ProfileCreate, ProfileUpdate, ProfileOut
from eventhub.services import event_queries

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_profile(db: Session, user_id: str) -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise UserNotFoundError(user_id)
    return profile


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error saving %s: %s", what, exc)
        raise PersistenceError(str(exc)) from exc


@router.post("/", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(payload: ProfileCreate, db: Session = Depends(get_db)):
    """Create a profile, keeping the auth user id when one is supplied."""
    profile = Profile(**payload.model_dump(exclude_none=True))
    db.add(profile)
    _commit(db, f"profile for {payload.email}")
    db.refresh(profile)
    logger.info("Created profile %s (%s)", profile.id, profile.name)
    return profile


@router.get("/", response_model=list[ProfileOut])
def list_profiles(db: Session = Depends(get_db)):
    """List all profiles."""
    return db.query(Profile).order_by(Profile.created_at).all()


@router.get("/{user_id}", response_model=ProfileOut)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    return _get_profile(db, user_id)


@router.patch("/{user_id}", response_model=ProfileOut)
def update_profile(user_id: str, payload: ProfileUpdate, db: Session = Depends(get_db)):
    """Update name, email or avatar (partial update)."""
    profile = _get_profile(db, user_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    _commit(db, f"profile {user_id}")
    db.refresh(profile)
    logger.info("Updated profile %s", user_id)
    return profile


@router.get("/{user_id}/events/organizing", response_model=list[EventOut])
def list_organizing_events(user_id: str, db: Session = Depends(get_db)):
    """Events the user organizes."""
    return event_queries.fetch_user_events(db, user_id)


@router.get("/{user_id}/events/attending", response_model=list[EventOut])
def list_attending_events(user_id: str, db: Session = Depends(get_db)):
    """Events the user has RSVP'd to, other than their own."""
    return event_queries.fetch_attending_events(db, user_id)
