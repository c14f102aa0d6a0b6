"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from eventhub.config import settings
from eventhub.database import Base, engine
from eventhub.errors import DomainError, ErrorCode

# Import routers
from eventhub.routers import attendees, events, profiles

# Import all models so Base.metadata knows about them
from eventhub.models.profile import Profile     # noqa: F401
from eventhub.models.event import Event         # noqa: F401
from eventhub.models.attendee import Attendee   # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

ERROR_STATUS = {
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.ORGANIZER_NOT_FOUND: 409,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.ORGANIZER_ATTENDANCE: 409,
    ErrorCode.PERSISTENCE_FAILED: 503,
}

app = FastAPI(
    title="EventHub",
    description="Event discovery and RSVP — browse public events, organize your own, RSVP to others'",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(profiles.router, prefix="/api/profiles", tags=["Profiles"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(attendees.router, prefix="/api/events", tags=["Attendees"])


@app.exception_handler(DomainError)
def domain_error_handler(request: Request, exc: DomainError):
    """Map domain errors to a status code and a {code, message} body."""
    body = {"code": exc.code.value, "message": exc.message}
    missing = getattr(exc, "missing_fields", None)
    if missing:
        body["missing_fields"] = missing
    return JSONResponse(status_code=ERROR_STATUS.get(exc.code, 400), content={"detail": body})


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
