"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./eventhub.db"  # postgresql://... in production
    CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "UTC"  # IANA tz used to decide "today"

    class Config:
        env_file = ".env"


settings = Settings()
