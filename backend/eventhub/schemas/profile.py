"""Pydantic schemas for Profiles (the app-level User)."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator


class ProfileCreate(BaseModel):
    id: Optional[str] = None  # auth user id, when the auth provider already assigned one
    name: str
    email: str
    avatar: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Partial update. Omitted fields are left alone; only avatar can be cleared."""

    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name", "email")
    @classmethod
    def _not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class ProfileOut(BaseModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
