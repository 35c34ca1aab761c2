# crewup/schemas/profile_schema.py
from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_name: str | None = None
    headline: str | None = None


class ProfileRead(ProfileSummary):
    id: int
    skills: str | None = None
    bio: str | None = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    display_name: str | None = None
    headline: str | None = None
    skills: str | None = None
    bio: str | None = None
