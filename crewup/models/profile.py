# crewup/models/profile.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from crewup.database import Base
from crewup.models.user import User  # noqa: F401


class Profile(Base):
    __tablename__ = "profiles"

    # same id as the user it belongs to
    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    display_name = Column(String(120), nullable=True)
    headline = Column(String(200), nullable=True)
    skills = Column(String, nullable=True)  # comma-separated
    bio = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
