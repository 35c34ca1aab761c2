# crewup/models/project.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from crewup.database import Base
from crewup.models.user import User  # noqa: F401


class ProjectStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)

    # owner never changes after creation
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    short_pitch = Column(String(280), nullable=True)
    description = Column(Text, nullable=True)

    # open | in_progress | closed
    status = Column(String(32), nullable=False, default=ProjectStatus.OPEN.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.created_at, ProjectMember.id",
    )
