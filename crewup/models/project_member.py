# crewup/models/project_member.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from crewup.database import Base
# registered in metadata before the relationships below are configured
from crewup.models.profile import Profile  # noqa: F401
from crewup.models.project import Project  # noqa: F401

ROLE_OWNER = "owner"
ROLE_MEMBER = "member"


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (
        # at most one row per (project, user); join relies on this to detect races
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    id = Column(Integer, primary_key=True, index=True)

    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    role = Column(String(50), nullable=False, default=ROLE_MEMBER)  # owner | member

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="members")
    profile = relationship(
        "Profile",
        primaryjoin="foreign(ProjectMember.user_id) == Profile.id",
        viewonly=True,
        lazy="joined",
    )
