# crewup/schemas/project_schema.py

from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from datetime import datetime

from crewup.models.project import ProjectStatus
from crewup.schemas.profile_schema import ProfileSummary


FeedFilter = Literal["open", "all", "mine"]


# --------- For creating a project (POST) ---------
class ProjectCreate(BaseModel):
    title: str
    short_pitch: Optional[str] = None
    description: Optional[str] = None


# --------- For updating a project (PATCH) ---------
# id / owner_id / created_at are not patchable; unknown keys are rejected
class ProjectUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    short_pitch: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None


# --------- For reading a project (GET responses) ---------
class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    short_pitch: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus
    created_at: datetime


# --------- Roster entries ---------
class MemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user_id: int
    role: Optional[str] = None
    created_at: datetime
    profile: Optional[ProfileSummary] = None


# --------- Project page: project + roster + what the caller may do ---------
class ProjectDetail(BaseModel):
    project: ProjectRead
    members: list[MemberRead]

    is_owner: bool = False
    is_member: bool = False
    can_join: bool = False
    can_leave: bool = False
    can_edit: bool = False
    can_delete: bool = False


class MyProjectsRead(BaseModel):
    owned: list[ProjectRead]
    joined: list[ProjectRead]


class ActionResponse(BaseModel):
    message: str
