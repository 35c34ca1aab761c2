# crewup/project/project_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from crewup.database import get_db
from crewup.auth.auth_router import get_current_actor, require_actor
from crewup.project.access import Actor
from crewup.project import membership_service, project_service
from crewup.responses import require_confirmation, unwrap
from crewup.schemas.project_schema import (
    ActionResponse,
    FeedFilter,
    MemberRead,
    MyProjectsRead,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
)


router = APIRouter(tags=["projects"])


# ==========================
#  FEED (anonymous allowed)
# ==========================
@router.get("/feed", response_model=list[ProjectRead])
def get_feed(
    feed_filter: FeedFilter = Query("open", alias="filter"),
    actor: Optional[Actor] = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return unwrap(project_service.list_feed(db, actor, feed_filter))


# ==========================
#  MY PROJECTS (owned + joined)
# ==========================
@router.get("/projects/mine", response_model=MyProjectsRead)
def get_my_projects(actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    owned, joined = unwrap(project_service.list_owned_and_joined(db, actor))
    return MyProjectsRead(
        owned=[ProjectRead.model_validate(p) for p in owned],
        joined=[ProjectRead.model_validate(p) for p in joined],
    )


# ==========================
#  CREATE PROJECT
# ==========================
@router.post("/projects/", response_model=ProjectRead, status_code=201)
def create_project(data: ProjectCreate, actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(
        project_service.create_project(
            db,
            actor,
            title=data.title,
            short_pitch=data.short_pitch,
            description=data.description,
        )
    )


# ==========================
#  GET PROJECT BY ID (+ roster)
# ==========================
@router.get("/projects/{project_id}", response_model=ProjectDetail)
def get_project(project_id: int, actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(project_service.get_project_detail(db, actor, project_id))


# ==========================
#  UPDATE PROJECT (PATCH)
# ==========================
@router.patch("/projects/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    actor: Actor = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return unwrap(project_service.update_project(db, actor, project_id, data))


# ==========================
#  DELETE PROJECT
# ==========================
@router.delete("/projects/{project_id}", response_model=ActionResponse)
def delete_project(
    project_id: int,
    confirm: bool = False,
    actor: Actor = Depends(require_actor),
    db: Session = Depends(get_db),
):
    require_confirmation(confirm, "delete this project")
    result = project_service.delete_project(db, actor, project_id)
    unwrap(result)
    return ActionResponse(message=result.message)


# ==========================
#  JOIN / LEAVE
# ==========================
@router.post("/projects/{project_id}/join", response_model=MemberRead)
def join_project(project_id: int, actor: Actor = Depends(require_actor), db: Session = Depends(get_db)):
    return unwrap(membership_service.join_project(db, actor, project_id))


@router.delete("/projects/{project_id}/membership", response_model=ActionResponse)
def leave_project(
    project_id: int,
    confirm: bool = False,
    actor: Actor = Depends(require_actor),
    db: Session = Depends(get_db),
):
    require_confirmation(confirm, "leave this project")
    result = membership_service.leave_project(db, actor, project_id)
    unwrap(result)
    return ActionResponse(message=result.message)
