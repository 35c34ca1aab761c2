"""
Project lifecycle: create, read, edit, delete and the two listing views.

Every function takes the SQLAlchemy session and the acting user explicitly and
returns a ServiceResult. Only StoreError is raised.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from crewup.models.project import Project, ProjectStatus
from crewup.models.project_member import ProjectMember, ROLE_OWNER
from crewup.project.access import Actor, can_delete, can_edit, permission_flags
from crewup.project.errors import (
    AuthRequired,
    NotFound,
    PermissionDenied,
    ServiceResult,
    ValidationFailed,
)
from crewup.project.store_guard import store_errors
from crewup.schemas.project_schema import MemberRead, ProjectDetail, ProjectRead, ProjectUpdate

logger = logging.getLogger("crewup.project")

FEED_FILTERS = ("open", "all", "mine")


def _clean(value: Optional[str]) -> Optional[str]:
    # blank optional text is stored as NULL
    if value is None:
        return None
    value = value.strip()
    return value or None


def _newest_first(projects: list[Project]) -> list[Project]:
    return sorted(projects, key=lambda p: (p.created_at, p.id), reverse=True)


def load_project(db: Session, project_id: int) -> Optional[Project]:
    return db.get(Project, project_id)


def create_project(
    db: Session,
    actor: Optional[Actor],
    title: str,
    short_pitch: Optional[str] = None,
    description: Optional[str] = None,
) -> ServiceResult:
    """
    Create a project owned by ``actor``.

    The project row and the owner's membership row are written in one
    transaction, so a project never exists without its owner on the roster.
    """
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to create a project."))

    title = (title or "").strip()
    if not title:
        return ServiceResult.failure(ValidationFailed("Title is required."))

    with store_errors(db, "create_project", user_id=actor.id):
        project = Project(
            owner_id=actor.id,
            title=title,
            short_pitch=_clean(short_pitch),
            description=_clean(description),
            status=ProjectStatus.OPEN.value,
        )
        db.add(project)
        db.flush()

        db.add(ProjectMember(project_id=project.id, user_id=actor.id, role=ROLE_OWNER))
        db.commit()
        db.refresh(project)

    logger.info("project_created", extra={"project_id": project.id, "user_id": actor.id})
    return ServiceResult.success(project, "Project created.")


def _repair_owner_membership(db: Session, project: Project) -> None:
    # projects created before single-transaction creation may lack the owner row
    if any(m.user_id == project.owner_id for m in project.members):
        return

    with store_errors(db, "repair_owner_membership", project_id=project.id):
        db.add(ProjectMember(project_id=project.id, user_id=project.owner_id, role=ROLE_OWNER))
        db.commit()
        db.refresh(project)

    logger.warning(
        "owner_membership_repaired",
        extra={"project_id": project.id, "user_id": project.owner_id},
    )


def get_project_detail(db: Session, actor: Optional[Actor], project_id: int) -> ServiceResult:
    """Project, its roster (with profiles) and what ``actor`` may do with it."""
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to view projects."))

    project = load_project(db, project_id)
    if project is None:
        return ServiceResult.failure(NotFound("Project not found."))

    _repair_owner_membership(db, project)

    roster = list(project.members)
    detail = ProjectDetail(
        project=ProjectRead.model_validate(project),
        members=[MemberRead.model_validate(m) for m in roster],
        **permission_flags(actor, project, roster),
    )
    return ServiceResult.success(detail)


def update_project(
    db: Session,
    actor: Optional[Actor],
    project_id: int,
    patch: ProjectUpdate,
) -> ServiceResult:
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to edit projects."))

    project = load_project(db, project_id)
    if project is None:
        return ServiceResult.failure(NotFound("Project not found."))

    if not can_edit(actor, project):
        return ServiceResult.failure(PermissionDenied("Only the project owner can edit this project."))

    changes = patch.model_dump(exclude_unset=True)

    if "title" in changes:
        title = (changes["title"] or "").strip()
        if not title:
            return ServiceResult.failure(ValidationFailed("Title is required."))
        changes["title"] = title

    if "status" in changes:
        if changes["status"] is None:
            return ServiceResult.failure(ValidationFailed("Status is required."))
        changes["status"] = ProjectStatus(changes["status"]).value

    for field in ("short_pitch", "description"):
        if field in changes:
            changes[field] = _clean(changes[field])

    with store_errors(db, "update_project", project_id=project.id, user_id=actor.id):
        for field, value in changes.items():
            setattr(project, field, value)
        db.commit()
        db.refresh(project)

    logger.info(
        "project_updated",
        extra={"project_id": project.id, "user_id": actor.id, "fields": sorted(changes)},
    )
    return ServiceResult.success(project, "Project updated.")


def delete_project(db: Session, actor: Optional[Actor], project_id: int) -> ServiceResult:
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to delete projects."))

    project = load_project(db, project_id)
    if project is None:
        return ServiceResult.failure(NotFound("Project not found."))

    if not can_delete(actor, project):
        return ServiceResult.failure(PermissionDenied("Only the project owner can delete this project."))

    with store_errors(db, "delete_project", project_id=project_id, user_id=actor.id):
        # membership rows go with it (ORM cascade + ON DELETE CASCADE)
        db.delete(project)
        db.commit()

    logger.info("project_deleted", extra={"project_id": project_id, "user_id": actor.id})
    return ServiceResult.success(None, "Project deleted.")


def list_feed(db: Session, actor: Optional[Actor], feed_filter: str = "open") -> ServiceResult:
    """All readable projects, newest first, narrowed by ``feed_filter`` after the fetch."""
    if feed_filter not in FEED_FILTERS:
        return ServiceResult.failure(
            ValidationFailed(f"Unknown filter '{feed_filter}'. Use one of: {', '.join(FEED_FILTERS)}.")
        )

    with store_errors(db, "list_feed"):
        projects = (
            db.query(Project)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )

    if feed_filter == "open":
        projects = [p for p in projects if p.status == ProjectStatus.OPEN.value]
    elif feed_filter == "mine":
        owner_id = actor.id if actor is not None else None
        projects = [p for p in projects if owner_id is not None and p.owner_id == owner_id]

    return ServiceResult.success(projects)


def list_owned_and_joined(db: Session, actor: Optional[Actor]) -> ServiceResult:
    """``(owned, joined)`` for the actor's own projects page."""
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to see your projects."))

    with store_errors(db, "list_owned_and_joined", user_id=actor.id):
        owned = (
            db.query(Project)
            .filter(Project.owner_id == actor.id)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )
        via_membership = (
            db.query(Project)
            .join(ProjectMember, ProjectMember.project_id == Project.id)
            .filter(ProjectMember.user_id == actor.id)
            .all()
        )

    owned_ids = {p.id for p in owned}
    joined = {p.id: p for p in via_membership if p.id not in owned_ids}

    return ServiceResult.success((owned, _newest_first(list(joined.values()))))
