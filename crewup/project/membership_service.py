from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crewup.models.project import ProjectStatus
from crewup.models.project_member import ProjectMember, ROLE_MEMBER
from crewup.project.access import Actor, can_join, can_leave, is_member, is_owner
from crewup.project.errors import AuthRequired, NotFound, PermissionDenied, ServiceResult
from crewup.project.project_service import load_project
from crewup.project.store_guard import store_errors

logger = logging.getLogger("crewup.membership")


def get_roster(db: Session, project_id: int) -> list[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.created_at.asc(), ProjectMember.id.asc())
        .all()
    )


def find_membership(db: Session, project_id: int, user_id: int) -> Optional[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )


def join_project(
    db: Session,
    actor: Optional[Actor],
    project_id: int,
    roster: Optional[Iterable[ProjectMember]] = None,
) -> ServiceResult:
    """
    Add ``actor`` to the project as a member.

    ``roster`` is what the caller saw when it decided to offer the join; when
    omitted it is loaded fresh. Joining twice is not an error: if the row
    already exists (seen in the roster, or hit as a unique-key violation from
    a concurrent join) the existing membership is returned.
    """
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to join projects."))

    project = load_project(db, project_id)
    if project is None:
        return ServiceResult.failure(NotFound("Project not found."))

    roster = list(roster) if roster is not None else get_roster(db, project.id)

    if is_member(actor, roster) and not is_owner(actor, project):
        existing = find_membership(db, project.id, actor.id)
        if existing is not None:
            return ServiceResult.success(existing, "You already joined this project.")
        # stale roster; the row was removed since the caller loaded it
        roster = get_roster(db, project.id)

    if not can_join(actor, project, roster):
        if is_owner(actor, project):
            return ServiceResult.failure(PermissionDenied("You own this project."))
        if project.status != ProjectStatus.OPEN.value:
            return ServiceResult.failure(PermissionDenied("This project is not open for new members."))
        return ServiceResult.failure(PermissionDenied("You cannot join this project."))

    with store_errors(db, "join_project", project_id=project.id, user_id=actor.id):
        membership = ProjectMember(project_id=project.id, user_id=actor.id, role=ROLE_MEMBER)
        db.add(membership)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = find_membership(db, project.id, actor.id)
            if existing is None:
                raise
            logger.info(
                "join_conflict_downgraded",
                extra={"project_id": project.id, "user_id": actor.id},
            )
            return ServiceResult.success(existing, "You already joined this project.")
        db.refresh(membership)

    logger.info("project_joined", extra={"project_id": project.id, "user_id": actor.id})
    return ServiceResult.success(membership, "Joined project!")


def leave_project(
    db: Session,
    actor: Optional[Actor],
    project_id: int,
    roster: Optional[Iterable[ProjectMember]] = None,
) -> ServiceResult:
    if actor is None:
        return ServiceResult.failure(AuthRequired("Sign in to leave projects."))

    project = load_project(db, project_id)
    if project is None:
        return ServiceResult.failure(NotFound("Project not found."))

    roster = list(roster) if roster is not None else get_roster(db, project.id)

    if not can_leave(actor, project, roster):
        if is_owner(actor, project):
            return ServiceResult.failure(
                PermissionDenied("Owners cannot leave their own project. Delete it instead.")
            )
        return ServiceResult.failure(PermissionDenied("You are not a member of this project."))

    with store_errors(db, "leave_project", project_id=project.id, user_id=actor.id):
        (
            db.query(ProjectMember)
            .filter(ProjectMember.project_id == project.id, ProjectMember.user_id == actor.id)
            .delete(synchronize_session="fetch")
        )
        db.commit()

    logger.info("project_left", extra={"project_id": project.id, "user_id": actor.id})
    return ServiceResult.success(None, "Left project.")
