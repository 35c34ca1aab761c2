"""
Permission predicates for projects and their rosters.

Everything here works on rows that were already loaded; nothing touches the
database. The store constraints remain the authoritative check, these only
stop requests that are bound to fail.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from crewup.models.project import Project, ProjectStatus
from crewup.models.project_member import ProjectMember


@dataclass(frozen=True)
class Actor:
    """The signed-in user an operation runs on behalf of."""

    id: int
    email: Optional[str] = None


def is_owner(actor: Optional[Actor], project: Project) -> bool:
    if actor is None or project is None:
        return False
    return project.owner_id == actor.id


def is_member(actor: Optional[Actor], roster: Iterable[ProjectMember]) -> bool:
    if actor is None:
        return False
    return any(m.user_id == actor.id for m in roster)


def can_join(actor: Optional[Actor], project: Project, roster: Iterable[ProjectMember]) -> bool:
    if actor is None or project is None:
        return False
    if is_owner(actor, project):
        return False
    if is_member(actor, roster):
        return False
    return project.status == ProjectStatus.OPEN.value


def can_leave(actor: Optional[Actor], project: Project, roster: Iterable[ProjectMember]) -> bool:
    if actor is None or project is None:
        return False
    if is_owner(actor, project):
        return False
    return is_member(actor, roster)


def can_edit(actor: Optional[Actor], project: Project) -> bool:
    return is_owner(actor, project)


def can_delete(actor: Optional[Actor], project: Project) -> bool:
    return is_owner(actor, project)


def permission_flags(actor: Optional[Actor], project: Project, roster: Iterable[ProjectMember]) -> dict:
    roster = list(roster)
    return {
        "is_owner": is_owner(actor, project),
        "is_member": is_member(actor, roster),
        "can_join": can_join(actor, project, roster),
        "can_leave": can_leave(actor, project, roster),
        "can_edit": can_edit(actor, project),
        "can_delete": can_delete(actor, project),
    }
