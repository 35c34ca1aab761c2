from __future__ import annotations

import pytest

from crewup.models.project import Project
from crewup.models.project_member import ProjectMember
from crewup.project.access import (
    Actor,
    can_delete,
    can_edit,
    can_join,
    can_leave,
    is_member,
    is_owner,
    permission_flags,
)

OWNER = Actor(id=1, email="owner@crewup.dev")
OTHER = Actor(id=2, email="other@crewup.dev")


def _project(status: str = "open", owner_id: int = OWNER.id) -> Project:
    return Project(id=10, owner_id=owner_id, title="Alpha", status=status)


def _row(user_id: int, role: str = "member") -> ProjectMember:
    return ProjectMember(project_id=10, user_id=user_id, role=role)


@pytest.mark.parametrize(
    "actor, expected",
    [(OWNER, True), (OTHER, False), (None, False)],
)
def test_edit_and_delete_only_for_owner(actor, expected) -> None:
    project = _project()
    assert can_edit(actor, project) is expected
    assert can_delete(actor, project) is expected
    assert is_owner(actor, project) is expected


@pytest.mark.parametrize("status", ["in_progress", "closed"])
def test_cannot_join_project_that_is_not_open(status: str) -> None:
    project = _project(status=status)
    assert can_join(OTHER, project, [_row(OWNER.id, "owner")]) is False


def test_anonymous_cannot_join_or_leave() -> None:
    project = _project()
    roster = [_row(OWNER.id, "owner")]
    assert can_join(None, project, roster) is False
    assert can_leave(None, project, roster) is False
    assert is_member(None, roster) is False


def test_alpha_scenario() -> None:
    alpha = _project()
    roster = [_row(OWNER.id, "owner")]

    assert can_join(OTHER, alpha, roster) is True

    roster.append(_row(OTHER.id))
    assert can_join(OTHER, alpha, roster) is False
    assert can_leave(OTHER, alpha, roster) is True

    # owners delete, they never leave
    assert can_leave(OWNER, alpha, roster) is False


def test_owner_cannot_join_even_without_roster_row() -> None:
    assert can_join(OWNER, _project(), []) is False


def test_non_member_cannot_leave() -> None:
    assert can_leave(OTHER, _project(), [_row(OWNER.id, "owner")]) is False


def test_permission_flags_for_member() -> None:
    flags = permission_flags(OTHER, _project(), [_row(OWNER.id, "owner"), _row(OTHER.id)])
    assert flags == {
        "is_owner": False,
        "is_member": True,
        "can_join": False,
        "can_leave": True,
        "can_edit": False,
        "can_delete": False,
    }
