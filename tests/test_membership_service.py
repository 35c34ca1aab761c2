from __future__ import annotations

from datetime import datetime

from crewup.models.project_member import ProjectMember
from crewup.project import membership_service, project_service
from crewup.project.access import can_join, can_leave
from crewup.project.errors import AuthRequired, NotFound, PermissionDenied
from crewup.schemas.project_schema import ProjectUpdate


def _project(db, owner, title="Alpha"):
    return project_service.create_project(db, owner, title).value


def _rows(db, project_id, user_id):
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .count()
    )


def test_join_adds_member_row(db, alice, bob) -> None:
    project = _project(db, alice)

    result = membership_service.join_project(db, bob, project.id)

    assert result.ok
    assert result.message == "Joined project!"
    assert result.value.role == "member"
    assert result.value.user_id == bob.id

    roster = membership_service.get_roster(db, project.id)
    assert [(m.user_id, m.role) for m in roster] == [(alice.id, "owner"), (bob.id, "member")]
    assert can_join(bob, project, roster) is False
    assert can_leave(bob, project, roster) is True


def test_join_twice_is_not_an_error(db, alice, bob) -> None:
    project = _project(db, alice)

    first = membership_service.join_project(db, bob, project.id)
    second = membership_service.join_project(db, bob, project.id)

    assert first.ok and second.ok
    assert second.message == "You already joined this project."
    assert second.value.id == first.value.id
    assert _rows(db, project.id, bob.id) == 1


def test_join_with_stale_roster_downgrades_unique_violation(db, alice, bob) -> None:
    project = _project(db, alice)
    first = membership_service.join_project(db, bob, project.id)

    # caller still holds the roster from before the first join
    stale = membership_service.join_project(db, bob, project.id, roster=[])

    assert stale.ok
    assert stale.message == "You already joined this project."
    assert stale.value.id == first.value.id
    assert _rows(db, project.id, bob.id) == 1


def test_join_rejected_when_not_open(db, alice, bob) -> None:
    project = _project(db, alice)
    project_service.update_project(db, alice, project.id, ProjectUpdate(status="in_progress"))

    result = membership_service.join_project(db, bob, project.id)

    assert isinstance(result.error, PermissionDenied)
    assert result.message == "This project is not open for new members."
    assert _rows(db, project.id, bob.id) == 0


def test_owner_cannot_join_own_project(db, alice) -> None:
    project = _project(db, alice)
    result = membership_service.join_project(db, alice, project.id)
    assert isinstance(result.error, PermissionDenied)


def test_join_requires_actor_and_existing_project(db, alice) -> None:
    project = _project(db, alice)
    assert isinstance(membership_service.join_project(db, None, project.id).error, AuthRequired)
    assert isinstance(membership_service.join_project(db, alice, 404).error, NotFound)


def test_leave_removes_only_own_row(db, alice, bob) -> None:
    project = _project(db, alice)
    membership_service.join_project(db, bob, project.id)

    result = membership_service.leave_project(db, bob, project.id)

    assert result.ok
    assert result.message == "Left project."
    assert _rows(db, project.id, bob.id) == 0
    assert _rows(db, project.id, alice.id) == 1


def test_owner_cannot_leave(db, alice) -> None:
    project = _project(db, alice)

    result = membership_service.leave_project(db, alice, project.id)

    assert isinstance(result.error, PermissionDenied)
    assert _rows(db, project.id, alice.id) == 1


def test_non_member_cannot_leave(db, alice, bob) -> None:
    project = _project(db, alice)
    result = membership_service.leave_project(db, bob, project.id)
    assert isinstance(result.error, PermissionDenied)


def test_join_leave_join_ends_with_one_row(db, alice, bob) -> None:
    project = _project(db, alice)

    assert membership_service.join_project(db, bob, project.id).ok
    assert membership_service.leave_project(db, bob, project.id).ok
    assert membership_service.join_project(db, bob, project.id).ok

    assert _rows(db, project.id, bob.id) == 1


def test_roster_order_matches_detail_when_timestamps_tie(db, alice, bob, make_actor) -> None:
    carol = make_actor("carol@crewup.dev")
    project = _project(db, alice)
    membership_service.join_project(db, carol, project.id)
    membership_service.join_project(db, bob, project.id)

    stamp = datetime(2024, 1, 1)
    for row in membership_service.get_roster(db, project.id):
        row.created_at = stamp
    db.commit()

    roster_ids = [m.id for m in membership_service.get_roster(db, project.id)]
    detail = project_service.get_project_detail(db, alice, project.id).value

    assert [m.id for m in detail.members] == roster_ids
    assert roster_ids == sorted(roster_ids)
