from __future__ import annotations

from datetime import datetime

import pytest

from crewup.models.project import Project
from crewup.models.project_member import ProjectMember
from crewup.project import membership_service, project_service
from crewup.project.errors import AuthRequired, ValidationFailed


@pytest.fixture()
def projects(db, alice, bob):
    """Three projects with fixed timestamps: old open, closed, new open."""
    rows = [
        ("Old open", alice, "open", datetime(2024, 1, 1)),
        ("Closed", bob, "closed", datetime(2024, 2, 1)),
        ("New open", bob, "open", datetime(2024, 3, 1)),
    ]
    created = {}
    for title, owner, status, created_at in rows:
        project = project_service.create_project(db, owner, title).value
        project.status = status
        project.created_at = created_at
        created[title] = project
    db.commit()
    return created


def _titles(result):
    assert result.ok
    return [p.title for p in result.value]


def test_open_filter_newest_first(db, alice, projects) -> None:
    assert _titles(project_service.list_feed(db, alice, "open")) == ["New open", "Old open"]


def test_all_filter(db, projects) -> None:
    assert _titles(project_service.list_feed(db, None, "all")) == ["New open", "Closed", "Old open"]


def test_mine_filter(db, bob, projects) -> None:
    assert _titles(project_service.list_feed(db, bob, "mine")) == ["New open", "Closed"]


def test_mine_filter_is_empty_for_anonymous(db, projects) -> None:
    assert _titles(project_service.list_feed(db, None, "mine")) == []


def test_unknown_filter(db, projects) -> None:
    result = project_service.list_feed(db, None, "popular")
    assert isinstance(result.error, ValidationFailed)


def test_owned_and_joined_are_disjoint_and_ordered(db, alice, bob, projects) -> None:
    membership_service.join_project(db, alice, projects["New open"].id)
    # joined rows for a closed project are still listed
    db.add(ProjectMember(project_id=projects["Closed"].id, user_id=alice.id, role="member"))
    db.commit()

    owned, joined = project_service.list_owned_and_joined(db, alice).value

    assert [p.title for p in owned] == ["Old open"]
    assert [p.title for p in joined] == ["New open", "Closed"]


def test_owned_and_joined_requires_actor(db) -> None:
    result = project_service.list_owned_and_joined(db, None)
    assert isinstance(result.error, AuthRequired)


def test_feed_breaks_timestamp_ties_by_id(db, alice) -> None:
    # equal timestamps fall back to id, newest row first
    stamp = datetime(2024, 5, 5)
    for title in ("First", "Second"):
        db.add(Project(owner_id=alice.id, title=title, status="open", created_at=stamp))
    db.commit()

    assert _titles(project_service.list_feed(db, alice, "all")) == ["Second", "First"]
