from __future__ import annotations

import os

# must be set before crewup modules read them at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crewup.auth.session_provider import SessionProvider
from crewup.database import Base, get_db
from crewup.models.project_member import ProjectMember  # noqa: F401
from crewup.models.user import User
from crewup.project.access import Actor


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_actor(db):
    def _make(email: str) -> Actor:
        user = User(email=email, password_hash="not-used")
        db.add(user)
        db.commit()
        db.refresh(user)
        return Actor(id=user.id, email=user.email)

    return _make


@pytest.fixture()
def alice(make_actor) -> Actor:
    return make_actor("alice@crewup.dev")


@pytest.fixture()
def bob(make_actor) -> Actor:
    return make_actor("bob@crewup.dev")


@pytest.fixture()
def provider() -> SessionProvider:
    return SessionProvider()


@pytest.fixture()
def client(session_factory, provider) -> TestClient:
    from crewup.auth.auth_router import get_session_provider
    from crewup.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_provider] = lambda: provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
