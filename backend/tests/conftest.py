"""Pytest configuration and shared fixtures."""

import os

# Set test environment variables before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-32-bytes-long-for-testing-only!"
os.environ["BNET_CLIENT_ID"] = "test-client-id"
os.environ["BNET_CLIENT_SECRET"] = "test-client-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.core.security import create_access_token
from app.db import enable_sqlite_foreign_keys, get_session, init_db
from app.main import app
from app.models import Team, TeamMember, User


def _sqlite_engine(url: str, **kwargs):
    engine = create_engine(url, connect_args={"check_same_thread": False}, **kwargs)
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    return engine


@pytest.fixture
def engine():
    """In-memory database seeded with the 14 default weekly slots."""
    engine = _sqlite_engine("sqlite://", poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed database for tests that open several connections at once."""
    engine = _sqlite_engine(f"sqlite:///{tmp_path / 'availability.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """Test client sharing the test's database session."""

    def _get_session_override():
        return session

    app.dependency_overrides[get_session] = _get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make_user(display_name=None, external_id=None):
        counter["n"] += 1
        user = User(
            external_id=external_id or f"bnet-{1000 + counter['n']}",
            display_name=display_name or f"Player#{counter['n']}",
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_team(session):
    def _make_team(name="Vivacity", members=()):
        team = Team(name=name)
        session.add(team)
        session.commit()
        session.refresh(team)
        for user, role in members:
            session.add(TeamMember(user_id=user.id, team_id=team.id, role=role))
        session.commit()
        return team

    return _make_team


@pytest.fixture
def auth_headers():
    """Bearer header for an access token carrying the given session identity."""

    def _auth_headers(user_id, team_id=None):
        return {"Authorization": f"Bearer {create_access_token(user_id, team_id)}"}

    return _auth_headers
