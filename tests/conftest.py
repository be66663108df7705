from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from portfolio.core.security import create_access_token
from portfolio.db.session import get_session
from portfolio.main import app
from portfolio.models.user import ADMIN_ROLE
from portfolio.schemas.blog import BlogCreate
from portfolio.services.auth import AuthService
from portfolio.services.blog import BlogService


@pytest.fixture(name="session")
def session_fixture():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    """Create test client bound to the test database"""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(session):
    return AuthService(session).create_user("admin@portfolio.com", "admin", "admin123", role=ADMIN_ROLE)


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(data={"sub": admin_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader_headers(session):
    user = AuthService(session).create_user("reader@example.com", "reader", "password123")
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def service(session):
    return BlogService(session)


@pytest.fixture
def make_blog(service):
    """Factory creating posts through the service; published by default"""
    counter = {"n": 0}

    def _make_blog(**overrides):
        counter["n"] += 1
        data = {
            "title": f"Post number {counter['n']}",
            "content": "Some words about building things.",
            "author": "Adedayo",
            "category": "Development",
            "is_published": True,
            "published_at": datetime(2024, 1, 1) + timedelta(days=counter["n"]),
        }
        data.update(overrides)
        return service.create_blog(BlogCreate(**data))

    return _make_blog
