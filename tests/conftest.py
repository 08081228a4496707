"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cheese_api.database import Base, get_db
from cheese_api.main import app
from cheese_api.models import CheeseListing, Role
from cheese_api.services.auth import create_user


class AuthHeaders(dict):
    """Dict subclass that also stores the authenticated user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email

    @property
    def iri(self) -> str:
        return f"/api/users/{self.user_id}"


# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/cheese_api", "/cheese_api_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def login(client, email: str, password: str) -> str:
    response = client.post("/api/login_check", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(client):
    """Register a user through the API and return bearer headers for them."""
    email = "test@example.com"
    response = client.post("/api/users", json={"email": email, "password": "testpass123"})
    assert response.status_code == 201
    user_id = response.json()["id"]

    token = login(client, email, "testpass123")
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


@pytest.fixture
def admin_headers(client, db):
    """Create an admin directly in the store and return bearer headers for them."""
    email = "admin@example.com"
    admin = create_user(db, email, "adminpass123", roles=[Role.ADMIN.value])

    token = login(client, email, "adminpass123")
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=admin.id, email=email)


@pytest.fixture
def make_listing(db, auth_headers):
    """Factory inserting listings owned by the auth_headers user."""

    def _make_listing(
        title: str = "Blue Cheese",
        description: str = "Pungent and creamy",
        price: int = 1000,
        is_published: bool = False,
    ) -> CheeseListing:
        listing = CheeseListing(
            title,
            price=price,
            owner_id=auth_headers.user_id,
            is_published=is_published,
        )
        listing.set_text_description(description)
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make_listing
