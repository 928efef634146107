"""Shared fixtures: an in-memory database per test and a wired TestClient."""

import os

# Must be set before any application module reads config
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("COOKIE_DOMAIN", None)

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from dependencies import get_email_service
from main import app
from models.user import Role, User
from services.auth import hash_password
from services.email_service import EmailService
from services.token_service import TokenService

TEST_PASSWORD = "TestPass123"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def mock_email_service():
    service = MagicMock(spec=EmailService)
    service.missing_settings.return_value = []
    service.send_otp.return_value = True
    return service


@pytest.fixture
def client(db_session: Session, mock_email_service):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: mock_email_service
    try:
        yield TestClient(app, base_url="https://testserver")
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def token_service() -> TokenService:
    """The same TokenService the application validates with."""
    return app.state.token_service


def create_user(db_session: Session, email: str, username: str, role: Role = Role.USER) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(TEST_PASSWORD),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session: Session) -> User:
    return create_user(db_session, "test@example.com", "testuser")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return create_user(db_session, "admin@example.com", "admin", role=Role.ADMIN)


@pytest.fixture
def auth_headers(test_user: User, token_service: TokenService) -> dict:
    access_token, _ = token_service.issue_session_pair(test_user)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def admin_headers(admin_user: User, token_service: TokenService) -> dict:
    access_token, _ = token_service.issue_session_pair(admin_user)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def make_user(db_session: Session):
    """Factory for extra accounts, all with the password ``TEST_PASSWORD``."""

    def _make(email: str, username: str, role: Role = Role.USER) -> User:
        return create_user(db_session, email, username, role)

    return _make
