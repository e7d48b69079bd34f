"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; keep hashing fast and mail local.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MAIL_BACKEND", "console")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.auth import AuthService  # noqa: E402
from app.services.email import EmailService, OutgoingEmail  # noqa: E402
from app.services.jwt import get_jwt_service  # noqa: E402
from app.services.password import get_password_hasher  # noqa: E402


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite database shared by every session through StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(name="db_session")
def db_session_fixture(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(name="outbox")
def outbox_fixture(monkeypatch) -> list[OutgoingEmail]:
    """Capture emails instead of handing them to a transport."""
    sent: list[OutgoingEmail] = []
    monkeypatch.setattr(EmailService, "_deliver", lambda self, message: sent.append(message))
    return sent


@pytest.fixture(name="client")
def client_fixture(db_session: Session, outbox):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    limiter.reset()
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_service")
def auth_service_fixture(outbox) -> AuthService:
    return AuthService()


def create_user(
    db: Session,
    email: str = "test@example.com",
    password: str = "password123",
    name: str = "Test User",
    verified: bool = True,
) -> User:
    """Insert a user directly, bypassing the signup flow."""
    user = User(
        email=email,
        name=name,
        password_hash=get_password_hasher().hash(password),
        is_verified=verified,
    )
    if not verified:
        user.verification_token = "123456"
        user.verification_token_expires_at = datetime.utcnow() + timedelta(hours=24)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session) -> dict:
    """A verified user plus a valid session token for it."""
    user = create_user(db_session)
    token = get_jwt_service().create_token(user.id)
    return {
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
        "password": "password123",
        "token": token,
    }


@pytest.fixture(name="make_user")
def make_user_fixture(db_session: Session):
    """Factory for extra users in the test database."""

    def _make_user(**kwargs) -> User:
        return create_user(db_session, **kwargs)

    return _make_user
