"""Database engine and session management for the user record store."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings

settings = get_settings()
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    """Declarative base for the ORM models."""


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped database session, closed once the request is done."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
