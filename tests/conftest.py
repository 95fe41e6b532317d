"""Shared fixtures: an in-memory database behind the FastAPI app."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from datetime import datetime
from unittest.mock import patch

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from api_main import app
from app.api.deps import get_db
from app.config import settings
from app.crud import create_auth_session, create_user
from app.db import enable_sqlite_foreign_keys
from app.models import Base, User
from app.security import hash_password

# Fixed instants used by tests that pin the clock.
FROZEN_NOW = datetime(2025, 5, 20, 12, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def override_db(session_factory) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_user(db: Session, email: str, password: str = "correct horse") -> User:
    return create_user(db, email, hash_password(password))


def auth_headers(db: Session, user: User) -> dict[str, str]:
    auth_session = create_auth_session(db, user, settings.SESSION_TTL_DAYS)
    return {"Authorization": f"Bearer {auth_session.token}"}


@pytest.fixture
def alice(db: Session) -> User:
    return make_user(db, "alice@example.com")


@pytest.fixture
def bob(db: Session) -> User:
    return make_user(db, "bob@example.com")


@pytest.fixture
def alice_headers(db: Session, alice: User) -> dict[str, str]:
    return auth_headers(db, alice)


@pytest.fixture
def bob_headers(db: Session, bob: User) -> dict[str, str]:
    return auth_headers(db, bob)


@pytest.fixture
def frozen_now() -> Iterator[datetime]:
    with patch("app.clock.utcnow", return_value=FROZEN_NOW):
        yield FROZEN_NOW
