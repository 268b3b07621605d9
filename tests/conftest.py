"""
Quai Antique API — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `app` import; database
       tests run against an in-memory SQLite database (aiosqlite) that is
       created fresh for every test.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        in-memory async engine with every table created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       one AsyncSession for service/store tests
    ├── user_store:       in-memory UserStore double (no database)
    ├── hasher:           PasswordHasher with a low round count
    ├── mock_db_session:  AsyncMock standing in for AsyncSession
    ├── app:              fresh create_app() with get_db_session overridden
    └── client:           HTTPX AsyncClient talking to `app` over ASGI
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db_session
from app.exceptions import DuplicateIdentityError
from app.main import create_app
from app.models.user import User, normalize_email
from app.security.passwords import PasswordHasher
from app.services.user_store import UserStore


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """AsyncMock simulating AsyncSession for tests that never touch SQL."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Domain Fixtures
# ══════════════════════════════════════════════════════════════════════════

class InMemoryUserStore(UserStore):
    """UserStore double enforcing the same email uniqueness as the real table."""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.creates = 0
        self.updates = 0

    def _owner_of(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        return next((u for u in self.users.values() if u.email == normalized), None)

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._owner_of(email)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def find_by_api_token(self, token: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.api_token == token), None)

    async def create(self, user: User) -> User:
        if self._owner_of(user.email) is not None:
            raise DuplicateIdentityError()
        user.id = len(self.users) + 1
        self.users[user.id] = user
        self.creates += 1
        return user

    async def update(self, user: User) -> User:
        owner = self._owner_of(user.email)
        if owner is not None and owner.id != user.id:
            raise DuplicateIdentityError()
        self.updates += 1
        return user


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=1000)


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def registration_payload():
    return {
        "firstName": "Jean",
        "lastName": "Dupont",
        "email": "a@x.com",
        "password": "secret123",
    }
