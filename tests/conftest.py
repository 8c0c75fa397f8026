"""Pytest configuration for all tests."""

from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from humans.core.logging import get_logger
from humans.infrastructure.auth.jwt_service import jwt_service
from humans.infrastructure.persistence import models  # noqa: F401
from humans.infrastructure.persistence.database import Base, register_sqlite_pragmas
from humans.infrastructure.persistence.models import ProfileModel, UserModel

logger = get_logger(__name__)

MakeUser = Callable[..., Awaitable[str]]


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    register_sqlite_pragmas(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from humans.infrastructure.api.app import app
    from humans.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def make_user(db_session: AsyncSession) -> MakeUser:
    """Factory creating a user with its profile; returns the user ID."""

    async def _make(user_id: str, username: str | None = None, email: str | None = None) -> str:
        user = UserModel(
            id=user_id,
            email=email or f"{user_id}@example.com",
            password_hash="hashed_secret",
            is_active=True,
        )
        db_session.add(user)
        db_session.add(ProfileModel(id=user_id, username=username, onboarding_state={}))
        await db_session.commit()
        return user_id

    return _make


@pytest_asyncio.fixture
async def owner_id(make_user: MakeUser) -> str:
    """A user with a finished profile setup."""
    return await make_user("11111111-1111-4111-8111-111111111111", username="alice")


@pytest_asyncio.fixture
async def other_user_id(make_user: MakeUser) -> str:
    """A second user with a finished profile setup."""
    return await make_user("22222222-2222-4222-8222-222222222222", username="bob")


@pytest_asyncio.fixture
async def new_user_id(make_user: MakeUser) -> str:
    """A user who has not picked a username yet."""
    return await make_user("33333333-3333-4333-8333-333333333333")


def bearer(user_id: str) -> dict[str, str]:
    token = jwt_service.create_access_token(user_id=user_id, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(owner_id: str) -> dict[str, str]:
    return bearer(owner_id)


@pytest.fixture
def other_headers(other_user_id: str) -> dict[str, str]:
    return bearer(other_user_id)
