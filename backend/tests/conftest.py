"""Pytest configuration and fixtures for backend tests."""

from datetime import datetime, timezone
from typing import AsyncGenerator
from zoneinfo import ZoneInfo

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from runlog.api.deps import get_now, get_timezone
from runlog.core.database import Base, get_db
from runlog.main import app as main_app
from runlog.models.activity import Activity

# Wednesday of ISO week 2024-W02 (Monday 2024-01-08)
FIXED_NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
TEST_USER_ID = 1
OTHER_USER_ID = 2


# -------------------------------------------------------------------------
# Database Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(db_session: AsyncSession) -> FastAPI:
    """Create a FastAPI app instance with test database and a fixed clock."""

    async def override_get_db():
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_now] = lambda: FIXED_NOW
    main_app.dependency_overrides[get_timezone] = lambda: ZoneInfo("UTC")
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client without a caller identity."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def auth_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an HTTP client acting as the test user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": str(TEST_USER_ID)},
    ) as ac:
        yield ac


# -------------------------------------------------------------------------
# Activity Fixtures
# -------------------------------------------------------------------------


def make_activity(
    when: datetime,
    activity_type: str = "running",
    distance: float = 10.0,
    duration: int = 3_000_000,
    user_id: int = TEST_USER_ID,
    note: str = "",
) -> Activity:
    return Activity(
        user_id=user_id,
        activity_type=activity_type,
        date=when,
        distance=distance,
        duration=duration,
        note=note,
    )


@pytest.fixture
async def sample_activities(db_session: AsyncSession) -> list[Activity]:
    """Two runs and a ride in the current week, one run the week before,
    and one run belonging to another user."""
    activities = [
        make_activity(datetime(2024, 1, 2, 7, 0, tzinfo=timezone.utc), distance=8.0, duration=2_400_000),
        make_activity(datetime(2024, 1, 8, 7, 0, tzinfo=timezone.utc), distance=10.0, duration=3_000_000),
        make_activity(datetime(2024, 1, 9, 7, 0, tzinfo=timezone.utc), distance=5.0, duration=1_500_000),
        make_activity(
            datetime(2024, 1, 9, 18, 0, tzinfo=timezone.utc),
            activity_type="cycling",
            distance=20.0,
            duration=3_600_000,
            note="Commute",
        ),
        make_activity(
            datetime(2024, 1, 8, 6, 0, tzinfo=timezone.utc),
            distance=42.0,
            duration=12_000_000,
            user_id=OTHER_USER_ID,
        ),
    ]
    db_session.add_all(activities)
    await db_session.commit()
    return activities
