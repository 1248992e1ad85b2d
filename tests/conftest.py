"""Pytest fixtures for event scheduler tests."""

import pytest
from datetime import date, time

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from event_scheduler.config import SchedulerConfig
from event_scheduler.database.models import Base
from event_scheduler.domain import ScheduledAssignment
from event_scheduler.services import CityDistanceGraph


RIYADH = 1
JEDDAH = 2
DAMMAM = 3


@pytest.fixture
def graph() -> CityDistanceGraph:
    """Riyadh, Jeddah and Dammam with only Riyadh <-> Jeddah recorded."""
    graph = CityDistanceGraph(city_ids=[RIYADH, JEDDAH, DAMMAM])
    graph.upsert_edge(RIYADH, JEDDAH, 1.5)
    return graph


@pytest.fixture
def jeddah_morning() -> ScheduledAssignment:
    """Existing assignment in Jeddah at 10:00."""
    return ScheduledAssignment(
        event_id=10,
        event_title="Al-Ittihad vs Al-Ahli",
        city_id=JEDDAH,
        city_name="Jeddah",
        event_date=date(2025, 1, 1),
        event_time=time(10, 0),
    )


@pytest.fixture
def make_assignment():
    """Factory for plain-mapping assignments, the shape callers hand the checker."""

    def _make(city_id: int, hhmm: str, event_id: int | None = None, day: str = "2025-01-01"):
        return {
            "event_id": event_id,
            "city_id": city_id,
            "event_date": day,
            "event_time": hhmm,
        }

    return _make


@pytest.fixture
def config() -> SchedulerConfig:
    return SchedulerConfig(database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def reject_config() -> SchedulerConfig:
    return SchedulerConfig(
        database_url="sqlite+aiosqlite:///:memory:",
        missing_distance_policy="reject",
    )


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine):
    """Create an async session for testing."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
