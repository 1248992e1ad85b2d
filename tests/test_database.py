"""Tests for database layer."""

import pytest
from datetime import date, time

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from event_scheduler.config import SchedulerConfig
from event_scheduler.database import Database, normalize_database_url
from event_scheduler.database.models import CityDistanceRecord, EventRecord
from event_scheduler.database.repository import (
    ActivityLogRepository,
    CityDistanceRepository,
    CityRepository,
    EventRepository,
    ResourceRepository,
)
from event_scheduler.domain import (
    CityDistance,
    EventDraft,
    EventStatus,
    InvalidEdgeError,
    ResourceType,
)


@pytest.fixture
async def cities(async_session):
    """Riyadh, Jeddah and Dammam."""
    repo = CityRepository(async_session)
    riyadh = await repo.create("Riyadh", latitude=24.71, longitude=46.68)
    jeddah = await repo.create("Jeddah", latitude=21.49, longitude=39.19)
    dammam = await repo.create("Dammam", latitude=26.43, longitude=50.10)
    await async_session.commit()
    return riyadh, jeddah, dammam


class TestCityRepository:
    """Tests for city repository."""

    @pytest.mark.asyncio
    async def test_get_active_ordered_by_name(self, async_session, cities):
        repo = CityRepository(async_session)
        await repo.create("Abha", is_active=False)
        await async_session.commit()

        active = await repo.get_active()

        assert [c.name for c in active] == ["Dammam", "Jeddah", "Riyadh"]

    @pytest.mark.asyncio
    async def test_get_many_skips_unknown(self, async_session, cities):
        riyadh, _, dammam = cities
        found = await CityRepository(async_session).get_many([riyadh.id, dammam.id, 999])
        assert set(found) == {riyadh.id, dammam.id}


class TestCityDistanceRepository:
    """Tests for city distance repository."""

    @pytest.mark.asyncio
    async def test_upsert_stores_canonical_order(self, async_session, cities):
        riyadh, jeddah, _ = cities
        repo = CityDistanceRepository(async_session)

        record, created = await repo.upsert(jeddah.id, riyadh.id, 1.5, notes="Flight")
        await async_session.commit()

        assert created is True
        assert record.from_city_id == riyadh.id
        assert record.to_city_id == jeddah.id
        assert record.travel_time_hours == 1.5

    @pytest.mark.asyncio
    async def test_reverse_upsert_updates(self, async_session, cities):
        """Saving (B, A) after (A, B) updates the same row."""
        riyadh, jeddah, _ = cities
        repo = CityDistanceRepository(async_session)

        first, _ = await repo.upsert(riyadh.id, jeddah.id, 1.5, notes="Flight")
        second, created = await repo.upsert(jeddah.id, riyadh.id, 2.25)
        await async_session.commit()

        assert created is False
        assert second.id == first.id
        assert second.notes == "Flight"

        rows = (await async_session.execute(select(CityDistanceRecord))).scalars().all()
        assert len(rows) == 1
        assert rows[0].travel_time_hours == 2.25

    @pytest.mark.asyncio
    async def test_get_pair_either_order(self, async_session, cities):
        riyadh, jeddah, dammam = cities
        repo = CityDistanceRepository(async_session)
        await repo.upsert(riyadh.id, jeddah.id, 1.5)
        await async_session.commit()

        assert (await repo.get_pair(jeddah.id, riyadh.id)).travel_time_hours == 1.5
        assert await repo.get_pair(riyadh.id, dammam.id) is None

    @pytest.mark.asyncio
    async def test_upsert_rejects_invalid_edges(self, async_session, cities):
        riyadh, jeddah, _ = cities
        repo = CityDistanceRepository(async_session)

        with pytest.raises(InvalidEdgeError):
            await repo.upsert(riyadh.id, riyadh.id, 1.0)
        with pytest.raises(InvalidEdgeError):
            await repo.upsert(riyadh.id, jeddah.id, 1000)

    @pytest.mark.asyncio
    async def test_unique_pair_constraint(self, async_session, cities):
        riyadh, jeddah, _ = cities
        async_session.add_all(
            [
                CityDistanceRecord(from_city_id=riyadh.id, to_city_id=jeddah.id, travel_time_hours=1.5),
                CityDistanceRecord(from_city_id=riyadh.id, to_city_id=jeddah.id, travel_time_hours=2.0),
            ]
        )
        with pytest.raises(IntegrityError):
            await async_session.flush()
        await async_session.rollback()

    @pytest.mark.asyncio
    async def test_list_and_load(self, async_session, cities):
        riyadh, jeddah, dammam = cities
        repo = CityDistanceRepository(async_session)
        await repo.upsert(riyadh.id, jeddah.id, 1.5)
        await repo.upsert(dammam.id, jeddah.id, 2.0)
        await async_session.commit()

        touching_dammam = await repo.list_distances(city_id=dammam.id)
        loaded = await repo.load_distances()

        assert len(touching_dammam) == 1
        assert all(isinstance(d, CityDistance) for d in loaded)
        assert [(d.from_city_id, d.to_city_id) for d in loaded] == [
            (riyadh.id, jeddah.id),
            (jeddah.id, dammam.id),
        ]

    @pytest.mark.asyncio
    async def test_save_edges(self, async_session, cities):
        riyadh, _, dammam = cities
        repo = CityDistanceRepository(async_session)

        await repo.save_edges(
            [CityDistance(from_city_id=riyadh.id, to_city_id=dammam.id, travel_time_hours=5.0)]
        )
        await async_session.commit()

        assert (await repo.get_pair(dammam.id, riyadh.id)).travel_time_hours == 5.0


class TestEventRepository:
    """Tests for event repository."""

    @pytest.fixture
    async def observer(self, async_session):
        record = await ResourceRepository(async_session).create(ResourceType.OBSERVER, "OB-01")
        await async_session.commit()
        return record

    async def _create(self, session, city, hhmm, observer, status=EventStatus.SCHEDULED):
        hour, minute = (int(part) for part in hhmm.split(":"))
        record = await EventRepository(session).create_event(
            EventDraft(
                title=f"{city.name} {hhmm}",
                city_id=city.id,
                event_date=date(2025, 1, 1),
                event_time=time(hour, minute),
                status=status,
                observer_ids=[observer.id],
            )
        )
        await session.commit()
        return record

    @pytest.mark.asyncio
    async def test_resource_assignments(self, async_session, cities, observer):
        riyadh, jeddah, _ = cities
        await self._create(async_session, jeddah, "18:00", observer)
        await self._create(async_session, riyadh, "10:00", observer)

        assignments = await EventRepository(async_session).get_resource_assignments(
            ResourceType.OBSERVER, observer.id
        )

        assert [a.city_name for a in assignments] == ["Riyadh", "Jeddah"]
        assert all(a.resource_type == ResourceType.OBSERVER for a in assignments)
        assert assignments[0].event_time == time(10, 0)

    @pytest.mark.asyncio
    async def test_cancelled_and_excluded_events_left_out(self, async_session, cities, observer):
        riyadh, jeddah, dammam = cities
        kept = await self._create(async_session, riyadh, "10:00", observer)
        edited = await self._create(async_session, jeddah, "12:00", observer)
        await self._create(async_session, dammam, "14:00", observer, status=EventStatus.CANCELLED)

        assignments = await EventRepository(async_session).get_resource_assignments(
            ResourceType.OBSERVER, observer.id, exclude_event_id=edited.id
        )

        assert [a.event_id for a in assignments] == [kept.id]

    @pytest.mark.asyncio
    async def test_other_resources_not_included(self, async_session, cities, observer):
        riyadh, _, _ = cities
        await self._create(async_session, riyadh, "10:00", observer)
        other = await ResourceRepository(async_session).create(ResourceType.OBSERVER, "OB-02")
        await async_session.commit()

        assert await EventRepository(async_session).get_resource_assignments(
            ResourceType.OBSERVER, other.id
        ) == []

    @pytest.mark.asyncio
    async def test_apply_draft_replaces_staffing(self, async_session, cities, observer):
        riyadh, jeddah, _ = cities
        repo = EventRepository(async_session)
        record = await self._create(async_session, riyadh, "10:00", observer)
        sng = await ResourceRepository(async_session).create(ResourceType.SNG, "SNG Unit 1")

        await repo.apply_draft(
            record,
            EventDraft(
                title="Moved",
                city_id=jeddah.id,
                event_date="2025-01-02",
                event_time="19:30",
                sng_ids=[sng.id],
            ),
        )
        await async_session.commit()

        stored = (await async_session.execute(select(EventRecord))).scalars().one()
        assert stored.city_id == jeddah.id
        assert stored.observers == []
        assert [s.id for s in stored.sngs] == [sng.id]


class TestActivityLogRepository:
    """Tests for activity log repository."""

    @pytest.mark.asyncio
    async def test_log_and_filter(self, async_session):
        repo = ActivityLogRepository(async_session)
        await repo.log("created", "Created new Event 'A'", model_type="Event", model_id=1)
        await repo.log(
            "travel_time_rejected",
            "Rejected Event 'B': insufficient travel time",
            model_type="Event",
            details={"required_travel_hours": 1.5},
        )
        await async_session.commit()

        rejected = await repo.get_recent(action="travel_time_rejected")

        assert len(rejected) == 1
        assert rejected[0].details == {"required_travel_hours": 1.5}
        assert len(await repo.get_recent()) == 2


class TestDatabase:
    """Tests for engine setup and the unit-of-work session."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db:5432/events", "postgresql+asyncpg://u:p@db:5432/events"),
            ("postgresql://u:p@db/events", "postgresql+asyncpg://u:p@db/events"),
            ("postgresql+asyncpg://u:p@db/events", "postgresql+asyncpg://u:p@db/events"),
            ("sqlite+aiosqlite:///./events.db", "sqlite+aiosqlite:///./events.db"),
        ],
    )
    def test_normalize_database_url(self, url, expected):
        assert normalize_database_url(url) == expected

    @pytest.mark.asyncio
    async def test_session_commits_and_rolls_back(self):
        database = Database(SchedulerConfig(database_url="sqlite+aiosqlite:///:memory:"))
        await database.create_tables()
        try:
            async with database.session() as session:
                await CityRepository(session).create("Riyadh")

            with pytest.raises(RuntimeError):
                async with database.session() as session:
                    await CityRepository(session).create("Jeddah")
                    await session.flush()
                    raise RuntimeError("abort")

            async with database.session() as session:
                names = [c.name for c in await CityRepository(session).get_all()]
            assert names == ["Riyadh"]
        finally:
            await database.dispose()
