"""
Repository pattern for database access.

Provides clean abstraction over SQLAlchemy queries with async support.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar, Optional, List

from sqlalchemy import Table, select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    Base,
    CityRecord,
    CityDistanceRecord,
    EventRecord,
    ObserverRecord,
    SngRecord,
    GeneratorRecord,
    ActivityLogRecord,
    event_observers,
    event_sngs,
    event_generators,
)
from event_scheduler.domain import (
    City,
    CityDistance,
    CityPair,
    Event,
    EventDraft,
    EventStatus,
    ResourceNotFoundError,
    ResourceType,
    ScheduledAssignment,
)
from event_scheduler.domain.city import validate_travel_hours


T = TypeVar("T", bound=Base)


class DatabaseRepository(Generic[T]):
    """
    Generic repository with common CRUD operations.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]):
        self.session = session
        self.model_class = model_class

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get a record by ID."""
        result = await self.session.execute(
            select(self.model_class).where(self.model_class.id == id)
        )
        return result.scalar_one_or_none()

    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Get all records with pagination."""
        result = await self.session.execute(
            select(self.model_class)
            .order_by(self.model_class.id)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def add(self, entity: T) -> T:
        """Add a new record."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def add_many(self, entities: List[T]) -> List[T]:
        """Add multiple records."""
        self.session.add_all(entities)
        await self.session.flush()
        return entities


def city_to_domain(record: CityRecord) -> City:
    return City(
        id=record.id,
        name=record.name,
        country=record.country,
        latitude=record.latitude,
        longitude=record.longitude,
        is_active=record.is_active,
    )


def distance_to_domain(record: CityDistanceRecord) -> CityDistance:
    return CityDistance(
        id=record.id,
        from_city_id=record.from_city_id,
        to_city_id=record.to_city_id,
        travel_time_hours=float(record.travel_time_hours),
        notes=record.notes,
    )


class CityRepository(DatabaseRepository[CityRecord]):
    """
    Repository for cities.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, CityRecord)

    async def get_active(self) -> List[CityRecord]:
        """Active cities ordered by name."""
        result = await self.session.execute(
            select(CityRecord)
            .where(CityRecord.is_active.is_(True))
            .order_by(CityRecord.name, CityRecord.id)
        )
        return list(result.scalars().all())

    async def get_many(self, ids: List[int]) -> dict[int, CityRecord]:
        """Cities by id; unknown ids are simply absent."""
        if not ids:
            return {}
        result = await self.session.execute(
            select(CityRecord).where(CityRecord.id.in_(set(ids)))
        )
        return {record.id: record for record in result.scalars().all()}

    async def create(
        self,
        name: str,
        country: str = "Saudi Arabia",
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        is_active: bool = True,
    ) -> CityRecord:
        return await self.add(
            CityRecord(
                name=name,
                country=country,
                latitude=latitude,
                longitude=longitude,
                is_active=is_active,
            )
        )


class CityDistanceRepository(DatabaseRepository[CityDistanceRecord]):
    """
    Repository for city-to-city travel times.

    Rows are written in canonical order (from_city_id < to_city_id). Reads
    also match rows stored the other way round.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, CityDistanceRecord)

    async def get_pair(self, city_a: int, city_b: int) -> Optional[CityDistanceRecord]:
        """Distance row for two cities in either order."""
        pair = CityPair.of(city_a, city_b)
        result = await self.session.execute(
            select(CityDistanceRecord)
            .where(
                or_(
                    and_(
                        CityDistanceRecord.from_city_id == pair.first,
                        CityDistanceRecord.to_city_id == pair.second,
                    ),
                    and_(
                        CityDistanceRecord.from_city_id == pair.second,
                        CityDistanceRecord.to_city_id == pair.first,
                    ),
                )
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_distances(
        self,
        city_id: Optional[int] = None,
    ) -> List[CityDistanceRecord]:
        """All distances, optionally only those touching one city."""
        query = select(CityDistanceRecord)
        if city_id is not None:
            query = query.where(
                or_(
                    CityDistanceRecord.from_city_id == city_id,
                    CityDistanceRecord.to_city_id == city_id,
                )
            )
        query = query.order_by(CityDistanceRecord.from_city_id, CityDistanceRecord.to_city_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def load_distances(self) -> List[CityDistance]:
        """Snapshot of every stored distance as domain models."""
        records = await self.list_distances()
        return [distance_to_domain(r) for r in records]

    async def upsert(
        self,
        city_a: int,
        city_b: int,
        hours: float,
        notes: Optional[str] = None,
    ) -> tuple[CityDistanceRecord, bool]:
        """
        Create or update the distance for a city pair.

        Returns:
            Tuple of (record, True if created)

        Raises:
            InvalidEdgeError: Same city or hours out of range
        """
        pair = CityPair.of(city_a, city_b)
        value = validate_travel_hours(hours)

        existing = await self.get_pair(pair.first, pair.second)
        if existing is not None:
            existing.travel_time_hours = value
            if notes is not None:
                existing.notes = notes
            await self.session.flush()
            return existing, False

        record = CityDistanceRecord(
            from_city_id=pair.first,
            to_city_id=pair.second,
            travel_time_hours=value,
            notes=notes,
        )
        return await self.add(record), True

    async def save_edges(self, edges: List[CityDistance]) -> List[CityDistanceRecord]:
        """Insert new edges produced by the in-memory graph."""
        records = [
            CityDistanceRecord(
                from_city_id=edge.from_city_id,
                to_city_id=edge.to_city_id,
                travel_time_hours=edge.travel_time_hours,
                notes=edge.notes,
            )
            for edge in edges
        ]
        return await self.add_many(records)


# Resource type -> (record class, pivot table, pivot column)
RESOURCE_TABLES: dict[ResourceType, tuple[type[Base], Table, str]] = {
    ResourceType.OBSERVER: (ObserverRecord, event_observers, "observer_id"),
    ResourceType.SNG: (SngRecord, event_sngs, "sng_id"),
    ResourceType.GENERATOR: (GeneratorRecord, event_generators, "generator_id"),
}


class ResourceRepository:
    """
    Repository for staffing resources (observers, SNG units, generators).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, resource_type: ResourceType, label: str) -> Base:
        model_class, _, _ = RESOURCE_TABLES[resource_type]
        field = "code" if resource_type == ResourceType.OBSERVER else "name"
        record = model_class(**{field: label})
        self.session.add(record)
        await self.session.flush()
        return record

    async def list_resources(self, resource_type: ResourceType) -> List[Any]:
        model_class, _, _ = RESOURCE_TABLES[resource_type]
        result = await self.session.execute(select(model_class).order_by(model_class.id))
        return list(result.scalars().all())

    async def get_many(self, resource_type: ResourceType, ids: List[int]) -> List[Any]:
        """
        Resources by id, in the order requested.

        Raises:
            ResourceNotFoundError: If any id does not exist
        """
        if not ids:
            return []
        model_class, _, _ = RESOURCE_TABLES[resource_type]
        result = await self.session.execute(
            select(model_class).where(model_class.id.in_(set(ids)))
        )
        by_id = {record.id: record for record in result.scalars().all()}
        unknown = [i for i in ids if i not in by_id]
        if unknown:
            raise ResourceNotFoundError(resource_type.value, unknown)
        return [by_id[i] for i in ids]


def event_to_domain(record: EventRecord) -> Event:
    return Event(
        id=record.id,
        title=record.title,
        city_id=record.city_id,
        event_date=record.event_date,
        event_time=record.event_time,
        status=EventStatus(record.status),
        description=record.description,
        observer_ids=[o.id for o in record.observers],
        sng_ids=[s.id for s in record.sngs],
        generator_ids=[g.id for g in record.generators],
    )


def event_to_assignment(
    record: EventRecord,
    resource_type: Optional[ResourceType] = None,
    resource_id: Optional[int] = None,
) -> ScheduledAssignment:
    return ScheduledAssignment(
        event_id=record.id,
        event_title=record.title,
        city_id=record.city_id,
        city_name=record.city.name if record.city is not None else None,
        event_date=record.event_date,
        event_time=record.event_time,
        resource_type=resource_type,
        resource_id=resource_id,
    )


class EventRepository(DatabaseRepository[EventRecord]):
    """
    Repository for events and their staffing.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, EventRecord)
        self.resources = ResourceRepository(session)

    async def get_by_id(self, id: int) -> Optional[EventRecord]:
        """Event with its city and staffing freshly loaded."""
        result = await self.session.execute(
            select(EventRecord)
            .where(EventRecord.id == id)
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    async def get_resource_assignments(
        self,
        resource_type: ResourceType,
        resource_id: int,
        exclude_event_id: Optional[int] = None,
    ) -> List[ScheduledAssignment]:
        """
        Every non-cancelled event a resource is staffed on.

        Args:
            resource_type: observer, sng or generator
            resource_id: Resource primary key
            exclude_event_id: Event being edited, left out of the result
        """
        _, pivot, column = RESOURCE_TABLES[resource_type]
        query = (
            select(EventRecord)
            .join(pivot, pivot.c.event_id == EventRecord.id)
            .where(
                and_(
                    pivot.c[column] == resource_id,
                    EventRecord.status != EventStatus.CANCELLED.value,
                )
            )
            .order_by(EventRecord.event_date, EventRecord.event_time, EventRecord.id)
            # Events created earlier in this session were never loaded with their city
            .execution_options(populate_existing=True)
        )
        if exclude_event_id is not None:
            query = query.where(EventRecord.id != exclude_event_id)

        result = await self.session.execute(query)
        return [
            event_to_assignment(record, resource_type, resource_id)
            for record in result.scalars().unique().all()
        ]

    async def create_event(self, draft: EventDraft, created_by: Optional[int] = None) -> EventRecord:
        """Insert an event with its staffing rows."""
        record = EventRecord(
            title=draft.title,
            event_date=draft.event_date,
            event_time=draft.event_time,
            city_id=draft.city_id,
            status=draft.status.value,
            description=draft.description,
            created_by=created_by,
        )
        record.observers = await self.resources.get_many(ResourceType.OBSERVER, draft.observer_ids)
        record.sngs = await self.resources.get_many(ResourceType.SNG, draft.sng_ids)
        record.generators = await self.resources.get_many(ResourceType.GENERATOR, draft.generator_ids)
        return await self.add(record)

    async def apply_draft(self, record: EventRecord, draft: EventDraft) -> EventRecord:
        """Overwrite an event and its staffing with a merged draft."""
        record.title = draft.title
        record.event_date = draft.event_date
        record.event_time = draft.event_time
        record.city_id = draft.city_id
        record.status = draft.status.value
        record.description = draft.description
        record.updated_at = datetime.utcnow()
        record.observers = await self.resources.get_many(ResourceType.OBSERVER, draft.observer_ids)
        record.sngs = await self.resources.get_many(ResourceType.SNG, draft.sng_ids)
        record.generators = await self.resources.get_many(ResourceType.GENERATOR, draft.generator_ids)
        await self.session.flush()
        return record


class ActivityLogRepository(DatabaseRepository[ActivityLogRecord]):
    """
    Repository for the activity log.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, ActivityLogRecord)

    async def log(
        self,
        action: str,
        description: str,
        model_type: Optional[str] = None,
        model_id: Optional[int] = None,
        details: Optional[dict] = None,
        user_id: Optional[int] = None,
    ) -> ActivityLogRecord:
        """Append an activity log entry."""
        return await self.add(
            ActivityLogRecord(
                user_id=user_id,
                action=action,
                model_type=model_type,
                model_id=model_id,
                description=description,
                details=details,
            )
        )

    async def get_recent(
        self,
        limit: int = 50,
        action: Optional[str] = None,
    ) -> List[ActivityLogRecord]:
        """Most recent entries, newest first."""
        query = select(ActivityLogRecord)
        if action:
            query = query.where(ActivityLogRecord.action == action)
        result = await self.session.execute(
            query.order_by(ActivityLogRecord.created_at.desc(), ActivityLogRecord.id.desc()).limit(limit)
        )
        return list(result.scalars().all())
