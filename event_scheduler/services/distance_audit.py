"""
Distance Audit Service.

Maintains the city distance table: finds active city pairs with no recorded
travel time, backfills them with a default, and serves the distance matrix.
Meant for administrative and batch use, not the live request path.
"""

import logging

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from event_scheduler.config import SchedulerConfig
from event_scheduler.database.repository import (
    CityDistanceRepository,
    CityRepository,
    city_to_domain,
    distance_to_domain,
)
from event_scheduler.domain.city import validate_travel_hours
from event_scheduler.domain import (
    City,
    CityDistance,
    CityNotFoundError,
    CityPair,
)

from .distance_graph import CityDistanceGraph

logger = logging.getLogger(__name__)


class MissingPair(BaseModel):
    """City pair without a recorded travel time."""

    pair: CityPair
    from_city_name: str
    to_city_name: str

    model_config = {"frozen": True}


class FillReport(BaseModel):
    """Outcome of a backfill run."""

    default_hours: float
    dry_run: bool
    missing: list[MissingPair] = Field(default_factory=list)
    created: int = 0


class BatchItem(BaseModel):
    from_city_id: int
    to_city_id: int
    travel_time_hours: float


class BatchReport(BaseModel):
    created: int = 0
    updated: int = 0


class DistanceMatrix(BaseModel):
    """Travel times between active cities; None where nothing is recorded."""

    cities: list[City]
    rows: list[list[float | None]]


class DistanceAuditService:
    """
    Service for city distance maintenance.

    Usage:
        async with database.session() as session:
            service = DistanceAuditService(session)
            report = await service.fill_missing(default_hours=5, dry_run=True)
    """

    def __init__(self, session: AsyncSession, config: SchedulerConfig | None = None):
        self.session = session
        self.config = config or SchedulerConfig.from_env()
        self.cities = CityRepository(session)
        self.distances = CityDistanceRepository(session)

    async def _snapshot(self) -> tuple[list[City], CityDistanceGraph]:
        cities = [city_to_domain(c) for c in await self.cities.get_active()]
        graph = CityDistanceGraph.from_distances(
            await self.distances.load_distances(),
            [c.id for c in cities],
        )
        return cities, graph

    async def missing_pairs(self) -> list[MissingPair]:
        """Active city pairs without a recorded travel time."""
        cities, graph = await self._snapshot()
        names = {c.id: c.name for c in cities}
        return [
            MissingPair(
                pair=pair,
                from_city_name=names[pair.first],
                to_city_name=names[pair.second],
            )
            for pair in graph.find_missing_pairs(names)
        ]

    async def fill_missing(
        self,
        default_hours: float | None = None,
        dry_run: bool = False,
    ) -> FillReport:
        """
        Create a distance with the default travel time for every missing pair.

        Args:
            default_hours: Travel time to store (default: configured value)
            dry_run: Only report what would be created

        Returns:
            Report listing the missing pairs and how many rows were created
        """
        hours = validate_travel_hours(
            self.config.default_travel_hours if default_hours is None else default_hours
        )
        cities, graph = await self._snapshot()
        names = {c.id: c.name for c in cities}

        logger.info(f"Checking for missing distances between {len(cities)} active cities")
        missing = [
            MissingPair(
                pair=pair,
                from_city_name=names[pair.first],
                to_city_name=names[pair.second],
            )
            for pair in graph.find_missing_pairs(names)
        ]

        if not missing:
            logger.info("No missing distances found")
            return FillReport(default_hours=hours, dry_run=dry_run)

        logger.warning(f"Found {len(missing)} missing distance pairs")
        for item in missing:
            logger.debug(f"Missing: {item.from_city_name} <-> {item.to_city_name}")

        if dry_run:
            return FillReport(default_hours=hours, dry_run=True, missing=missing)

        created = graph.fill_missing_with_default(hours, names)
        await self.distances.save_edges(created)
        logger.info(f"Created {len(created)} missing distances with {hours} hours travel time")

        return FillReport(
            default_hours=hours,
            dry_run=False,
            missing=missing,
            created=len(created),
        )

    async def upsert_distance(
        self,
        from_city_id: int,
        to_city_id: int,
        travel_time_hours: float,
        notes: str | None = None,
    ) -> tuple[CityDistance, bool]:
        """
        Create or update the distance between two cities (either order).

        Raises:
            InvalidEdgeError: Same city or hours out of range
            CityNotFoundError: Unknown city
        """
        pair = CityPair.of(from_city_id, to_city_id)
        known = await self.cities.get_many(list(pair.as_tuple()))
        for city_id in pair.as_tuple():
            if city_id not in known:
                raise CityNotFoundError(city_id)

        record, created = await self.distances.upsert(
            pair.first,
            pair.second,
            travel_time_hours,
            notes=notes,
        )
        logger.info(
            f"{'Created' if created else 'Updated'} distance {pair}: "
            f"{record.travel_time_hours} hours"
        )
        return distance_to_domain(record), created

    async def batch_upsert(self, items: list[BatchItem]) -> BatchReport:
        """Upsert many distances; the whole batch fails on the first bad item."""
        report = BatchReport()
        for item in items:
            _, created = await self.upsert_distance(
                item.from_city_id,
                item.to_city_id,
                item.travel_time_hours,
            )
            if created:
                report.created += 1
            else:
                report.updated += 1
        logger.info(f"Batch update completed: {report.created} created, {report.updated} updated")
        return report

    async def travel_time(self, from_city_id: int, to_city_id: int) -> float | None:
        """Recorded travel time between two cities (0 for the same city)."""
        if from_city_id == to_city_id:
            return 0.0
        record = await self.distances.get_pair(from_city_id, to_city_id)
        return float(record.travel_time_hours) if record else None

    async def matrix(self) -> DistanceMatrix:
        """Travel-time matrix over active cities ordered by name."""
        cities, graph = await self._snapshot()
        return DistanceMatrix(
            cities=cities,
            rows=graph.matrix([c.id for c in cities]),
        )
