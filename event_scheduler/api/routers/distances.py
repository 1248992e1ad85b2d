"""
City distances API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from event_scheduler.api.dependencies import SessionDep, get_distance_service
from event_scheduler.database.repository import CityDistanceRepository, distance_to_domain
from event_scheduler.domain import CityDistance, MAX_TRAVEL_HOURS
from event_scheduler.services.distance_audit import (
    BatchItem,
    BatchReport,
    DistanceAuditService,
    DistanceMatrix,
    FillReport,
    MissingPair,
)

router = APIRouter()

DistanceService = Annotated[DistanceAuditService, Depends(get_distance_service)]


class DistanceUpsertRequest(BaseModel):
    """Create or update the travel time between two cities."""

    from_city_id: int
    to_city_id: int
    travel_time_hours: float = Field(..., ge=0, le=MAX_TRAVEL_HOURS)
    notes: str | None = Field(default=None, max_length=1000)


class DistanceResponse(BaseModel):
    id: int | None
    from_city_id: int
    to_city_id: int
    travel_time_hours: float
    notes: str | None
    formatted_time: str


class BatchRequest(BaseModel):
    distances: list[BatchItem]


class TravelTimeResponse(BaseModel):
    from_city_id: int
    to_city_id: int
    travel_time_hours: float | None
    recorded: bool


def _to_response(distance: CityDistance) -> DistanceResponse:
    return DistanceResponse(
        id=distance.id,
        from_city_id=distance.from_city_id,
        to_city_id=distance.to_city_id,
        travel_time_hours=distance.travel_time_hours,
        notes=distance.notes,
        formatted_time=distance.formatted_time(),
    )


@router.get("/", response_model=list[DistanceResponse])
async def list_distances(
    session: SessionDep,
    city_id: int | None = Query(default=None),
):
    """List distances, optionally only those involving one city."""
    records = await CityDistanceRepository(session).list_distances(city_id)
    return [_to_response(distance_to_domain(r)) for r in records]


@router.post("/", response_model=DistanceResponse)
async def upsert_distance(
    request: DistanceUpsertRequest,
    service: DistanceService,
    response: Response,
):
    """
    Create or update a distance.

    The city order does not matter: posting (B, A) after (A, B) updates the
    same row. Returns 201 when a row was created, 200 when updated.
    """
    distance, created = await service.upsert_distance(
        request.from_city_id,
        request.to_city_id,
        request.travel_time_hours,
        notes=request.notes,
    )
    response.status_code = 201 if created else 200
    return _to_response(distance)


@router.post("/batch", response_model=BatchReport)
async def batch_upsert(request: BatchRequest, service: DistanceService):
    """Create or update many distances in one transaction."""
    return await service.batch_upsert(request.distances)


@router.get("/travel-time", response_model=TravelTimeResponse)
async def get_travel_time(
    service: DistanceService,
    from_city_id: int = Query(...),
    to_city_id: int = Query(...),
):
    """Recorded travel time between two cities, in either order."""
    hours = await service.travel_time(from_city_id, to_city_id)
    return TravelTimeResponse(
        from_city_id=from_city_id,
        to_city_id=to_city_id,
        travel_time_hours=hours,
        recorded=hours is not None,
    )


@router.get("/matrix", response_model=DistanceMatrix)
async def get_matrix(service: DistanceService):
    """Travel-time matrix over active cities."""
    return await service.matrix()


@router.get("/missing", response_model=list[MissingPair])
async def get_missing_pairs(service: DistanceService):
    """Active city pairs without a recorded travel time."""
    return await service.missing_pairs()


@router.post("/fill-missing", response_model=FillReport)
async def fill_missing(
    service: DistanceService,
    hours: float | None = Query(default=None, ge=0, le=MAX_TRAVEL_HOURS),
    dry_run: bool = Query(default=False),
):
    """Backfill missing distances with a default travel time."""
    return await service.fill_missing(default_hours=hours, dry_run=dry_run)
