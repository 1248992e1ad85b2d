"""
Cities API endpoints.
"""

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from event_scheduler.api.dependencies import SessionDep
from event_scheduler.database.repository import CityRepository, city_to_domain
from event_scheduler.domain import City, CityNotFoundError

router = APIRouter()


class CityCreateRequest(BaseModel):
    """Request to create a city."""

    name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(default="Saudi Arabia", max_length=255)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    is_active: bool = True


class CityList(BaseModel):
    """List of cities."""

    cities: list[City]
    total: int


@router.get("/", response_model=CityList)
async def list_cities(
    session: SessionDep,
    active_only: bool = Query(default=False),
):
    """List cities, optionally only active ones."""
    repo = CityRepository(session)
    records = await repo.get_active() if active_only else await repo.get_all(limit=1000)
    cities = [city_to_domain(r) for r in records]
    return CityList(cities=cities, total=len(cities))


@router.post("/", response_model=City, status_code=201)
async def create_city(request: CityCreateRequest, session: SessionDep):
    """Create a city."""
    record = await CityRepository(session).create(**request.model_dump())
    return city_to_domain(record)


@router.get("/{city_id}", response_model=City)
async def get_city(city_id: int, session: SessionDep):
    """Get a city by id."""
    record = await CityRepository(session).get_by_id(city_id)
    if record is None:
        raise CityNotFoundError(city_id)
    return city_to_domain(record)
