"""
Staffing resources API endpoints (observers, SNG units, generators).
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from event_scheduler.api.dependencies import SessionDep
from event_scheduler.database.repository import ResourceRepository
from event_scheduler.domain import ResourceType

router = APIRouter()


class ResourceCreateRequest(BaseModel):
    """Observer code or SNG/generator name."""

    label: str = Field(..., min_length=1, max_length=255)


class ResourceInfo(BaseModel):
    id: int
    resource_type: ResourceType
    label: str
    is_active: bool


@router.get("/{resource_type}", response_model=list[ResourceInfo])
async def list_resources(resource_type: ResourceType, session: SessionDep):
    """List resources of one type."""
    records = await ResourceRepository(session).list_resources(resource_type)
    return [
        ResourceInfo(id=r.id, resource_type=resource_type, label=r.label, is_active=r.is_active)
        for r in records
    ]


@router.post("/{resource_type}", response_model=ResourceInfo, status_code=201)
async def create_resource(
    resource_type: ResourceType,
    request: ResourceCreateRequest,
    session: SessionDep,
):
    """Create an observer, SNG unit or generator."""
    record = await ResourceRepository(session).create(resource_type, request.label)
    return ResourceInfo(
        id=record.id,
        resource_type=resource_type,
        label=record.label,
        is_active=True,
    )
