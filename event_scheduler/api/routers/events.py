"""
Events API endpoints.

Event writes run the travel feasibility check for every staffed resource;
a failed check answers 422 with ``error_type: travel_time_insufficient``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from event_scheduler.api.dependencies import get_assignment_service
from event_scheduler.domain import Event, EventDraft, EventUpdate
from event_scheduler.services import EventAssignmentService

router = APIRouter()

AssignmentService = Annotated[EventAssignmentService, Depends(get_assignment_service)]


class ResourceCheck(BaseModel):
    resource_type: str
    resource_id: int
    feasible: bool
    required_travel_hours: float | None = None
    available_hours: float | None = None
    conflicting_event_id: int | None = None
    missing_city_pairs: list[str] = []


class CheckResponse(BaseModel):
    feasible: bool
    resources: list[ResourceCheck]


@router.post("/check", response_model=CheckResponse)
async def check_event(
    draft: EventDraft,
    service: AssignmentService,
    event_id: int | None = Query(default=None),
):
    """
    Dry-run the travel feasibility check for a draft event.

    Pass ``event_id`` when checking an edit so the event itself is ignored.
    """
    results = await service.check_event(draft, event_id=event_id)
    checks = []
    for r in results:
        conflict = r.verdict.conflict
        checks.append(
            ResourceCheck(
                resource_type=r.resource_type.value,
                resource_id=r.resource_id,
                feasible=r.feasible,
                required_travel_hours=conflict.required_hours if conflict else None,
                available_hours=round(conflict.available_hours, 2) if conflict else None,
                conflicting_event_id=conflict.conflicting_assignment.event_id if conflict else None,
                missing_city_pairs=[str(p) for p in r.verdict.missing_pairs],
            )
        )
    return CheckResponse(feasible=all(c.feasible for c in checks), resources=checks)


@router.post("/", response_model=Event, status_code=201)
async def create_event(
    draft: EventDraft,
    service: AssignmentService,
    user_id: int | None = Query(default=None),
):
    """Create an event; rejected with 422 when a resource cannot travel in time."""
    return await service.create_event(draft, user_id=user_id)


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: int, service: AssignmentService):
    """Get an event with its staffing."""
    return await service.get_event(event_id)


@router.patch("/{event_id}", response_model=Event)
async def update_event(
    event_id: int,
    changes: EventUpdate,
    service: AssignmentService,
    user_id: int | None = Query(default=None),
):
    """Update an event; city/date/time/staffing changes are re-checked."""
    return await service.update_event(event_id, changes, user_id=user_id)
