"""
API dependencies.

Provides dependency injection for FastAPI routes. Each request gets one
database session from the application's ``Database``; services built on it
share that session.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from event_scheduler.config import SchedulerConfig
from event_scheduler.services import DistanceAuditService, EventAssignmentService


async def get_session_dependency(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session, committed when the endpoint returns."""
    async with request.app.state.database.session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session_dependency)]


def get_config(request: Request) -> SchedulerConfig:
    """Dependency for the configuration the application was created with."""
    return request.app.state.config


ConfigDep = Annotated[SchedulerConfig, Depends(get_config)]


def get_assignment_service(session: SessionDep, config: ConfigDep) -> EventAssignmentService:
    """Dependency for the event assignment service."""
    return EventAssignmentService(session, config)


def get_distance_service(session: SessionDep, config: ConfigDep) -> DistanceAuditService:
    """Dependency for the distance audit service."""
    return DistanceAuditService(session, config)
