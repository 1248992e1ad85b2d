"""
FastAPI main application.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from event_scheduler.config import SchedulerConfig, setup_logging
from event_scheduler.database.session import Database
from event_scheduler.domain import (
    CityNotFoundError,
    EventNotFoundError,
    ResourceNotFoundError,
    SchedulerError,
)

from .routers import cities, distances, events, resources

logger = logging.getLogger(__name__)

# Domain error -> HTTP status
ERROR_STATUS = {
    CityNotFoundError: 404,
    EventNotFoundError: 404,
    ResourceNotFoundError: 404,
}


@asynccontextmanager
async def lifespan(application: FastAPI):
    database = Database(application.state.config)
    await database.create_tables()
    application.state.database = database
    yield
    await database.dispose()


async def scheduler_error_handler(request: Request, exc: SchedulerError) -> JSONResponse:
    """Render domain errors as the standard error body."""
    status_code = ERROR_STATUS.get(type(exc), 422)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.error_type}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": exc.message,
            "error_type": exc.error_type,
            "details": exc.details,
        },
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as the standard error body."""
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path")),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    fields = ", ".join(e["field"] for e in errors if e["field"])
    logger.info(f"{request.method} {request.url.path} -> 422 invalid_input: {fields}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": f"Validation failed: {fields}" if fields else "Validation failed",
            "error_type": "invalid_input",
            "details": {"errors": errors},
        },
    )


def create_app(config: SchedulerConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or SchedulerConfig.from_env()
    setup_logging(config.log_level)

    application = FastAPI(
        title="Event Scheduler API",
        description="""
        Sports event scheduling backend.

        ## Features

        - **Cities & distances**: Symmetric city-to-city travel times, gap audit and backfill
        - **Resources**: Observers, SNG units and generators
        - **Events**: Create and reschedule events with travel feasibility checks
        """,
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.config = config

    # CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(SchedulerError, scheduler_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    application.include_router(
        cities.router,
        prefix="/api/v1/cities",
        tags=["Cities"],
    )
    application.include_router(
        distances.router,
        prefix="/api/v1/distances",
        tags=["Distances"],
    )
    application.include_router(
        resources.router,
        prefix="/api/v1/resources",
        tags=["Resources"],
    )
    application.include_router(
        events.router,
        prefix="/api/v1/events",
        tags=["Events"],
    )

    @application.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Event Scheduler API",
            "version": "1.0.0",
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @application.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "missing_distance_policy": config.missing_distance_policy,
            "default_travel_hours": config.default_travel_hours,
        }

    return application


# Create default app instance
app = create_app()
