"""
Database layer for the event scheduler.

Provides async SQLAlchemy models and repositories for persistence.
"""

from .models import (
    Base,
    CityRecord,
    CityDistanceRecord,
    EventRecord,
    ObserverRecord,
    SngRecord,
    GeneratorRecord,
    ActivityLogRecord,
)
from .repository import (
    DatabaseRepository,
    CityRepository,
    CityDistanceRepository,
    ResourceRepository,
    EventRepository,
    ActivityLogRepository,
)
from .session import Database, normalize_database_url

__all__ = [
    "Base",
    "CityRecord",
    "CityDistanceRecord",
    "EventRecord",
    "ObserverRecord",
    "SngRecord",
    "GeneratorRecord",
    "ActivityLogRecord",
    "DatabaseRepository",
    "CityRepository",
    "CityDistanceRepository",
    "ResourceRepository",
    "EventRepository",
    "ActivityLogRepository",
    "Database",
    "normalize_database_url",
]
