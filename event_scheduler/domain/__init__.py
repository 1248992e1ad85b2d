"""
Domain models for the event scheduler.

Core business entities: cities and travel distances, events, staffing
assignments and feasibility verdicts.
All models use Pydantic for validation and serialization.
"""

from .errors import (
    SchedulerError,
    InvalidEdgeError,
    InvalidInputError,
    CityNotFoundError,
    EventNotFoundError,
    ResourceNotFoundError,
    TravelTimeInsufficientError,
)
from .city import City, CityPair, CityDistance, AUTO_GENERATED_NOTE, MAX_TRAVEL_HOURS
from .assignment import ResourceType, ScheduledAssignment
from .event import Event, EventDraft, EventUpdate, EventStatus
from .verdict import FeasibilityVerdict, TravelConflict, ConflictDirection, ConflictReason
from .activity import ActivityAction, describe_activity

__all__ = [
    # Errors
    "SchedulerError",
    "InvalidEdgeError",
    "InvalidInputError",
    "CityNotFoundError",
    "EventNotFoundError",
    "ResourceNotFoundError",
    "TravelTimeInsufficientError",
    # City
    "City",
    "CityPair",
    "CityDistance",
    "AUTO_GENERATED_NOTE",
    "MAX_TRAVEL_HOURS",
    # Assignment
    "ResourceType",
    "ScheduledAssignment",
    # Event
    "Event",
    "EventDraft",
    "EventUpdate",
    "EventStatus",
    # Verdict
    "FeasibilityVerdict",
    "TravelConflict",
    "ConflictDirection",
    "ConflictReason",
    # Activity
    "ActivityAction",
    "describe_activity",
]
