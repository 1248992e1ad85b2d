"""
Event domain models.

An event happens in one city at a date and time and is staffed by any
number of observers, SNG units and generators.
"""

from datetime import date, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .assignment import ResourceType, parse_event_date, parse_event_time


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class EventDraft(BaseModel):
    """Event as submitted for creation or after merging an update."""

    title: str = Field(min_length=1, max_length=255)
    city_id: int
    event_date: date
    event_time: time
    status: EventStatus = EventStatus.SCHEDULED
    description: str | None = None
    observer_ids: list[int] = Field(default_factory=list)
    sng_ids: list[int] = Field(default_factory=list)
    generator_ids: list[int] = Field(default_factory=list)

    @field_validator("event_date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> date:
        return parse_event_date(v)

    @field_validator("event_time", mode="before")
    @classmethod
    def _parse_time(cls, v: Any) -> time:
        return parse_event_time(v)

    @field_validator("observer_ids", "sng_ids", "generator_ids")
    @classmethod
    def _dedupe(cls, v: list[int]) -> list[int]:
        return list(dict.fromkeys(v))

    def resource_ids(self, resource_type: ResourceType) -> list[int]:
        return {
            ResourceType.OBSERVER: self.observer_ids,
            ResourceType.SNG: self.sng_ids,
            ResourceType.GENERATOR: self.generator_ids,
        }[resource_type]

    def assigned_resources(self) -> list[tuple[ResourceType, int]]:
        """All (type, id) pairs staffed on this event."""
        return [
            (resource_type, resource_id)
            for resource_type in ResourceType
            for resource_id in self.resource_ids(resource_type)
        ]


class EventUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    city_id: int | None = None
    event_date: date | None = None
    event_time: time | None = None
    status: EventStatus | None = None
    description: str | None = None
    observer_ids: list[int] | None = None
    sng_ids: list[int] | None = None
    generator_ids: list[int] | None = None

    @field_validator("event_date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> date | None:
        return None if v is None else parse_event_date(v)

    @field_validator("event_time", mode="before")
    @classmethod
    def _parse_time(cls, v: Any) -> time | None:
        return None if v is None else parse_event_time(v)

    def touches_schedule(self) -> bool:
        """True when city, date, time or staffing changed."""
        fields = self.model_fields_set & {
            "city_id",
            "event_date",
            "event_time",
            "observer_ids",
            "sng_ids",
            "generator_ids",
        }
        return bool(fields)


class Event(EventDraft):
    """Persisted event."""

    id: int
