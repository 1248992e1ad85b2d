"""
Scheduled assignment domain models.

A scheduled assignment is one commitment of a staffing resource (observer,
SNG unit or generator unit) to an event in a city at a date and time.
"""

from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from .errors import InvalidInputError


class ResourceType(str, Enum):
    """Kinds of staffing resources that travel between events."""

    OBSERVER = "observer"  # OB van crew
    SNG = "sng"  # Satellite news gathering unit
    GENERATOR = "generator"  # Mobile power generator


TIME_FORMATS = ("%H:%M", "%H:%M:%S")
DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M")


def parse_event_date(value: Any) -> date:
    """Parse a date, a datetime or a ``YYYY-MM-DD`` string (time part ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        for fmt in DATETIME_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"invalid event date: {value!r}")


def parse_event_time(value: Any) -> time:
    """Parse a time, a datetime or an ``HH:MM`` / ``HH:MM:SS`` string."""
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        if value.tzinfo is not None:
            # Event times are local wall-clock times; they combine with naive dates
            raise ValueError(f"event time must not carry a timezone: {value!r}")
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in TIME_FORMATS:
            try:
                return datetime.strptime(text, fmt).time()
            except ValueError:
                continue
        # Full timestamps, as stored by some clients in the time column
        for fmt in DATETIME_FORMATS:
            try:
                return datetime.strptime(text, fmt).time()
            except ValueError:
                continue
    raise ValueError(f"invalid event time: {value!r}")


class ScheduledAssignment(BaseModel):
    """
    One commitment of a resource to an event.

    Only ``city_id``, ``event_date`` and ``event_time`` take part in the
    travel check; the rest identifies the assignment in error messages.
    """

    city_id: int
    event_date: date
    event_time: time
    event_id: int | None = None
    event_title: str | None = None
    city_name: str | None = None
    resource_type: ResourceType | None = None
    resource_id: int | None = None

    model_config = {"frozen": True}

    @field_validator("event_date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> date:
        return parse_event_date(v)

    @field_validator("event_time", mode="before")
    @classmethod
    def _parse_time(cls, v: Any) -> time:
        return parse_event_time(v)

    @property
    def starts_at(self) -> datetime:
        """Date and time combined into a single instant."""
        return datetime.combine(self.event_date, self.event_time)

    @classmethod
    def coerce(cls, value: "ScheduledAssignment | Mapping[str, Any]") -> "ScheduledAssignment":
        """
        Build an assignment from a model or a plain mapping.

        Raises:
            InvalidInputError: If the city is missing or date/time is malformed
        """
        if isinstance(value, ScheduledAssignment):
            return value
        if not isinstance(value, Mapping):
            raise InvalidInputError(
                f"Expected an assignment mapping, got {type(value).__name__}"
            )
        if value.get("city_id") is None:
            raise InvalidInputError(
                "City is required for a scheduled assignment",
                {"event_id": value.get("event_id")},
            )
        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise InvalidInputError(
                f"Invalid scheduled assignment: {', '.join(fields)}",
                {"fields": fields, "event_id": value.get("event_id")},
            ) from e

    def describe(self) -> dict[str, Any]:
        """Serializable summary used in error payloads."""
        return {
            "event_id": self.event_id,
            "event_title": self.event_title,
            "city_id": self.city_id,
            "city_name": self.city_name,
            "time": self.starts_at.strftime("%Y-%m-%d %H:%M"),
        }
