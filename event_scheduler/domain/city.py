"""
City and city-distance domain models.

Cities host events; distances record how many hours it takes staff and
equipment to travel between two cities. A distance is a fact about an
unordered pair, so pairs are always kept in canonical (ascending) order.
"""

import math

from pydantic import BaseModel, Field, model_validator

from .errors import InvalidEdgeError


# Upper bound of the decimal(8, 2) travel time column
MAX_TRAVEL_HOURS = 999.99

AUTO_GENERATED_NOTE = "Auto-generated with default travel time"


class City(BaseModel):
    """City that can host events."""

    id: int
    name: str
    country: str = "Saudi Arabia"
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    is_active: bool = True

    model_config = {"frozen": True}


class CityPair(BaseModel):
    """
    Unordered pair of two distinct cities.

    Always stored with ``first < second``; build it with ``CityPair.of`` so
    that (A, B) and (B, A) end up as the same value.
    """

    first: int
    second: int

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_canonical(self) -> "CityPair":
        if self.first == self.second:
            raise ValueError("a city cannot be paired with itself")
        if self.first > self.second:
            raise ValueError("city pair must be in ascending order, use CityPair.of()")
        return self

    @classmethod
    def of(cls, city_a: int, city_b: int) -> "CityPair":
        """Canonical pair for two city ids, in either order."""
        if city_a is None or city_b is None:
            raise InvalidEdgeError("Both cities are required for a distance")
        if city_a == city_b:
            raise InvalidEdgeError(
                "Cannot create distance between the same city",
                {"city_id": city_a},
            )
        low, high = sorted((city_a, city_b))
        return cls(first=low, second=high)

    def contains(self, city_id: int) -> bool:
        return city_id in (self.first, self.second)

    def as_tuple(self) -> tuple[int, int]:
        return self.first, self.second

    def __str__(self) -> str:
        return f"{self.first}<->{self.second}"


def validate_travel_hours(hours: float) -> float:
    """Check a travel time is a finite value in [0, MAX_TRAVEL_HOURS]."""
    try:
        value = float(hours)
    except (TypeError, ValueError):
        raise InvalidEdgeError(f"Travel time must be a number, got {hours!r}")
    if not math.isfinite(value) or value < 0:
        raise InvalidEdgeError(
            "Travel time must be a non-negative number",
            {"travel_time_hours": hours},
        )
    if value > MAX_TRAVEL_HOURS:
        raise InvalidEdgeError(
            f"Travel time must not exceed {MAX_TRAVEL_HOURS} hours",
            {"travel_time_hours": hours},
        )
    return round(value, 2)


class CityDistance(BaseModel):
    """Travel time between an unordered pair of cities."""

    from_city_id: int
    to_city_id: int
    travel_time_hours: float = Field(ge=0, le=MAX_TRAVEL_HOURS)
    notes: str | None = None
    id: int | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_pair(self) -> "CityDistance":
        if self.from_city_id == self.to_city_id:
            raise ValueError("a city cannot be paired with itself")
        return self

    @property
    def pair(self) -> CityPair:
        return CityPair.of(self.from_city_id, self.to_city_id)

    @property
    def is_auto_generated(self) -> bool:
        return self.notes == AUTO_GENERATED_NOTE

    def formatted_time(self) -> str:
        """Human readable travel time, e.g. ``1 h 30 min``."""
        hours = int(self.travel_time_hours)
        minutes = round((self.travel_time_hours - hours) * 60)
        if minutes == 60:
            hours, minutes = hours + 1, 0
        if hours == 0:
            return f"{minutes} min"
        if minutes == 0:
            return f"{hours} h"
        return f"{hours} h {minutes} min"
