"""
Feasibility verdict models.

A verdict is the answer of the travel feasibility check. It is never
persisted; callers turn it into an API error body or an activity log entry.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .assignment import ScheduledAssignment
from .city import CityPair


class ConflictDirection(str, Enum):
    """Which way the resource would have to travel."""

    AFTER = "after"  # candidate follows the conflicting event
    BEFORE = "before"  # candidate precedes the conflicting event


class ConflictReason(str, Enum):
    INSUFFICIENT_TRAVEL_TIME = "insufficient_travel_time"
    MISSING_TRAVEL_TIME = "missing_travel_time"


class TravelConflict(BaseModel):
    """A violated travel constraint between the candidate and one assignment."""

    candidate: ScheduledAssignment
    conflicting_assignment: ScheduledAssignment
    required_hours: float | None  # None when missing data is rejected
    available_hours: float
    direction: ConflictDirection
    reason: ConflictReason = ConflictReason.INSUFFICIENT_TRAVEL_TIME
    used_default: bool = False

    model_config = {"frozen": True}

    @property
    def shortage_hours(self) -> float | None:
        if self.required_hours is None:
            return None
        return round(self.required_hours - self.available_hours, 2)

    @property
    def origin(self) -> ScheduledAssignment:
        """Assignment the resource travels from."""
        if self.direction == ConflictDirection.AFTER:
            return self.conflicting_assignment
        return self.candidate

    @property
    def destination(self) -> ScheduledAssignment:
        """Assignment the resource travels to."""
        if self.direction == ConflictDirection.AFTER:
            return self.candidate
        return self.conflicting_assignment

    def message(self) -> str:
        origin_city = self.origin.city_name or f"city {self.origin.city_id}"
        dest_city = self.destination.city_name or f"city {self.destination.city_id}"
        if self.reason == ConflictReason.MISSING_TRAVEL_TIME:
            return (
                f"No travel time recorded from {origin_city} to {dest_city}; "
                f"cannot confirm the resource can travel in time"
            )
        return (
            f"Cannot travel from {origin_city} ({self.origin.starts_at:%H:%M}) "
            f"to {dest_city} ({self.destination.starts_at:%H:%M}) in time. "
            f"Required: {self.required_hours:.1f} hours, "
            f"Available: {self.available_hours:.1f} hours"
        )


class FeasibilityVerdict(BaseModel):
    """
    Result of a travel feasibility check.

    ``missing_pairs`` lists city pairs that had no recorded travel time during
    the check, so callers can log them for backfilling even when feasible.
    """

    feasible: bool
    conflict: TravelConflict | None = None
    missing_pairs: list[CityPair] = Field(default_factory=list)
    checked_count: int = 0

    model_config = {"frozen": True}

    @classmethod
    def ok(cls, missing_pairs: list[CityPair] | None = None, checked_count: int = 0) -> "FeasibilityVerdict":
        return cls(feasible=True, missing_pairs=missing_pairs or [], checked_count=checked_count)

    @classmethod
    def infeasible(
        cls,
        conflict: TravelConflict,
        missing_pairs: list[CityPair] | None = None,
        checked_count: int = 0,
    ) -> "FeasibilityVerdict":
        return cls(
            feasible=False,
            conflict=conflict,
            missing_pairs=missing_pairs or [],
            checked_count=checked_count,
        )

    @property
    def required_hours(self) -> float | None:
        return self.conflict.required_hours if self.conflict else None

    @property
    def available_hours(self) -> float | None:
        return self.conflict.available_hours if self.conflict else None

    def to_error_payload(
        self,
        resource_type: str | None = None,
        resource_id: int | None = None,
    ) -> dict[str, Any]:
        """API error body for an infeasible verdict."""
        if self.conflict is None:
            raise ValueError("feasible verdicts have no error payload")

        conflict = self.conflict
        label = resource_type.upper() if resource_type else "Resource"
        return {
            "success": False,
            "message": f"{label} travel conflict: {conflict.message()}",
            "error_type": "travel_time_insufficient",
            "details": {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "required_travel_hours": conflict.required_hours,
                "available_hours": round(conflict.available_hours, 2),
                "shortage_hours": conflict.shortage_hours,
                "direction": conflict.direction.value,
                "reason": conflict.reason.value,
                "used_default_travel_time": conflict.used_default,
                "candidate": conflict.candidate.describe(),
                "conflicting_event": conflict.conflicting_assignment.describe(),
            },
        }
