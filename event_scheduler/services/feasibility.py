"""
Travel Feasibility Checker.

Decides whether a staffing resource (observer, SNG unit or generator) can
attend a candidate event given its other scheduled assignments and the
travel times between cities.

The check is a pure function of its inputs: callers load the resource's
schedule and a distance graph snapshot, then act on the verdict.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from event_scheduler.domain import (
    CityPair,
    ConflictDirection,
    ConflictReason,
    FeasibilityVerdict,
    InvalidInputError,
    ScheduledAssignment,
    TravelConflict,
)

from .distance_graph import CityDistanceGraph


AssignmentLike = ScheduledAssignment | Mapping[str, Any]


def _coerce_default_hours(default_hours: float | None) -> float | None:
    if default_hours is None:
        return None
    try:
        value = float(default_hours)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Default travel hours must be a number, got {default_hours!r}")
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(
            "Default travel hours must be a non-negative number",
            {"default_hours": default_hours},
        )
    return value


def _severity(conflict: TravelConflict, index: int) -> tuple:
    # Lower sorts first: rejected missing data, then largest shortage,
    # then the earliest conflicting assignment, then input order.
    if conflict.reason == ConflictReason.MISSING_TRAVEL_TIME:
        return (0, 0.0, conflict.conflicting_assignment.starts_at, index)
    return (1, -conflict.shortage_hours, conflict.conflicting_assignment.starts_at, index)


def check_feasibility(
    candidate: AssignmentLike,
    existing_assignments: Iterable[AssignmentLike],
    distance_graph: CityDistanceGraph,
    default_hours: float | None,
) -> FeasibilityVerdict:
    """
    Check a candidate assignment against a resource's other assignments.

    Same-city pairs are always feasible. For different cities the time
    between the two events must be at least the recorded travel time, or
    ``default_hours`` when none is recorded. Exactly enough time is feasible.

    All assignments are evaluated; when several are violated the verdict
    cites the one with the largest shortage.

    Args:
        candidate: The new or edited event assignment
        existing_assignments: The resource's other assignments. An entry with
            the candidate's ``event_id`` is skipped.
        distance_graph: Travel time lookup
        default_hours: Travel time assumed for unrecorded pairs. None treats
            unrecorded pairs as infeasible.

    Returns:
        Feasibility verdict

    Raises:
        InvalidInputError: If any date/time is malformed or a city is missing
    """
    # Validate everything before comparing anything
    target = ScheduledAssignment.coerce(candidate)
    others = [ScheduledAssignment.coerce(a) for a in existing_assignments]
    fallback = _coerce_default_hours(default_hours)

    violations: list[tuple[tuple, TravelConflict]] = []
    missing: list[CityPair] = []
    checked = 0

    for index, other in enumerate(others):
        if target.event_id is not None and other.event_id == target.event_id:
            continue
        checked += 1

        if other.city_id == target.city_id:
            continue

        delta_hours = abs((target.starts_at - other.starts_at).total_seconds()) / 3600
        direction = (
            ConflictDirection.AFTER
            if target.starts_at >= other.starts_at
            else ConflictDirection.BEFORE
        )

        required = distance_graph.travel_time(other.city_id, target.city_id)
        used_default = False
        if required is None:
            pair = CityPair.of(other.city_id, target.city_id)
            if pair not in missing:
                missing.append(pair)
            if fallback is None:
                conflict = TravelConflict(
                    candidate=target,
                    conflicting_assignment=other,
                    required_hours=None,
                    available_hours=delta_hours,
                    direction=direction,
                    reason=ConflictReason.MISSING_TRAVEL_TIME,
                )
                violations.append((_severity(conflict, index), conflict))
                continue
            required = fallback
            used_default = True

        if delta_hours >= required:
            continue

        conflict = TravelConflict(
            candidate=target,
            conflicting_assignment=other,
            required_hours=required,
            available_hours=delta_hours,
            direction=direction,
            used_default=used_default,
        )
        violations.append((_severity(conflict, index), conflict))

    if not violations:
        return FeasibilityVerdict.ok(missing_pairs=missing, checked_count=checked)

    _, worst = min(violations, key=lambda v: v[0])
    return FeasibilityVerdict.infeasible(worst, missing_pairs=missing, checked_count=checked)


class TravelFeasibilityChecker:
    """
    Checker bound to one distance graph snapshot and a missing-data policy.

    Usage:
        checker = TravelFeasibilityChecker(graph, default_hours=5.0)
        verdict = checker.check(candidate, existing)
        if not verdict.feasible:
            raise TravelTimeInsufficientError("observer", 7, verdict)
    """

    def __init__(self, distance_graph: CityDistanceGraph, default_hours: float | None = 5.0):
        self.distance_graph = distance_graph
        self.default_hours = _coerce_default_hours(default_hours)

    def check(
        self,
        candidate: AssignmentLike,
        existing_assignments: Iterable[AssignmentLike],
    ) -> FeasibilityVerdict:
        return check_feasibility(
            candidate,
            existing_assignments,
            self.distance_graph,
            self.default_hours,
        )
