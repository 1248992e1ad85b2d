"""
Domain errors for the event scheduler.

Every error carries an ``error_type`` tag and a ``details`` dict so the API
layer can turn it into a JSON error body without knowing the concrete class.
"""

from typing import Any


class SchedulerError(Exception):
    """Base class for all scheduler errors."""

    error_type: str = "scheduler_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidEdgeError(SchedulerError):
    """A city distance edge is invalid (self-loop or out-of-range hours)."""

    error_type = "invalid_edge"


class InvalidInputError(SchedulerError):
    """Malformed date/time or a missing city reference."""

    error_type = "invalid_input"


class CityNotFoundError(SchedulerError):
    """Referenced city does not exist."""

    error_type = "city_not_found"

    def __init__(self, city_id: int):
        super().__init__(f"City {city_id} not found", {"city_id": city_id})
        self.city_id = city_id


class EventNotFoundError(SchedulerError):
    """Referenced event does not exist."""

    error_type = "event_not_found"

    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} not found", {"event_id": event_id})
        self.event_id = event_id


class ResourceNotFoundError(SchedulerError):
    """Referenced observer, SNG unit or generator does not exist."""

    error_type = "resource_not_found"

    def __init__(self, resource_type: str, resource_ids: list[int]):
        ids = ", ".join(str(i) for i in resource_ids)
        super().__init__(
            f"{resource_type.upper()} not found: {ids}",
            {"resource_type": resource_type, "resource_ids": list(resource_ids)},
        )
        self.resource_type = resource_type
        self.resource_ids = list(resource_ids)


class TravelTimeInsufficientError(SchedulerError):
    """
    Raised by the assignment workflow when a resource cannot make it in time.

    Wraps the infeasible verdict of the first resource that failed, together
    with the resource identity, so the API can report the numbers.
    """

    error_type = "travel_time_insufficient"

    def __init__(self, resource_type: str, resource_id: int, verdict: Any):
        payload = verdict.to_error_payload(resource_type=resource_type, resource_id=resource_id)
        super().__init__(payload["message"], payload["details"])
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.verdict = verdict
