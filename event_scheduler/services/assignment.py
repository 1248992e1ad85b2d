"""
Event Assignment Service.

Runs the travel feasibility check for every resource staffed on an event
before an event is created or rescheduled, and records the outcome in the
activity log.
"""

import logging
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from event_scheduler.config import SchedulerConfig
from event_scheduler.database.models import EventRecord
from event_scheduler.database.repository import (
    ActivityLogRepository,
    CityDistanceRepository,
    CityRepository,
    EventRepository,
    event_to_domain,
)
from event_scheduler.domain import (
    ActivityAction,
    CityNotFoundError,
    Event,
    EventDraft,
    EventNotFoundError,
    EventStatus,
    EventUpdate,
    FeasibilityVerdict,
    ResourceType,
    ScheduledAssignment,
    TravelTimeInsufficientError,
    describe_activity,
)

from .distance_graph import CityDistanceGraph
from .feasibility import TravelFeasibilityChecker

logger = logging.getLogger(__name__)


class ResourceVerdict(BaseModel):
    """Feasibility verdict for one staffed resource."""

    resource_type: ResourceType
    resource_id: int
    verdict: FeasibilityVerdict

    model_config = {"frozen": True}

    @property
    def feasible(self) -> bool:
        return self.verdict.feasible


class EventAssignmentService:
    """
    Service guarding event writes with the travel feasibility check.

    All reads for one check happen on the given session, so the checker sees
    one consistent snapshot. The session owner commits or rolls back.

    Usage:
        async with database.session() as session:
            service = EventAssignmentService(session, SchedulerConfig.from_env())
            event = await service.create_event(draft, user_id=1)
    """

    def __init__(self, session: AsyncSession, config: SchedulerConfig | None = None):
        self.session = session
        self.config = config or SchedulerConfig.from_env()
        self.cities = CityRepository(session)
        self.distances = CityDistanceRepository(session)
        self.events = EventRepository(session)
        self.activity = ActivityLogRepository(session)

    async def _load_graph(self) -> CityDistanceGraph:
        return CityDistanceGraph.from_distances(await self.distances.load_distances())

    async def check_event(
        self,
        draft: EventDraft,
        event_id: int | None = None,
    ) -> list[ResourceVerdict]:
        """
        Check every resource staffed on a (draft) event.

        Args:
            draft: Event city, date, time and staffing
            event_id: Id of the event being edited, excluded from schedules

        Returns:
            One verdict per staffed resource, in observer/sng/generator order
        """
        city = (await self.cities.get_many([draft.city_id])).get(draft.city_id)
        if city is None:
            raise CityNotFoundError(draft.city_id)
        for resource_type in ResourceType:
            # Unknown ids raise ResourceNotFoundError
            await self.events.resources.get_many(resource_type, draft.resource_ids(resource_type))

        checker = TravelFeasibilityChecker(
            await self._load_graph(),
            default_hours=self.config.effective_default_hours,
        )

        results = []
        for resource_type, resource_id in draft.assigned_resources():
            candidate = ScheduledAssignment(
                event_id=event_id,
                event_title=draft.title,
                city_id=draft.city_id,
                city_name=city.name,
                event_date=draft.event_date,
                event_time=draft.event_time,
                resource_type=resource_type,
                resource_id=resource_id,
            )
            existing = await self.events.get_resource_assignments(
                resource_type,
                resource_id,
                exclude_event_id=event_id,
            )
            verdict = checker.check(candidate, existing)

            if verdict.missing_pairs:
                logger.warning(
                    f"No travel time recorded for {len(verdict.missing_pairs)} city pair(s) "
                    f"while checking {resource_type.value} {resource_id}: "
                    f"{', '.join(str(p) for p in verdict.missing_pairs)}"
                )

            results.append(
                ResourceVerdict(
                    resource_type=resource_type,
                    resource_id=resource_id,
                    verdict=verdict,
                )
            )

        return results

    async def _reject_if_infeasible(
        self,
        results: list[ResourceVerdict],
        draft: EventDraft,
        event_id: int | None,
        user_id: int | None,
    ) -> None:
        failed = next((r for r in results if not r.feasible), None)
        if failed is None:
            return

        error = TravelTimeInsufficientError(
            failed.resource_type.value,
            failed.resource_id,
            failed.verdict,
        )
        logger.info(f"Rejected event '{draft.title}': {error.message}")

        await self.activity.log(
            action=ActivityAction.TRAVEL_TIME_REJECTED.value,
            description=describe_activity(
                ActivityAction.TRAVEL_TIME_REJECTED,
                "Event",
                label=draft.title,
                entity_id=event_id,
            ),
            model_type="Event",
            model_id=event_id,
            details=error.details,
            user_id=user_id,
        )
        # Nothing else was written yet; keep the audit entry when the caller rolls back
        await self.session.commit()
        raise error

    async def create_event(self, draft: EventDraft, user_id: int | None = None) -> Event:
        """
        Create an event after checking every staffed resource.

        Raises:
            CityNotFoundError: If the city does not exist
            ResourceNotFoundError: If a staffed resource does not exist
            TravelTimeInsufficientError: If a resource cannot travel in time
        """
        results = await self.check_event(draft)
        await self._reject_if_infeasible(results, draft, None, user_id)

        record = await self.events.create_event(draft, created_by=user_id)
        await self.activity.log(
            action=ActivityAction.CREATED.value,
            description=describe_activity(ActivityAction.CREATED, "Event", label=record.title),
            model_type="Event",
            model_id=record.id,
            details={"city_id": record.city_id, "resources": len(draft.assigned_resources())},
            user_id=user_id,
        )
        logger.info(f"Created event {record.id} '{record.title}'")
        return event_to_domain(record)

    async def update_event(
        self,
        event_id: int,
        changes: EventUpdate,
        user_id: int | None = None,
    ) -> Event:
        """
        Apply a partial update, re-checking travel when the schedule changed
        or a cancelled event is revived.

        Raises:
            EventNotFoundError: If the event does not exist
            CityNotFoundError: If the new city does not exist
            ResourceNotFoundError: If a staffed resource does not exist
            TravelTimeInsufficientError: If a resource cannot travel in time
        """
        record: EventRecord | None = await self.events.get_by_id(event_id)
        if record is None:
            raise EventNotFoundError(event_id)

        current = event_to_domain(record)
        # An explicit null only clears the description
        updates: dict[str, Any] = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        draft = EventDraft.model_validate(
            {**current.model_dump(exclude={"id"}), **updates}
        )

        # A cancelled event is off every schedule; reviving it puts its staffing back
        reactivated = (
            current.status == EventStatus.CANCELLED and draft.status != EventStatus.CANCELLED
        )
        if draft.status != EventStatus.CANCELLED and (changes.touches_schedule() or reactivated):
            results = await self.check_event(draft, event_id=event_id)
            await self._reject_if_infeasible(results, draft, event_id, user_id)

        await self.events.apply_draft(record, draft)
        await self.activity.log(
            action=ActivityAction.UPDATED.value,
            description=describe_activity(ActivityAction.UPDATED, "Event", label=record.title),
            model_type="Event",
            model_id=record.id,
            details={"changed": sorted(updates)},
            user_id=user_id,
        )
        logger.info(f"Updated event {record.id} ({', '.join(sorted(updates)) or 'no changes'})")
        return event_to_domain(record)

    async def get_event(self, event_id: int) -> Event:
        record = await self.events.get_by_id(event_id)
        if record is None:
            raise EventNotFoundError(event_id)
        return event_to_domain(record)
