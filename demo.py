#!/usr/bin/env python3
"""
Event Scheduler Demo.

Demonstrates the core capabilities:
1. City distance graph
2. Travel feasibility checks
3. Event creation guarded by the check
4. Missing distance audit and backfill
"""

import asyncio
from dataclasses import replace

from event_scheduler.config import SchedulerConfig, setup_logging
from event_scheduler.database import CityRepository, CityDistanceRepository, Database, ResourceRepository
from event_scheduler.domain import (
    EventDraft,
    ResourceType,
    ScheduledAssignment,
    TravelTimeInsufficientError,
)
from event_scheduler.services import (
    CityDistanceGraph,
    DistanceAuditService,
    EventAssignmentService,
    TravelFeasibilityChecker,
)


def print_section(title: str):
    """Print a section header."""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)


async def main():
    # In-memory database; the policy settings still come from the environment
    config = replace(SchedulerConfig.from_env(), database_url="sqlite+aiosqlite:///:memory:")
    setup_logging("WARNING")

    print()
    print("*" * 60)
    print("*     Sports Event Scheduler: Travel Feasibility Demo     *")
    print("*" * 60)

    # 1. Distance graph
    print_section("1. City Distance Graph")

    graph = CityDistanceGraph(city_ids=[1, 2, 3])
    graph.upsert_edge(1, 2, 1.5)
    _, created = graph.upsert_edge(2, 1, 1.5)
    print(f"Riyadh <-> Jeddah: {graph.travel_time(2, 1)} hours (second upsert created: {created})")
    print(f"Riyadh <-> Riyadh: {graph.travel_time(1, 1)} hours")
    missing = graph.find_missing_pairs(graph.city_ids)
    print(f"Missing pairs: {', '.join(str(p) for p in missing)}")

    # 2. Feasibility checks
    print_section("2. Travel Feasibility")

    checker = TravelFeasibilityChecker(graph, default_hours=config.default_travel_hours)
    jeddah = ScheduledAssignment(
        event_id=1, city_id=2, city_name="Jeddah", event_date="2025-01-01", event_time="10:00"
    )
    dammam = ScheduledAssignment(
        event_id=2, city_id=3, city_name="Dammam", event_date="2025-01-01", event_time="09:00"
    )

    scenarios = [
        ("Riyadh 12:00 after Jeddah 10:00", {"city_id": 1, "event_date": "2025-01-01", "event_time": "12:00"}, [jeddah]),
        ("Riyadh 11:00 after Jeddah 10:00", {"city_id": 1, "event_date": "2025-01-01", "event_time": "11:00"}, [jeddah]),
        ("Riyadh 12:00 after Dammam 09:00", {"city_id": 1, "event_date": "2025-01-01", "event_time": "12:00"}, [dammam]),
        ("Jeddah 10:00 with Jeddah 10:00", {"city_id": 2, "event_date": "2025-01-01", "event_time": "10:00"}, [jeddah]),
    ]
    for label, candidate, existing in scenarios:
        verdict = checker.check(candidate, existing)
        if verdict.feasible:
            print(f"  [OK      ] {label}")
        else:
            conflict = verdict.conflict
            source = "default" if conflict.used_default else "recorded"
            print(f"  [CONFLICT] {label}")
            print(
                f"             Required: {conflict.required_hours:.1f} h ({source}), "
                f"Available: {conflict.available_hours:.1f} h"
            )

    # 3. Event workflow on the database
    print_section("3. Event Creation")

    database = Database(config)
    await database.create_tables()
    async with database.session() as session:
        cities = CityRepository(session)
        riyadh_id = (await cities.create("Riyadh")).id
        jeddah_id = (await cities.create("Jeddah")).id
        await cities.create("Dammam")
        await CityDistanceRepository(session).upsert(riyadh_id, jeddah_id, 1.5)
        observer_id = (await ResourceRepository(session).create(ResourceType.OBSERVER, "OB-01")).id

    async with database.session() as session:
        service = EventAssignmentService(session, config)
        event = await service.create_event(
            EventDraft(
                title="Al-Ittihad vs Al-Ahli",
                city_id=jeddah_id,
                event_date="2025-01-01",
                event_time="10:00",
                observer_ids=[observer_id],
            )
        )
        print(f"Created event {event.id}: {event.title} ({event.event_time:%H:%M})")

    try:
        async with database.session() as session:
            service = EventAssignmentService(session, config)
            await service.create_event(
                EventDraft(
                    title="Al-Hilal vs Al-Nassr",
                    city_id=riyadh_id,
                    event_date="2025-01-01",
                    event_time="11:00",
                    observer_ids=[observer_id],
                )
            )
    except TravelTimeInsufficientError as e:
        print(f"Rejected: {e.message}")
        print(f"Shortage: {e.details['shortage_hours']} hours")

    # 4. Distance audit
    print_section("4. Missing Distance Audit")

    async with database.session() as session:
        audit = DistanceAuditService(session, config)
        report = await audit.fill_missing(dry_run=True)
        print(f"Missing pairs: {len(report.missing)}")
        for item in report.missing:
            print(f"  {item.from_city_name} <-> {item.to_city_name}")

        report = await audit.fill_missing()
        print(f"Created {report.created} distances with {report.default_hours} hours")

        matrix = await audit.matrix()
        print()
        print("          " + "".join(f"{c.name:>10}" for c in matrix.cities))
        for city, row in zip(matrix.cities, matrix.rows):
            print(f"{city.name:>10}" + "".join(f"{h:>10.2f}" for h in row))

    await database.dispose()

    print()
    print("=" * 60)
    print("  Demo Complete!")
    print("=" * 60)
    print()
    print("To run the API server:")
    print("  uvicorn event_scheduler.api:app --reload")
    print()
    print("API Documentation at: http://localhost:8000/docs")
    print()


if __name__ == "__main__":
    asyncio.run(main())
