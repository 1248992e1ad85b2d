"""
Core services for the event scheduler.

Business logic layer containing:
- Distance graph: symmetric city-to-city travel time lookup
- Feasibility: travel-time check for staffing resources
- Assignment: event create/update guarded by the feasibility check
- Distance audit: missing-distance detection, backfill and matrix
"""

from .distance_graph import CityDistanceGraph
from .feasibility import TravelFeasibilityChecker, check_feasibility
from .assignment import EventAssignmentService, ResourceVerdict
from .distance_audit import DistanceAuditService

__all__ = [
    "CityDistanceGraph",
    "TravelFeasibilityChecker",
    "check_feasibility",
    "EventAssignmentService",
    "ResourceVerdict",
    "DistanceAuditService",
]
