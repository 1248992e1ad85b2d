"""
FastAPI application for the event scheduler.

Provides REST endpoints for:
- Cities and city-to-city travel times
- Staffing resources
- Event scheduling with travel feasibility checks
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
