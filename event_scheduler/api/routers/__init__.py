"""API routers."""

from . import cities, distances, events, resources

__all__ = ["cities", "distances", "events", "resources"]
