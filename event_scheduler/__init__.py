"""Sports event scheduling backend with city travel-time feasibility checks."""
