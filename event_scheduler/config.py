"""Configuration for the event scheduler."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./event_scheduler.db"

MISSING_DISTANCE_POLICIES = ("default", "reject")


@dataclass
class SchedulerConfig:
    """Runtime configuration."""

    database_url: str = DEFAULT_DATABASE_URL
    default_travel_hours: float = 5.0  # Assumed travel time for unrecorded city pairs
    missing_distance_policy: str = "default"  # "default" or "reject"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.missing_distance_policy not in MISSING_DISTANCE_POLICIES:
            raise ValueError(
                f"missing_distance_policy must be one of {MISSING_DISTANCE_POLICIES}, "
                f"got {self.missing_distance_policy!r}"
            )
        if self.default_travel_hours < 0:
            raise ValueError("default_travel_hours cannot be negative")

    @property
    def effective_default_hours(self) -> float | None:
        """Fallback handed to the feasibility check (None rejects missing data)."""
        if self.missing_distance_policy == "reject":
            return None
        return self.default_travel_hours

    @classmethod
    def from_env(cls) -> "SchedulerConfig":
        """Load configuration from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            default_travel_hours=float(os.getenv("DEFAULT_TRAVEL_HOURS", "5")),
            missing_distance_policy=os.getenv("MISSING_DISTANCE_POLICY", "default").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def setup_logging(level: str | int = "INFO") -> None:
    """Configure root logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
