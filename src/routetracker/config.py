"""Runtime configuration for the route tracker."""

import os
from dataclasses import dataclass
from datetime import timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Australia/Brisbane"

# Local GTFS-realtime proxy serving the SEQ feeds as JSON
DEFAULT_FEED_BASE = "http://127.0.0.1:5343/gtfs/seq"


@dataclass(frozen=True)
class PlannerConfig:
    """
    Settings shared by the loader, the realtime client and the planner.

    Built once per session and passed explicitly; nothing reads it globally.
    """

    static_data_dir: str = "static-data"
    static_data_url: Optional[str] = None
    trip_updates_url: str = f"{DEFAULT_FEED_BASE}/trip_updates.json"
    vehicle_positions_url: str = f"{DEFAULT_FEED_BASE}/vehicle_positions.json"
    alerts_url: str = f"{DEFAULT_FEED_BASE}/alerts.json"
    cache_dir: str = "cached-data"
    cache_ttl: float = 300  # seconds a cached feed is considered fresh
    request_timeout: float = 10
    lookahead_minutes: int = 10
    timezone: str = DEFAULT_TIMEZONE

    @property
    def lookahead(self) -> timedelta:
        return timedelta(minutes=self.lookahead_minutes)

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """Build a config from ROUTETRACKER_* environment variables, falling back to defaults."""
        defaults = cls()
        env = os.environ.get
        return cls(
            static_data_dir=env("ROUTETRACKER_STATIC_DIR", defaults.static_data_dir),
            static_data_url=env("ROUTETRACKER_STATIC_URL") or None,
            trip_updates_url=env("ROUTETRACKER_TRIP_UPDATES_URL", defaults.trip_updates_url),
            vehicle_positions_url=env(
                "ROUTETRACKER_VEHICLE_POSITIONS_URL", defaults.vehicle_positions_url
            ),
            alerts_url=env("ROUTETRACKER_ALERTS_URL", defaults.alerts_url),
            cache_dir=env("ROUTETRACKER_CACHE_DIR", defaults.cache_dir),
            cache_ttl=float(env("ROUTETRACKER_CACHE_TTL", defaults.cache_ttl)),
            request_timeout=float(env("ROUTETRACKER_REQUEST_TIMEOUT", defaults.request_timeout)),
            lookahead_minutes=int(env("ROUTETRACKER_LOOKAHEAD_MINUTES", defaults.lookahead_minutes)),
            timezone=env("ROUTETRACKER_TIMEZONE", defaults.timezone),
        )
