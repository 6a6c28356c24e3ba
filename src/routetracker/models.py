"""Data models for the route tracker."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

# Shown wherever a value could not be determined.
UNAVAILABLE = "N/A"


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Stop:
    """A physical stop on a route."""
    stop_id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Stop":
        return cls(
            stop_id=str(row.get("stop_id", "")),
            name=str(row.get("stop_name", "")),
            latitude=_to_float(row.get("stop_lat")),
            longitude=_to_float(row.get("stop_lon")),
        )


@dataclass(frozen=True)
class StopTimeUpdate:
    """Predicted arrival/departure at one stop of a live trip."""
    stop_id: str
    arrival_time: Optional[int] = None  # Unix timestamp
    departure_time: Optional[int] = None  # Unix timestamp

    @property
    def predicted_time(self) -> Optional[int]:
        """Arrival prediction, falling back to departure."""
        return self.arrival_time if self.arrival_time is not None else self.departure_time


@dataclass(frozen=True)
class TripUpdate:
    """Real-time predictions for one trip."""
    trip_id: Optional[str]
    route_id: Optional[str]
    stop_time_updates: List[StopTimeUpdate] = field(default_factory=list)

    def update_for_stop(self, stop_id: str) -> Optional[StopTimeUpdate]:
        for update in self.stop_time_updates:
            if update.stop_id == stop_id:
                return update
        return None


@dataclass(frozen=True)
class VehiclePosition:
    """Current location of the vehicle running a trip."""
    trip_id: Optional[str]
    route_id: Optional[str]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    vehicle_id: Optional[str] = None


@dataclass(frozen=True)
class Alert:
    """Represents a service alert for a route."""
    route_id: str
    message: str
    severity: str  # e.g., "SEVERE", "WARNING", "INFO"


@dataclass(frozen=True)
class LiveData:
    """Live enrichment for one scheduled departure."""
    live_arrival_time: str = UNAVAILABLE
    live_position: str = UNAVAILABLE


@dataclass(frozen=True)
class Departure:
    """A scheduled departure from the origin stop inside the lookahead window."""
    origin_stop_time: Dict[str, Any]
    destination_stop_time: Optional[Dict[str, Any]]
    route_id: str
    service_date: date
    scheduled_departure: datetime


@dataclass
class TripResult:
    """One row of planner output, ready for display."""
    route_short_name: str = UNAVAILABLE
    route_long_name: str = UNAVAILABLE
    service_id: str = UNAVAILABLE
    trip_id: str = UNAVAILABLE
    headsign: str = UNAVAILABLE
    scheduled_arrival_time: str = UNAVAILABLE
    live_arrival_time: str = UNAVAILABLE
    live_position: str = UNAVAILABLE
    travel_time: str = UNAVAILABLE

    def as_row(self) -> Dict[str, str]:
        return {
            "Route Short Name": self.route_short_name,
            "Route Long Name": self.route_long_name,
            "Service ID": self.service_id,
            "Trip ID": self.trip_id,
            "Heading Sign": self.headsign,
            "Scheduled Arrival Time": self.scheduled_arrival_time,
            "Live Arrival Time": self.live_arrival_time,
            "Live Position": self.live_position,
            "Estimated Travel Time": self.travel_time,
        }
