"""Route Tracker - single-route trip planner over GTFS static and realtime feeds."""

__version__ = "0.1.0"

from .config import PlannerConfig
from .gtfs_loader import GTFSLoader
from .models import Alert, Departure, LiveData, Stop, TripResult, UNAVAILABLE
from .planner import RoutePlanner
from .realtime_client import RealtimeClient
from .schedule import Schedule
from .table import Table

__all__ = [
    "RoutePlanner",
    "GTFSLoader",
    "RealtimeClient",
    "PlannerConfig",
    "Schedule",
    "Table",
    "Stop",
    "Departure",
    "LiveData",
    "TripResult",
    "Alert",
    "UNAVAILABLE",
]
