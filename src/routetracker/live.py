"""Correlates scheduled stop times with real-time trip updates and vehicle positions."""

import logging
from datetime import date, datetime, tzinfo
from typing import Any, Dict, Optional, Sequence
from zoneinfo import ZoneInfo

from .config import DEFAULT_TIMEZONE
from .departures import project_clock
from .models import UNAVAILABLE, LiveData, TripUpdate, VehiclePosition

logger = logging.getLogger(__name__)


def routes_match(static_route_id: Optional[str], realtime_route_id: Optional[str]) -> bool:
    """
    Compare route ids on the part before the first hyphen.

    Static feeds append variant suffixes (e.g. "66-3734") that the realtime feed
    may omit or number differently.
    """
    if not static_route_id or not realtime_route_id:
        return False
    return static_route_id.split("-", 1)[0] == realtime_route_id.split("-", 1)[0]


def format_clock(timestamp: int, tz: tzinfo) -> str:
    """Local HH:MM for a Unix timestamp."""
    return datetime.fromtimestamp(timestamp, tz).strftime("%H:%M")


def _format_coordinate(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def format_position(position: VehiclePosition) -> Optional[str]:
    if position.latitude is None or position.longitude is None:
        return None
    return f"{_format_coordinate(position.latitude)}, {_format_coordinate(position.longitude)}"


def _closest_update(
    candidates: Sequence[TripUpdate],
    stop_id: str,
    scheduled: Optional[datetime],
) -> TripUpdate:
    if scheduled is None or len(candidates) == 1:
        return candidates[0]

    target = scheduled.timestamp()

    def distance(update: TripUpdate) -> float:
        predicted = update.update_for_stop(stop_id).predicted_time
        return abs(predicted - target) if predicted is not None else float("inf")

    # min() keeps the first of equally close candidates
    return min(candidates, key=distance)


def match_live_data(
    trip_updates: Optional[Sequence[TripUpdate]],
    vehicle_positions: Optional[Sequence[VehiclePosition]],
    stop_time: Dict[str, Any],
    route_id: str,
    trip_id: Optional[str] = None,
    service_date: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> LiveData:
    """
    Find the live arrival time and vehicle position for a scheduled stop time.

    Trip updates are narrowed to those on a matching route that predict the
    stop, and to trip_id when given. When several remain, the one predicted
    closest to the stop's scheduled arrival on service_date is used.

    Args:
        trip_updates: Parsed trip-update feed, or None if unavailable.
        vehicle_positions: Parsed vehicle-position feed, or None if unavailable.
        stop_time: Static stop_times record for the stop being queried.
        route_id: Static route id of the scheduled trip.
        trip_id: Optional exact trip id to require.
        service_date: Service date the stop time belongs to.
        tz: Timezone for displayed times; defaults to DEFAULT_TIMEZONE.

    Returns:
        LiveData with "N/A" for anything that could not be matched.
    """
    if trip_updates is None or vehicle_positions is None:
        logger.info("No live data available")
        return LiveData()

    tz = tz or ZoneInfo(DEFAULT_TIMEZONE)
    stop_id = stop_time.get("stop_id")
    logger.debug(f"Matching live data for route {route_id}, stop {stop_id}")

    candidates = [
        update for update in trip_updates
        if routes_match(route_id, update.route_id) and update.update_for_stop(stop_id) is not None
    ]
    if trip_id is not None:
        candidates = [update for update in candidates if update.trip_id == trip_id]

    if not candidates:
        logger.debug(f"No relevant trip updates found for route {route_id}")
        return LiveData()

    scheduled = None
    if service_date is not None:
        clock = stop_time.get("arrival_time") or stop_time.get("departure_time")
        scheduled = project_clock(service_date, clock, tz)

    chosen = _closest_update(candidates, stop_id, scheduled)
    logger.debug(f"Closest trip update: {chosen.trip_id}")

    live_arrival_time = UNAVAILABLE
    predicted = chosen.update_for_stop(stop_id).predicted_time
    if predicted is not None:
        try:
            live_arrival_time = format_clock(predicted, tz)
        except (OverflowError, OSError, ValueError) as e:
            logger.debug(f"Unusable predicted time {predicted} for trip {chosen.trip_id}: {e}")

    live_position = UNAVAILABLE
    for position in vehicle_positions:
        if routes_match(route_id, position.route_id) and position.trip_id == chosen.trip_id:
            live_position = format_position(position) or UNAVAILABLE
            break
    else:
        logger.debug(f"No matching vehicle position found for trip {chosen.trip_id}")

    return LiveData(live_arrival_time=live_arrival_time, live_position=live_position)
