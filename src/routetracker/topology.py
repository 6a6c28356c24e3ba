"""Ordered stop list for a route."""

import logging
from typing import List

from .models import Stop
from .schedule import Schedule

logger = logging.getLogger(__name__)

OUTBOUND = "0"
INBOUND = "1"


def _direction(row) -> str:
    # direction_id is optional in GTFS; trips without one count as outbound
    value = str(row.get("direction_id", "")).strip()
    return value or OUTBOUND


def resolve_route_stops(route_short_name: str, schedule: Schedule) -> List[Stop]:
    """
    Derive the distinct stops of a route in running order.

    Outbound stops come first, then inbound, each ordered by stop_sequence and
    deduplicated by stop_id. A loop route whose last stop repeats the first
    loses the repeat.

    Args:
        route_short_name: Rider-facing route code (e.g., "66").
        schedule: Loaded static schedule.

    Returns:
        List of Stop objects; empty for an unknown route or a route with no trips.
    """
    route = schedule.route_by_short_name(route_short_name)
    if route is None:
        logger.info(f"No route info found for route {route_short_name}")
        return []

    route_trips = schedule.trips.filter(lambda row: row.get("route_id") == route["route_id"])
    logger.debug(f"Found {len(route_trips)} trips for route {route_short_name}")
    if not len(route_trips):
        return []

    stop_times = (
        schedule.stop_times.join(route_trips, "trip_id")
        .join(schedule.stops, "stop_id")
        .select(["stop_id", "stop_name", "stop_lat", "stop_lon", "stop_sequence", "direction_id"])
    )

    # The per-direction filters below keep stop_sequence order within each direction
    ordered = stop_times.sort("stop_sequence")

    outbound = ordered.filter(lambda row: _direction(row) == OUTBOUND).distinct("stop_id")
    inbound = ordered.filter(lambda row: _direction(row) == INBOUND).distinct("stop_id")
    logger.debug(f"Outbound stops: {len(outbound)}, inbound stops: {len(inbound)}")

    combined = [Stop.from_row(row) for row in list(outbound) + list(inbound)]
    if len(combined) >= 2 and combined[0].stop_id == combined[-1].stop_id:
        combined.pop()

    return combined
