"""Main route planner class."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .config import PlannerConfig
from .departures import find_upcoming_departures, project_clock
from .live import match_live_data, routes_match
from .models import UNAVAILABLE, Alert, Departure, Stop, TripResult
from .realtime_client import RealtimeClient
from .schedule import Schedule
from .service_calendar import ServiceCalendar
from .topology import resolve_route_stops
from .travel_time import calculate_travel_time

logger = logging.getLogger(__name__)


class RoutePlanner:
    """
    Plans single-route trips against the static schedule and live feeds.

    This class provides methods to:
    - Look up a route and list its stops in running order
    - Find departures between two stops in the next few minutes
    - Enrich them with live arrival times, vehicle positions and travel times
    - Get service alerts for the route
    """

    def __init__(
        self,
        schedule: Schedule,
        realtime: Optional[RealtimeClient] = None,
        config: Optional[PlannerConfig] = None,
    ):
        """
        Initialize the planner.

        Args:
            schedule: Loaded static schedule for the session.
            realtime: Client for the live feeds. Without one, results carry no live data.
            config: Lookahead window and timezone settings.
        """
        self.schedule = schedule
        self.realtime = realtime
        self.config = config or PlannerConfig()
        self.calendar = ServiceCalendar(schedule.calendar, schedule.calendar_dates)
        self._stops_by_route: Dict[str, List[Stop]] = {}

    def get_route(self, route_short_name: str) -> Dict[str, Any]:
        """
        Get a route by its short name.

        Raises:
            ValueError: If no route has that short name.
        """
        route = self.schedule.route_by_short_name(route_short_name)
        if route is None:
            raise ValueError(f"No route found matching '{route_short_name}'")
        return route

    def get_route_stops(self, route_short_name: str) -> List[Stop]:
        """Stops of a route in running order, outbound then inbound."""
        if route_short_name not in self._stops_by_route:
            self._stops_by_route[route_short_name] = resolve_route_stops(route_short_name, self.schedule)
        return self._stops_by_route[route_short_name]

    def get_alerts(self, route_short_name: str) -> List[Alert]:
        """
        Get service alerts for a route.

        Args:
            route_short_name: Rider-facing route code.

        Returns:
            List of Alert objects, empty when the route or the alerts feed is unavailable.
        """
        route = self.schedule.route_by_short_name(route_short_name)
        if route is None or self.realtime is None:
            return []

        alerts = self.realtime.get_alerts() or []
        matching = []
        seen_messages = set()
        for alert in alerts:
            if routes_match(route["route_id"], alert.route_id) and alert.message not in seen_messages:
                seen_messages.add(alert.message)
                matching.append(alert)
        return matching

    def plan_trips(
        self,
        route_short_name: str,
        origin: Union[Stop, str],
        destination: Union[Stop, str],
        when: datetime,
    ) -> List[TripResult]:
        """
        Get departures from origin to destination in the lookahead window after when.

        Args:
            route_short_name: Rider-facing route code.
            origin: Origin Stop or stop_id.
            destination: Destination Stop or stop_id.
            when: Departure time. A naive datetime is taken to be in the configured timezone.

        Returns:
            List of TripResult rows in schedule order.
        """
        if when.tzinfo is None:
            when = when.replace(tzinfo=self.config.tzinfo)

        departures = find_upcoming_departures(
            self.schedule,
            route_short_name,
            origin,
            destination,
            when,
            lookahead=self.config.lookahead,
            calendar=self.calendar,
        )
        if not departures:
            return []

        trip_updates = vehicle_positions = None
        if self.realtime is not None:
            trip_updates = self.realtime.get_trip_updates()
            vehicle_positions = self.realtime.get_vehicle_positions()

        return [
            self._build_result(departure, trip_updates, vehicle_positions, when)
            for departure in departures
        ]

    def _build_result(self, departure: Departure, trip_updates, vehicle_positions, when: datetime) -> TripResult:
        origin_row = departure.origin_stop_time
        trip = self.schedule.trip(origin_row.get("trip_id")) or {}
        route = self.schedule.route(departure.route_id) or {}

        live = match_live_data(
            trip_updates,
            vehicle_positions,
            origin_row,
            departure.route_id,
            service_date=departure.service_date,
            tz=when.tzinfo,
        )

        start_clock = origin_row.get("arrival_time") or origin_row.get("departure_time")
        travel_time = None
        if departure.destination_stop_time is not None:
            end_row = departure.destination_stop_time
            end_clock = end_row.get("arrival_time") or end_row.get("departure_time")
            travel_time = calculate_travel_time(start_clock, end_clock)

        scheduled = project_clock(departure.service_date, start_clock, when.tzinfo)

        return TripResult(
            route_short_name=route.get("route_short_name") or UNAVAILABLE,
            route_long_name=route.get("route_long_name") or UNAVAILABLE,
            service_id=trip.get("service_id") or UNAVAILABLE,
            trip_id=trip.get("trip_id") or UNAVAILABLE,
            headsign=trip.get("trip_headsign") or UNAVAILABLE,
            scheduled_arrival_time=scheduled.strftime("%H:%M") if scheduled else UNAVAILABLE,
            live_arrival_time=live.live_arrival_time,
            live_position=live.live_position,
            travel_time=travel_time or UNAVAILABLE,
        )
