"""Loaded static schedule for one session."""

from typing import Any, Dict, Optional

from .table import Row, Table


class Schedule:
    """
    The six static GTFS tables plus first-occurrence lookups over them.

    Tables are treated as read-only after construction.
    """

    def __init__(
        self,
        routes: Table,
        stops: Table,
        stop_times: Table,
        trips: Table,
        calendar: Optional[Table] = None,
        calendar_dates: Optional[Table] = None,
    ):
        self.routes = routes
        self.stops = stops
        self.stop_times = stop_times
        self.trips = trips
        self.calendar = calendar if calendar is not None else Table()
        self.calendar_dates = calendar_dates if calendar_dates is not None else Table()

        self._routes_by_id: Dict[Any, Row] = routes.index_by("route_id")
        self._routes_by_short_name: Dict[Any, Row] = routes.index_by("route_short_name")
        self._trips_by_id: Dict[Any, Row] = trips.index_by("trip_id")

    def route_by_short_name(self, short_name: str) -> Optional[Row]:
        return self._routes_by_short_name.get(short_name)

    def route(self, route_id: str) -> Optional[Row]:
        return self._routes_by_id.get(route_id)

    def trip(self, trip_id: str) -> Optional[Row]:
        return self._trips_by_id.get(trip_id)

    def __repr__(self) -> str:
        return (
            f"Schedule(routes={len(self.routes)}, stops={len(self.stops)}, "
            f"trips={len(self.trips)}, stop_times={len(self.stop_times)})"
        )
