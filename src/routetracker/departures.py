"""Scheduled departures inside the lookahead window."""

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, List, Optional, Union

from .models import Departure, Stop
from .schedule import Schedule
from .service_calendar import ServiceCalendar
from .table import Row

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD = timedelta(minutes=10)


def clock_offset(clock: Optional[str]) -> Optional[timedelta]:
    """
    Offset from service-day midnight for a GTFS clock string.

    Hours may run past 24 for trips that finish after midnight, so "25:10:00"
    is one day and seventy minutes. Seconds are optional.
    """
    if not clock:
        return None
    parts = str(clock).strip().split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        values = [int(part) for part in parts]
    except ValueError:
        return None
    hours, minutes = values[0], values[1]
    seconds = values[2] if len(values) == 3 else 0
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def project_clock(service_date: date, clock: Optional[str], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Wall-clock datetime of a GTFS clock string on a service date."""
    offset = clock_offset(clock)
    if offset is None:
        return None
    return datetime.combine(service_date, time(0), tzinfo=tz) + offset


def candidate_service_dates(start: datetime, end: datetime) -> List[date]:
    """Service dates whose trips could run between start and end."""
    # Yesterday's service can still be running after midnight
    day = start.date() - timedelta(days=1)
    dates = []
    while day <= end.date():
        dates.append(day)
        day += timedelta(days=1)
    return dates


def _stop_id(stop: Union[Stop, str]) -> str:
    return stop.stop_id if isinstance(stop, Stop) else str(stop)


def find_upcoming_departures(
    schedule: Schedule,
    route_short_name: str,
    origin: Union[Stop, str],
    destination: Union[Stop, str],
    now: datetime,
    lookahead: timedelta = DEFAULT_LOOKAHEAD,
    calendar: Optional[ServiceCalendar] = None,
) -> List[Departure]:
    """
    Find trips of a route leaving the origin stop between now and now + lookahead.

    Both window ends are inclusive. A trip only counts when its service runs on
    the service date the departure belongs to. Each departure carries the same
    trip's stop time at the destination, when the trip serves it.

    Args:
        schedule: Loaded static schedule.
        route_short_name: Rider-facing route code; trips of other routes that
            share the origin stop are ignored.
        origin: Origin Stop or stop_id.
        destination: Destination Stop or stop_id.
        now: Start of the window. Its tzinfo is applied to scheduled times.
        lookahead: Length of the window.
        calendar: Service calendar to use; built from the schedule if omitted.

    Returns:
        List of Departure objects in stop_times order.
    """
    if calendar is None:
        calendar = ServiceCalendar(schedule.calendar, schedule.calendar_dates)

    window_end = now + lookahead
    service_dates = candidate_service_dates(now, window_end)
    origin_id = _stop_id(origin)
    destination_id = _stop_id(destination)

    destination_times: Dict[str, Row] = {}
    for row in schedule.stop_times.filter(lambda r: r.get("stop_id") == destination_id):
        destination_times.setdefault(row.get("trip_id"), row)

    departures: List[Departure] = []
    for row in schedule.stop_times.filter(lambda r: r.get("stop_id") == origin_id):
        trip = schedule.trip(row.get("trip_id"))
        if trip is None:
            logger.debug(f"Stop time references unknown trip {row.get('trip_id')}")
            continue

        route = schedule.route(trip.get("route_id"))
        if route is None or route.get("route_short_name") != route_short_name:
            continue

        clock = row.get("departure_time") or row.get("arrival_time")
        for service_date in service_dates:
            scheduled = project_clock(service_date, clock, now.tzinfo)
            if scheduled is None:
                logger.debug(f"Unreadable clock time {clock!r} for trip {trip.get('trip_id')}")
                break
            if not now <= scheduled <= window_end:
                continue
            if not calendar.is_running(trip.get("service_id"), service_date):
                continue
            departures.append(
                Departure(
                    origin_stop_time=row,
                    destination_stop_time=destination_times.get(row.get("trip_id")),
                    route_id=trip.get("route_id"),
                    service_date=service_date,
                    scheduled_departure=scheduled,
                )
            )
            break

    logger.info(
        f"Found {len(departures)} departures of route {route_short_name} from stop "
        f"{origin_id} between {now:%H:%M} and {window_end:%H:%M}"
    )
    return departures
