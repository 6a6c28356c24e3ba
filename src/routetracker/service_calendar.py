"""Service calendar: which services run on which dates."""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from .table import Row, Table

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# calendar_dates exception_type; "2" removes the service for the day
SERVICE_ADDED = "1"


def date_key(day: date) -> str:
    """Compact GTFS date string, e.g. 20240829."""
    return day.strftime("%Y%m%d")


def parse_gtfs_date(value: Any) -> Optional[date]:
    try:
        return datetime.strptime(str(value).strip(), "%Y%m%d").date()
    except ValueError:
        return None


class ServiceCalendar:
    """
    Decides whether a service operates on a date.

    A calendar_dates exception for the service and date wins outright;
    otherwise the weekly calendar row and its validity range decide.
    """

    def __init__(self, calendar: Table, calendar_dates: Optional[Table] = None):
        self._weekly: Dict[Any, Row] = calendar.index_by("service_id")
        self._exceptions: Dict[Tuple[str, str], Row] = {}
        for row in calendar_dates if calendar_dates is not None else Table():
            key = (str(row.get("service_id")), str(row.get("date")).strip())
            self._exceptions.setdefault(key, row)

    def is_running(self, service_id: str, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()

        exception = self._exceptions.get((str(service_id), date_key(day)))
        if exception is not None:
            return str(exception.get("exception_type")).strip() == SERVICE_ADDED

        weekly = self._weekly.get(service_id)
        if weekly is None:
            logger.debug(f"No calendar entry for service {service_id}")
            return False

        start = parse_gtfs_date(weekly.get("start_date"))
        end = parse_gtfs_date(weekly.get("end_date"))
        if start is None or end is None:
            logger.debug(f"Unreadable date range for service {service_id}")
            return False

        weekday = WEEKDAYS[day.weekday()]
        return start <= day <= end and str(weekly.get(weekday)).strip() == "1"
