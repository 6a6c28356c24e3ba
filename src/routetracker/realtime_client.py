"""GTFS-Realtime feed fetcher and parser."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests
from google.protobuf.json_format import MessageToDict
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from .config import PlannerConfig
from .models import Alert, StopTimeUpdate, TripUpdate, VehiclePosition

logger = logging.getLogger(__name__)


def _field(record: Any, camel: str, snake: Optional[str] = None) -> Any:
    """Read a feed field by its JSON (camelCase) or proto (snake_case) name."""
    if not isinstance(record, dict):
        return None
    value = record.get(camel)
    if value is None and snake:
        value = record.get(snake)
    return value


def _to_int(value: Any) -> Optional[int]:
    # JSON renderings of int64 fields arrive as strings
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_translation(text: Any) -> str:
    translations = _field(text, "translation") or []
    if translations and isinstance(translations[0], dict):
        return str(translations[0].get("text", ""))
    return ""


def parse_trip_updates(entities: Optional[Iterable[Dict[str, Any]]]) -> List[TripUpdate]:
    """
    Parse trip-update entities into TripUpdate objects.

    Entities without a trip update or trip descriptor are skipped.
    """
    updates: List[TripUpdate] = []
    for entity in entities or []:
        trip_update = _field(entity, "tripUpdate", "trip_update")
        trip = _field(trip_update, "trip")
        if not isinstance(trip, dict):
            continue

        stop_time_updates = []
        for stu in _field(trip_update, "stopTimeUpdate", "stop_time_update") or []:
            stop_id = _field(stu, "stopId", "stop_id")
            if not stop_id:
                continue
            stop_time_updates.append(
                StopTimeUpdate(
                    stop_id=str(stop_id),
                    arrival_time=_to_int(_field(_field(stu, "arrival"), "time")),
                    departure_time=_to_int(_field(_field(stu, "departure"), "time")),
                )
            )

        updates.append(
            TripUpdate(
                trip_id=_field(trip, "tripId", "trip_id"),
                route_id=_field(trip, "routeId", "route_id"),
                stop_time_updates=stop_time_updates,
            )
        )
    return updates


def parse_vehicle_positions(entities: Optional[Iterable[Dict[str, Any]]]) -> List[VehiclePosition]:
    """Parse vehicle entities into VehiclePosition objects."""
    positions: List[VehiclePosition] = []
    for entity in entities or []:
        vehicle = _field(entity, "vehicle")
        if not isinstance(vehicle, dict):
            continue
        trip = _field(vehicle, "trip") or {}
        position = _field(vehicle, "position") or {}
        descriptor = _field(vehicle, "vehicle") or {}
        positions.append(
            VehiclePosition(
                trip_id=_field(trip, "tripId", "trip_id"),
                route_id=_field(trip, "routeId", "route_id"),
                latitude=_to_float(_field(position, "latitude")),
                longitude=_to_float(_field(position, "longitude")),
                vehicle_id=_field(descriptor, "id"),
            )
        )
    return positions


def parse_alerts(entities: Optional[Iterable[Dict[str, Any]]]) -> List[Alert]:
    """
    Parse service alerts, one Alert per route an alert informs.

    The route can be given directly on the informed entity or on its trip.
    """
    alerts: List[Alert] = []
    for entity in entities or []:
        alert = _field(entity, "alert")
        if not isinstance(alert, dict):
            continue

        header_text = _first_translation(_field(alert, "headerText", "header_text"))
        description_text = _first_translation(_field(alert, "descriptionText", "description_text"))
        message = f"{header_text} {description_text}".strip()
        severity = _field(alert, "severityLevel", "severity_level") or "WARNING"

        seen_routes = set()
        for informed in _field(alert, "informedEntity", "informed_entity") or []:
            route_id = _field(informed, "routeId", "route_id")
            if not route_id:
                route_id = _field(_field(informed, "trip"), "routeId", "route_id")
            if route_id and route_id not in seen_routes:
                seen_routes.add(route_id)
                alerts.append(Alert(route_id=route_id, message=message, severity=severity))

    logger.debug(f"Parsed {len(alerts)} alerts")
    return alerts


class RealtimeClient:
    """
    Fetches GTFS-Realtime feeds with an on-disk cache.

    A cached copy younger than the configured TTL is served without a request.
    When a fetch fails the cached copy is used whatever its age; with no cached
    copy the feed is reported as unavailable (None).
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """
        Initialize the realtime client.

        Args:
            config: Feed URLs, cache directory and freshness settings.
        """
        self.config = config or PlannerConfig()
        self.cache_dir = Path(self.config.cache_dir)

    def get_trip_updates(self) -> Optional[List[TripUpdate]]:
        feed = self.fetch_feed(self.config.trip_updates_url, "trip_updates.json")
        return None if feed is None else parse_trip_updates(feed.get("entity"))

    def get_vehicle_positions(self) -> Optional[List[VehiclePosition]]:
        feed = self.fetch_feed(self.config.vehicle_positions_url, "vehicle_positions.json")
        return None if feed is None else parse_vehicle_positions(feed.get("entity"))

    def get_alerts(self) -> Optional[List[Alert]]:
        feed = self.fetch_feed(self.config.alerts_url, "alerts.json")
        return None if feed is None else parse_alerts(feed.get("entity"))

    def fetch_feed(self, url: str, cache_file: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one feed as a dict, going through the cache.

        Args:
            url: Feed URL serving GTFS-Realtime JSON or protobuf.
            cache_file: File name under the cache directory.

        Returns:
            Decoded feed, or None if neither the network nor the cache has it.
        """
        cache_path = self.cache_dir / cache_file

        if self._is_fresh(cache_path):
            cached = self._read_cache(cache_path)
            if cached is not None:
                logger.debug(f"Using cached data for {cache_file}")
                return cached

        logger.debug(f"Fetching {url}")
        try:
            response = requests.get(url, timeout=self.config.request_timeout)
            response.raise_for_status()
            feed = self._decode(url, response)
        except (requests.RequestException, ValueError, DecodeError) as e:
            logger.warning(f"Failed to fetch live data, falling back to cached data for {cache_file}: {e}")
            cached = self._read_cache(cache_path)
            if cached is None:
                logger.error(f"No cached data available for {cache_file}")
            return cached

        self._write_cache(cache_path, feed)
        return feed

    @staticmethod
    def _decode(url: str, response: requests.Response) -> Dict[str, Any]:
        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type or url.endswith(".json"):
            feed = response.json()
            if not isinstance(feed, dict):
                raise ValueError(f"Unexpected feed payload from {url}")
            return feed

        message = gtfs_realtime_pb2.FeedMessage()
        message.ParseFromString(response.content)
        return MessageToDict(message)

    def _is_fresh(self, cache_path: Path) -> bool:
        try:
            age = time.time() - cache_path.stat().st_mtime
        except OSError:
            return False
        return age < self.config.cache_ttl

    @staticmethod
    def _read_cache(cache_path: Path) -> Optional[Dict[str, Any]]:
        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                cached = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug(f"Cache unreadable at {cache_path}: {e}")
            return None
        return cached if isinstance(cached, dict) else None

    @staticmethod
    def _write_cache(cache_path: Path, feed: Dict[str, Any]) -> None:
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                json.dump(feed, f, indent=2)
        except OSError as e:
            logger.warning(f"Failed to write cache {cache_path}: {e}")

    def clear_cache(self) -> None:
        """Delete cached feed files."""
        for name in ("trip_updates.json", "vehicle_positions.json", "alerts.json"):
            (self.cache_dir / name).unlink(missing_ok=True)
