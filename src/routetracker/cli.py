"""Interactive command-line route planner."""

import argparse
import logging
import re
import sys
from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from .config import PlannerConfig
from .gtfs_loader import GTFSLoader
from .models import Stop, TripResult
from .planner import RoutePlanner
from .realtime_client import RealtimeClient
from .schedule import Schedule

logger = logging.getLogger(__name__)

STOP_SELECTION = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_FORMAT = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_stop_selection(text: str, stop_count: int) -> Optional[Tuple[int, int]]:
    """
    Parse "start - end" stop numbers (1-based).

    Returns:
        Zero-based (start, end) indices, or None unless both are in range and start < end.
    """
    match = STOP_SELECTION.match(text or "")
    if not match:
        return None
    start, end = int(match.group(1)), int(match.group(2))
    if not (1 <= start <= stop_count and 1 <= end <= stop_count) or start >= end:
        return None
    return start - 1, end - 1


def parse_date(text: str) -> Optional[date]:
    """Parse a YYYY-MM-DD date."""
    text = (text or "").strip()
    if not DATE_FORMAT.match(text):
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_time(text: str) -> Optional[time]:
    """Parse a 24-hour HH:MM time."""
    match = TIME_FORMAT.match((text or "").strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def render_results(results: Sequence[TripResult]) -> str:
    """Format planner results as a console table."""
    frame = pd.DataFrame([result.as_row() for result in results])
    return frame.to_string(index=False)


def load_schedule(config: PlannerConfig) -> Schedule:
    loader = GTFSLoader()
    if config.static_data_url:
        return loader.load_from_url(config.static_data_url)
    return loader.load_from_directory(config.static_data_dir)


def _prompt_until(prompt: str, parse: Callable[[str], Optional[object]], error: str, ask: Callable[[str], str]):
    while True:
        value = parse(ask(prompt))
        if value is not None:
            return value
        print(error)


def run_session(planner: RoutePlanner, ask: Callable[[str], str] = input) -> None:
    """
    Run the interactive loop until the user declines another search.

    Args:
        planner: Planner over the loaded schedule.
        ask: Prompt function, input() by default.
    """
    while True:
        route = _prompt_until(
            "What Bus Route would you like to take? ",
            lambda text: text.strip() if planner.schedule.route_by_short_name(text.strip()) else None,
            "Please enter a valid bus route.",
            ask,
        )

        stops: List[Stop] = planner.get_route_stops(route)
        if not stops:
            print("No stops found for this route. Please enter a valid bus route.")
            continue

        print("Stops for this route:")
        for number, stop in enumerate(stops, start=1):
            print(f"{number}. {stop.name}")

        start_index, end_index = _prompt_until(
            "What is your start and end stop on the route? (e.g., 1 - 2) ",
            lambda text: parse_stop_selection(text, len(stops)),
            "Please enter valid stop numbers within the range of available stops.",
            ask,
        )
        origin, destination = stops[start_index], stops[end_index]
        print(f'You\'ve selected to travel from "{origin.name}" to "{destination.name}".')

        travel_date = _prompt_until(
            "What date will you take the route? (YYYY-MM-DD) ",
            parse_date,
            "Incorrect date format. Please use YYYY-MM-DD.",
            ask,
        )
        travel_time = _prompt_until(
            "What time will you leave? (HH:mm) ",
            parse_time,
            "Incorrect time format. Please use HH:mm.",
            ask,
        )
        when = datetime.combine(travel_date, travel_time, tzinfo=planner.config.tzinfo)
        print(f"You've chosen to travel on {travel_date:%Y-%m-%d} at {travel_time:%H:%M}.")

        results = planner.plan_trips(route, origin, destination, when)
        if results:
            print(render_results(results))
        else:
            print(f"No upcoming trips found within the next {planner.config.lookahead_minutes} minutes.")

        alerts = planner.get_alerts(route)
        if alerts:
            print("\nSERVICE ALERTS:")
            for alert in alerts:
                print(f"  [{alert.severity}] {alert.message}")

        replay = (ask("Would you like to search again? (y/n) ") or "").strip().lower()
        if replay not in ("y", "yes"):
            break


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Route Tracker - plan a trip on one route using the static timetable and live feeds",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--offline", action="store_true", help="Skip live feeds")
    parser.add_argument("--data-dir", type=str, help="Directory holding the GTFS static .txt files")
    parser.add_argument("--cache-dir", type=str, help="Directory for cached live feeds")
    parser.add_argument("--refresh", action="store_true", help="Discard cached live feeds before starting")
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    config = PlannerConfig.from_env()
    if args.data_dir:
        config = replace(config, static_data_dir=args.data_dir, static_data_url=None)
    if args.cache_dir:
        config = replace(config, cache_dir=args.cache_dir)

    print("Welcome to the South East Queensland Route Planner!")
    try:
        schedule = load_schedule(config)
    except Exception as e:
        logger.error(f"Failed to load GTFS data: {e}")
        print(f"Error loading GTFS data: {e}")
        return 1

    realtime = None if args.offline else RealtimeClient(config)
    if realtime is None:
        print("Running in OFFLINE mode without live data")
    elif args.refresh:
        logger.info(f"Clearing cached live feeds in {realtime.cache_dir}")
        realtime.clear_cache()

    planner = RoutePlanner(schedule, realtime=realtime, config=config)
    try:
        run_session(planner)
    except (KeyboardInterrupt, EOFError):
        print()

    print("Thanks for using the Route Tracker!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
