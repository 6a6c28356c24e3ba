"""Example usage of RoutePlanner."""

import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src to path so we can import routetracker
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from routetracker import GTFSLoader, PlannerConfig, RealtimeClient, RoutePlanner

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_trips(route: str, start: int, end: int, when: datetime):
    """
    Fetch and display upcoming trips between two stops of a route.

    Args:
        route: Route short name (e.g., "66")
        start: 1-based number of the origin stop in the route's stop list
        end: 1-based number of the destination stop
        when: Departure date and time
    """
    print(f"\n{'='*70}")
    print(f"Route {route}, stops {start} - {end}, {when:%Y-%m-%d %H:%M}")
    print(f"{'='*70}\n")

    try:
        config = PlannerConfig.from_env()
        schedule = GTFSLoader().load_from_directory(config.static_data_dir)
        planner = RoutePlanner(schedule, realtime=RealtimeClient(config), config=config)

        planner.get_route(route)
        stops = planner.get_route_stops(route)
        origin, destination = stops[start - 1], stops[end - 1]
        print(f"From: {origin.name} ({origin.stop_id})")
        print(f"To:   {destination.name} ({destination.stop_id})\n")

        results = planner.plan_trips(route, origin, destination, when)
        if not results:
            print("  No upcoming trips found")
        for result in results:
            print(
                f"  {result.route_short_name} {result.headsign}: scheduled {result.scheduled_arrival_time}, "
                f"live {result.live_arrival_time}, travel {result.travel_time}"
            )
            print(f"    vehicle at {result.live_position}")

        alerts = planner.get_alerts(route)
        if alerts:
            print("\nSERVICE ALERTS:")
            for alert in alerts:
                print(f"  [{alert.severity}] {alert.message}")

    except (ValueError, IndexError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to plan trip: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 4:
        print("Usage: example.py ROUTE START END [YYYY-MM-DDTHH:MM]")
        sys.exit(1)
    departure = datetime.fromisoformat(sys.argv[4]) if len(sys.argv) > 4 else datetime.now()
    print_trips(sys.argv[1], int(sys.argv[2]), int(sys.argv[3]), departure)
