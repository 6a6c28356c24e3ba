"""Tests for live data correlation."""

import unittest
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

# Add src to path so we can import routetracker
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from routetracker.live import format_position, match_live_data, routes_match
from routetracker.models import LiveData, StopTimeUpdate, TripUpdate, VehiclePosition

BRISBANE = timezone(timedelta(hours=10))
SERVICE_DATE = date(2024, 8, 29)


def at(hour, minute):
    return int(datetime(2024, 8, 29, hour, minute, tzinfo=BRISBANE).timestamp())


class TestRoutesMatch(unittest.TestCase):
    """Test route id normalization."""

    def test_suffixes_ignored(self):
        """Test only the part before the first hyphen is compared."""
        self.assertTrue(routes_match("66-3734", "66-3735"))
        self.assertTrue(routes_match("66-3734", "66"))
        self.assertFalse(routes_match("66-3734", "67-3734"))

    def test_missing_ids(self):
        """Test empty or missing ids never match."""
        self.assertFalse(routes_match(None, "66"))
        self.assertFalse(routes_match("66", ""))


class TestFormatPosition(unittest.TestCase):
    """Test coordinate rendering."""

    def test_trailing_zero_dropped(self):
        """Test whole-number coordinates render without .0."""
        position = VehiclePosition("trip1", "66-3734", -27.5, 153.0)
        self.assertEqual(format_position(position), "-27.5, 153")

    def test_missing_coordinates(self):
        """Test a vehicle without a position gives None."""
        self.assertIsNone(format_position(VehiclePosition("trip1", "66-3734")))


class TestMatchLiveData(unittest.TestCase):
    """Test match_live_data."""

    def setUp(self):
        """Set up test fixtures."""
        self.stop_time = {"stop_id": "1", "arrival_time": "10:00:00", "departure_time": "10:00:00"}

    def match(self, trip_updates, vehicle_positions, **kwargs):
        kwargs.setdefault("service_date", SERVICE_DATE)
        kwargs.setdefault("tz", BRISBANE)
        return match_live_data(trip_updates, vehicle_positions, self.stop_time, "66-3734", **kwargs)

    def test_single_match(self):
        """Test a matching trip update and vehicle position."""
        trip_updates = [TripUpdate("trip1", "66-3734", [StopTimeUpdate("1", 1624932800)])]
        vehicle_positions = [VehiclePosition("trip1", "66-3734", -27.5, 153.0)]

        live = match_live_data(
            trip_updates, vehicle_positions, {"stop_id": "1"}, "66-3734", trip_id="trip1", tz=BRISBANE
        )

        self.assertEqual(live.live_arrival_time, "12:13")
        self.assertEqual(live.live_position, "-27.5, 153")

    def test_feeds_unavailable(self):
        """Test a missing feed gives N/A for everything."""
        trip_updates = [TripUpdate("trip1", "66-3734", [StopTimeUpdate("1", at(10, 1))])]
        self.assertEqual(self.match(None, []), LiveData())
        self.assertEqual(self.match(trip_updates, None), LiveData("N/A", "N/A"))

    def test_no_relevant_updates(self):
        """Test updates for other routes or stops are ignored."""
        trip_updates = [
            TripUpdate("trip1", "67-3734", [StopTimeUpdate("1", at(10, 1))]),
            TripUpdate("trip2", "66-3734", [StopTimeUpdate("9", at(10, 1))]),
        ]
        self.assertEqual(self.match(trip_updates, []), LiveData())

    def test_closest_prediction_wins(self):
        """Test the update predicted nearest the scheduled time is chosen."""
        trip_updates = [
            TripUpdate("tripA", "66-1", [StopTimeUpdate("1", at(10, 10))]),
            TripUpdate("tripB", "66-2", [StopTimeUpdate("1", at(10, 2))]),
            TripUpdate("tripC", "66-3", [StopTimeUpdate("1", at(9, 55))]),
        ]
        vehicle_positions = [
            VehiclePosition("tripA", "66-1", -27.1, 153.1),
            VehiclePosition("tripB", "66-2", -27.2, 153.2),
        ]

        live = self.match(trip_updates, vehicle_positions)

        self.assertEqual(live.live_arrival_time, "10:02")
        self.assertEqual(live.live_position, "-27.2, 153.2")

    def test_tie_keeps_first(self):
        """Test equally close updates resolve to the first."""
        trip_updates = [
            TripUpdate("tripA", "66-1", [StopTimeUpdate("1", at(10, 2))]),
            TripUpdate("tripB", "66-1", [StopTimeUpdate("1", at(9, 58))]),
        ]
        self.assertEqual(self.match(trip_updates, []).live_arrival_time, "10:02")

    def test_without_service_date_first_candidate_used(self):
        """Test the first candidate is used with nothing to compare against."""
        trip_updates = [
            TripUpdate("tripA", "66-1", [StopTimeUpdate("1", at(10, 30))]),
            TripUpdate("tripB", "66-1", [StopTimeUpdate("1", at(10, 0))]),
        ]
        self.assertEqual(self.match(trip_updates, [], service_date=None).live_arrival_time, "10:30")

    def test_departure_prediction_fallback(self):
        """Test a departure-only prediction is used."""
        trip_updates = [TripUpdate("trip1", "66-1", [StopTimeUpdate("1", None, at(10, 1))])]
        self.assertEqual(self.match(trip_updates, []).live_arrival_time, "10:01")

    def test_prediction_missing(self):
        """Test an update with no times leaves the arrival unavailable."""
        trip_updates = [TripUpdate("trip1", "66-1", [StopTimeUpdate("1")])]
        vehicle_positions = [VehiclePosition("trip1", "66-1", -27.5, 153.5)]

        live = self.match(trip_updates, vehicle_positions)

        self.assertEqual(live.live_arrival_time, "N/A")
        self.assertEqual(live.live_position, "-27.5, 153.5")

    def test_out_of_range_prediction(self):
        """Test an epoch too large to convert leaves the arrival unavailable."""
        trip_updates = [TripUpdate("trip1", "66-1", [StopTimeUpdate("1", arrival_time=99999999999999999)])]
        vehicle_positions = [VehiclePosition("trip1", "66-1", -27.5, 153.5)]

        live = self.match(trip_updates, vehicle_positions)

        self.assertEqual(live.live_arrival_time, "N/A")
        self.assertEqual(live.live_position, "-27.5, 153.5")

    def test_trip_id_filter(self):
        """Test trip_id narrows the candidates."""
        trip_updates = [
            TripUpdate("tripA", "66-1", [StopTimeUpdate("1", at(10, 0))]),
            TripUpdate("tripB", "66-1", [StopTimeUpdate("1", at(10, 9))]),
        ]
        self.assertEqual(self.match(trip_updates, [], trip_id="tripB").live_arrival_time, "10:09")
        self.assertEqual(self.match(trip_updates, [], trip_id="tripX"), LiveData())

    def test_vehicle_on_other_route(self):
        """Test a vehicle must match both route and trip."""
        trip_updates = [TripUpdate("trip1", "66-1", [StopTimeUpdate("1", at(10, 1))])]
        vehicle_positions = [
            VehiclePosition("trip1", "67-1", -27.5, 153.5),
            VehiclePosition("trip2", "66-1", -27.6, 153.6),
        ]

        live = self.match(trip_updates, vehicle_positions)

        self.assertEqual(live.live_arrival_time, "10:01")
        self.assertEqual(live.live_position, "N/A")


if __name__ == "__main__":
    unittest.main()
