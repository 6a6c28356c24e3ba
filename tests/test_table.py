"""Tests for the in-memory Table."""

import unittest
import sys
from pathlib import Path

# Add src to path so we can import routetracker
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from routetracker.table import Table


class TestTable(unittest.TestCase):
    """Test filter, select, join, distinct and sort."""

    def setUp(self):
        """Set up test fixtures."""
        self.table = Table([
            {"id": 1, "name": "Alice", "age": 30},
            {"id": 2, "name": "Bob", "age": 25},
            {"id": 3, "name": "Charlie", "age": 35},
        ])

    def test_filter_preserves_order(self):
        """Test filtering keeps matching rows in order."""
        filtered = self.table.filter(lambda row: row["age"] > 25)
        self.assertEqual([row["name"] for row in filtered], ["Alice", "Charlie"])

    def test_select_omits_missing_columns(self):
        """Test projection drops unselected and missing columns."""
        table = Table([{"id": 1, "name": "Alice"}, {"id": 2}])
        selected = table.select(["name", "city"])
        self.assertEqual(list(selected), [{"name": "Alice"}, {}])

    def test_join_right_values_win(self):
        """Test a 3-row by 2-row join yields one merged row per matching pair."""
        left = Table([
            {"id": 1, "name": "Alice", "city": "Brisbane"},
            {"id": 2, "name": "Bob", "city": "Sydney"},
            {"id": 3, "name": "Charlie", "city": "Perth"},
        ])
        right = Table([
            {"id": 1, "city": "New York"},
            {"id": 2, "city": "London"},
        ])
        joined = left.join(right, "id")

        self.assertEqual(len(joined), 2)
        self.assertEqual(joined[0], {"id": 1, "name": "Alice", "city": "New York"})
        self.assertEqual(joined[1], {"id": 2, "name": "Bob", "city": "London"})

    def test_join_multiple_matches_in_right_order(self):
        """Test a left row matching several right rows emits one row each."""
        left = Table([{"trip_id": "t1", "stop_id": "A"}])
        right = Table([
            {"trip_id": "t1", "direction_id": "0"},
            {"trip_id": "t2", "direction_id": "1"},
            {"trip_id": "t1", "direction_id": "1"},
        ])
        joined = left.join(right, "trip_id")
        self.assertEqual([row["direction_id"] for row in joined], ["0", "1"])

    def test_join_keep_unmatched(self):
        """Test unmatched left rows survive unmerged when requested."""
        left = Table([{"id": 1, "name": "Alice"}, {"id": 9, "name": "Zed"}])
        right = Table([{"id": 1, "city": "London"}])

        self.assertEqual(len(left.join(right, "id")), 1)

        kept = left.join(right, "id", keep_unmatched=True)
        self.assertEqual(list(kept), [
            {"id": 1, "name": "Alice", "city": "London"},
            {"id": 9, "name": "Zed"},
        ])

    def test_join_does_not_mutate_inputs(self):
        """Test joined rows are new dicts."""
        left = Table([{"id": 1, "city": "Brisbane"}])
        right = Table([{"id": 1, "city": "London"}])
        left.join(right, "id")
        self.assertEqual(left[0]["city"], "Brisbane")

    def test_distinct_first_occurrence_wins(self):
        """Test distinct keeps the first row per key in order."""
        table = Table([
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
            {"id": 3, "name": "Alice"},
        ])
        distinct = table.distinct("name")
        self.assertEqual([row["id"] for row in distinct], [1, 2])

    def test_sort_numeric_strings(self):
        """Test numeric-looking strings sort as numbers."""
        table = Table([{"seq": "10"}, {"seq": "9"}, {"seq": "1"}])
        self.assertEqual([row["seq"] for row in table.sort("seq")], ["1", "9", "10"])

    def test_sort_text(self):
        """Test non-numeric values sort as strings."""
        sorted_table = self.table.sort("name", ascending=False)
        self.assertEqual([row["name"] for row in sorted_table], ["Charlie", "Bob", "Alice"])

    def test_sort_is_stable(self):
        """Test equal keys keep their original order in both directions."""
        table = Table([
            {"k": 1, "tag": "a"},
            {"k": 2, "tag": "b"},
            {"k": 1, "tag": "c"},
        ])
        self.assertEqual([row["tag"] for row in table.sort("k")], ["a", "c", "b"])
        self.assertEqual([row["tag"] for row in table.sort("k", ascending=False)], ["b", "a", "c"])

    def test_sort_returns_new_table(self):
        """Test sorting leaves the source table untouched."""
        self.table.sort("age")
        self.assertEqual(self.table[0]["name"], "Alice")

    def test_index_by(self):
        """Test index_by keeps the first row per value."""
        table = Table([{"id": "a", "n": 1}, {"id": "a", "n": 2}, {"id": "b", "n": 3}])
        index = table.index_by("id")
        self.assertEqual(index["a"]["n"], 1)
        self.assertEqual(index["b"]["n"], 3)


if __name__ == "__main__":
    unittest.main()
