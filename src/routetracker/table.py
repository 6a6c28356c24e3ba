"""In-memory table of GTFS records."""

from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

Row = Dict[str, Any]


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Table:
    """
    Ordered collection of key-value records.

    Every operation returns a new Table; the rows of the source table are never
    modified, so a Table can be shared freely once loaded.
    """

    def __init__(self, rows: Optional[Iterable[Row]] = None):
        self._rows: List[Row] = list(rows) if rows is not None else []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    def __repr__(self) -> str:
        return f"Table({len(self._rows)} rows)"

    def filter(self, predicate: Callable[[Row], bool]) -> "Table":
        return Table(row for row in self._rows if predicate(row))

    def select(self, columns: Sequence[str]) -> "Table":
        """Project onto columns. Columns a row does not have are left out of that row."""
        return Table({col: row[col] for col in columns if col in row} for row in self._rows)

    def join(self, other: "Table", key: str, keep_unmatched: bool = False) -> "Table":
        """
        Inner equality join on a shared column.

        Each left row produces one merged row per matching right row, in the
        right table's order. On a name clash the right-hand value wins.

        Args:
            other: Right-hand table.
            key: Column to join on.
            keep_unmatched: Emit left rows without a match unchanged instead of
                dropping them.

        Returns:
            New joined Table.
        """
        index = other.group_by(key)
        joined: List[Row] = []
        for left in self._rows:
            value = left.get(key)
            matches = index.get(value, []) if value is not None else []
            if matches:
                joined.extend({**left, **right} for right in matches)
            elif keep_unmatched:
                joined.append(dict(left))
        return Table(joined)

    def distinct(self, key: str) -> "Table":
        """Drop rows whose value for key was already seen. First occurrence wins."""
        seen = set()
        kept = []
        for row in self._rows:
            value = row.get(key)
            if value in seen:
                continue
            seen.add(value)
            kept.append(row)
        return Table(kept)

    def sort(self, key: str, ascending: bool = True) -> "Table":
        """
        Stable sort on one column.

        Two values are compared as numbers when both parse as numbers and as
        strings otherwise.
        """
        direction = 1 if ascending else -1

        def compare(a: Row, b: Row) -> int:
            a_value, b_value = a.get(key), b.get(key)
            a_num, b_num = _as_number(a_value), _as_number(b_value)
            if a_num is not None and b_num is not None:
                left, right = a_num, b_num
            else:
                left, right = str(a_value), str(b_value)
            if left < right:
                return -direction
            if left > right:
                return direction
            return 0

        return Table(sorted(self._rows, key=cmp_to_key(compare)))

    def index_by(self, key: str) -> Dict[Any, Row]:
        """Map each value of key to the first row carrying it."""
        index: Dict[Any, Row] = {}
        for row in self._rows:
            value = row.get(key)
            if value is not None and value not in index:
                index[value] = row
        return index

    def group_by(self, key: str) -> Dict[Any, List[Row]]:
        """Map each value of key to all rows carrying it, in table order."""
        groups: Dict[Any, List[Row]] = {}
        for row in self._rows:
            value = row.get(key)
            if value is not None:
                groups.setdefault(value, []).append(row)
        return groups
