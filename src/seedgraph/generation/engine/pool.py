"""Per-run store of generated rows, keyed by physical table name."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

Row = Dict[str, Any]


class RowPool:
    """
    Ordered rows per table for one generation run.

    Rows are only ever appended; a row at a given index never changes, so the
    index can be used to share a dependency row between callers.
    """

    def __init__(self):
        self._rows: Dict[str, List[Row]] = {}

    def get(self, table: str, index: int) -> Optional[Row]:
        rows = self._rows.get(table)
        if rows is None or index >= len(rows):
            return None
        return rows[index]

    def rows(self, table: str) -> Sequence[Row]:
        return tuple(self._rows.get(table, ()))

    def count(self, table: str) -> int:
        return len(self._rows.get(table, ()))

    def extend(self, table: str, rows: Sequence[Row]) -> None:
        """Append rows after any rows already pooled for the table."""
        self._rows.setdefault(table, []).extend(rows)

    def merge(self, other: "RowPool") -> None:
        """Fold every table of another pool into this one."""
        for table, rows in other.items():
            self.extend(table, rows)

    def tables(self) -> List[str]:
        return list(self._rows)

    def items(self) -> Iterator[Tuple[str, Sequence[Row]]]:
        for table, rows in self._rows.items():
            yield table, tuple(rows)

    def __contains__(self, table: str) -> bool:
        return bool(self._rows.get(table))

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._rows.values())


@dataclass
class TableBatch:
    """Rows bound for one physical table, with the column order to write."""

    table_name: str
    columns: List[str]
    rows: List[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)
