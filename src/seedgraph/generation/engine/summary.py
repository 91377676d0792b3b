"""Human-readable record of what each generation batch created."""

from typing import Any, Dict, Iterator, List, Optional, Sequence
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)


class SummaryLog:
    """Ordered summary lines, one per generation batch."""

    def __init__(self):
        self.lines: List[str] = []

    def add(self, line: str) -> None:
        self.lines.append(line)
        logger.info(line)

    def rows_created(
        self,
        count: int,
        table: str,
        commonality: Optional[Dict[str, Any]] = None,
        polymorphic_types: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Record a batch of entity rows.

        Args:
            count: Rows in the batch
            table: Physical table name
            commonality: Dependency values shared by every row of the batch
            polymorphic_types: Entity types chosen for polymorphic dependencies
        """
        line = f"{count} rows created in table {table}"
        if commonality is not None:
            line += f" with commonality: {commonality!r}"
            if polymorphic_types:
                line += f" of polymorphic type {', '.join(polymorphic_types)}"
        self.add(line)

    def edges_created(
        self, count: int, id1: Any, edge_type: str, symmetric: bool = False, inverse: bool = False
    ) -> None:
        line = str(count)
        if symmetric:
            line += " symmetric"
        if inverse:
            line += " inverse"
        line += f" edges created from id1 {id1} with edge_type: {edge_type}"
        self.add(line)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)
