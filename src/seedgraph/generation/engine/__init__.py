"""Row and edge generation engine."""

from .pool import Row, RowPool, TableBatch
from .summary import SummaryLog
from .row_generator import RowGenerator
from .edge_generator import (
    EdgeConfig,
    EdgeConfigStore,
    EdgeRowGenerator,
    InMemoryEdgeConfigStore,
    JsonEdgeConfigStore,
)
from .pipeline import GenerationResult, generate_rows, run
from .writer import write_batches

__all__ = [
    "Row",
    "RowPool",
    "TableBatch",
    "SummaryLog",
    "RowGenerator",
    "EdgeConfig",
    "EdgeConfigStore",
    "EdgeRowGenerator",
    "InMemoryEdgeConfigStore",
    "JsonEdgeConfigStore",
    "GenerationResult",
    "generate_rows",
    "run",
    "write_batches",
]
