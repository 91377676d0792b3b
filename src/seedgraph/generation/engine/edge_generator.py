"""Association edge rows and the edge configuration they are checked against."""

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union
from pydantic import BaseModel, ConfigDict, ValidationError
from seedgraph.generation.allocator import fanout_schedule
from seedgraph.generation.constants import EDGE_COLUMNS
from seedgraph.generation.errors import ConfigurationError, PersistenceError
from seedgraph.generation.graph import EdgeInfo
from seedgraph.ir.schema import IDENTITY_COLUMN
from seedgraph.config.logging import get_logger
from .pool import Row, RowPool, TableBatch
from .row_generator import RowGenerator

logger = get_logger(__name__)


class EdgeConfig(BaseModel):
    """One row of the stored assoc_edge_config table."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    edge_name: str
    edge_type: str
    edge_table: str
    symmetric_edge: bool = False
    inverse_edge_type: Optional[str] = None


class EdgeConfigStore(Protocol):
    """Source of stored edge configuration."""

    def get_edge_config(self, edge_name: str) -> EdgeConfig:
        """
        Raises:
            ConfigurationError: No config is stored for the edge
            PersistenceError: The store could not be read
        """
        ...


class InMemoryEdgeConfigStore:
    """Edge configs held in a dict, keyed by edge name."""

    def __init__(self, configs: Iterable[Union[EdgeConfig, Dict[str, Any]]] = ()):
        self._configs: Dict[str, EdgeConfig] = {}
        for config in configs:
            self.add(config)

    def add(self, config: Union[EdgeConfig, Dict[str, Any]]) -> None:
        if not isinstance(config, EdgeConfig):
            config = EdgeConfig.model_validate(config)
        self._configs[config.edge_name] = config

    def get_edge_config(self, edge_name: str) -> EdgeConfig:
        config = self._configs.get(edge_name)
        if config is None:
            raise ConfigurationError(f"couldn't load data for edge {edge_name}")
        return config


class JsonEdgeConfigStore:
    """
    Edge configs read from a JSON dump of assoc_edge_config.

    The file holds either a list of rows or {"assoc_edge_config": [rows]}.
    It is read lazily on first lookup.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._store: Optional[InMemoryEdgeConfigStore] = None

    def _load(self) -> InMemoryEdgeConfigStore:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"couldn't read edge config from {self.path}: {e}", cause=e) from e

        if isinstance(data, dict):
            data = data.get("assoc_edge_config", [])
        if not isinstance(data, list):
            raise ConfigurationError(f"edge config in {self.path} must be a list of rows")
        try:
            return InMemoryEdgeConfigStore(data)
        except ValidationError as e:
            raise ConfigurationError(f"invalid edge config in {self.path}: {e}") from e

    def get_edge_config(self, edge_name: str) -> EdgeConfig:
        if self._store is None:
            self._store = self._load()
            logger.debug(f"Loaded edge config from {self.path}")
        return self._store.get_edge_config(edge_name)


def check_edge_config(config: EdgeConfig, edge: EdgeInfo) -> None:
    """
    Cross-check stored edge config against the edge catalogue entry.

    Raises:
        ConfigurationError: Symmetric flag or inverse presence disagree
    """
    if config.symmetric_edge != edge.symmetric:
        raise ConfigurationError(
            f"stored config and schema disagree on symmetric for edge {edge.edge_name}: "
            f"config={config.symmetric_edge} schema={edge.symmetric}"
        )
    if bool(config.inverse_edge_type) != (edge.inverse_edge is not None):
        raise ConfigurationError(
            f"stored config and schema disagree on inverse edge for {edge.edge_name}: "
            f"config={config.inverse_edge_type!r} schema={edge.inverse_edge!r}"
        )


class EdgeRowGenerator:
    """Generates rows for one association edge using the row generator for endpoints."""

    def __init__(self, rows: RowGenerator, store: EdgeConfigStore):
        self.rows = rows
        self.store = store

    def generate_edges(self, edge_name: str, total_count: int, pool: RowPool) -> TableBatch:
        """
        Generate edge rows for an edge.

        id2 endpoints are created up front at ceil(total_count / 2) rows. The
        id1 side follows the halving schedule with one fresh id1 row per batch,
        each linked to the first `batch` id2 rows. id1 rows are built in their
        own pool and merged into `pool` at the end.

        Args:
            edge_name: Edge name from the catalogue
            total_count: Requested edges before symmetric/inverse copies
            pool: Run-wide row pool

        Returns:
            TableBatch for the edge table

        Raises:
            ConfigurationError: Unknown edge or mismatching stored config
            PersistenceError: The config store failed
        """
        if total_count < 1:
            raise ValueError(f"total_count must be positive, got {total_count}")
        schema = self.rows.schema
        edge = schema.edge(edge_name)
        config = self.store.get_edge_config(edge.edge_name)
        check_edge_config(config, edge)

        id1_info = schema.info(edge.id1_type)
        id2_info = schema.info(edge.id2_type)
        timestamp = self.rows.oracle.format_instant("timestamptz", self.rows.oracle.now())
        logger.info(
            f"Generating edge {edge.edge_name} ({edge.id1_type} -> {edge.id2_type}), "
            f"edge_type={config.edge_type}, table={config.edge_table}"
        )

        id2_rows = self.rows.generate(
            id2_info.name, math.ceil(total_count / 2), pool, record_summary=False
        )
        id1_pool = RowPool()
        edge_rows: List[Row] = []

        for batch in fanout_schedule(total_count):
            id1 = self.rows.generate(id1_info.name, 1, id1_pool, record_summary=False)[0]
            for j in range(batch):
                id2 = id2_rows[j]
                edge_rows.append(
                    self._edge_row(id1, edge.id1_type, config.edge_type, id2, edge.id2_type, timestamp)
                )
                if edge.symmetric:
                    edge_rows.append(
                        self._edge_row(id2, edge.id2_type, config.edge_type, id1, edge.id1_type, timestamp)
                    )
                if edge.inverse_edge is not None:
                    edge_rows.append(
                        self._edge_row(
                            id2, edge.id2_type, config.inverse_edge_type, id1, edge.id1_type, timestamp
                        )
                    )
            self.rows.summaries.edges_created(
                batch,
                id1.get(IDENTITY_COLUMN),
                config.edge_type,
                symmetric=edge.symmetric,
                inverse=edge.inverse_edge is not None,
            )

        pool.merge(id1_pool)
        logger.info(f"Generated {len(edge_rows)} edge rows for {edge.edge_name}")
        return TableBatch(table_name=config.edge_table, columns=list(EDGE_COLUMNS), rows=edge_rows)

    @staticmethod
    def _edge_row(id1: Row, id1_type: str, edge_type: Optional[str], id2: Row, id2_type: str, time: str) -> Row:
        return {
            "id1": id1.get(IDENTITY_COLUMN),
            "id1_type": id1_type,
            "edge_type": edge_type,
            "id2": id2.get(IDENTITY_COLUMN),
            "id2_type": id2_type,
            "time": time,
            "data": None,
        }
