"""Run orchestration: schema -> ordered row batches (and edge rows)."""

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from seedgraph.ir.schema import SchemaIR
from seedgraph.generation.constants import DEFAULT_ROW_COUNT
from seedgraph.generation.error_logging import log_error, safe_execute
from seedgraph.generation.graph import ParsedSchema, build_parsed_schema
from seedgraph.generation.randomness import RandomSource
from seedgraph.generation.values import ValueOracle
from seedgraph.config.logging import get_logger
from .edge_generator import EdgeConfigStore, EdgeRowGenerator, InMemoryEdgeConfigStore
from .pool import RowPool, TableBatch
from .row_generator import RowGenerator
from .summary import SummaryLog

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Everything one run produced."""

    pool: RowPool
    batches: List[TableBatch] = field(default_factory=list)
    summaries: List[str] = field(default_factory=list)
    edge_table: Optional[str] = None

    def batch(self, table_name: str) -> Optional[TableBatch]:
        for b in self.batches:
            if b.table_name == table_name:
                return b
        return None


def generate_rows(
    parsed: ParsedSchema, row_count: int, generator: RowGenerator, pool: RowPool
) -> None:
    """
    Generate rows for every active entity in dependency order.

    Fixed-row entities and entities outside the allow-list are skipped here;
    they only gain rows when a dependent pulls them into existence.

    Args:
        parsed: Parsed schema
        row_count: Rows requested per entity
        generator: Row generator bound to `parsed`
        pool: Run-wide row pool
    """
    order = parsed.topological_order()
    active = [name for name in order if parsed.infos[name].generate]
    logger.info(f"Generating rows for {len(active)} of {len(order)} entities ({row_count} each)")

    for idx, name in enumerate(active, 1):
        entity_start = time.time()
        logger.info(f"[{idx}/{len(active)}] Generating entity: {name}")
        rows = safe_execute(
            lambda: generator.generate(name, row_count, pool),
            error_context={"row_count": row_count, "position": f"{idx}/{len(active)}"},
            operation="row generation",
            entity=name,
        )
        logger.debug(f"  {name}: {len(rows)} rows in {time.time() - entity_start:.3f}s")


def ordered_batches(parsed: ParsedSchema, pool: RowPool) -> List[TableBatch]:
    """Pool contents as table batches in topological order, skipping empty tables."""
    batches = []
    for name in parsed.topological_order():
        info = parsed.infos[name]
        rows = pool.rows(info.table_name)
        if not rows:
            continue
        batches.append(TableBatch(table_name=info.table_name, columns=list(info.columns), rows=list(rows)))
    return batches


def run(
    schema: SchemaIR,
    row_count: int = DEFAULT_ROW_COUNT,
    restrict: Optional[Iterable[str]] = None,
    edge_name: Optional[str] = None,
    edge_store: Optional[EdgeConfigStore] = None,
    seed: Optional[int] = None,
    random: Optional[RandomSource] = None,
) -> GenerationResult:
    """
    Generate rows (or, with `edge_name`, edge rows) for a schema.

    Args:
        schema: Schema input
        row_count: Rows requested per entity, or edges requested in edge mode
        restrict: Optional allow-list of entities that generate rows directly
        edge_name: Generate this edge instead of entity rows
        edge_store: Stored edge configuration, required in edge mode
        seed: Seed for a new RandomSource (ignored when `random` is given)
        random: RandomSource to draw from

    Returns:
        GenerationResult with batches in dependency order, the edge table last

    Raises:
        ConfigurationError: Invalid schema, cycle, unknown edge or bad edge config
        ValueGenerationError: The value oracle failed
        PersistenceError: The edge config store failed
    """
    run_start = time.time()
    logger.info(
        f"Starting generation (row_count={row_count}, seed={seed}, "
        f"restrict={list(restrict) if restrict is not None else None}, edge={edge_name})"
    )
    try:
        parsed = build_parsed_schema(schema, restrict)
    except Exception as e:
        log_error(e, context={"entities": len(schema.entities)}, operation="building dependency graph")
        raise

    oracle = ValueOracle(random or RandomSource(seed))
    summaries = SummaryLog()
    generator = RowGenerator(parsed, oracle, summaries)
    pool = RowPool()
    edge_batch: Optional[TableBatch] = None

    if edge_name:
        edges = EdgeRowGenerator(generator, edge_store or InMemoryEdgeConfigStore())
        edge_batch = safe_execute(
            lambda: edges.generate_edges(edge_name, row_count, pool),
            error_context={"row_count": row_count},
            operation="edge generation",
            entity=edge_name,
        )
    else:
        generate_rows(parsed, row_count, generator, pool)

    batches = ordered_batches(parsed, pool)
    if edge_batch is not None:
        batches.append(edge_batch)

    logger.info(
        f"Generation complete: {sum(len(b) for b in batches)} rows in {len(batches)} table(s) "
        f"(total time: {time.time() - run_start:.3f}s)"
    )
    return GenerationResult(
        pool=pool,
        batches=batches,
        summaries=list(summaries),
        edge_table=edge_batch.table_name if edge_batch is not None else None,
    )
