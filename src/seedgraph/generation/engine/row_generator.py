"""Row generator: materializes entity rows and, on demand, their dependencies."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple
from seedgraph.generation.allocator import fanout_schedule
from seedgraph.generation.constants import MAX_UNIQUE_ATTEMPTS
from seedgraph.generation.errors import ConfigurationError, SchemaMismatchError, ValueGenerationError
from seedgraph.generation.graph import Dependency, EntityInfo, ParsedSchema
from seedgraph.generation.randomness import RandomSource
from seedgraph.generation.values import ValueOracle
from seedgraph.ir.schema import FieldDescriptor
from seedgraph.config.logging import get_logger
from .pool import Row, RowPool
from .summary import SummaryLog

logger = get_logger(__name__)


@dataclass
class Resolution:
    """Dependency values shared by the rows built from one resolution."""

    values: Dict[str, Any] = field(default_factory=dict)
    # field name -> entity written into that field's derived columns
    types: Dict[str, str] = field(default_factory=dict)
    polymorphic_types: List[str] = field(default_factory=list)


class RowGenerator:
    """
    Generates rows for one run against a caller-owned RowPool.

    Dependency rows are looked up by pool index: index i of a target table is
    reused if present and otherwise created (with its own dependencies) and
    appended. Entities with a unique dependency claim a new index per row from a
    run-wide cursor, so no two of their rows share a dependency row; all other
    dependent entities use one index per fan-out batch.
    """

    def __init__(
        self,
        schema: ParsedSchema,
        oracle: Optional[ValueOracle] = None,
        summaries: Optional[SummaryLog] = None,
    ):
        self.schema = schema
        self.oracle = oracle or ValueOracle()
        self.random: RandomSource = self.oracle.random
        self.summaries = summaries if summaries is not None else SummaryLog()
        self._in_progress: Set[Tuple[str, int]] = set()
        self._unique_seen: Dict[Tuple[str, str], Set[Any]] = {}
        # entity -> next dependency index its one-to-one rows may claim
        self._claimed: Dict[str, int] = {}

    def generate(
        self,
        entity: str,
        count: int,
        pool: RowPool,
        record_summary: bool = True,
    ) -> List[Row]:
        """
        Generate rows for an entity and append them to the pool.

        Args:
            entity: Entity name
            count: Requested rows; fan-out entities may produce more
            pool: Run-wide row pool, read for dependencies and appended to
            record_summary: Add summary lines for the batches

        Returns:
            The rows generated by this call, in order

        Raises:
            ConfigurationError: Unknown entity, fixed-row entity, or an unresolvable dependency
            ValueGenerationError: The value oracle failed
        """
        info = self.schema.info(entity)
        if info.is_fixed:
            raise ConfigurationError(f"entity {entity} has fixed rows and is never generated")
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")

        deps = self.schema.dependencies_for(entity)
        rows: List[Row] = []
        if count == 0:
            return rows

        if not deps:
            for _ in range(count):
                rows.append(self._build_row(info, Resolution()))
            if record_summary:
                self.summaries.rows_created(count, info.table_name)
        elif any(dep.unique for dep in deps):
            # one-to-one: every row gets dependency rows no earlier row claimed
            for _ in range(count):
                resolution = self._resolve_dependencies(info, deps, self._claim(entity), pool)
                rows.append(self._build_row(info, resolution))
            if record_summary:
                self.summaries.rows_created(count, info.table_name)
        else:
            for i, batch in enumerate(fanout_schedule(count)):
                resolution = self._resolve_dependencies(info, deps, i, pool)
                for _ in range(batch):
                    rows.append(self._build_row(info, resolution))
                if record_summary:
                    self.summaries.rows_created(
                        batch,
                        info.table_name,
                        commonality=dict(resolution.values),
                        polymorphic_types=resolution.polymorphic_types,
                    )

        pool.extend(info.table_name, rows)
        logger.debug(f"Generated {len(rows)} row(s) for {entity} (requested {count})")
        return rows

    def resolve(self, entity: str, index: int, pool: RowPool) -> Row:
        """
        Row at `index` of an entity's pool, creating one if it doesn't exist.

        Fixed-row entities are read from their fixed rows and never created.

        Raises:
            ConfigurationError: The same (entity, index) is already being created
        """
        info = self.schema.info(entity)
        if info.is_fixed:
            if not info.fixed_rows:
                raise ConfigurationError(f"no fixed rows for entity {entity}")
            return info.fixed_rows[index % len(info.fixed_rows)]

        row = pool.get(info.table_name, index)
        if row is not None:
            return row

        key = (entity, index)
        if key in self._in_progress:
            raise ConfigurationError(
                f"dependency cycle while creating {entity} row at index {index}"
            )
        self._in_progress.add(key)
        try:
            created = self.generate(entity, 1, pool, record_summary=False)
        finally:
            self._in_progress.discard(key)
        return created[0]

    def _claim(self, entity: str) -> int:
        index = self._claimed.get(entity, 0)
        self._claimed[entity] = index + 1
        return index

    def _resolvable(self, entity: str, index: int, pool: RowPool) -> bool:
        info = self.schema.info(entity)
        if info.is_fixed or pool.get(info.table_name, index) is not None:
            return True
        # a missing row of an entity already being created would recurse
        return all(creating != entity for creating, _ in self._in_progress)

    def _candidates(self, dep: Dependency) -> List[str]:
        if dep.is_wildcard:
            candidates = self.schema.identity_entities()
            if not candidates:
                raise ConfigurationError(
                    f"{dep.entity}.{dep.field_name} is polymorphic but no entity has an id column"
                )
            return candidates
        if dep.is_polymorphic:
            return list(dep.target)
        return [dep.target]

    def _resolve_dependency(
        self, dep: Dependency, index: int, pool: RowPool
    ) -> Tuple[Optional[Row], Optional[str]]:
        remaining = self._candidates(dep)
        while remaining:
            target = self.random.pick(remaining) if dep.is_polymorphic else remaining[0]
            if self._resolvable(target, index, pool):
                return self.resolve(target, index, pool), target
            # target is mid-creation (self reference)
            remaining = [t for t in remaining if t != target]

        if dep.nullable:
            logger.debug(
                f"Leaving {dep.entity}.{dep.column} null: every target is still being created"
            )
            return None, None
        raise ConfigurationError(
            f"cannot resolve non-nullable {dep.entity}.{dep.field_name}: "
            f"its target is still being created at index {index}"
        )

    def _resolve_dependencies(
        self, info: EntityInfo, deps: List[Dependency], index: int, pool: RowPool
    ) -> Resolution:
        resolution = Resolution()
        for dep in deps:
            row, target = self._resolve_dependency(dep, index, pool)
            if row is None:
                resolution.values[dep.column] = None
                continue
            if dep.inverse_column not in row:
                raise SchemaMismatchError(dep.inverse_column, self.schema.info(target).table_name, index)
            resolution.values[dep.column] = row[dep.inverse_column]
            resolution.types[dep.field_name] = target
            if dep.is_polymorphic:
                resolution.polymorphic_types.append(target)
        return resolution

    def _build_row(self, info: EntityInfo, resolution: Resolution) -> Row:
        row: Row = {}
        for f in info.descriptor.fields:
            col = f.column
            if col in resolution.values:
                row[col] = resolution.values[col]
            else:
                row[col] = self._draw(info, f, col)
            for derived in f.derived_fields:
                row[derived.column] = resolution.types.get(f.name)
        return row

    def _draw(self, info: EntityInfo, f: FieldDescriptor, col: str) -> Any:
        if not f.unique:
            return self.oracle.value(f, col, self.schema.infos)

        seen = self._unique_seen.setdefault((info.table_name, col), set())
        for _ in range(MAX_UNIQUE_ATTEMPTS):
            value = self.oracle.value(f, col, self.schema.infos)
            if value is None:
                return value
            if value not in seen:
                seen.add(value)
                return value
        raise ValueGenerationError(
            f"no unused value for unique column {info.table_name}.{col} "
            f"after {MAX_UNIQUE_ATTEMPTS} attempts"
        )
