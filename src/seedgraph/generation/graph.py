"""Dependency graph builder: entity ordering, dependencies and edge catalogue."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import networkx as nx
from seedgraph.ir.schema import IDENTITY_COLUMN, EntityDescriptor, SchemaIR
from seedgraph.ir.validators import raise_for_issues, validate_schema
from seedgraph.generation.errors import ConfigurationError
from seedgraph.generation.naming import column_name, edge_name
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)

# Target of a wildcard polymorphic dependency: any identity-bearing entity
WILDCARD = "*"


@dataclass(frozen=True)
class Dependency:
    """A column on `entity` that must point at a row of `target`.

    `target` is an entity name, a tuple of allowed entity names (fixed-type
    polymorphic) or WILDCARD.
    """

    entity: str
    target: Union[str, Tuple[str, ...]]
    field_name: str
    column: str
    inverse_column: str
    unique: bool = False
    nullable: bool = False

    @property
    def is_wildcard(self) -> bool:
        return self.target == WILDCARD

    @property
    def is_polymorphic(self) -> bool:
        return self.is_wildcard or isinstance(self.target, tuple)


@dataclass
class EntityInfo:
    """Per-entity data the generators need."""

    name: str
    descriptor: EntityDescriptor
    table_name: str
    columns: List[str]
    generate: bool = True
    # dbRows keyed by storage column
    fixed_rows: Optional[List[Dict[str, Any]]] = None

    @property
    def is_fixed(self) -> bool:
        return self.fixed_rows is not None

    @property
    def has_identity(self) -> bool:
        return IDENTITY_COLUMN in self.columns


@dataclass(frozen=True)
class EdgeInfo:
    """One direction of an association edge."""

    edge_name: str
    id1_type: str
    id2_type: str
    symmetric: bool = False
    inverse_edge: Optional[str] = None


@dataclass
class ParsedSchema:
    """Output of the graph builder, consumed by the row and edge generators."""

    graph: nx.DiGraph
    infos: Dict[str, EntityInfo]
    dependencies: Dict[str, List[Dependency]] = field(default_factory=dict)
    edges: Dict[str, EdgeInfo] = field(default_factory=dict)

    def info(self, entity: str) -> EntityInfo:
        try:
            return self.infos[entity]
        except KeyError:
            raise ConfigurationError(f"couldn't get info for entity '{entity}'") from None

    def edge(self, name: str) -> EdgeInfo:
        try:
            return self.edges[name]
        except KeyError:
            raise ConfigurationError(f"couldn't load edge info for '{name}'") from None

    def dependencies_for(self, entity: str) -> List[Dependency]:
        return self.dependencies.get(entity, [])

    def identity_entities(self) -> List[str]:
        """Entities a wildcard polymorphic dependency may point at."""
        return [name for name, info in self.infos.items() if info.has_identity]

    def topological_order(self) -> List[str]:
        """
        Entities ordered so every dependency precedes its dependents.

        Raises:
            ConfigurationError: If the dependency graph has a cycle
        """
        try:
            return list(nx.topological_sort(self.graph))
        except nx.NetworkXUnfeasible:
            cycle = nx.find_cycle(self.graph)
            path = " -> ".join(u for u, _ in cycle) + f" -> {cycle[0][0]}"
            raise ConfigurationError(f"dependency graph has a cycle: {path}") from None


def _column_keyed_rows(entity: EntityDescriptor) -> List[Dict[str, Any]]:
    """Normalize fixed rows so they are keyed by storage column."""
    rows = []
    for raw in entity.db_rows or []:
        row = {}
        for f in entity.fields:
            if f.column in raw:
                row[f.column] = raw[f.column]
            elif f.name in raw:
                row[f.column] = raw[f.name]
        rows.append(row)
    return rows


def build_parsed_schema(
    schema: SchemaIR, restrict: Optional[Iterable[str]] = None
) -> ParsedSchema:
    """
    Build the dependency graph, dependency map and edge catalogue.

    Args:
        schema: Validated schema input
        restrict: Optional allow-list; entities outside it are not generated
            directly but may still be created as dependency targets

    Returns:
        ParsedSchema

    Raises:
        ConfigurationError: If the schema fails validation or has a cycle
    """
    allowed = set(restrict) if restrict is not None else None
    raise_for_issues(validate_schema(schema, allowed))

    graph = nx.DiGraph()
    infos: Dict[str, EntityInfo] = {}
    dependencies: Dict[str, List[Dependency]] = {}
    edges: Dict[str, EdgeInfo] = {}

    def add_edge(target: str, owner: str) -> None:
        # a self reference cannot change the order
        if target != owner:
            graph.add_edge(target, owner)

    for key, entity in schema.entities.items():
        graph.add_node(key)
        generate = allowed is None or key in allowed
        # rows we want added by default are managed outside generation
        if entity.is_fixed:
            generate = False

        for f in entity.fields:
            col = f.column
            if f.foreign_key is not None:
                add_edge(f.foreign_key.entity, key)
                if f.is_identity_type:
                    dependencies.setdefault(key, []).append(
                        Dependency(
                            entity=key,
                            target=f.foreign_key.entity,
                            field_name=f.name,
                            column=col,
                            inverse_column=column_name(f.foreign_key.column),
                            unique=f.unique,
                            nullable=f.nullable,
                        )
                    )

            if f.polymorphic is not None:
                if f.polymorphic.wildcard:
                    target: Union[str, Tuple[str, ...]] = WILDCARD
                else:
                    target = tuple(f.polymorphic.types)
                    for typ in target:
                        add_edge(typ, key)
                dependencies.setdefault(key, []).append(
                    Dependency(
                        entity=key,
                        target=target,
                        field_name=f.name,
                        column=col,
                        inverse_column=IDENTITY_COLUMN,
                        unique=f.unique,
                        nullable=f.nullable,
                    )
                )

        for edge in entity.all_assoc_edges():
            name = edge_name(key, edge.name)
            inverse: Optional[str] = None
            if edge.inverse_edge is not None:
                inverse = edge_name(edge.schema_name, edge.inverse_edge.name)
                edges[inverse] = EdgeInfo(
                    edge_name=inverse,
                    id1_type=edge.schema_name,
                    id2_type=key,
                    symmetric=False,
                    inverse_edge=name,
                )
            edges[name] = EdgeInfo(
                edge_name=name,
                id1_type=key,
                id2_type=edge.schema_name,
                symmetric=edge.symmetric,
                inverse_edge=inverse,
            )

        infos[key] = EntityInfo(
            name=key,
            descriptor=entity,
            table_name=entity.physical_table,
            columns=entity.columns,
            generate=generate,
            fixed_rows=_column_keyed_rows(entity) if entity.is_fixed else None,
        )

    parsed = ParsedSchema(graph=graph, infos=infos, dependencies=dependencies, edges=edges)
    # fail fast on cycles rather than when rows are first requested
    order = parsed.topological_order()
    logger.info(
        f"Parsed schema: {len(infos)} entities, "
        f"{sum(len(d) for d in dependencies.values())} dependencies, {len(edges)} edges"
    )
    logger.debug(f"Topological order: {order}")
    return parsed
