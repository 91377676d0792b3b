"""Schema input model: entities, fields, foreign keys and association edges.

The JSON shape mirrors what the schema introspection step emits (camelCase
keys); snake_case keys are accepted too.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from seedgraph.generation.naming import column_name, pascal_case, table_name

FieldType = Literal[
    "uuid",
    "string",
    "int",
    "float",
    "boolean",
    "date",
    "time",
    "timetz",
    "timestamp",
    "timestamptz",
    "enum",
]

# Spellings accepted from introspection output, mapped onto FieldType
_TYPE_ALIASES = {
    "text": "string",
    "integer": "int",
    "bool": "boolean",
    "stringenum": "enum",
    "string_enum": "enum",
}


def _normalize_field_type(v: Any) -> Any:
    if isinstance(v, str):
        key = v.strip().lower()
        return _TYPE_ALIASES.get(key, key)
    return v


IDENTITY_TYPES = frozenset({"uuid"})
IDENTITY_COLUMN = "id"

_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    frozen=True,
)


class ForeignKeyRef(BaseModel):
    """Reference from a field to a column on another entity."""

    model_config = _MODEL_CONFIG

    entity: str = Field(alias="schema")
    column: str = IDENTITY_COLUMN


class PolymorphicRef(BaseModel):
    """Polymorphic target: any identity-bearing entity, or a fixed set of types."""

    model_config = _MODEL_CONFIG

    types: Optional[List[str]] = None

    @field_validator("types")
    @classmethod
    def _entity_names(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        # node types are lower-cased ("user"); entity names are PascalCase
        if v is None:
            return None
        return [pascal_case(t) for t in v]

    @property
    def wildcard(self) -> bool:
        return not self.types


class DerivedFieldDescriptor(BaseModel):
    """Companion column holding the resolved target type of its parent field."""

    model_config = _MODEL_CONFIG

    name: str
    storage_key: Optional[str] = None
    type: FieldType = "string"
    nullable: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        return _normalize_field_type(v)

    @property
    def column(self) -> str:
        return self.storage_key or column_name(self.name)


class FieldDescriptor(BaseModel):
    """A field on an entity."""

    model_config = _MODEL_CONFIG

    name: str
    storage_key: Optional[str] = None
    type: FieldType = "string"
    nullable: bool = False
    unique: bool = False
    primary_key: bool = False
    values: Optional[List[str]] = None
    foreign_key: Optional[ForeignKeyRef] = None
    polymorphic: Optional[PolymorphicRef] = None
    derived_fields: List[DerivedFieldDescriptor] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        return _normalize_field_type(v)

    @field_validator("polymorphic", mode="before")
    @classmethod
    def _polymorphic_flag(cls, v: Any) -> Any:
        # `polymorphic: true` (or {}) means any entity
        if v is True:
            return {}
        if v is False:
            return None
        return v

    @property
    def column(self) -> str:
        return self.storage_key or column_name(self.name)

    @property
    def is_identity_type(self) -> bool:
        return self.type in IDENTITY_TYPES


class InverseEdgeDescriptor(BaseModel):
    """Inverse side of an association edge, authored on the source entity."""

    model_config = _MODEL_CONFIG

    name: str


class AssociationEdgeDescriptor(BaseModel):
    """Directed association edge from the owning entity to `schema_name`."""

    model_config = _MODEL_CONFIG

    name: str
    schema_name: str
    symmetric: bool = False
    inverse_edge: Optional[InverseEdgeDescriptor] = None


class AssociationEdgeGroup(BaseModel):
    """Named group of association edges."""

    model_config = _MODEL_CONFIG

    name: str = ""
    assoc_edges: List[AssociationEdgeDescriptor] = Field(default_factory=list)


class EntityDescriptor(BaseModel):
    """An entity: ordered fields, optional fixed rows and association edges."""

    model_config = _MODEL_CONFIG

    name: str = ""
    table_name: Optional[str] = None
    fields: List[FieldDescriptor] = Field(default_factory=list)
    # Rows managed outside generation (enum tables); never synthesized
    db_rows: Optional[List[Dict[str, Any]]] = None
    assoc_edges: List[AssociationEdgeDescriptor] = Field(default_factory=list)
    assoc_edge_groups: List[AssociationEdgeGroup] = Field(default_factory=list)

    @property
    def is_fixed(self) -> bool:
        return self.db_rows is not None

    @property
    def physical_table(self) -> str:
        return self.table_name or table_name(self.name)

    @property
    def columns(self) -> List[str]:
        """Storage columns in field order, each field followed by its derived columns."""
        cols: List[str] = []
        for f in self.fields:
            cols.append(f.column)
            cols.extend(d.column for d in f.derived_fields)
        return cols

    @property
    def has_identity(self) -> bool:
        return IDENTITY_COLUMN in self.columns

    def field(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def all_assoc_edges(self) -> List[AssociationEdgeDescriptor]:
        """Direct edges followed by edges nested in edge groups."""
        edges = list(self.assoc_edges)
        for group in self.assoc_edge_groups:
            edges.extend(group.assoc_edges)
        return edges


class SchemaIR(BaseModel):
    """All entities of a schema, keyed by entity name."""

    model_config = ConfigDict(frozen=True)

    entities: Dict[str, EntityDescriptor]

    @model_validator(mode="before")
    @classmethod
    def _fill_entity_names(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("entities"), dict):
            return data
        entities = {}
        for key, value in data["entities"].items():
            if isinstance(value, dict):
                value = {**value, "name": value.get("name") or key}
            elif isinstance(value, EntityDescriptor) and not value.name:
                value = value.model_copy(update={"name": key})
            entities[key] = value
        return {**data, "entities": entities}

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "SchemaIR":
        """Build from the introspection output: a map of entity name -> descriptor."""
        return cls(entities=data)
