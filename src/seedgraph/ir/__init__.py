"""Schema input models and validation."""

from .schema import (
    FieldType,
    ForeignKeyRef,
    PolymorphicRef,
    DerivedFieldDescriptor,
    FieldDescriptor,
    InverseEdgeDescriptor,
    AssociationEdgeDescriptor,
    AssociationEdgeGroup,
    EntityDescriptor,
    SchemaIR,
)

__all__ = [
    "FieldType",
    "ForeignKeyRef",
    "PolymorphicRef",
    "DerivedFieldDescriptor",
    "FieldDescriptor",
    "InverseEdgeDescriptor",
    "AssociationEdgeDescriptor",
    "AssociationEdgeGroup",
    "EntityDescriptor",
    "SchemaIR",
]
