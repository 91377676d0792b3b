"""Validators for schema input."""

from dataclasses import dataclass, field
from typing import Iterable, List, Literal, Optional
from .schema import SchemaIR
from seedgraph.generation.errors import ConfigurationError
from seedgraph.generation.naming import column_name, derived_type_name, edge_name
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)


@dataclass
class QaIssue:
    """QA issue found during validation."""

    stage: Literal["Schema", "Edges", "Run"]
    code: str  # e.g., "FK_TARGET_MISSING", "DERIVED_FIELD_NAME"
    location: str  # e.g., "Entity" or "Entity.field"
    message: str
    severity: Literal["error", "warning"] = "error"
    details: dict = field(default_factory=dict)


def validate_schema(
    schema: SchemaIR, restrict: Optional[Iterable[str]] = None
) -> List[QaIssue]:
    """
    Validate a schema before generation.

    Args:
        schema: Parsed schema input
        restrict: Optional allow-list of entities that actively generate rows

    Returns:
        List of QaIssue objects (empty if validation passes)
    """
    entities = schema.entities
    issues: List[QaIssue] = []
    has_wildcard = False

    for name, entity in entities.items():
        if not entity.is_fixed and not entity.has_identity:
            issues.append(
                QaIssue(
                    stage="Schema",
                    code="MISSING_IDENTITY",
                    location=name,
                    message=f"{name}: no 'id' column; rows cannot be referenced by edges or polymorphic fields",
                    severity="warning",
                )
            )

        for f in entity.fields:
            location = f"{name}.{f.name}"

            if f.foreign_key is not None:
                target = entities.get(f.foreign_key.entity)
                if target is None:
                    issues.append(
                        QaIssue(
                            stage="Schema",
                            code="FK_TARGET_MISSING",
                            location=location,
                            message=f"{location}: foreign key references missing entity '{f.foreign_key.entity}'",
                            details={"target": f.foreign_key.entity},
                        )
                    )
                elif column_name(f.foreign_key.column) not in target.columns and not target.field(f.foreign_key.column):
                    issues.append(
                        QaIssue(
                            stage="Schema",
                            code="FK_COLUMN_MISSING",
                            location=location,
                            message=(
                                f"{location}: foreign key references "
                                f"'{f.foreign_key.entity}.{f.foreign_key.column}' which does not exist"
                            ),
                            details={"target": f.foreign_key.entity, "column": f.foreign_key.column},
                        )
                    )

            if f.polymorphic is not None:
                if f.polymorphic.wildcard:
                    has_wildcard = True
                else:
                    for typ in f.polymorphic.types:
                        if typ not in entities:
                            issues.append(
                                QaIssue(
                                    stage="Schema",
                                    code="POLY_TARGET_MISSING",
                                    location=location,
                                    message=f"{location}: polymorphic type '{typ}' is not a known entity",
                                    details={"type": typ},
                                )
                            )

            if f.derived_fields:
                expected = derived_type_name(f.name)
                for derived in f.derived_fields:
                    if expected is None or derived.name != expected:
                        issues.append(
                            QaIssue(
                                stage="Schema",
                                code="DERIVED_FIELD_NAME",
                                location=location,
                                message=(
                                    f"{location}: unsupported derived field '{derived.name}'"
                                    + (f", expected '{expected}'" if expected else "; parent must end in _id or ID")
                                ),
                                details={"derived": derived.name, "expected": expected},
                            )
                        )

            if f.type == "enum" and not f.values:
                if f.foreign_key is None:
                    issues.append(
                        QaIssue(
                            stage="Schema",
                            code="ENUM_NO_VALUES",
                            location=location,
                            message=f"{location}: enum without values or a lookup table is not supported",
                        )
                    )
                else:
                    target = entities.get(f.foreign_key.entity)
                    if target is not None and not target.db_rows:
                        issues.append(
                            QaIssue(
                                stage="Schema",
                                code="ENUM_FK_NO_ROWS",
                                location=location,
                                message=f"{location}: lookup entity '{f.foreign_key.entity}' has no fixed rows",
                                details={"target": f.foreign_key.entity},
                            )
                        )

    if has_wildcard and not any(e.has_identity for e in entities.values()):
        issues.append(
            QaIssue(
                stage="Schema",
                code="NO_IDENTITY_ENTITY",
                location="*",
                message="wildcard polymorphic field present but no entity exposes an 'id' column",
            )
        )

    issues.extend(validate_edges(schema))

    for name in restrict or []:
        if name not in entities:
            issues.append(
                QaIssue(
                    stage="Run",
                    code="RESTRICT_UNKNOWN",
                    location=name,
                    message=f"restrict names unknown entity '{name}'",
                    severity="warning",
                )
            )

    return issues


def validate_edges(schema: SchemaIR) -> List[QaIssue]:
    """Check association edge targets and that computed edge names are unique."""
    issues: List[QaIssue] = []
    seen = {}
    for name, entity in schema.entities.items():
        for edge in entity.all_assoc_edges():
            location = f"{name}.{edge.name}"
            if edge.schema_name not in schema.entities:
                issues.append(
                    QaIssue(
                        stage="Edges",
                        code="EDGE_TARGET_MISSING",
                        location=location,
                        message=f"{location}: edge targets missing entity '{edge.schema_name}'",
                    )
                )
            names = [edge_name(name, edge.name)]
            if edge.inverse_edge is not None:
                names.append(edge_name(edge.schema_name, edge.inverse_edge.name))
            for computed in names:
                if computed in seen:
                    issues.append(
                        QaIssue(
                            stage="Edges",
                            code="EDGE_NAME_DUPLICATE",
                            location=location,
                            message=f"{location}: edge name '{computed}' already declared at {seen[computed]}",
                        )
                    )
                else:
                    seen[computed] = location
    return issues


def raise_for_issues(issues: List[QaIssue]) -> None:
    """
    Log warnings and raise ConfigurationError if any issue is an error.

    Raises:
        ConfigurationError: Listing every error-level issue
    """
    for issue in issues:
        if issue.severity == "warning":
            logger.warning(f"[{issue.code}] {issue.message}")

    errors = [i for i in issues if i.severity == "error"]
    if errors:
        lines = "\n".join(f"  [{i.code}] {i.message}" for i in errors)
        raise ConfigurationError(f"schema has {len(errors)} configuration error(s):\n{lines}")
