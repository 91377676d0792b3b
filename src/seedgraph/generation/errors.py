"""Exception taxonomy for row and edge generation.

Every error here is fatal for the run: callers log it once and re-raise.
"""

from typing import Optional


class SeedGraphError(Exception):
    """Base class for all seedgraph errors."""


class ConfigurationError(SeedGraphError):
    """The schema or edge configuration cannot be generated against.

    Raised for cyclic dependency graphs, unknown entities or edges, derived
    field naming violations, enum lookups without fixed rows and edge config
    mismatches.
    """


class SchemaMismatchError(ConfigurationError):
    """A resolved dependency row is missing the column it is referenced by."""

    def __init__(self, column: str, table: str, index: int):
        self.column = column
        self.table = table
        self.index = index
        super().__init__(
            f"got no value for column '{column}' in row at index {index} "
            f"in table '{table}'"
        )


class ValueGenerationError(SeedGraphError):
    """A value could not be produced (override validation, unique exhaustion)."""


class PersistenceError(SeedGraphError):
    """An external store or writer failed."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)
