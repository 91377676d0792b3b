"""Registry of column-name overrides for the value oracle."""

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Pattern, Tuple
from faker import Faker
from .base import ValueProvider
from .faker_provider import FakerProvider
from .overrides import EmailProvider, PasswordProvider, PhoneNumberProvider
from seedgraph.generation.randomness import RandomSource
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)

ProviderFactory = Callable[[RandomSource, Faker], ValueProvider]


@dataclass(frozen=True)
class ColumnOverride:
    """Provider used instead of the type default when a column name matches."""

    name: str
    field_types: FrozenSet[str]
    patterns: Tuple[Pattern[str], ...]
    factory: ProviderFactory

    def matches(self, field_type: str, column: str) -> bool:
        if field_type not in self.field_types:
            return False
        return any(p.search(column) for p in self.patterns)


def _override(name: str, patterns: List[str], factory: ProviderFactory) -> ColumnOverride:
    return ColumnOverride(
        name=name,
        field_types=frozenset({"string"}),
        patterns=tuple(re.compile(p) for p in patterns),
        factory=factory,
    )


# Checked in order; the first match wins
OVERRIDES: List[ColumnOverride] = [
    _override("phone_number", [r"^phone(_number)?", r"_phone$", r"_phone_number$"],
              lambda rnd, fk: PhoneNumberProvider(rnd)),
    _override("email", [r"^email(_address)?", r"_email$"],
              lambda rnd, fk: EmailProvider(rnd)),
    _override("password", [r"^password"],
              lambda rnd, fk: PasswordProvider(rnd)),
    _override("first_name", [r"^first_?(name)?"],
              lambda rnd, fk: FakerProvider(fk, field="first_name")),
    _override("last_name", [r"^last_?(name)?"],
              lambda rnd, fk: FakerProvider(fk, field="last_name")),
]


def find_override(field_type: str, column: str) -> Optional[ColumnOverride]:
    """
    Find the override for a field type and storage column.

    Args:
        field_type: Semantic field type (e.g., "string")
        column: Storage column name (e.g., "email_address")

    Returns:
        The first matching ColumnOverride, or None
    """
    for override in OVERRIDES:
        if override.matches(field_type, column):
            return override
    return None


def register_override(override: ColumnOverride, first: bool = True) -> None:
    """
    Register a column override.

    Args:
        override: Override to add
        first: Check it before the built-in overrides
    """
    if first:
        OVERRIDES.insert(0, override)
    else:
        OVERRIDES.append(override)
    logger.info(f"Registered column override: {override.name}")
