"""Value oracle: one random value per field, honoring type and nullability."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING
from faker import Faker
from seedgraph.ir.schema import FieldDescriptor
from seedgraph.generation.constants import MAX_FLOAT_VALUE, MAX_INT_VALUE
from seedgraph.generation.errors import ConfigurationError
from seedgraph.generation.naming import column_name
from seedgraph.generation.randomness import RandomSource
from seedgraph.generation.providers.base import ValueProvider
from seedgraph.generation.providers.registry import find_override
from seedgraph.config.logging import get_logger

if TYPE_CHECKING:
    from seedgraph.generation.graph import EntityInfo

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ValueOracle:
    """Produces field values; column-name overrides win over type defaults."""

    def __init__(
        self,
        random: Optional[RandomSource] = None,
        locale: str = "en_US",
        now: Callable[[], datetime] = _utc_now,
    ):
        """
        Args:
            random: Source of all draws (a fresh unseeded one by default)
            locale: Faker locale for name overrides
            now: Clock used for date and time fields
        """
        self.random = random or RandomSource()
        self.fk = Faker(locale)
        if self.random.seed is not None:
            self.fk.seed_instance(self.random.seed)
        self.now = now
        self._providers: Dict[str, ValueProvider] = {}

    def _provider(self, field_type: str, column: str) -> Optional[ValueProvider]:
        override = find_override(field_type, column)
        if override is None:
            return None
        if override.name not in self._providers:
            self._providers[override.name] = override.factory(self.random, self.fk)
        return self._providers[override.name]

    def value(
        self,
        field: FieldDescriptor,
        column: str,
        infos: Optional[Mapping[str, "EntityInfo"]] = None,
    ) -> Any:
        """
        Produce one value for a field.

        Args:
            field: Field descriptor
            column: Storage column the value is for
            infos: Entity infos, needed for enums backed by a lookup entity

        Returns:
            A value, or None for half of the draws on nullable fields

        Raises:
            ConfigurationError: Enum without values or usable lookup rows, or unsupported type
            ValueGenerationError: An override produced an invalid value
        """
        if field.nullable and self.random.coin_flip():
            return None

        provider = self._provider(field.type, column)
        if provider is not None:
            return provider.value()

        typ = field.type
        if typ == "uuid":
            return self.random.uuid4()
        if typ == "boolean":
            return self.random.coin_flip()
        if typ in ("date", "time", "timetz", "timestamp", "timestamptz"):
            return self.format_instant(typ, self.now())
        if typ == "string":
            return self.random.token()
        if typ == "int":
            return self.random.integer(MAX_INT_VALUE)
        if typ == "float":
            return self.random.real(MAX_FLOAT_VALUE)
        if typ == "enum":
            return self._enum_value(field, infos)
        raise ConfigurationError(f"unsupported type {typ} for column {column}")

    @staticmethod
    def format_instant(typ: str, instant: datetime) -> str:
        """Format an aware UTC instant for a date/time field type."""
        if typ == "date":
            return instant.date().isoformat()
        if typ == "time":
            return instant.time().isoformat(timespec="milliseconds")
        if typ == "timetz":
            return instant.timetz().isoformat(timespec="milliseconds")
        if typ == "timestamp":
            return instant.replace(tzinfo=None).isoformat(timespec="milliseconds")
        return instant.isoformat(timespec="milliseconds")

    def _enum_value(
        self, field: FieldDescriptor, infos: Optional[Mapping[str, "EntityInfo"]]
    ) -> Any:
        if field.values:
            return self.random.pick(field.values)
        if field.foreign_key is None:
            raise ConfigurationError(f"enum field {field.name} has no values and no lookup entity")

        target = field.foreign_key.entity
        if infos is None:
            raise ConfigurationError(f"entity infos required for enum {field.name} with foreign key")
        info = infos.get(target)
        if info is None:
            raise ConfigurationError(f"couldn't load data for entity {target}")
        if not info.fixed_rows:
            raise ConfigurationError(f"no fixed rows for entity {target}")
        row = self.random.pick(info.fixed_rows)
        return row.get(column_name(field.foreign_key.column))
