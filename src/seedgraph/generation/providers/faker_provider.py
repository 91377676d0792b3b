"""Faker-based value provider."""

from typing import Any
from faker import Faker
from seedgraph.generation.errors import ValueGenerationError


class FakerProvider:
    """Value provider using a Faker method."""

    def __init__(self, fk: Faker, field: str = "name", **kwargs):
        """
        Initialize Faker provider.

        Args:
            fk: Seeded Faker instance shared by the oracle
            field: Faker method name (e.g., "first_name", "last_name")
            **kwargs: Arguments passed to the Faker method
        """
        self.fk = fk
        self.field = field
        self.kwargs = kwargs

    def value(self) -> Any:
        try:
            method = getattr(self.fk, self.field)
        except AttributeError:
            raise ValueGenerationError(f"Faker field '{self.field}' not available") from None
        return method(**self.kwargs)
