"""Base protocol for value providers."""

from typing import Any, Protocol


class ValueProvider(Protocol):
    """
    Protocol for providers that produce one realistic value per call.

    Providers are offline (no HTTP calls) and draw their randomness from the
    RandomSource or seeded Faker instance they were built with.
    """

    def value(self) -> Any:
        """
        Produce one value.

        Raises:
            ValueGenerationError: If the produced value fails the provider's own validation
        """
        ...
