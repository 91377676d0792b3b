"""Random draws used by generation.

All non-determinism in row and edge generation goes through RandomSource so
tests can inject a seeded instance.
"""

import uuid
from typing import Optional, Sequence, TypeVar
import numpy as np

T = TypeVar("T")


class RandomSource:
    """Seedable wrapper around a numpy Generator."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def coin_flip(self) -> bool:
        return bool(self.rng.integers(0, 10) >= 5)

    def pick(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise ValueError("cannot pick from an empty sequence")
        return items[int(self.rng.integers(0, len(items)))]

    def integer(self, high: int) -> int:
        """Uniform integer in [0, high)."""
        return int(self.rng.integers(0, high))

    def real(self, high: float) -> float:
        """Uniform float in [0, high)."""
        return float(self.rng.random() * high)

    def digits(self, n: int) -> str:
        return "".join(str(d) for d in self.rng.integers(0, 10, size=n))

    def token(self, nbytes: int = 8) -> str:
        """Random opaque lowercase hex token."""
        return self.rng.bytes(nbytes).hex()

    def uuid4(self) -> str:
        return str(uuid.UUID(bytes=self.rng.bytes(16), version=4))
