"""Seeded source of synthetic values.

Every component of a dashboard session draws from its own ``SyntheticSource``
so that a session built from the same seed replays the same traffic.
"""

from typing import Optional, Sequence, TypeVar, Union

import numpy as np

T = TypeVar("T")


class SyntheticSource:
    """
    Thin wrapper around a numpy ``Generator`` exposing the handful of draws the
    simulators need (coin flips, bounded integers, hex strings, payload bytes).
    """

    def __init__(self, seed: Optional[Union[int, np.random.Generator]] = None):
        """
        Initialize the source.

        Args:
            seed (int | Generator | None): Seed for the underlying generator, or
                an existing generator to wrap. ``None`` draws fresh entropy.
        """
        self.generator = np.random.default_rng(seed)

    def random(self) -> float:
        """
        Draw a float in the range [0, 1).

        Returns:
            float: A pseudo-random number.
        """
        return float(self.generator.random())

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random() < probability

    def randint(self, low: int, high: int) -> int:
        """Draw an integer in the half-open range [low, high)."""
        return int(self.generator.integers(low, high))

    def uniform(self, low: float, high: float) -> float:
        """Draw a float uniformly between low and high."""
        return float(self.generator.uniform(low, high))

    def choice(self, items: Sequence[T]) -> T:
        """
        Select a random item from a non-empty sequence.

        Args:
            items (Sequence): The items to choose from.

        Returns:
            Any: A randomly selected item.

        Raises:
            ValueError: If the input sequence is empty.
        """
        if not items:
            raise ValueError("Cannot choose from an empty list")
        return items[self.randint(0, len(items))]

    def hex_digest(self, length: int = 8) -> str:
        """Return ``length`` lowercase hex characters."""
        return "".join(f"{int(d):x}" for d in self.generator.integers(0, 16, size=length))

    def payload(self, length: int = 32) -> bytes:
        """Return ``length`` random bytes."""
        return self.generator.integers(0, 256, size=length, dtype=np.uint8).tobytes()

    def spawn(self) -> "SyntheticSource":
        """Derive an independent child source from this one."""
        return SyntheticSource(self.generator.spawn(1)[0])
