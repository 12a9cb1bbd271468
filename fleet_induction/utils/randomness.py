# fleet_induction/utils/randomness.py
"""Injectable randomness for the classifier jitter.

Every optimization run gets its own source so concurrent runs never share
entropy state. Tests pass a seeded or fixed source for reproducible output.
"""
from __future__ import annotations

import random
from typing import Iterable, Optional, Protocol, runtime_checkable

from fleet_induction.models.errors import RandomSourceError


@runtime_checkable
class RandomSource(Protocol):
    def next(self) -> float:
        """Return a float in [0, 1)."""
        ...


class SeededRandomSource:
    """Wraps a private ``random.Random`` instance; ``seed=None`` draws fresh entropy."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next(self) -> float:
        return self._rng.random()


class FixedRandomSource:
    """Replays the given values in order, cycling when exhausted."""

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        if not self._values:
            raise ValueError("FixedRandomSource needs at least one value")
        self._index = 0

    def next(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def draw_jitter(source: RandomSource) -> float:
    """Draw one jitter value, refusing anything outside [0, 1)."""
    value = source.next()
    if not isinstance(value, (int, float)) or not 0.0 <= value < 1.0:
        raise RandomSourceError(f"Random source returned {value!r}, expected a float in [0, 1)")
    return float(value)
