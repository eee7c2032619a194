"""Deterministic uniform stream and Box-Muller Gaussian draws."""

from __future__ import annotations

import math
from typing import Callable

UniformSource = Callable[[], float]

# u1 at or below this is redrawn to keep log(u1) finite
BOX_MULLER_EPSILON = 1e-10


class SeededRandom:
    """Reproducible scalar stream in ``[0, 1)`` derived from an integer seed.

    Each draw takes the fractional part of ``sin(counter) * 10000`` and then
    advances the counter, so the same seed always replays the same sequence.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._counter = self.seed

    @property
    def counter(self) -> int:
        return self._counter

    def next(self) -> float:
        x = math.sin(self._counter) * 10000.0
        self._counter += 1
        return x - math.floor(x)

    __call__ = next


def gaussian(uniform: UniformSource) -> float:
    """Return one standard-normal sample via the Box-Muller transform."""

    u1 = uniform()
    while u1 <= BOX_MULLER_EPSILON:
        u1 = uniform()
    u2 = uniform()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class GaussianNoise:
    """Standard-normal noise drawn from an underlying uniform source."""

    def __init__(self, uniform: UniformSource) -> None:
        self.uniform = uniform

    def next(self) -> float:
        return gaussian(self.uniform)

    __call__ = next
