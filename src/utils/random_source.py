"""
Random Sources
==============

Every stochastic draw in the simulation (weight init, mutation gating,
perturbations, pipe heights, selection rolls) goes through a RandomSource,
so a run can be seeded or scripted end to end.
"""

from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    """Capability for drawing uniform random numbers."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        ...


class NumpyRandomSource:
    """RandomSource backed by a numpy Generator."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        return float(self._rng.uniform(low, high))
