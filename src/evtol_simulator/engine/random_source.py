"""Random source — the only entry point of nondeterminism into the engine.

Fault trials and random fleet assignment draw from a ``RandomSource``.
Production runs use ``NumpyRandomSource`` (a seeded ``np.random.Generator``);
tests substitute scripted implementations so outcomes are fixed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class RandomSource(ABC):
    """Bernoulli trials and inclusive uniform integer draws."""

    @abstractmethod
    def bernoulli(self, p: float) -> bool:
        """Return True with probability ``p``."""

    @abstractmethod
    def uniform_int(self, low: int, high: int) -> int:
        """Return an integer drawn uniformly from ``[low, high]`` (both inclusive)."""


class NumpyRandomSource(RandomSource):
    """``RandomSource`` backed by ``numpy.random.default_rng``.

    Parameters
    ----------
    seed : int | None
        Seed for reproducible runs.  ``None`` draws fresh OS entropy.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def bernoulli(self, p: float) -> bool:
        # Linear fault scaling may push p past 1; the trial saturates.
        if p <= 0.0:
            return False
        if p >= 1.0:
            return True
        return bool(self._rng.random() < p)

    def uniform_int(self, low: int, high: int) -> int:
        if high < low:
            raise ValueError(f"uniform_int: high ({high}) < low ({low})")
        return int(self._rng.integers(low, high, endpoint=True))
