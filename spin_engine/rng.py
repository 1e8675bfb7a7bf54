"""
LUXSPIN — Random Sources

Uniform fraction providers for the wheel engine. Every draw in the engine
(segment selection, turn counts, jitter) goes through a RandomSource so the
same code path runs live and under simulation.

    SystemRandomSource  — 32 bits from os.urandom per draw, falls back to
                          random.random() if the OS source is unavailable.
    SeededRandomSource  — splitmix64, reproducible; used for Monte Carlo
                          runs and tests.

Usage:
    from spin_engine.rng import default_random_source
    rng = default_random_source(seed=WheelSettings.RNG_SEED)
    r = rng.next_uniform_fraction()        # float in [0, 1)
"""

from __future__ import annotations

import logging
import os
import random
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger("luxspin.rng")

_TWO_POW_32 = 0x100000000
_MASK64 = 0xFFFFFFFFFFFFFFFF


# ═══════════════════════════════════════════════════════════════
# Interface
# ═══════════════════════════════════════════════════════════════

class RandomSource(ABC):
    """Provider of uniform fractions in [0, 1)."""

    @abstractmethod
    def next_uniform_fraction(self) -> float:
        """Float in [0, 1)."""
        ...

    def uniform(self, lo: float, hi: float) -> float:
        """Float in [lo, hi)."""
        return lo + (hi - lo) * self.next_uniform_fraction()

    def randint(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi] inclusive."""
        idx = lo + int(self.next_uniform_fraction() * (hi - lo + 1))
        return min(idx, hi)


# ═══════════════════════════════════════════════════════════════
# Implementations
# ═══════════════════════════════════════════════════════════════

class SystemRandomSource(RandomSource):
    """OS entropy, 32 bits per draw.

    If os.urandom raises (no entropy source on the platform) the source
    degrades to the Mersenne Twister for the rest of its lifetime. The
    distribution stays uniform, so callers are never told.
    """

    def __init__(self):
        self._fallback: Optional[random.Random] = None

    @property
    def degraded(self) -> bool:
        return self._fallback is not None

    def next_uniform_fraction(self) -> float:
        if self._fallback is None:
            try:
                return int.from_bytes(os.urandom(4), "big") / _TWO_POW_32
            except (NotImplementedError, OSError) as e:
                logger.warning(f"OS entropy unavailable ({e}); using pseudo-random fallback")
                self._fallback = random.Random()
        return self._fallback.random()


class SeededRandomSource(RandomSource):
    """Splitmix64 PRNG — fast, deterministic, good distribution."""

    def __init__(self, seed: int = 0):
        self.seed = seed
        self.state = seed & _MASK64

    def _next(self) -> int:
        self.state = (self.state + 0x9E3779B97F4A7C15) & _MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
        return (z ^ (z >> 31)) & _MASK64

    def next_uniform_fraction(self) -> float:
        # Top 53 bits so the result is exactly representable and < 1.0
        return (self._next() >> 11) / (1 << 53)


class SequenceRandomSource(RandomSource):
    """Replays a fixed list of fractions, cycling when exhausted.

    Lets callers pin the draws of a spin (e.g. to replay a reported
    outcome or to exercise boundary jitter).
    """

    def __init__(self, values: list[float]):
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Fraction out of range [0, 1): {v}")
        self.values = list(values)
        self._pos = 0

    def next_uniform_fraction(self) -> float:
        v = self.values[self._pos % len(self.values)]
        self._pos += 1
        return v


def default_random_source(seed: Optional[int] = None) -> RandomSource:
    """Seeded source if a seed is given, else OS entropy."""
    if seed is not None:
        logger.info(f"Using seeded random source (seed={seed})")
        return SeededRandomSource(seed)
    return SystemRandomSource()
