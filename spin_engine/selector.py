"""Weighted Outcome Selector — linear cumulative scan over a weight table."""

from typing import Sequence

from spin_engine.rng import RandomSource


def select_index(weights: Sequence[float], rng: RandomSource) -> int:
    """Draw one index with probability weights[i] / sum(weights).

    Callers must pass a non-empty table with a positive total; Ring
    construction guarantees that for ring tables. If rounding pushes the
    draw past every cumulative sum, the last index is returned.
    """
    total = sum(weights)
    r = rng.next_uniform_fraction() * total
    cumulative = 0.0
    for i, w in enumerate(weights):
        cumulative += w
        if r < cumulative:
            return i
    return len(weights) - 1
