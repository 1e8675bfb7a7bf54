"""
LUXSPIN — Spin Resolver

One spin, start to finish:
  1. Draw the outer and inner segments independently (two selector calls).
  2. Compute the rotation target for each ring and write it to RotationState.
  3. Settle the outcome pair against the stake.

The result is final as soon as resolve_spin returns; the presentation layer
only delays showing it.

Contract: the resolver does not track spins in progress. Callers must not
resolve a new spin on a RotationState whose previous spin is still being
animated, and must have checked that the stake is positive and affordable.

Usage:
    from spin_engine import resolve_spin, RotationState, OUTER_RING, INNER_RING
    state = RotationState()
    result = resolve_spin(1.0, OUTER_RING, INNER_RING, state, rng)
    result.settlement.delta, result.outer_rotation_target
"""

from __future__ import annotations

from dataclasses import dataclass

from spin_engine.geometry import (
    DEFAULT_JITTER_FRACTION, RotationState, RingRotation, rotation_target_for,
)
from spin_engine.rings import Ring, Segment
from spin_engine.rng import RandomSource
from spin_engine.selector import select_index
from spin_engine.settlement import Settlement, settle


@dataclass(frozen=True)
class SpinOutcome:
    outer_segment: Segment
    inner_segment: Segment

    @property
    def labels(self) -> tuple[str, str]:
        return self.outer_segment.display_label, self.inner_segment.display_label


@dataclass(frozen=True)
class SpinResult:
    outcome: SpinOutcome
    settlement: Settlement
    outer_rotation_target: float
    inner_rotation_target: float

    @property
    def outer_outcome(self) -> Segment:
        return self.outcome.outer_segment

    @property
    def inner_outcome(self) -> Segment:
        return self.outcome.inner_segment

    def to_dict(self) -> dict:
        outer, inner = self.outcome.labels
        return {
            "outer": outer,
            "inner": inner,
            "outer_index": self.outer_outcome.index,
            "inner_index": self.inner_outcome.index,
            "delta": self.settlement.delta,
            "stake": self.settlement.stake,
            "outer_rotation_target": round(self.outer_rotation_target, 4),
            "inner_rotation_target": round(self.inner_rotation_target, 4),
        }


def _rotate(ring: Ring, rotation: RingRotation, index: int,
            rng: RandomSource, jitter_fraction: float) -> float:
    target = rotation_target_for(
        rotation.resting_degrees, ring.size, index, ring.turns, rng, jitter_fraction)
    rotation.advance(target)
    return target


def resolve_drawn(stake: float, outer_ring: Ring, inner_ring: Ring,
                  outer_index: int, inner_index: int,
                  rotation_state: RotationState, rng: RandomSource,
                  jitter_fraction: float = DEFAULT_JITTER_FRACTION) -> SpinResult:
    """Resolve a spin whose segment draws are already known.

    `rng` is only consumed for turn counts and jitter, so the settlement is
    a pure function of the stake, the rings and the two indices.
    """
    outcome = SpinOutcome(outer_ring[outer_index], inner_ring[inner_index])
    outer_target = _rotate(outer_ring, rotation_state.outer, outer_index, rng, jitter_fraction)
    inner_target = _rotate(inner_ring, rotation_state.inner, inner_index, rng, jitter_fraction)
    return SpinResult(
        outcome=outcome,
        settlement=settle(stake, outcome.outer_segment, outcome.inner_segment),
        outer_rotation_target=outer_target,
        inner_rotation_target=inner_target,
    )


def resolve_spin(stake: float, outer_ring: Ring, inner_ring: Ring,
                 rotation_state: RotationState, rng: RandomSource,
                 jitter_fraction: float = DEFAULT_JITTER_FRACTION) -> SpinResult:
    """Draw both rings independently and resolve the spin."""
    outer_index = select_index(outer_ring.weights, rng)
    inner_index = select_index(inner_ring.weights, rng)
    return resolve_drawn(stake, outer_ring, inner_ring, outer_index, inner_index,
                         rotation_state, rng, jitter_fraction)
