"""
LUXSPIN — Twin-Ring Wheel Engine

Outcome resolution and payout math for a two-ring wheel: weighted draws,
landing geometry and settlement.

Usage:
    from spin_engine import resolve_spin, RotationState, OUTER_RING, INNER_RING
    from spin_engine.rng import SystemRandomSource
    state = RotationState()
    result = resolve_spin(0.50, OUTER_RING, INNER_RING, state, SystemRandomSource())
"""

from spin_engine.errors import (
    InsufficientBalanceError, InvalidStakeError, RingConfigError,
    SessionClosedError, SpinInProgressError,
)
from spin_engine.geometry import (
    RingRotation, RotationState, SpinDirection, TurnRange, landing_index,
)
from spin_engine.resolver import SpinOutcome, SpinResult, resolve_drawn, resolve_spin
from spin_engine.rings import (
    INNER_RING, OUTER_RING, Ring, Segment, build_ring, parse_multiplier,
)
from spin_engine.rng import (
    RandomSource, SeededRandomSource, SequenceRandomSource, SystemRandomSource,
    default_random_source,
)
from spin_engine.selector import select_index
from spin_engine.settlement import Settlement, settle, settlement_delta
