#!/usr/bin/env python3
"""
Tests for Rotation Geometry

Validates:
1. normalize_degrees / pointer_angle / landing_index conventions
2. compute_rotation_target lands the chosen segment for both directions
3. Every segment index lands strictly inside its slice across many draws
4. Each spin advances by at least min_turns full turns, never backward
5. Jitter stays within 30% of half a slice
6. Out-of-range indices are rejected
"""

import sys
from pathlib import Path

# ── Ensure project root is on sys.path ──
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from spin_engine.geometry import (
    FULL_TURN, RingRotation, RotationState, SpinDirection, TurnRange,
    boundary_distance, compute_rotation_target, draw_jitter, landing_index,
    max_jitter, normalize_degrees, pointer_angle, rotation_target_for,
    segment_center, slice_width,
)
from spin_engine.resolver import resolve_spin
from spin_engine.rings import INNER_RING, OUTER_RING
from spin_engine.rng import SeededRandomSource

DRAWS_PER_INDEX = 100


def test_normalize_degrees():
    """Angles reduce into [0, 360)."""
    assert normalize_degrees(0) == 0
    assert normalize_degrees(360) == 0
    assert normalize_degrees(725) == 5
    assert normalize_degrees(-90) == 270
    assert 0 <= normalize_degrees(-1e-15) < 360
    print("✅ normalize_degrees: wraps positive and negative angles")


def test_pointer_reads_negated_rotation():
    """Rotating clockwise by θ brings the ring point at -θ under the pointer."""
    assert pointer_angle(0) == 0
    assert pointer_angle(30) == 330
    assert pointer_angle(-30) == 30
    assert landing_index(4, 0.0) == 0
    assert landing_index(4, -100.0) == 1   # pointer at 100°, slice 90°
    assert landing_index(4, 10.0) == 3     # pointer at 350°
    print("✅ pointer_angle / landing_index: conventions hold")


def test_clockwise_target_from_rest():
    """Outer ring, index 0, 6 turns, no jitter, starting at 0°."""
    center = segment_center(7, 0)
    target = compute_rotation_target(0.0, 7, 0, 6, SpinDirection.CLOCKWISE)
    assert abs(target - (6 * FULL_TURN + FULL_TURN - center)) < 1e-9, target
    assert abs(pointer_angle(target) - center) < 1e-9
    assert landing_index(7, target) == 0
    print(f"✅ Clockwise target: {target:.4f}° lands segment 0")


def test_counter_clockwise_target_from_rest():
    """Inner ring, index 1, 7 turns, no jitter: lands at -2655°."""
    target = compute_rotation_target(0.0, 4, 1, 7, SpinDirection.COUNTER_CLOCKWISE)
    assert abs(target - (-2655.0)) < 1e-9, target
    assert landing_index(4, target) == 1
    print(f"✅ Counter-clockwise target: {target:.1f}° lands segment 1")


def test_target_ignores_accumulated_offset():
    """A non-zero, non-aligned previous angle still lands the chosen segment."""
    for previous in (13.7, 2494.2857, -777.7, 100000.25):
        for index in range(7):
            target = compute_rotation_target(previous, 7, index, 8, SpinDirection.CLOCKWISE)
            assert landing_index(7, target) == index, (previous, index, target)
            assert target - previous >= 8 * FULL_TURN
    print("✅ Landing is independent of the previous resting angle")


def _check_ring_landings(ring, seed):
    rng = SeededRandomSource(seed)
    w = slice_width(ring.size)
    floor = w / 2 - max_jitter(ring.size) - 1e-6
    previous = 0.0
    for index in range(ring.size):
        for _ in range(DRAWS_PER_INDEX):
            target = rotation_target_for(previous, ring.size, index, ring.turns, rng)
            assert landing_index(ring.size, target) == index, (ring.name, index, target)
            margin = boundary_distance(ring.size, target)
            assert margin > 0, f"{ring.name}[{index}] landed on an edge"
            assert margin >= floor, f"{ring.name}[{index}] margin {margin:.4f} < {floor:.4f}"
            advance = (target - previous) * int(ring.turns.direction)
            assert advance >= ring.turns.min_turns * FULL_TURN, advance
            assert advance < (ring.turns.max_turns + 1) * FULL_TURN, advance
            previous = target
    return ring.size * DRAWS_PER_INDEX


def test_outer_every_index_lands_inside():
    """7 indices × 100 draws on the clockwise outer ring."""
    n = _check_ring_landings(OUTER_RING, seed=101)
    print(f"✅ Outer ring: {n} landings strictly inside their slices")


def test_inner_every_index_lands_inside():
    """4 indices × 100 draws on the counter-clockwise inner ring."""
    n = _check_ring_landings(INNER_RING, seed=202)
    print(f"✅ Inner ring: {n} landings strictly inside their slices")


def test_rings_spin_opposite_directions():
    """Across consecutive resolved spins outer rises and inner falls."""
    state = RotationState()
    rng = SeededRandomSource(303)
    prev_outer, prev_inner = 0.0, 0.0
    for _ in range(200):
        result = resolve_spin(1.0, OUTER_RING, INNER_RING, state, rng)
        assert result.outer_rotation_target - prev_outer >= 6 * FULL_TURN
        assert prev_inner - result.inner_rotation_target >= 7 * FULL_TURN
        assert landing_index(OUTER_RING.size, result.outer_rotation_target) == result.outer_outcome.index
        assert landing_index(INNER_RING.size, result.inner_rotation_target) == result.inner_outcome.index
        prev_outer, prev_inner = result.outer_rotation_target, result.inner_rotation_target
    print("✅ 200 spins: outer clockwise, inner counter-clockwise, always landing the draw")


def test_jitter_bound():
    """|jitter| ≤ 0.3 × slice / 2."""
    rng = SeededRandomSource(404)
    for n in (4, 7, 12):
        bound = max_jitter(n)
        assert abs(bound - 0.15 * slice_width(n)) < 1e-12
        for _ in range(5000):
            assert abs(draw_jitter(rng, n)) <= bound
    print("✅ Jitter within 15% of a slice")


def test_out_of_range_index_rejected():
    """Index outside [0, n) raises IndexError."""
    for bad in (-1, 7):
        try:
            compute_rotation_target(0.0, 7, bad, 6, SpinDirection.CLOCKWISE)
        except IndexError:
            continue
        raise AssertionError(f"index {bad} accepted")
    print("✅ Out-of-range segment index rejected")


def test_turn_range_validation():
    """TurnRange refuses empty or inverted ranges."""
    for lo, hi in ((0, 3), (5, 4)):
        try:
            TurnRange(lo, hi)
        except ValueError:
            continue
        raise AssertionError(f"TurnRange({lo}, {hi}) accepted")
    print("✅ TurnRange validation")


def test_rotation_state_advance_and_reset():
    """advance() shifts target into cumulative; reset() returns to rest."""
    rot = RingRotation()
    rot.advance(2500.0)
    rot.advance(5100.0)
    assert rot.cumulative_rotation_degrees == 2500.0
    assert rot.resting_degrees == 5100.0

    state = RotationState(outer=rot)
    state.reset()
    assert state.outer.target_rotation_degrees == 0.0
    assert state.to_dict()["inner"] == {"cumulative": 0.0, "target": 0.0}
    print("✅ RotationState advance/reset")


# ═══════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════

if __name__ == "__main__":
    tests = [
        test_normalize_degrees,
        test_pointer_reads_negated_rotation,
        test_clockwise_target_from_rest,
        test_counter_clockwise_target_from_rest,
        test_target_ignores_accumulated_offset,
        test_outer_every_index_lands_inside,
        test_inner_every_index_lands_inside,
        test_rings_spin_opposite_directions,
        test_jitter_bound,
        test_out_of_range_index_rejected,
        test_turn_range_validation,
        test_rotation_state_advance_and_reset,
    ]

    print(f"\n{'='*60}")
    print(f"Geometry Tests — {len(tests)} tests")
    print(f"{'='*60}\n")

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"❌ {test.__name__}: {e}")
            failed += 1
        print()

    print(f"{'='*60}")
    print(f"Results: {passed} passed, {failed} failed, {passed + failed} total")
    print(f"{'='*60}")

    sys.exit(0 if failed == 0 else 1)
