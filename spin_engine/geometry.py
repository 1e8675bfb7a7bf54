"""
LUXSPIN — Rotation Geometry

Maps a chosen segment index to the angle a ring must rotate to so that the
segment comes to rest under the fixed top pointer.

Conventions:
    * Angles are degrees; positive rotation is clockwise.
    * Segment k of an n-segment ring spans [k*slice, (k+1)*slice) measured
      clockwise from the top of the ring in its own frame, slice = 360/n.
    * A ring rotated by θ shows, under the top pointer, the point of the ring
      at (-θ) mod 360. So resting on segment k means θ ≡ -(center_k) + jitter.

Target rotation:
    target = previous + direction * turns * 360 + correction
    where correction moves, in the spin direction, from the previous resting
    residue to -(center_k) + jitter (mod 360). The ring therefore always
    advances by at least turns * 360 and never snaps backward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from spin_engine.rng import RandomSource

FULL_TURN = 360.0
DEFAULT_JITTER_FRACTION = 0.3


class SpinDirection(int, Enum):
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = -1


@dataclass(frozen=True)
class TurnRange:
    """Inclusive range of whole turns added per spin, plus spin direction."""
    min_turns: int
    max_turns: int
    direction: SpinDirection = SpinDirection.CLOCKWISE

    def __post_init__(self):
        if self.min_turns < 1:
            raise ValueError(f"min_turns must be >= 1, got {self.min_turns}")
        if self.max_turns < self.min_turns:
            raise ValueError(
                f"max_turns ({self.max_turns}) < min_turns ({self.min_turns})")


# ═══════════════════════════════════════════════════════════════
# Rotation State
# ═══════════════════════════════════════════════════════════════

@dataclass
class RingRotation:
    cumulative_rotation_degrees: float = 0.0
    target_rotation_degrees: float = 0.0

    def advance(self, target: float):
        """Record a new landing angle; it becomes the base of the next spin."""
        self.cumulative_rotation_degrees = self.target_rotation_degrees
        self.target_rotation_degrees = target

    @property
    def resting_degrees(self) -> float:
        return self.target_rotation_degrees


@dataclass
class RotationState:
    """Resting angles of both rings. Single writer: the spin resolver.

    Not safe for concurrent spins. Callers must not start a spin while a
    previous one on the same state is still in flight.
    """
    outer: RingRotation = field(default_factory=RingRotation)
    inner: RingRotation = field(default_factory=RingRotation)

    def reset(self):
        self.outer = RingRotation()
        self.inner = RingRotation()

    def to_dict(self) -> dict:
        return {
            "outer": {
                "cumulative": round(self.outer.cumulative_rotation_degrees, 4),
                "target": round(self.outer.target_rotation_degrees, 4),
            },
            "inner": {
                "cumulative": round(self.inner.cumulative_rotation_degrees, 4),
                "target": round(self.inner.target_rotation_degrees, 4),
            },
        }


# ═══════════════════════════════════════════════════════════════
# Segment Geometry
# ═══════════════════════════════════════════════════════════════

def normalize_degrees(deg: float) -> float:
    """Reduce to [0, 360)."""
    r = math.fmod(deg, FULL_TURN)
    if r < 0:
        r += FULL_TURN
    # fmod of a tiny negative can round up to exactly 360
    return 0.0 if r >= FULL_TURN else r


def slice_width(n_segments: int) -> float:
    if n_segments <= 0:
        raise ValueError(f"Ring needs at least one segment, got {n_segments}")
    return FULL_TURN / n_segments


def segment_span(n_segments: int, index: int) -> tuple[float, float]:
    """(start, end) of segment `index` in the ring's own frame."""
    w = slice_width(n_segments)
    return index * w, (index + 1) * w


def segment_center(n_segments: int, index: int) -> float:
    w = slice_width(n_segments)
    return index * w + w / 2


def pointer_angle(rotation: float) -> float:
    """Angle of the ring (own frame) sitting under the top pointer."""
    return normalize_degrees(-rotation)


def landing_index(n_segments: int, rotation: float) -> int:
    """Index of the segment under the top pointer for a given rotation."""
    idx = int(pointer_angle(rotation) // slice_width(n_segments))
    return min(idx, n_segments - 1)


def boundary_distance(n_segments: int, rotation: float) -> float:
    """Distance in degrees from the pointer to the nearest segment edge."""
    w = slice_width(n_segments)
    offset = math.fmod(pointer_angle(rotation), w)
    return min(offset, w - offset)


def max_jitter(n_segments: int, jitter_fraction: float = DEFAULT_JITTER_FRACTION) -> float:
    """Largest |jitter| allowed: a fraction of half a slice."""
    return jitter_fraction * slice_width(n_segments) / 2


# ═══════════════════════════════════════════════════════════════
# Targets
# ═══════════════════════════════════════════════════════════════

def compute_rotation_target(previous: float, n_segments: int, index: int,
                            turns: int, direction: SpinDirection,
                            jitter: float = 0.0) -> float:
    """Pure target computation for landing `index` under the pointer."""
    if not 0 <= index < n_segments:
        raise IndexError(f"Segment {index} out of range for {n_segments}-segment ring")
    desired = normalize_degrees(jitter - segment_center(n_segments, index))
    current = normalize_degrees(previous)
    if direction == SpinDirection.CLOCKWISE:
        correction = normalize_degrees(desired - current)
    else:
        correction = -normalize_degrees(current - desired)
    return previous + int(direction) * turns * FULL_TURN + correction


def draw_jitter(rng: RandomSource, n_segments: int,
                jitter_fraction: float = DEFAULT_JITTER_FRACTION) -> float:
    """Uniform in [-max_jitter, +max_jitter)."""
    bound = max_jitter(n_segments, jitter_fraction)
    return rng.uniform(-bound, bound)


def rotation_target_for(previous: float, n_segments: int, index: int,
                        turn_range: TurnRange, rng: RandomSource,
                        jitter_fraction: float = DEFAULT_JITTER_FRACTION) -> float:
    """Draw turns and jitter, then compute the landing target."""
    turns = rng.randint(turn_range.min_turns, turn_range.max_turns)
    jitter = draw_jitter(rng, n_segments, jitter_fraction)
    return compute_rotation_target(previous, n_segments, index, turns,
                                   turn_range.direction, jitter)
