"""
LUXSPIN — Rings & Segments

Immutable ring definitions. A ring is validated once, at construction, so
that the selector never has to deal with a broken odds table at spin time.

Canonical tables:
    Outer  0x 72 | 2x 15 | 5x 7 | 10x 3.5 | 15x 1.5 | 20x 0.8 | 50x 0.2
    Inner  1x 65 | 2x 25 | 3x 8 | 4x 2
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from spin_engine.errors import RingConfigError
from spin_engine.geometry import SpinDirection, TurnRange


@dataclass(frozen=True)
class Segment:
    index: int
    multiplier: float
    weight: float
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or format_multiplier(self.multiplier)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "label": self.display_label,
            "multiplier": self.multiplier,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class Ring:
    name: str
    segments: tuple[Segment, ...]
    turns: TurnRange = field(default_factory=lambda: TurnRange(6, 9))

    def __post_init__(self):
        if not self.segments:
            raise RingConfigError(f"Ring '{self.name}' has no segments")
        for pos, seg in enumerate(self.segments):
            if seg.index != pos:
                raise RingConfigError(
                    f"Ring '{self.name}': segment at position {pos} has index {seg.index}")
            if not math.isfinite(seg.weight) or seg.weight < 0:
                raise RingConfigError(
                    f"Ring '{self.name}': segment {pos} has invalid weight {seg.weight!r}")
            if not math.isfinite(seg.multiplier) or seg.multiplier < 0:
                raise RingConfigError(
                    f"Ring '{self.name}': segment {pos} has invalid multiplier {seg.multiplier!r}")
        if self.total_weight <= 0:
            raise RingConfigError(f"Ring '{self.name}': weights must sum to a positive total")

    @property
    def size(self) -> int:
        return len(self.segments)

    @property
    def weights(self) -> list[float]:
        return [s.weight for s in self.segments]

    @property
    def multipliers(self) -> list[float]:
        return [s.multiplier for s in self.segments]

    @property
    def labels(self) -> list[str]:
        return [s.display_label for s in self.segments]

    @property
    def total_weight(self) -> float:
        return sum(s.weight for s in self.segments)

    def probability(self, index: int) -> float:
        return self.segments[index].weight / self.total_weight

    def probabilities(self) -> list[float]:
        total = self.total_weight
        return [s.weight / total for s in self.segments]

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def __len__(self) -> int:
        return len(self.segments)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "segments": [s.to_dict() for s in self.segments],
            "turns": {
                "min": self.turns.min_turns,
                "max": self.turns.max_turns,
                "direction": self.turns.direction.name.lower(),
            },
        }


# ═══════════════════════════════════════════════════════════════
# Builders
# ═══════════════════════════════════════════════════════════════

def parse_multiplier(label: str) -> float:
    """'2x' → 2.0, '0.5x' → 0.5."""
    text = label.strip().lower().rstrip("x").strip()
    try:
        value = float(text)
    except ValueError:
        raise RingConfigError(f"Cannot parse multiplier label: {label!r}") from None
    return value


def format_multiplier(mult: float) -> str:
    return f"{mult:g}x"


def build_ring(name: str, labels: Sequence[str], weights: Sequence[float],
               turns: TurnRange = None) -> Ring:
    """Build a ring from multiplier labels and a parallel weight table."""
    if len(labels) != len(weights):
        raise RingConfigError(
            f"Ring '{name}': {len(labels)} labels but {len(weights)} weights")
    segments = tuple(
        Segment(index=i, multiplier=parse_multiplier(lbl), weight=float(w), label=lbl)
        for i, (lbl, w) in enumerate(zip(labels, weights))
    )
    if turns is None:
        return Ring(name=name, segments=segments)
    return Ring(name=name, segments=segments, turns=turns)


OUTER_LABELS = ("0x", "2x", "5x", "10x", "15x", "20x", "50x")
OUTER_WEIGHTS = (72, 15, 7, 3.5, 1.5, 0.8, 0.2)
OUTER_TURNS = TurnRange(6, 9, SpinDirection.CLOCKWISE)

INNER_LABELS = ("1x", "2x", "3x", "4x")
INNER_WEIGHTS = (65, 25, 8, 2)
INNER_TURNS = TurnRange(7, 10, SpinDirection.COUNTER_CLOCKWISE)

OUTER_RING = build_ring("outer", OUTER_LABELS, OUTER_WEIGHTS, OUTER_TURNS)
INNER_RING = build_ring("inner", INNER_LABELS, INNER_WEIGHTS, INNER_TURNS)
