"""
LuxSpin — Wheel Configuration Schema

Data-driven definition of the two rings, the landing geometry and the stake
bounds. Validation happens when the model is built, so an unusable odds
table is reported at load time and never reaches a spin.

Usage:
    from config.wheel_schema import default_wheel_config, load_wheel_config
    config = default_wheel_config()
    outer, inner = config.build_rings()
    json_str = config.model_dump_json(indent=2)
"""

from __future__ import annotations

import math
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from config.settings import WheelSettings
from spin_engine.geometry import DEFAULT_JITTER_FRACTION, SpinDirection, TurnRange
from spin_engine.rings import (
    INNER_LABELS, INNER_TURNS, INNER_WEIGHTS, OUTER_LABELS, OUTER_TURNS,
    OUTER_WEIGHTS, Ring, Segment, parse_multiplier,
)


# ═══════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════

class Direction(str, Enum):
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"

    def to_spin_direction(self) -> SpinDirection:
        if self is Direction.CLOCKWISE:
            return SpinDirection.CLOCKWISE
        return SpinDirection.COUNTER_CLOCKWISE


# ═══════════════════════════════════════════════════════════════
# Ring Configuration
# ═══════════════════════════════════════════════════════════════

class SegmentConfig(BaseModel):
    """One wedge: multiplier label + selection weight"""
    label: str
    weight: float = Field(ge=0)
    multiplier: Optional[float] = None

    @field_validator("weight")
    @classmethod
    def finite_weight(cls, v):
        if not math.isfinite(v):
            raise ValueError("weight must be finite")
        return v

    @model_validator(mode="after")
    def derive_multiplier(self):
        # Multiplier defaults to the number in the label ("5x" → 5.0)
        if self.multiplier is None:
            self.multiplier = parse_multiplier(self.label)
        if self.multiplier < 0 or not math.isfinite(self.multiplier):
            raise ValueError(f"multiplier must be a finite non-negative number, got {self.multiplier}")
        return self


class RingConfig(BaseModel):
    """Ordered segments plus the spin range of the ring"""
    name: str
    segments: list[SegmentConfig]
    min_turns: int = Field(6, ge=1)
    max_turns: int = Field(9, ge=1)
    direction: Direction = Direction.CLOCKWISE

    @field_validator("segments")
    @classmethod
    def usable_odds_table(cls, v):
        if not v:
            raise ValueError("ring needs at least one segment")
        if sum(s.weight for s in v) <= 0:
            raise ValueError("segment weights must sum to a positive total")
        return v

    @model_validator(mode="after")
    def ordered_turns(self):
        if self.max_turns < self.min_turns:
            raise ValueError(f"max_turns ({self.max_turns}) < min_turns ({self.min_turns})")
        return self

    def build_ring(self) -> Ring:
        segments = tuple(
            Segment(index=i, multiplier=s.multiplier, weight=s.weight, label=s.label)
            for i, s in enumerate(self.segments)
        )
        turns = TurnRange(self.min_turns, self.max_turns, self.direction.to_spin_direction())
        return Ring(name=self.name, segments=segments, turns=turns)


class GeometryConfig(BaseModel):
    """Landing jitter as a fraction of half a slice"""
    jitter_fraction: float = Field(DEFAULT_JITTER_FRACTION, ge=0.0, lt=1.0)


DEFAULT_STAKE_OPTIONS = (0.10, 0.25, 0.50, 1.0, 2.0, 5.0, 10.0)


class StakeConfig(BaseModel):
    """Stake bounds and balance defaults"""
    default_stake: float = Field(default_factory=lambda: WheelSettings.DEFAULT_STAKE, gt=0)
    min_stake: float = Field(default_factory=lambda: WheelSettings.MIN_STAKE, gt=0)
    max_stake: float = Field(default_factory=lambda: WheelSettings.MAX_STAKE, gt=0)
    stake_options: list[float] = Field(default_factory=lambda: [
        s for s in DEFAULT_STAKE_OPTIONS
        if WheelSettings.MIN_STAKE <= s <= WheelSettings.MAX_STAKE
    ])
    starting_balance: float = Field(default_factory=lambda: WheelSettings.STARTING_BALANCE, ge=0)
    deposit_amount: float = Field(default_factory=lambda: WheelSettings.DEPOSIT_AMOUNT, gt=0)

    @model_validator(mode="after")
    def consistent_bounds(self):
        if self.max_stake < self.min_stake:
            raise ValueError(f"max_stake ({self.max_stake}) < min_stake ({self.min_stake})")
        if not self.min_stake <= self.default_stake <= self.max_stake:
            raise ValueError(
                f"default_stake {self.default_stake} outside [{self.min_stake}, {self.max_stake}]")
        outside = [s for s in self.stake_options if not self.min_stake <= s <= self.max_stake]
        if outside:
            raise ValueError(
                f"stake_options {outside} outside [{self.min_stake}, {self.max_stake}]")
        self.stake_options = sorted(set(self.stake_options))
        return self


class WheelConfig(BaseModel):
    """Complete wheel definition"""
    outer: RingConfig
    inner: RingConfig
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    stakes: StakeConfig = Field(default_factory=StakeConfig)
    reveal_delay_seconds: float = Field(default_factory=lambda: WheelSettings.REVEAL_DELAY_SECONDS, ge=0)

    def build_rings(self) -> tuple[Ring, Ring]:
        return self.outer.build_ring(), self.inner.build_ring()


# ═══════════════════════════════════════════════════════════════
# Builders
# ═══════════════════════════════════════════════════════════════

def _ring_config(name, labels, weights, turns: TurnRange) -> RingConfig:
    direction = (Direction.CLOCKWISE if turns.direction == SpinDirection.CLOCKWISE
                 else Direction.COUNTER_CLOCKWISE)
    return RingConfig(
        name=name,
        segments=[SegmentConfig(label=l, weight=w) for l, w in zip(labels, weights)],
        min_turns=turns.min_turns,
        max_turns=turns.max_turns,
        direction=direction,
    )


def default_wheel_config() -> WheelConfig:
    """The canonical twin-ring wheel."""
    return WheelConfig(
        outer=_ring_config("outer", OUTER_LABELS, OUTER_WEIGHTS, OUTER_TURNS),
        inner=_ring_config("inner", INNER_LABELS, INNER_WEIGHTS, INNER_TURNS),
    )


def load_wheel_config(path: Union[str, Path, None] = None) -> WheelConfig:
    """Load a WheelConfig from JSON; falls back to WHEEL_CONFIG_PATH, then defaults."""
    path = path or WheelSettings.CONFIG_PATH
    if not path:
        return default_wheel_config()
    return WheelConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
