"""
LUXSPIN — Settlement

Turns a resolved outcome pair and a stake into a signed balance delta.

    outer multiplier == 0  →  delta = -(stake × inner)        (1x–4x loss)
    otherwise              →  delta = +(stake × outer × inner)

The zero branch turns the inner ring into a loss multiplier, so a spin can
cost more than the stake. The reported delta is exact: never rounded and
never clamped. Rounding to cents and clamping the balance at zero are the
wallet's job when the delta is applied.
"""

from __future__ import annotations

from dataclasses import dataclass

from spin_engine.rings import Segment


def round_money(amount: float) -> float:
    # +0.0 normalises a rounded -0.0
    return round(amount, 2) + 0.0


@dataclass(frozen=True)
class Settlement:
    delta: float
    stake: float
    outer_multiplier: float
    inner_multiplier: float

    @property
    def is_win(self) -> bool:
        return self.delta > 0

    @property
    def is_loss(self) -> bool:
        return self.delta < 0

    @property
    def effective_multiplier(self) -> float:
        """Delta per unit stake (negative on the zero branch)."""
        if self.outer_multiplier == 0:
            return -self.inner_multiplier
        return self.outer_multiplier * self.inner_multiplier

    def to_dict(self) -> dict:
        return {
            "delta": self.delta,
            "stake": self.stake,
            "outer_multiplier": self.outer_multiplier,
            "inner_multiplier": self.inner_multiplier,
            "effective_multiplier": self.effective_multiplier,
        }


def settlement_delta(stake: float, outer_multiplier: float, inner_multiplier: float) -> float:
    if outer_multiplier == 0:
        return -(stake * inner_multiplier)
    return stake * outer_multiplier * inner_multiplier


def settle(stake: float, outer: Segment, inner: Segment) -> Settlement:
    """Pure: same stake and segments always give the same delta."""
    return Settlement(
        delta=settlement_delta(stake, outer.multiplier, inner.multiplier),
        stake=stake,
        outer_multiplier=outer.multiplier,
        inner_multiplier=inner.multiplier,
    )
