"""
LUXSPIN — Monte Carlo Validator

Runs N spins through the real resolver and checks:
  • Each ring's observed frequencies fit its weight table (chi-squared)
  • Mean delta per unit stake matches the exact odds model
  • Every rotation target reads back, through the pointer, as the drawn segment
  • Every spin advances each ring by at least its minimum whole turns

Uses a seeded splitmix64 source so runs are reproducible.

Usage:
    from tools.wheel_montecarlo import MonteCarloValidator
    mc = MonteCarloValidator(seed=42)
    result = mc.validate(n_rounds=200_000)
    print(result.summary())
"""

from __future__ import annotations

import logging
import math
import statistics
import time
from dataclasses import dataclass, field
from typing import Sequence

from spin_engine.geometry import (
    FULL_TURN, RotationState, boundary_distance, landing_index,
)
from spin_engine.resolver import resolve_spin
from spin_engine.rings import INNER_RING, OUTER_RING, Ring
from spin_engine.rng import SeededRandomSource
from tools.wheel_math import build_math_model

logger = logging.getLogger("luxspin.montecarlo")

# Upper-tail standard normal quantiles for the supported significance levels
_Z_UPPER = {0.05: 1.6449, 0.01: 2.3263, 0.001: 3.0902}


# ═══════════════════════════════════════════════════════════════
# Data Structures
# ═══════════════════════════════════════════════════════════════

@dataclass
class RingFit:
    """Observed vs expected frequencies for one ring."""
    ring: str
    observed: dict = field(default_factory=dict)      # {label: count}
    expected_pct: dict = field(default_factory=dict)  # {label: pct}
    chi_squared: float = 0.0
    degrees_of_freedom: int = 0
    critical_value: float = 0.0
    passed: bool = True

    def to_dict(self) -> dict:
        return {
            "ring": self.ring,
            "observed": self.observed,
            "expected_pct": self.expected_pct,
            "chi_squared": round(self.chi_squared, 4),
            "df": self.degrees_of_freedom,
            "critical_value": round(self.critical_value, 4),
            "pass": self.passed,
        }


@dataclass
class SimulationResult:
    """Results from a Monte Carlo run."""
    n_rounds: int
    theoretical_delta: float         # Exact, from the odds model
    measured_delta: float            # Mean delta per unit stake
    delta_error: float               # |measured - theoretical|
    standard_error: float
    delta_pass: bool
    z_limit: float = 4.0

    outer_fit: RingFit = None
    inner_fit: RingFit = None

    geometry_mismatches: int = 0
    min_boundary_distance: float = 0.0   # degrees, over all landings
    outer_min_advance_turns: float = 0.0   # smallest signed advance / 360 seen per ring
    inner_min_advance_turns: float = 0.0
    outer_required_turns: int = 0          # the ring's own turns.min_turns
    inner_required_turns: int = 0

    measured_std_dev: float = 0.0
    measured_hit_frequency: float = 0.0
    max_win: float = 0.0
    max_loss: float = 0.0
    delta_distribution: dict = field(default_factory=dict)
    streak_analysis: dict = field(default_factory=dict)

    duration_seconds: float = 0.0
    rounds_per_second: float = 0.0
    seed: int = 0

    @property
    def advance_pass(self) -> bool:
        return (self.outer_min_advance_turns >= self.outer_required_turns
                and self.inner_min_advance_turns >= self.inner_required_turns)

    @property
    def passed(self) -> bool:
        return (self.delta_pass
                and self.geometry_mismatches == 0
                and self.advance_pass
                and (self.outer_fit is None or self.outer_fit.passed)
                and (self.inner_fit is None or self.inner_fit.passed))

    def summary(self) -> str:
        status = "✅ PASS" if self.passed else "❌ FAIL"
        lines = [
            "═══ Monte Carlo: TWIN-RING WHEEL ═══",
            f"  Rounds:        {self.n_rounds:,}",
            f"  Theoretical:   {self.theoretical_delta:+.4f} per unit stake",
            f"  Measured:      {self.measured_delta:+.4f}  (±{self.standard_error:.4f} s.e.)",
            f"  Hit Freq:      {self.measured_hit_frequency*100:.2f}%",
            f"  Std Dev:       {self.measured_std_dev:.4f}",
            f"  Max Win:       {self.max_win:+.2f}x   Max Loss: {self.max_loss:+.2f}x",
        ]
        for fit in (self.outer_fit, self.inner_fit):
            if fit is not None:
                mark = "✅" if fit.passed else "❌"
                lines.append(f"  χ² {fit.ring:6s}     {fit.chi_squared:.3f} "
                             f"(df={fit.degrees_of_freedom}, crit={fit.critical_value:.3f}) {mark}")
        lines += [
            f"  Geometry:      {self.geometry_mismatches} mismatches, "
            f"min edge gap {self.min_boundary_distance:.2f}°, "
            f"min advance {self.outer_min_advance_turns:.2f}/{self.outer_required_turns} (outer) "
            f"{self.inner_min_advance_turns:.2f}/{self.inner_required_turns} (inner) turns",
            f"  Speed:         {self.rounds_per_second:,.0f} rounds/sec",
            f"  Overall:       {status}",
        ]
        if self.streak_analysis:
            lines.append(f"  Max Loss Streak: {self.streak_analysis.get('max_loss_streak', 'N/A')}")
            lines.append(f"  Max Win Streak:  {self.streak_analysis.get('max_win_streak', 'N/A')}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "n_rounds": self.n_rounds,
            "theoretical_delta": round(self.theoretical_delta, 6),
            "measured_delta": round(self.measured_delta, 6),
            "delta_error": round(self.delta_error, 6),
            "standard_error": round(self.standard_error, 6),
            "delta_pass": self.delta_pass,
            "z_limit": self.z_limit,
            "fits": [f.to_dict() for f in (self.outer_fit, self.inner_fit) if f is not None],
            "geometry": {
                "mismatches": self.geometry_mismatches,
                "min_boundary_distance_deg": round(self.min_boundary_distance, 4),
                "min_advance_turns": {
                    "outer": round(self.outer_min_advance_turns, 4),
                    "inner": round(self.inner_min_advance_turns, 4),
                },
                "required_turns": {"outer": self.outer_required_turns, "inner": self.inner_required_turns},
                "advance_pass": self.advance_pass,
            },
            "volatility": {
                "std_dev": round(self.measured_std_dev, 4),
                "hit_frequency_pct": round(self.measured_hit_frequency * 100, 2),
                "max_win_mult": self.max_win,
                "max_loss_mult": self.max_loss,
            },
            "distribution": self.delta_distribution,
            "streak_analysis": self.streak_analysis,
            "performance": {
                "duration_s": round(self.duration_seconds, 2),
                "rounds_per_sec": int(self.rounds_per_second),
            },
            "seed": self.seed,
            "pass": self.passed,
        }


# ═══════════════════════════════════════════════════════════════
# Statistics
# ═══════════════════════════════════════════════════════════════

def chi_squared_critical(df: int, alpha: float = 0.001) -> float:
    """Wilson–Hilferty approximation of the chi-squared upper quantile."""
    if df <= 0:
        return 0.0
    z = _Z_UPPER.get(alpha)
    if z is None:
        raise ValueError(f"Unsupported alpha {alpha}; use one of {sorted(_Z_UPPER)}")
    k = 2.0 / (9.0 * df)
    return df * (1.0 - k + z * math.sqrt(k)) ** 3


def chi_squared_fit(counts: Sequence[int], weights: Sequence[float],
                    alpha: float = 0.001, ring: str = "") -> RingFit:
    """Goodness of fit of observed counts to a weight table.

    Zero-weight bins carry no expectation; any hit on one fails the fit.
    """
    n = sum(counts)
    total = sum(weights)
    chi2 = 0.0
    bins = 0
    impossible_hits = 0
    for c, w in zip(counts, weights):
        if w <= 0:
            impossible_hits += c
            continue
        expected = n * w / total
        chi2 += (c - expected) ** 2 / expected
        bins += 1
    df = max(bins - 1, 0)
    crit = chi_squared_critical(df, alpha)
    return RingFit(
        ring=ring,
        chi_squared=chi2,
        degrees_of_freedom=df,
        critical_value=crit,
        passed=impossible_hits == 0 and chi2 <= crit,
    )


def _analyze_streaks(outcomes: list[float]) -> dict:
    """Win/loss streaks from a list of deltas."""
    if not outcomes:
        return {}

    max_win = 0
    max_loss = 0
    cur_win = 0
    cur_loss = 0
    total_wins = 0

    for o in outcomes:
        if o > 0:
            total_wins += 1
            cur_win += 1
            cur_loss = 0
            if cur_win > max_win:
                max_win = cur_win
        else:
            cur_loss += 1
            cur_win = 0
            if cur_loss > max_loss:
                max_loss = cur_loss

    return {
        "max_win_streak": max_win,
        "max_loss_streak": max_loss,
        "total_wins": total_wins,
        "total_losses": len(outcomes) - total_wins,
    }


def _delta_distribution(outcomes: list[float]) -> dict:
    """Bucket deltas (per unit stake) into ranges, as percentages."""
    buckets = {"loss >1x": 0, "loss 1x": 0, "2-5x": 0, "5-10x": 0,
               "10-50x": 0, "50-100x": 0, "100x+": 0}
    for o in outcomes:
        if o < -1:
            buckets["loss >1x"] += 1
        elif o < 0:
            buckets["loss 1x"] += 1
        elif o < 5:
            buckets["2-5x"] += 1
        elif o < 10:
            buckets["5-10x"] += 1
        elif o < 50:
            buckets["10-50x"] += 1
        elif o < 100:
            buckets["50-100x"] += 1
        else:
            buckets["100x+"] += 1
    n = len(outcomes)
    return {k: round(v / n * 100, 2) for k, v in buckets.items()}


# ═══════════════════════════════════════════════════════════════
# Monte Carlo Validator
# ═══════════════════════════════════════════════════════════════

class MonteCarloValidator:
    """Validates the twin-ring wheel via simulation."""

    def __init__(self, outer_ring: Ring = OUTER_RING, inner_ring: Ring = INNER_RING,
                 seed: int = 42, alpha: float = 0.001, z_limit: float = 4.0):
        """
        Args:
            seed: Base seed for reproducibility
            alpha: Significance level of the chi-squared fits
            z_limit: Max allowed |measured - theoretical| in standard errors
        """
        self.outer_ring = outer_ring
        self.inner_ring = inner_ring
        self.seed = seed
        self.alpha = alpha
        self.z_limit = z_limit

    def validate(self, n_rounds: int = 200_000) -> SimulationResult:
        if n_rounds < 2:
            raise ValueError("Need at least 2 rounds")
        model = build_math_model(self.outer_ring, self.inner_ring)
        rng = SeededRandomSource(self.seed)
        state = RotationState()
        outer_counts = [0] * self.outer_ring.size
        inner_counts = [0] * self.inner_ring.size

        outcomes = []
        mismatches = 0
        min_gap = FULL_TURN
        outer_advance = math.inf
        inner_advance = math.inf
        outer_dir = int(self.outer_ring.turns.direction)
        inner_dir = int(self.inner_ring.turns.direction)

        t0 = time.time()
        for _ in range(n_rounds):
            prev_outer = state.outer.resting_degrees
            prev_inner = state.inner.resting_degrees
            result = resolve_spin(1.0, self.outer_ring, self.inner_ring, state, rng)
            oi = result.outer_outcome.index
            ii = result.inner_outcome.index
            outer_counts[oi] += 1
            inner_counts[ii] += 1
            outcomes.append(result.settlement.delta)

            if (landing_index(self.outer_ring.size, result.outer_rotation_target) != oi
                    or landing_index(self.inner_ring.size, result.inner_rotation_target) != ii):
                mismatches += 1
            min_gap = min(min_gap,
                          boundary_distance(self.outer_ring.size, result.outer_rotation_target),
                          boundary_distance(self.inner_ring.size, result.inner_rotation_target))
            # signed in the ring's own direction, so a backward move counts as negative
            outer_advance = min(outer_advance,
                                (result.outer_rotation_target - prev_outer) * outer_dir / FULL_TURN)
            inner_advance = min(inner_advance,
                                (result.inner_rotation_target - prev_inner) * inner_dir / FULL_TURN)
        duration = time.time() - t0

        outer_fit = chi_squared_fit(outer_counts, self.outer_ring.weights, self.alpha,
                                    ring=self.outer_ring.name)
        outer_fit.observed = dict(zip(self.outer_ring.labels, outer_counts))
        outer_fit.expected_pct = {l: round(p * 100, 4) for l, p in
                                  zip(self.outer_ring.labels, self.outer_ring.probabilities())}
        inner_fit = chi_squared_fit(inner_counts, self.inner_ring.weights, self.alpha,
                                    ring=self.inner_ring.name)
        inner_fit.observed = dict(zip(self.inner_ring.labels, inner_counts))
        inner_fit.expected_pct = {l: round(p * 100, 4) for l, p in
                                  zip(self.inner_ring.labels, self.inner_ring.probabilities())}

        measured = sum(outcomes) / n_rounds
        std_dev = statistics.stdev(outcomes)
        std_err = std_dev / math.sqrt(n_rounds)
        error = abs(measured - model.expected_delta)
        delta_pass = error <= self.z_limit * std_err if std_err > 0 else error < 1e-9

        result = SimulationResult(
            n_rounds=n_rounds,
            theoretical_delta=model.expected_delta,
            measured_delta=measured,
            delta_error=error,
            standard_error=std_err,
            delta_pass=delta_pass,
            z_limit=self.z_limit,
            outer_fit=outer_fit,
            inner_fit=inner_fit,
            geometry_mismatches=mismatches,
            min_boundary_distance=min_gap,
            outer_min_advance_turns=outer_advance,
            inner_min_advance_turns=inner_advance,
            outer_required_turns=self.outer_ring.turns.min_turns,
            inner_required_turns=self.inner_ring.turns.min_turns,
            measured_std_dev=std_dev,
            measured_hit_frequency=sum(1 for o in outcomes if o > 0) / n_rounds,
            max_win=max(outcomes),
            max_loss=min(outcomes),
            delta_distribution=_delta_distribution(outcomes),
            streak_analysis=_analyze_streaks(outcomes),
            duration_seconds=duration,
            rounds_per_second=n_rounds / duration if duration > 0 else 0,
            seed=self.seed,
        )
        logger.info(f"Monte Carlo finished: {n_rounds:,} rounds, pass={result.passed}")
        return result
