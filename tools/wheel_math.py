"""
LUXSPIN — Twin-Ring Odds Model

Exact model of the joint outcome table. The rings are drawn independently,
so every (outer, inner) pair has probability P_outer × P_inner and a delta
per unit stake of:

    outer == 0x  →  -inner
    otherwise    →  outer × inner

Each model produces:
  - Paytable with all n_outer × n_inner pairs
  - Expected delta per unit stake: Σ(P × delta_mult)
  - Volatility metrics: std dev, hit frequency, max win/loss probability
  - A certification-style JSON report

Usage:
    from tools.wheel_math import build_math_model
    model = build_math_model()
    model.expected_delta          # per unit stake
    print(model.to_json())
"""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from spin_engine.rings import INNER_RING, OUTER_RING, Ring
from spin_engine.settlement import settlement_delta


# ═══════════════════════════════════════════════════════════════
# Core Data Structures
# ═══════════════════════════════════════════════════════════════

@dataclass
class PaytableEntry:
    outcome_id: str
    description: str
    delta_multiplier: float
    probability: float
    contribution: float = 0

    def __post_init__(self):
        self.contribution = round(self.probability * self.delta_multiplier, 10)


@dataclass
class VolatilityMetrics:
    standard_deviation: float
    variance: float
    hit_frequency: float
    max_win_multiplier: float
    max_win_probability: float
    max_loss_multiplier: float
    max_loss_probability: float
    median_delta: float
    p_loss_beyond_stake: float = 0.0
    p_win_gt_10x: float = 0.0
    p_win_gt_100x: float = 0.0


@dataclass
class WheelMathModel:
    outer_ring: str
    inner_ring: str
    expected_delta: float = 0.0
    paytable: list[PaytableEntry] = field(default_factory=list)
    volatility: VolatilityMetrics = None
    ring_probabilities: dict = field(default_factory=dict)
    model_version: str = "1.0.0"
    model_hash: str = ""
    generated_at: str = ""

    def __post_init__(self):
        self.generated_at = datetime.now(timezone.utc).isoformat()
        self._compute_hash()

    def _compute_hash(self):
        data = json.dumps(
            [(e.outcome_id, e.delta_multiplier, e.probability) for e in self.paytable],
            sort_keys=True,
        )
        self.model_hash = hashlib.sha256(data.encode()).hexdigest()[:16]

    @property
    def hit_frequency(self) -> float:
        return self.volatility.hit_frequency if self.volatility else 0.0

    @property
    def max_win_multiplier(self) -> float:
        return self.volatility.max_win_multiplier if self.volatility else 0.0

    @property
    def max_loss_multiplier(self) -> float:
        return self.volatility.max_loss_multiplier if self.volatility else 0.0

    def probability_of(self, outer_label: str, inner_label: str) -> float:
        key = f"{outer_label}|{inner_label}"
        for e in self.paytable:
            if e.outcome_id == key:
                return e.probability
        raise KeyError(key)

    def rtp_proof(self) -> dict:
        entries = []
        total = 0.0
        for e in self.paytable:
            entries.append({
                "outcome": e.outcome_id,
                "P": round(e.probability, 10),
                "delta_mult": e.delta_multiplier,
                "P×delta": round(e.contribution, 10),
            })
            total += e.contribution
        prob_sum = sum(e.probability for e in self.paytable)
        return {
            "model_hash": self.model_hash,
            "expected_delta": round(self.expected_delta, 8),
            "paytable_expected_delta": round(total, 8),
            "probability_sum": round(prob_sum, 10),
            "probability_sum_check": "PASS" if abs(prob_sum - 1.0) < 1e-6 else "FAIL",
            "expected_delta_check": "PASS" if abs(total - self.expected_delta) < 1e-6 else "FAIL",
            "n_outcomes": len(self.paytable),
            "entries": entries,
        }

    def certification_report(self) -> dict:
        proof = self.rtp_proof()
        v = self.volatility
        return {
            "report_type": "Twin-Ring Wheel Odds Report",
            "generated_at": self.generated_at,
            "model_hash": self.model_hash,
            "rings": {"outer": self.outer_ring, "inner": self.inner_ring},
            "ring_probabilities": self.ring_probabilities,
            "expected_value": proof,
            "volatility_profile": {
                "standard_deviation": round(v.standard_deviation, 4),
                "hit_frequency_pct": round(v.hit_frequency * 100, 2),
                "max_win_multiplier": v.max_win_multiplier,
                "max_win_probability": f"{v.max_win_probability:.2e}",
                "max_loss_multiplier": v.max_loss_multiplier,
                "max_loss_probability": f"{v.max_loss_probability:.2e}",
                "median_delta": v.median_delta,
                "p_loss_beyond_stake_pct": round(v.p_loss_beyond_stake * 100, 4),
                "p_win_gt_10x_pct": round(v.p_win_gt_10x * 100, 4),
                "p_win_gt_100x_pct": round(v.p_win_gt_100x * 100, 6),
            } if v else {},
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.certification_report(), indent=indent, default=str)


# ═══════════════════════════════════════════════════════════════
# Volatility Calculator
# ═══════════════════════════════════════════════════════════════

def _compute_volatility(paytable: list[PaytableEntry], mean: float) -> VolatilityMetrics:
    mults = [e.delta_multiplier for e in paytable]
    probs = [e.probability for e in paytable]
    ex2 = sum(p * m * m for p, m in zip(probs, mults))
    variance = max(0, ex2 - mean * mean)
    max_mult = max(mults)
    min_mult = min(mults)
    sorted_e = sorted(zip(probs, mults), key=lambda x: x[1])
    cum, median = 0.0, 0.0
    for p, m in sorted_e:
        cum += p
        if cum >= 0.5:
            median = m
            break
    return VolatilityMetrics(
        standard_deviation=math.sqrt(variance),
        variance=variance,
        hit_frequency=sum(p for p, m in zip(probs, mults) if m > 0),
        max_win_multiplier=max_mult,
        max_win_probability=sum(p for p, m in zip(probs, mults) if m == max_mult),
        max_loss_multiplier=min_mult,
        max_loss_probability=sum(p for p, m in zip(probs, mults) if m == min_mult),
        median_delta=median,
        p_loss_beyond_stake=sum(p for p, m in zip(probs, mults) if m < -1),
        p_win_gt_10x=sum(p for p, m in zip(probs, mults) if m > 10),
        p_win_gt_100x=sum(p for p, m in zip(probs, mults) if m > 100),
    )


# ═══════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════

def build_math_model(outer_ring: Ring = OUTER_RING, inner_ring: Ring = INNER_RING) -> WheelMathModel:
    """Exact joint model of two independently drawn rings."""
    outer_p = outer_ring.probabilities()
    inner_p = inner_ring.probabilities()

    paytable = []
    for o_seg, po in zip(outer_ring.segments, outer_p):
        for i_seg, pi in zip(inner_ring.segments, inner_p):
            delta_mult = settlement_delta(1.0, o_seg.multiplier, i_seg.multiplier)
            branch = "loss" if o_seg.multiplier == 0 else "win"
            paytable.append(PaytableEntry(
                outcome_id=f"{o_seg.display_label}|{i_seg.display_label}",
                description=f"Outer {o_seg.display_label} × inner {i_seg.display_label} ({branch})",
                delta_multiplier=delta_mult,
                probability=po * pi,
            ))

    # Independence lets the expectation factor: E[delta] = Σ_o P(o)·(±m_o or -1)·E[inner]
    inner_mean = sum(p * s.multiplier for s, p in zip(inner_ring.segments, inner_p))
    expected = sum(
        po * (-1.0 if s.multiplier == 0 else s.multiplier) * inner_mean
        for s, po in zip(outer_ring.segments, outer_p)
    )
    return WheelMathModel(
        outer_ring=outer_ring.name,
        inner_ring=inner_ring.name,
        expected_delta=expected,
        paytable=paytable,
        volatility=_compute_volatility(paytable, expected),
        ring_probabilities={
            outer_ring.name: {s.display_label: round(p, 6) for s, p in zip(outer_ring.segments, outer_p)},
            inner_ring.name: {s.display_label: round(p, 6) for s, p in zip(inner_ring.segments, inner_p)},
        },
    )
