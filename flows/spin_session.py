"""
LUXSPIN — Spin Session

Caller-side state machine around the spin resolver:

    IDLE ──spin()──▶ SPINNING ──reveal──▶ SETTLED ──spin()──▶ SPINNING …

  * spin() validates the stake, resolves the outcome immediately and
    returns it so the wheel can start animating toward the rotation targets.
  * The settlement is applied to the wallet only when the reveal fires,
    after the presentation delay.
  * A spin is refused while another is SPINNING; the rotation state has a
    single writer.
  * close() cancels a pending reveal so nothing fires against a torn-down
    session.

Usage:
    from flows.spin_session import SpinSession
    from tools.wallet import Wallet
    session = SpinSession(Wallet(10.0), on_reveal=lambda r, change: ...)
    result = session.spin()          # animate to result.outer_rotation_target
    ...
    session.close()
"""

from __future__ import annotations

import bisect
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from config.settings import WheelSettings
from config.wheel_schema import WheelConfig, load_wheel_config
from spin_engine.errors import (
    InsufficientBalanceError, InvalidStakeError, SessionClosedError, SpinInProgressError,
)
from spin_engine.geometry import RotationState
from spin_engine.resolver import SpinResult, resolve_spin
from spin_engine.rng import RandomSource, default_random_source
from spin_engine.settlement import round_money
from tools.wallet import Wallet

logger = logging.getLogger("luxspin.session")

RevealCallback = Callable[[SpinResult, float], None]


class SpinPhase(str, Enum):
    IDLE = "idle"
    SPINNING = "spinning"
    SETTLED = "settled"


# ═══════════════════════════════════════════════════════════════
# Scheduled Reveal
# ═══════════════════════════════════════════════════════════════

class ScheduledReveal:
    """One-shot, cancellable delayed call. Fires exactly once or never."""

    def __init__(self, delay: float, action: Callable[[], None]):
        self.delay = delay
        self._action = action
        self._lock = threading.Lock()
        self._done = threading.Event()
        self.fired = False
        self.cancelled = False
        self._timer = threading.Timer(delay, self.fire)
        self._timer.daemon = True

    def start(self) -> "ScheduledReveal":
        self._timer.start()
        return self

    def fire(self) -> bool:
        """Run the action now unless it already ran or was cancelled."""
        with self._lock:
            if self.fired or self.cancelled:
                return False
            self.fired = True
        self._timer.cancel()
        try:
            self._action()
        finally:
            self._done.set()
        return True

    def cancel(self) -> bool:
        with self._lock:
            if self.fired or self.cancelled:
                return False
            self.cancelled = True
        self._timer.cancel()
        self._done.set()
        return True

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)


# ═══════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════

@dataclass
class SessionStats:
    spins: int = 0
    wins: int = 0
    total_wagered: float = 0.0
    total_won: float = 0.0
    total_lost: float = 0.0
    biggest_win: float = 0.0

    def record(self, result: SpinResult, balance_change: float):
        self.spins += 1
        self.total_wagered = round_money(self.total_wagered + result.settlement.stake)
        if balance_change > 0:
            self.wins += 1
            self.total_won = round_money(self.total_won + balance_change)
            self.biggest_win = max(self.biggest_win, balance_change)
        elif balance_change < 0:
            self.total_lost = round_money(self.total_lost - balance_change)

    @property
    def net(self) -> float:
        return round_money(self.total_won - self.total_lost)

    def to_dict(self) -> dict:
        return {
            "spins": self.spins,
            "wins": self.wins,
            "total_wagered": self.total_wagered,
            "total_won": self.total_won,
            "total_lost": self.total_lost,
            "net": self.net,
            "biggest_win": self.biggest_win,
        }


class SpinSession:
    """One player's wheel: stake, rotation state, pending reveal, wallet."""

    def __init__(self, wallet: Wallet, config: Optional[WheelConfig] = None,
                 rng: Optional[RandomSource] = None,
                 reveal_delay: Optional[float] = None,
                 on_reveal: Optional[RevealCallback] = None):
        self.wallet = wallet
        self.config = config or load_wheel_config()
        self.outer_ring, self.inner_ring = self.config.build_rings()
        self.rng = rng or default_random_source(WheelSettings.RNG_SEED)
        self.reveal_delay = (self.config.reveal_delay_seconds
                             if reveal_delay is None else reveal_delay)
        self.on_reveal = on_reveal
        self.rotation = RotationState()
        self.stats = SessionStats()
        self.phase = SpinPhase.IDLE
        self.last_result: Optional[SpinResult] = None
        self._stake = self.config.stakes.default_stake
        self._pending: Optional[ScheduledReveal] = None
        self._closed = False
        self._lock = threading.RLock()

    # ── Stake ─────────────────────────────────────────────────

    @property
    def stake(self) -> float:
        return self._stake

    def set_stake(self, amount: float) -> float:
        bounds = self.config.stakes
        if amount <= 0:
            raise InvalidStakeError(f"Stake must be positive, got {amount}")
        if not bounds.min_stake <= amount <= bounds.max_stake:
            raise InvalidStakeError(
                f"Stake {amount:.2f} outside [{bounds.min_stake:.2f}, {bounds.max_stake:.2f}]")
        self._stake = round_money(amount)
        return self._stake

    @property
    def stake_options(self) -> list[float]:
        return list(self.config.stakes.stake_options)

    def step_stake(self, steps: int = 1) -> float:
        """Move `steps` options up (or down, if negative), stopping at the ends."""
        options = self.config.stakes.stake_options
        if not options:
            raise InvalidStakeError("No stake options configured")
        current = self._stake
        if current in options:
            idx = options.index(current) + steps
        elif steps > 0:
            idx = bisect.bisect_right(options, current) + steps - 1
        else:
            idx = bisect.bisect_left(options, current) + steps
        idx = max(0, min(idx, len(options) - 1))
        return self.set_stake(options[idx])

    # ── Spin lifecycle ────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_spinning(self) -> bool:
        return self.phase == SpinPhase.SPINNING

    def spin(self) -> SpinResult:
        """Start a spin. The outcome is final; the wallet changes at reveal."""
        with self._lock:
            if self._closed:
                raise SessionClosedError("Session is closed")
            if self.phase == SpinPhase.SPINNING:
                raise SpinInProgressError("A spin is already in progress")
            stake = self._stake
            if stake <= 0:
                raise InvalidStakeError(f"Stake must be positive, got {stake}")
            balance = self.wallet.current_balance
            if stake > balance:
                raise InsufficientBalanceError(balance, stake)

            result = resolve_spin(
                stake, self.outer_ring, self.inner_ring, self.rotation, self.rng,
                jitter_fraction=self.config.geometry.jitter_fraction,
            )
            self.phase = SpinPhase.SPINNING
            self.last_result = result
            outer, inner = result.outcome.labels
            logger.info(f"Spin started: stake={stake:.2f} outer={outer} inner={inner} "
                        f"delta={result.settlement.delta:+.2f}")
            self._pending = ScheduledReveal(self.reveal_delay, lambda: self._reveal(result))
            self._pending.start()
            return result

    def _reveal(self, result: SpinResult):
        with self._lock:
            if self._closed:
                return
            change = self.wallet.apply_settlement(result.settlement)
            self.stats.record(result, change)
            self.phase = SpinPhase.SETTLED
            self._pending = None
            if change != round_money(result.settlement.delta):
                logger.info(f"Balance clamped at zero: delta={result.settlement.delta:+.2f} "
                            f"applied={change:+.2f}")
            logger.info(f"Spin settled: change={change:+.2f} "
                        f"balance={self.wallet.current_balance:.2f}")
        if self.on_reveal is not None:
            self.on_reveal(result, change)

    def settle_now(self) -> bool:
        """Fire the pending reveal immediately. False if nothing was pending."""
        with self._lock:
            pending = self._pending
        if pending is None:
            return False
        pending.fire()
        # the timer thread may have won the race; wait for its reveal to finish
        pending.wait()
        return pending.fired

    def wait_for_reveal(self, timeout: Optional[float] = None) -> bool:
        with self._lock:
            pending = self._pending
        if pending is None:
            return True
        return pending.wait(timeout)

    def close(self):
        """Tear down: cancel any pending reveal; later spins are refused."""
        with self._lock:
            self._closed = True
            if self._pending is not None:
                if self._pending.cancel():
                    logger.info("Pending reveal cancelled on close")
                self._pending = None
            self.phase = SpinPhase.IDLE

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "phase": self.phase.value,
                "stake": self._stake,
                "balance": self.wallet.current_balance,
                "rotation": self.rotation.to_dict(),
                "last_result": self.last_result.to_dict() if self.last_result else None,
                "stats": self.stats.to_dict(),
            }
