#!/usr/bin/env python3
"""
Tests for the Spin Session

Validates:
1. IDLE → SPINNING → SETTLED lifecycle, wallet untouched until reveal
2. A second spin is refused while one is in flight
3. Insufficient balance / bad stake refuse the spin without side effects
4. Amplified losses clamp the balance at zero but report the full delta
5. The reveal timer fires on its own after the delay
6. close() cancels a pending reveal; later spins are refused
"""

import sys
import threading
from pathlib import Path

# ── Ensure project root is on sys.path ──
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.wheel_schema import SegmentConfig, default_wheel_config
from flows.spin_session import ScheduledReveal, SpinPhase, SpinSession
from spin_engine.errors import (
    InsufficientBalanceError, InvalidStakeError, SessionClosedError, SpinInProgressError,
)
from spin_engine.rng import SeededRandomSource, SequenceRandomSource
from tools.wallet import Wallet

# outer draw, inner draw, then turns/jitter for each ring
WIN_5X_3X = [0.9, 0.95, 0.5, 0.5, 0.5, 0.5]
LOSS_0X_4X = [0.0, 0.999, 0.5, 0.5, 0.5, 0.5]

LONG_DELAY = 60.0


def _session(balance, draws=None, delay=LONG_DELAY, **kw):
    rng = SequenceRandomSource(draws) if draws else SeededRandomSource(7)
    return SpinSession(Wallet(balance), rng=rng, reveal_delay=delay, **kw)


def test_wallet_changes_only_at_reveal():
    """spin() returns the outcome immediately; balance moves on settle."""
    with _session(10.0, WIN_5X_3X) as session:
        session.set_stake(1.0)
        assert session.phase == SpinPhase.IDLE
        result = session.spin()
        assert result.outcome.labels == ("5x", "3x")
        assert result.settlement.delta == 15.0
        assert session.phase == SpinPhase.SPINNING
        assert session.wallet.current_balance == 10.0

        assert session.settle_now() is True
        assert session.phase == SpinPhase.SETTLED
        assert session.wallet.current_balance == 25.0
        assert session.settle_now() is False
    print("✅ Lifecycle: IDLE → SPINNING → SETTLED, +15.00 applied at reveal")


def test_spin_refused_while_spinning():
    """Re-entry gate: no second spin before the reveal."""
    with _session(10.0) as session:
        first = session.spin()
        rotation_before = session.rotation.to_dict()
        try:
            session.spin()
        except SpinInProgressError:
            pass
        else:
            raise AssertionError("second spin accepted while spinning")
        assert session.rotation.to_dict() == rotation_before
        assert session.last_result is first
        session.settle_now()
        session.spin()
        assert session.phase == SpinPhase.SPINNING
    print("✅ Spin refused while SPINNING, allowed again after SETTLED")


def test_insufficient_balance_has_no_side_effects():
    """stake > balance: error, no outcome drawn, no rotation change."""
    with _session(0.25) as session:
        session.set_stake(0.5)
        try:
            session.spin()
        except InsufficientBalanceError as e:
            assert e.balance == 0.25 and e.stake == 0.5
        else:
            raise AssertionError("spin accepted with insufficient balance")
        assert session.phase == SpinPhase.IDLE
        assert session.last_result is None
        assert session.rotation.to_dict()["outer"]["target"] == 0.0
        assert session.wallet.current_balance == 0.25
    print("✅ Insufficient balance refused without side effects")


def test_zero_balance_refused():
    """A fresh wallet with nothing in it cannot spin until a deposit."""
    with _session(0.0) as session:
        try:
            session.spin()
        except InsufficientBalanceError:
            pass
        else:
            raise AssertionError("spin accepted on empty wallet")
        session.wallet.deposit()
        session.spin()
        assert session.is_spinning
    print("✅ Empty wallet refused; deposit unlocks spinning")


def test_invalid_stake_rejected():
    """Stakes must be positive and inside the configured bounds."""
    with _session(10.0) as session:
        for bad in (0, -1, 0.01, 1000):
            try:
                session.set_stake(bad)
            except InvalidStakeError:
                continue
            raise AssertionError(f"stake {bad} accepted")
        assert session.set_stake(2.0) == 2.0
    print("✅ Invalid stakes rejected")


def test_amplified_loss_clamps_balance():
    """0x × 4x on a 1.00 stake with 1.00 balance: delta -4.00, change -1.00."""
    seen = []
    with _session(1.0, LOSS_0X_4X, on_reveal=lambda r, c: seen.append((r, c))) as session:
        session.set_stake(1.0)
        result = session.spin()
        assert result.settlement.delta == -4.0
        session.settle_now()
        assert session.wallet.current_balance == 0.0
        assert len(seen) == 1
        assert seen[0][0] is result
        assert seen[0][0].settlement.delta == -4.0
        assert seen[0][1] == -1.0
        assert session.stats.total_lost == 1.0
    print("✅ Amplified loss: reported -4.00, balance clamped at 0.00")


def test_reveal_fires_after_delay():
    """The timer settles the spin on its own."""
    fired = threading.Event()
    with _session(5.0, WIN_5X_3X, delay=0.05,
                  on_reveal=lambda r, c: fired.set()) as session:
        session.set_stake(0.5)
        session.spin()
        assert fired.wait(5.0), "reveal never fired"
        assert session.wait_for_reveal(5.0)
        assert session.phase == SpinPhase.SETTLED
        assert session.wallet.current_balance == 12.5
    print("✅ Reveal fired after 50ms delay")


def test_close_cancels_pending_reveal():
    """Closing mid-spin: no settlement, no callback, further spins refused."""
    calls = []
    session = _session(10.0, WIN_5X_3X, on_reveal=lambda r, c: calls.append(c))
    session.set_stake(1.0)
    session.spin()
    session.close()
    assert session.settle_now() is False
    assert calls == []
    assert session.wallet.current_balance == 10.0
    assert session.closed
    try:
        session.spin()
    except SessionClosedError:
        pass
    else:
        raise AssertionError("spin accepted on closed session")
    print("✅ close() cancelled the pending reveal")


def test_scheduled_reveal_fires_once():
    """fire() and the timer race; the action runs exactly once."""
    count = []
    reveal = ScheduledReveal(0.01, lambda: count.append(1)).start()
    reveal.fire()
    assert reveal.wait(5.0)
    assert reveal.fire() is False
    assert reveal.cancel() is False
    assert count == [1]

    cancelled = ScheduledReveal(LONG_DELAY, lambda: count.append(2)).start()
    assert cancelled.cancel() is True
    assert cancelled.fire() is False
    assert not cancelled.pending
    assert count == [1]
    print("✅ ScheduledReveal: exactly-once fire, cancel wins before fire")


def test_stats_and_snapshot():
    """Stats track spins and the snapshot is plain data."""
    with _session(100.0, delay=0.0) as session:
        session.set_stake(1.0)
        for _ in range(20):
            session.spin()
            session.settle_now()
        stats = session.stats
        assert stats.spins == 20
        assert stats.total_wagered == 20.0
        assert abs(stats.net - (session.wallet.current_balance - 100.0)) < 0.011
        snap = session.snapshot()
        assert snap["phase"] == "settled"
        assert snap["stats"]["spins"] == 20
        assert snap["last_result"]["stake"] == 1.0
    print(f"✅ 20 spins settled, net {stats.net:+.2f}")


def test_step_stake_walks_the_options():
    """Stake buttons move through the configured options and stop at the ends."""
    with _session(10.0) as session:
        options = session.stake_options
        assert options == sorted(options) and options, options
        session.set_stake(options[0])
        assert session.step_stake(1) == options[1]
        assert session.step_stake(100) == options[-1]
        assert session.step_stake(-100) == options[0]

        # off-grid stake snaps to the neighbouring option
        session.set_stake(0.3)
        assert session.step_stake(1) == 0.5
        session.set_stake(0.3)
        assert session.step_stake(-1) == 0.25
    print(f"✅ step_stake across {len(options)} options")


def test_stake_and_balance_in_cents_delta_exact():
    """Stake enters in cents, the delta stays exact, the wallet moves in cents."""
    with _session(10.0, LOSS_0X_4X) as session:
        assert session.set_stake(0.333) == 0.33
        result = session.spin()
        assert result.settlement.stake == 0.33
        assert result.settlement.delta == -(0.33 * 4.0)
        session.settle_now()
        assert session.wallet.current_balance == 8.68

    config = default_wheel_config()
    config.outer.segments[1] = SegmentConfig(label="0.5x", weight=15)
    with _session(10.0, [0.8, 0.95, 0.5, 0.5, 0.5, 0.5], config=config) as session:
        session.set_stake(0.1)
        result = session.spin()
        assert result.outcome.labels == ("0.5x", "3x")
        assert result.settlement.delta == 0.1 * 0.5 * 3.0
        session.settle_now()
        assert session.wallet.current_balance == 10.15
    print("✅ Exact delta reported, stake and balance in cents")


# ═══════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════

if __name__ == "__main__":
    tests = [
        test_wallet_changes_only_at_reveal,
        test_spin_refused_while_spinning,
        test_insufficient_balance_has_no_side_effects,
        test_zero_balance_refused,
        test_invalid_stake_rejected,
        test_amplified_loss_clamps_balance,
        test_reveal_fires_after_delay,
        test_close_cancels_pending_reveal,
        test_scheduled_reveal_fires_once,
        test_stats_and_snapshot,
        test_step_stake_walks_the_options,
        test_stake_and_balance_in_cents_delta_exact,
    ]

    print(f"\n{'='*60}")
    print(f"Spin Session Tests — {len(tests)} tests")
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
