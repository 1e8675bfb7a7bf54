#!/usr/bin/env python3
"""
LUXSPIN — Wheel CLI

Usage:
    python -m tools.wheel_cli spin --balance 20 --stake 0.5 --count 10
    python -m tools.wheel_cli odds
    python -m tools.wheel_cli simulate --rounds 200000 --seed 7
    python -m tools.wheel_cli dump-config --config my_wheel.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import WheelSettings
from config.wheel_schema import load_wheel_config
from flows.spin_session import SpinSession
from spin_engine.errors import (
    InsufficientBalanceError, InvalidStakeError, SpinInProgressError,
)
from spin_engine.rng import default_random_source
from tools.wallet import Wallet
from tools.wheel_math import build_math_model
from tools.wheel_montecarlo import MonteCarloValidator

logger = logging.getLogger("luxspin.cli")
console = Console()


def _configure_logging(verbose: bool = False):
    root = logging.getLogger("luxspin")
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(message)s", datefmt="%H:%M:%S"))
        root.addHandler(h)
    root.setLevel(logging.DEBUG if verbose else getattr(logging, WheelSettings.LOG_LEVEL, logging.INFO))


# ═══════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════

def cmd_spin(args) -> int:
    config = load_wheel_config(args.config)
    balance = config.stakes.starting_balance if args.balance is None else args.balance
    wallet = Wallet(balance)
    seed = args.seed if args.seed is not None else WheelSettings.RNG_SEED
    delay = 0.0 if args.delay is None else args.delay

    def _on_reveal(result, change):
        outer, inner = result.outcome.labels
        colour = "green" if change > 0 else "red"
        console.print(f"  🎡 [bold]{outer}[/bold] × [bold]{inner}[/bold]  "
                      f"gain [{colour}]{result.settlement.delta:+.2f}[/{colour}]  "
                      f"balance {wallet.current_balance:.2f}")

    session = SpinSession(wallet, config=config, rng=default_random_source(seed),
                          reveal_delay=delay, on_reveal=_on_reveal)
    with session:
        try:
            session.set_stake(args.stake if args.stake is not None else config.stakes.default_stake)
            if args.step:
                session.step_stake(args.step)
        except InvalidStakeError as e:
            console.print(f"[red]❌ {e}[/red]")
            return 2

        options = " / ".join(f"{s:.2f}" for s in session.stake_options) or "none"
        console.print(Panel(
            f"Balance: {wallet.current_balance:.2f}\n"
            f"Stake: {session.stake:.2f}  (options: {options})\n"
            f"Spins: {args.count}",
            title="LuxSpin", border_style="yellow",
        ))

        for _ in range(args.count):
            if args.deposit and not wallet.can_afford(session.stake):
                wallet.deposit(config.stakes.deposit_amount)
                console.print(f"  💰 Deposited {config.stakes.deposit_amount:.2f}")
            try:
                session.spin()
            except InsufficientBalanceError as e:
                console.print(f"[yellow]⚠️  {e}[/yellow]")
                break
            except SpinInProgressError as e:
                console.print(f"[yellow]⚠️  {e}[/yellow]")
                continue
            if delay > 0:
                session.wait_for_reveal(timeout=delay + 5)
            else:
                session.settle_now()

        stats = session.stats.to_dict()

    table = Table(title="Session")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        table.add_row(key.replace("_", " "), f"{value:.2f}" if isinstance(value, float) else str(value))
    table.add_row("final balance", f"{wallet.current_balance:.2f}")
    console.print(table)
    return 0


def cmd_odds(args) -> int:
    config = load_wheel_config(args.config)
    outer, inner = config.build_rings()
    model = build_math_model(outer, inner)

    if args.json:
        console.print_json(model.to_json())
        return 0

    table = Table(title=f"Paytable ({len(model.paytable)} outcomes)")
    table.add_column("Outcome")
    table.add_column("P", justify="right")
    table.add_column("Δ / stake", justify="right")
    table.add_column("P × Δ", justify="right")
    for e in sorted(model.paytable, key=lambda e: -e.probability):
        colour = "green" if e.delta_multiplier > 0 else "red"
        table.add_row(e.outcome_id, f"{e.probability*100:.4f}%",
                      f"[{colour}]{e.delta_multiplier:+g}[/{colour}]",
                      f"{e.contribution:+.5f}")
    console.print(table)
    v = model.volatility
    console.print(f"Expected Δ per unit stake: [bold]{model.expected_delta:+.5f}[/bold]")
    console.print(f"Hit frequency: {v.hit_frequency*100:.2f}%   σ: {v.standard_deviation:.4f}")
    console.print(f"Loss beyond stake: {v.p_loss_beyond_stake*100:.2f}%   "
                  f"Max win: {v.max_win_multiplier:g}x ({v.max_win_probability:.2e})")
    return 0


def cmd_simulate(args) -> int:
    config = load_wheel_config(args.config)
    outer, inner = config.build_rings()
    mc = MonteCarloValidator(outer, inner, seed=args.seed, alpha=args.alpha, z_limit=args.z_limit)
    console.print(f"[cyan]Running {args.rounds:,}-round simulation...[/cyan]")
    result = mc.validate(n_rounds=args.rounds)
    if args.json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        console.print(result.summary())
    return 0 if result.passed else 1


def cmd_dump_config(args) -> int:
    config = load_wheel_config(args.config)
    print(config.model_dump_json(indent=2))
    return 0


# ═══════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LuxSpin twin-ring wheel")
    parser.add_argument("--config", type=str, default=None, help="WheelConfig JSON file")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("spin", help="Play spins against a demo wallet")
    p.add_argument("--stake", type=float, default=None)
    p.add_argument("--balance", type=float, default=None)
    p.add_argument("--count", type=int, default=1)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--delay", type=float, default=None, help="Reveal delay in seconds")
    p.add_argument("--deposit", action="store_true", help="Top up when the stake is unaffordable")
    p.add_argument("--step", type=int, default=0, help="Move the stake N options up (negative: down)")
    p.set_defaults(func=cmd_spin)

    p = sub.add_parser("odds", help="Exact paytable and expected value")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_odds)

    p = sub.add_parser("simulate", help="Monte Carlo validation")
    p.add_argument("--rounds", type=int, default=200_000)
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--alpha", type=float, default=0.001, choices=[0.05, 0.01, 0.001])
    p.add_argument("--z-limit", type=float, default=4.0)
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_simulate)

    p = sub.add_parser("dump-config", help="Print the effective WheelConfig")
    p.set_defaults(func=cmd_dump_config)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger.debug(f"Command: {args.command} (config={args.config or WheelSettings.CONFIG_PATH or 'default'})")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
