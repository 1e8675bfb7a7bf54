"""
LUXSPIN — Wallet

In-memory balance store the spin session settles against. The balance never
drops below zero: a debit larger than the balance empties it and reports
how much was actually taken.

Usage:
    from tools.wallet import Wallet
    wallet = Wallet(balance=10.0)
    wallet.deposit()                          # demo top-up
    change = wallet.apply_settlement(result.settlement)
"""

from __future__ import annotations

import logging
import threading

from config.settings import WheelSettings
from spin_engine.settlement import Settlement, round_money

logger = logging.getLogger("luxspin.wallet")


class Wallet:
    """Thread-safe balance with clamp-at-zero debits."""

    def __init__(self, balance: float = 0.0):
        if balance < 0:
            raise ValueError(f"Starting balance must be >= 0, got {balance}")
        self._balance = round_money(balance)
        self._lock = threading.Lock()

    @property
    def current_balance(self) -> float:
        with self._lock:
            return self._balance

    def can_afford(self, amount: float) -> bool:
        return amount <= self.current_balance

    def credit(self, amount: float) -> float:
        """Add `amount`; returns the new balance."""
        if amount <= 0:
            raise ValueError("Credit must be positive")
        with self._lock:
            self._balance = round_money(self._balance + amount)
            logger.debug(f"Credit {amount:.2f} → balance {self._balance:.2f}")
            return self._balance

    def debit(self, amount: float) -> float:
        """Remove up to `amount`; returns what was actually removed."""
        if amount <= 0:
            raise ValueError("Debit must be positive")
        with self._lock:
            taken = min(round_money(amount), self._balance)
            self._balance = round_money(self._balance - taken)
            if taken < round_money(amount):
                logger.info(f"Debit {amount:.2f} clamped to {taken:.2f} (balance exhausted)")
            return taken

    def deposit(self, amount: float = None) -> float:
        """Demo top-up; returns the new balance."""
        return self.credit(WheelSettings.DEPOSIT_AMOUNT if amount is None else amount)

    def apply_settlement(self, settlement: Settlement) -> float:
        """Apply a spin delta; returns the actual balance change.

        The balance moves in whole cents, so the change is settlement.delta
        rounded to cents. On an amplified loss it can also be smaller in
        magnitude than settlement.delta, since the balance stops at zero.
        """
        if settlement.delta > 0:
            with self._lock:
                before = self._balance
            return round_money(self.credit(settlement.delta) - before)
        if settlement.delta < 0:
            return round_money(-self.debit(-settlement.delta))
        return 0.0

    def to_dict(self) -> dict:
        return {"balance": self.current_balance}
