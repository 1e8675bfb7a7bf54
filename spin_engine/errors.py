"""Spin Engine — error types raised at the engine and session seams."""


class RingConfigError(ValueError):
    """Odds table or ring definition is unusable (raised at construction)."""


class InvalidStakeError(ValueError):
    """Stake is not a positive amount inside the configured bounds."""


class InsufficientBalanceError(ValueError):
    """Stake exceeds the balance available in the wallet."""

    def __init__(self, balance: float, stake: float):
        self.balance = balance
        self.stake = stake
        super().__init__(f"Insufficient balance: {balance:.2f} < {stake:.2f}")


class SpinInProgressError(RuntimeError):
    """A spin was requested while another one is still being revealed."""


class SessionClosedError(RuntimeError):
    """The session has been torn down and accepts no further spins."""
