"""
LUXSPIN — Runtime Settings

Environment-driven defaults for the wheel session and CLI. Values come from
the process environment (a local .env file is loaded first).

    WHEEL_REVEAL_DELAY_SECONDS   5.0    delay between spin start and reveal
    WHEEL_DEFAULT_STAKE          0.50
    WHEEL_MIN_STAKE              0.10
    WHEEL_MAX_STAKE              100.00
    WHEEL_STARTING_BALANCE       0.0
    WHEEL_DEPOSIT_AMOUNT         50.0   demo deposit button
    WHEEL_RNG_SEED               unset  seed → reproducible spins
    WHEEL_CONFIG_PATH            unset  JSON WheelConfig overriding the rings
    WHEEL_LOG_LEVEL              INFO
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


class WheelSettings:

    # --- Presentation ---
    REVEAL_DELAY_SECONDS = _env_float("WHEEL_REVEAL_DELAY_SECONDS", 5.0)

    # --- Stakes & Balance ---
    DEFAULT_STAKE = _env_float("WHEEL_DEFAULT_STAKE", 0.50)
    MIN_STAKE = _env_float("WHEEL_MIN_STAKE", 0.10)
    MAX_STAKE = _env_float("WHEEL_MAX_STAKE", 100.00)
    STARTING_BALANCE = _env_float("WHEEL_STARTING_BALANCE", 0.0)
    DEPOSIT_AMOUNT = _env_float("WHEEL_DEPOSIT_AMOUNT", 50.0)

    # --- Randomness ---
    RNG_SEED = _env_int("WHEEL_RNG_SEED")

    # --- Files & Logging ---
    CONFIG_PATH = os.getenv("WHEEL_CONFIG_PATH") or None
    LOG_LEVEL = os.getenv("WHEEL_LOG_LEVEL", "INFO").upper()

    @classmethod
    def summary(cls) -> dict:
        return {
            "reveal_delay_seconds": cls.REVEAL_DELAY_SECONDS,
            "default_stake": cls.DEFAULT_STAKE,
            "min_stake": cls.MIN_STAKE,
            "max_stake": cls.MAX_STAKE,
            "starting_balance": cls.STARTING_BALANCE,
            "deposit_amount": cls.DEPOSIT_AMOUNT,
            "rng_seed": cls.RNG_SEED,
            "config_path": cls.CONFIG_PATH,
            "log_level": cls.LOG_LEVEL,
        }
