from __future__ import annotations

import os
from dataclasses import dataclass

from ntdice.strategy import FIRST_PICKS, FirstPick

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class GameSettings:
    first_pick: FirstPick = "lowest"
    precision: int = 4
    log_level: str = "WARNING"
    once: bool = False

    def __post_init__(self) -> None:
        if self.first_pick not in FIRST_PICKS:
            raise ValueError(f"first pick must be one of {'|'.join(FIRST_PICKS)}, got {self.first_pick!r}")
        if not 0 <= self.precision <= 12:
            raise ValueError(f"precision must be within 0..12, got {self.precision}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {'|'.join(LOG_LEVELS)}, got {self.log_level!r}")


def default_first_pick() -> str:
    return os.environ.get("NTDICE_FIRST_PICK", "lowest").strip().lower()


def default_precision() -> int:
    raw = os.environ.get("NTDICE_PRECISION", "4").strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"NTDICE_PRECISION must be an integer, got {raw!r}") from None


def default_log_level() -> str:
    return os.environ.get("NTDICE_LOG_LEVEL", "WARNING").strip().upper()
