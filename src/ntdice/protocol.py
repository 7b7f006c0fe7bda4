from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

Player = Literal["user", "computer"]
Outcome = Literal["win", "loss", "tie"]


def other_player(player: Player) -> Player:
    return "computer" if player == "user" else "user"


def determine_outcome(user_face: int, computer_face: int) -> Outcome:
    """Verdict from the user's point of view."""
    if user_face == computer_face:
        return "tie"
    return "win" if user_face > computer_face else "loss"


class RoundState(str, Enum):
    AWAITING_FIRST_MOVE = "awaiting_first_move_decision"
    AWAITING_FIRST_SELECTION = "awaiting_die_selection_first"
    AWAITING_SECOND_SELECTION = "awaiting_die_selection_second"
    AWAITING_FIRST_ROLL = "awaiting_roll_first"
    AWAITING_SECOND_ROLL = "awaiting_roll_second"
    COMPLETE = "round_complete"


@dataclass(frozen=True)
class RevealedResult:
    secret_value: int
    key: str  # hex


@dataclass(frozen=True)
class FairExchange:
    digest: str
    revealed: RevealedResult
    counterpart_value: int
    modulus: int
    joint_value: int


@dataclass(frozen=True)
class RoundResult:
    first_mover: Player
    user_die: str
    computer_die: str
    user_face: int
    computer_face: int
    outcome: Outcome
    exchanges: tuple[FairExchange, ...] = ()
