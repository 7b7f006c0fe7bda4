from __future__ import annotations

from fractions import Fraction
from typing import AbstractSet, Literal

from ntdice.probability import ProbabilityMatrix

FirstPick = Literal["lowest", "minimax"]
FIRST_PICKS: tuple[FirstPick, ...] = ("lowest", "minimax")


def select_best(
    available: AbstractSet[int],
    opponent_choice: int | None,
    matrix: ProbabilityMatrix,
    *,
    first_pick: FirstPick = "lowest",
) -> int:
    """Pick the die index with the best chance against the opponent.

    With a known opponent die this is the argmax of ``matrix[d, opponent]``,
    ties going to the lowest index. Without one, ``first_pick`` decides:
    ``lowest`` takes the lowest free index, ``minimax`` takes the die whose
    worst win probability over the remaining replies is highest.
    """
    if not available:
        raise ValueError("no dice available to select from")
    if opponent_choice is not None and opponent_choice in available:
        raise ValueError(f"die {opponent_choice} is already claimed by the opponent")

    candidates = sorted(available)
    if opponent_choice is not None:
        return _argmax(candidates, lambda d: matrix[(d, opponent_choice)])

    if first_pick == "lowest":
        return candidates[0]
    if first_pick == "minimax":
        return _argmax(candidates, lambda d: _worst_case(d, candidates, matrix))
    raise ValueError(f"unknown first-pick strategy {first_pick!r}")


def _worst_case(die: int, candidates: list[int], matrix: ProbabilityMatrix) -> Fraction:
    replies = [matrix[(die, o)] for o in candidates if o != die]
    # Nothing left for the opponent to pick; every candidate scores the same.
    return min(replies) if replies else Fraction(1, 2)


def _argmax(candidates: list[int], score) -> int:
    best = candidates[0]
    best_score = score(best)
    for d in candidates[1:]:
        s = score(d)
        if s > best_score:
            best, best_score = d, s
    return best
