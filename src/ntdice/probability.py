from __future__ import annotations

import logging
from fractions import Fraction
from typing import Sequence

from ntdice.dice import Die

logger = logging.getLogger(__name__)

# (i, j) -> P(die i shows a strictly higher face than die j). Self pairs absent.
ProbabilityMatrix = dict[tuple[int, int], Fraction]


def win_probability(a: Die, b: Die) -> Fraction:
    wins = sum(1 for fa in a.faces for fb in b.faces if fa > fb)
    return Fraction(wins, a.count * b.count)


def tie_rate(a: Die, b: Die) -> Fraction:
    ties = sum(1 for fa in a.faces for fb in b.faces if fa == fb)
    return Fraction(ties, a.count * b.count)


def build_matrix(dice: Sequence[Die]) -> ProbabilityMatrix:
    """Strict-win probability for every ordered pair of distinct dice.

    Ties count for neither side, so ``m[i, j] + m[j, i] + tie_rate == 1``.
    """
    matrix: ProbabilityMatrix = {}
    for i, a in enumerate(dice):
        for j, b in enumerate(dice):
            if i == j:
                continue
            matrix[(i, j)] = win_probability(a, b)
    logger.debug("built probability matrix for %d dice", len(dice))
    return matrix
