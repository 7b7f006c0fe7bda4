from __future__ import annotations

from typing import Sequence

from tabulate import tabulate

from ntdice.dice import Die
from ntdice.probability import ProbabilityMatrix

RULES = (
    "Game rules:\n"
    "- We decide who picks first with a fair coin: guess my committed bit.\n"
    "- Each player picks a different die.\n"
    "- Each roll is (my committed number + your number) mod face count, so neither of us controls it.\n"
    "- Check any HMAC yourself: HMAC-SHA3-256(KEY, number) must equal the value shown before your choice.\n"
    "- The higher face wins the round."
)


def render_probability_table(
    dice: Sequence[Die],
    matrix: ProbabilityMatrix,
    *,
    precision: int = 4,
) -> str:
    headers = ["User dice v"] + [str(d) for d in dice]
    rows = []
    for i, die in enumerate(dice):
        row = [str(die)]
        for j in range(len(dice)):
            row.append("-" if i == j else f"{float(matrix[(i, j)]):.{precision}f}")
        rows.append(row)
    return tabulate(rows, headers=headers, tablefmt="grid", disable_numparse=True)


def render_help(dice: Sequence[Die], matrix: ProbabilityMatrix, *, precision: int = 4) -> str:
    return (
        "\nProbability of the win for the user:\n"
        + render_probability_table(dice, matrix, precision=precision)
        + "\n\n"
        + RULES
    )
