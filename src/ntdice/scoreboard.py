from __future__ import annotations

from dataclasses import dataclass

from ntdice.protocol import Outcome


@dataclass
class ScoreBoard:
    """Session tally from the user's side. Lives only as long as the process."""

    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def rounds(self) -> int:
        return self.wins + self.losses + self.ties

    def record(self, outcome: Outcome) -> None:
        if outcome == "win":
            self.wins += 1
        elif outcome == "loss":
            self.losses += 1
        else:
            self.ties += 1

    def format_table(self) -> str:
        if not self.rounds:
            return "(no rounds played)"

        lines: list[str] = []
        header = f"{'rounds':>6}  {'wins':>4}  {'losses':>6}  {'ties':>4}"
        lines.append(header)
        lines.append("-" * len(header))
        lines.append(f"{self.rounds:>6}  {self.wins:>4}  {self.losses:>6}  {self.ties:>4}")
        return "\n".join(lines)
