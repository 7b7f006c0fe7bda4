from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ntdice.commit_reveal import FairRandom, combine
from ntdice.dice import Die
from ntdice.errors import ProtocolSequenceError, UserAbort
from ntdice.help_table import render_help
from ntdice.probability import ProbabilityMatrix, build_matrix
from ntdice.protocol import (
    FairExchange,
    Player,
    RoundResult,
    RoundState,
    determine_outcome,
    other_player,
)
from ntdice.scoreboard import ScoreBoard
from ntdice.settings import GameSettings
from ntdice.strategy import select_best

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]
Emit = Callable[[str], None]
ProtocolFactory = Callable[[int, int], FairRandom]

_NUMBER_RE = re.compile(r"[0-9]+")

_NEXT_STATE = {
    RoundState.AWAITING_FIRST_MOVE: RoundState.AWAITING_FIRST_SELECTION,
    RoundState.AWAITING_FIRST_SELECTION: RoundState.AWAITING_SECOND_SELECTION,
    RoundState.AWAITING_SECOND_SELECTION: RoundState.AWAITING_FIRST_ROLL,
    RoundState.AWAITING_FIRST_ROLL: RoundState.AWAITING_SECOND_ROLL,
    RoundState.AWAITING_SECOND_ROLL: RoundState.COMPLETE,
}


@dataclass
class RoundContext:
    """Mutable state of one round, threaded through every step."""

    die_count: int
    state: RoundState = RoundState.AWAITING_FIRST_MOVE
    first_mover: Player | None = None
    selections: dict[Player, int] = field(default_factory=dict)
    faces: dict[Player, int] = field(default_factory=dict)
    exchanges: list[FairExchange] = field(default_factory=list)

    def advance(self, expected: RoundState) -> None:
        if self.state is not expected:
            raise ProtocolSequenceError(f"round is {self.state.value}, expected {expected.value}")
        self.state = _NEXT_STATE[expected]

    def available(self) -> set[int]:
        claimed = set(self.selections.values())
        return {i for i in range(self.die_count) if i not in claimed}

    def claim(self, player: Player, die_index: int) -> None:
        if player in self.selections:
            raise ProtocolSequenceError(f"{player} already holds die {self.selections[player]}")
        if die_index not in self.available():
            raise ProtocolSequenceError(f"die {die_index} is not available")
        self.selections[player] = die_index

    @property
    def order(self) -> tuple[Player, Player]:
        if self.first_mover is None:
            raise ProtocolSequenceError("first mover not decided yet")
        return self.first_mover, other_player(self.first_mover)


class DiceGame:
    def __init__(
        self,
        dice: Sequence[Die],
        *,
        settings: GameSettings | None = None,
        prompt: Prompt | None = None,
        emit: Emit | None = None,
        protocol_factory: ProtocolFactory = FairRandom,
        scoreboard: ScoreBoard | None = None,
    ) -> None:
        self.dice = list(dice)
        self.settings = settings or GameSettings()
        self.matrix: ProbabilityMatrix = build_matrix(self.dice)
        self.scoreboard = scoreboard or ScoreBoard()
        self._prompt = prompt or input
        self._emit = emit or print
        self._protocol_factory = protocol_factory

    # --- Session ---
    def run(self) -> ScoreBoard:
        """Play rounds until the user declines or exits; return the tally."""
        try:
            while True:
                self.play_round()
                if self.settings.once or not self._play_again():
                    break
        except UserAbort:
            logger.info("user left the game")
        return self.scoreboard

    def play_round(self) -> RoundResult:
        ctx = RoundContext(die_count=len(self.dice))

        self._emit("Let's determine who makes the first move.")
        self.decide_first_mover(ctx)
        ctx.advance(RoundState.AWAITING_FIRST_MOVE)

        first, second = ctx.order
        self.select_die(ctx, first)
        ctx.advance(RoundState.AWAITING_FIRST_SELECTION)
        self.select_die(ctx, second)
        ctx.advance(RoundState.AWAITING_SECOND_SELECTION)

        self.roll(ctx, first)
        ctx.advance(RoundState.AWAITING_FIRST_ROLL)
        self.roll(ctx, second)
        ctx.advance(RoundState.AWAITING_SECOND_ROLL)

        result = self._finish(ctx)
        self.scoreboard.record(result.outcome)
        return result

    # --- Steps ---
    def decide_first_mover(self, ctx: RoundContext) -> Player:
        exchange = self._fair_exchange(
            ctx,
            low=0,
            high=1,
            intro=lambda digest: [
                f"I selected a random value in the range 0..1 (HMAC={digest}).",
                "Try to guess my selection.",
            ],
            labels=["0", "1"],
            reveal_line=lambda r: f"My selection: {r.secret_value} (KEY={r.key}).",
        )
        # (secret + guess) mod 2 is 0 exactly when the guess matches.
        ctx.first_mover = "user" if exchange.joint_value == 0 else "computer"
        self._emit(f"{'You' if ctx.first_mover == 'user' else 'I'} make the first move.")
        logger.debug("first mover: %s", ctx.first_mover)
        return ctx.first_mover

    def select_die(self, ctx: RoundContext, player: Player) -> int:
        if player == "computer":
            choice = select_best(
                ctx.available(),
                ctx.selections.get("user"),
                self.matrix,
                first_pick=self.settings.first_pick,
            )
            ctx.claim("computer", choice)
            self._emit(f"I choose the {self.dice[choice]} dice.")
        else:
            options = sorted(ctx.available())
            self._emit("Choose your dice:")
            picked = self._ask([str(self.dice[i]) for i in options])
            choice = options[picked]
            ctx.claim("user", choice)
            self._emit(f"You choose the {self.dice[choice]} dice.")
        logger.debug("%s claimed die %d", player, choice)
        return choice

    def roll(self, ctx: RoundContext, player: Player) -> int:
        die = self.dice[ctx.selections[player]]
        n = die.count
        self._emit(f"It's time for {'your' if player == 'user' else 'my'} roll.")
        exchange = self._fair_exchange(
            ctx,
            low=0,
            high=n - 1,
            intro=lambda digest: [
                f"I selected a random value in the range 0..{n - 1} (HMAC={digest}).",
                f"Add your number modulo {n}.",
            ],
            labels=[str(i) for i in range(n)],
            reveal_line=lambda r: f"My number is {r.secret_value} (KEY={r.key}).",
        )
        self._emit(
            f"The fair number generation result is {exchange.revealed.secret_value} + "
            f"{exchange.counterpart_value} = {exchange.joint_value} (mod {n})."
        )
        face = die.face(exchange.joint_value)
        ctx.faces[player] = face
        self._emit(f"{'Your' if player == 'user' else 'My'} roll result is {face}.")
        return face

    def help_text(self) -> str:
        return render_help(self.dice, self.matrix, precision=self.settings.precision)

    # --- Helpers ---
    def _fair_exchange(self, ctx: RoundContext, *, low: int, high: int, intro, labels, reveal_line) -> FairExchange:
        protocol = self._protocol_factory(low, high)
        digest = protocol.commit()
        try:
            for line in intro(digest):
                self._emit(line)
            counterpart = self._ask(labels)
        except UserAbort:
            protocol.discard()
            raise
        revealed = protocol.reveal()
        self._emit(reveal_line(revealed))
        modulus = high - low + 1
        exchange = FairExchange(
            digest=digest,
            revealed=revealed,
            counterpart_value=counterpart,
            modulus=modulus,
            joint_value=combine(revealed.secret_value - low, counterpart, modulus),
        )
        ctx.exchanges.append(exchange)
        return exchange

    def _ask(self, labels: list[str]) -> int:
        while True:
            for i, label in enumerate(labels):
                self._emit(f"{i} - {label}")
            self._emit("X - exit")
            self._emit("? - help")
            raw = self._read("Your selection: ").strip()
            if raw.upper() == "X":
                raise UserAbort()
            if raw == "?":
                self._emit(self.help_text())
                continue
            if _NUMBER_RE.fullmatch(raw) and int(raw) < len(labels):
                return int(raw)
            self._emit(f"Invalid selection {raw!r}: enter 0..{len(labels) - 1}, X or ?.")

    def _read(self, message: str) -> str:
        try:
            return self._prompt(message)
        except (EOFError, KeyboardInterrupt):
            raise UserAbort() from None

    def _play_again(self) -> bool:
        return self._read("\nPlay another round? (y/n): ").strip().lower() == "y"

    def _finish(self, ctx: RoundContext) -> RoundResult:
        user_face, computer_face = ctx.faces["user"], ctx.faces["computer"]
        outcome = determine_outcome(user_face, computer_face)
        if outcome == "win":
            self._emit(f"You win ({user_face} > {computer_face})!")
        elif outcome == "loss":
            self._emit(f"You lose ({user_face} < {computer_face})!")
        else:
            self._emit(f"It's a tie ({user_face} = {computer_face})!")
        first, _ = ctx.order
        return RoundResult(
            first_mover=first,
            user_die=str(self.dice[ctx.selections["user"]]),
            computer_die=str(self.dice[ctx.selections["computer"]]),
            user_face=user_face,
            computer_face=computer_face,
            outcome=outcome,
            exchanges=tuple(ctx.exchanges),
        )
