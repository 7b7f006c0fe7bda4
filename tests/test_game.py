from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

from ntdice.commit_reveal import FairRandom, verify_commitment  # type: ignore[import-not-found]  # noqa: E402
from ntdice.dice import parse_dice  # type: ignore[import-not-found]  # noqa: E402
from ntdice.errors import ProtocolSequenceError  # type: ignore[import-not-found]  # noqa: E402
from ntdice.game import DiceGame, RoundContext  # type: ignore[import-not-found]  # noqa: E402
from ntdice.protocol import RoundState  # type: ignore[import-not-found]  # noqa: E402
from ntdice.settings import GameSettings  # type: ignore[import-not-found]  # noqa: E402

CLASSIC = ["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"]


class ScriptedProtocols:
    """Hands out FairRandom instances whose secrets come from a fixed list."""

    def __init__(self, secrets: Iterable[int]) -> None:
        self._secrets = iter(secrets)
        self.made: list[FairRandom] = []

    def __call__(self, low: int, high: int) -> FairRandom:
        fr = FairRandom(low, high, randint=lambda lo, hi: next(self._secrets), key_factory=lambda: b"\x07" * 32)
        self.made.append(fr)
        return fr


def _game(inputs: list[str], secrets: list[int], *, once: bool = True, first_pick: str = "lowest"):
    replies = iter(inputs)
    transcript: list[str] = []
    protocols = ScriptedProtocols(secrets)
    game = DiceGame(
        parse_dice(CLASSIC),
        settings=GameSettings(once=once, first_pick=first_pick),  # type: ignore[arg-type]
        prompt=lambda _msg: next(replies),
        emit=transcript.append,
        protocol_factory=protocols,
    )
    return game, transcript, protocols


def test_round_with_user_moving_first() -> None:
    # First-move secret 1 guessed right; user takes die 0; rolls: 2+3 and 0+0 (mod 6).
    game, transcript, _ = _game(["1", "0", "3", "0"], [1, 2, 0])
    result = game.play_round()

    assert result.first_mover == "user"
    assert result.user_die == "[2,2,4,4,9,9]"
    assert result.computer_die == "[3,3,5,5,7,7]"
    assert (result.user_face, result.computer_face, result.outcome) == (9, 3, "win")

    first_move, user_roll, computer_roll = result.exchanges
    assert (first_move.modulus, first_move.joint_value) == (2, 0)
    assert user_roll.revealed.secret_value == 2
    assert user_roll.counterpart_value == 3
    assert user_roll.modulus == 6
    assert user_roll.joint_value == 5
    assert computer_roll.joint_value == 0

    for ex in result.exchanges:
        assert verify_commitment(expected_digest=ex.digest, key=ex.revealed.key, value=ex.revealed.secret_value)

    assert "You make the first move." in transcript
    assert "I choose the [3,3,5,5,7,7] dice." in transcript
    assert "The fair number generation result is 2 + 3 = 5 (mod 6)." in transcript
    assert "Your roll result is 9." in transcript
    assert "You win (9 > 3)!" in transcript
    assert any(line.startswith("I selected a random value in the range 0..5 (HMAC=") for line in transcript)


def test_round_with_computer_moving_first() -> None:
    # Wrong guess; computer takes the lowest die, user takes the second listed ([3,...]).
    game, transcript, _ = _game(["1", "1", "2", "0"], [0, 3, 1])
    result = game.play_round()

    assert result.first_mover == "computer"
    assert result.computer_die == "[2,2,4,4,9,9]"
    assert result.user_die == "[3,3,5,5,7,7]"
    assert (result.computer_face, result.user_face, result.outcome) == (9, 3, "loss")
    assert "I make the first move." in transcript
    assert transcript.index("It's time for my roll.") < transcript.index("It's time for your roll.")
    assert "You lose (3 < 9)!" in transcript


def test_minimax_first_pick_is_used_when_configured() -> None:
    dice = parse_dice(["1,2,3", "9,9,9", "0,0,0"])
    replies = iter(["0", "0", "0", "0"])
    game = DiceGame(
        dice,
        settings=GameSettings(once=True, first_pick="minimax"),
        prompt=lambda _msg: next(replies),
        emit=lambda _line: None,
        protocol_factory=ScriptedProtocols([1, 0, 0]),
    )
    result = game.play_round()
    assert result.first_mover == "computer"
    assert result.computer_die == "[9,9,9]"


def test_help_and_invalid_input_reprompt() -> None:
    game, transcript, _ = _game(["?", "7", "abc", "1", "0", "3", "0"], [1, 2, 0])
    result = game.play_round()

    assert result.outcome == "win"
    assert any("Probability of the win for the user:" in line for line in transcript)
    assert sum(1 for line in transcript if line.startswith("Invalid selection")) == 2


def test_exit_discards_pending_commitment() -> None:
    game, transcript, protocols = _game(["1", "0", "x"], [1, 2])
    scoreboard = game.run()

    assert scoreboard.rounds == 0
    pending = protocols.made[-1]
    with pytest.raises(ProtocolSequenceError):
        pending.reveal()
    assert not any(line.startswith("My number is") for line in transcript)


def test_end_of_input_ends_the_session() -> None:
    def closed(_msg: str) -> str:
        raise EOFError

    game = DiceGame(parse_dice(CLASSIC), prompt=closed, emit=lambda _line: None, protocol_factory=ScriptedProtocols([0]))
    assert game.run().rounds == 0


def test_play_again_loop_records_every_round() -> None:
    inputs = ["1", "0", "3", "0", "y", "1", "0", "3", "0", "n"]
    game, _, protocols = _game(inputs, [1, 2, 0, 1, 2, 0], once=False)
    scoreboard = game.run()

    assert scoreboard.rounds == 2
    assert scoreboard.wins == 2
    # First move is decided again in every round.
    assert [p.modulus for p in protocols.made] == [2, 6, 6, 2, 6, 6]


def test_round_context_enforces_order_and_claims() -> None:
    ctx = RoundContext(die_count=3)
    with pytest.raises(ProtocolSequenceError):
        ctx.advance(RoundState.AWAITING_FIRST_SELECTION)
    with pytest.raises(ProtocolSequenceError):
        _ = ctx.order

    ctx.first_mover = "computer"
    ctx.advance(RoundState.AWAITING_FIRST_MOVE)
    assert ctx.order == ("computer", "user")

    ctx.claim("computer", 1)
    assert ctx.available() == {0, 2}
    with pytest.raises(ProtocolSequenceError):
        ctx.claim("user", 1)
    with pytest.raises(ProtocolSequenceError):
        ctx.claim("computer", 0)


def test_finishing_without_a_first_mover_is_a_sequence_error() -> None:
    game, _, _ = _game([], [])
    ctx = RoundContext(die_count=3, selections={"user": 0, "computer": 2}, faces={"user": 9, "computer": 3})
    with pytest.raises(ProtocolSequenceError):
        game._finish(ctx)
