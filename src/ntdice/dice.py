from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Iterable, Sequence

from ntdice.errors import InputValidationError, ValidationKind

MIN_DICE: Final[int] = 3

_FACE_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Die:
    faces: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.faces:
            raise InputValidationError(ValidationKind.MALFORMED_DIE, "a die needs at least one face")
        for f in self.faces:
            if isinstance(f, bool) or not isinstance(f, int) or f < 0:
                raise InputValidationError(ValidationKind.NON_INTEGER_FACE, f"got {f!r}")

    @property
    def count(self) -> int:
        return len(self.faces)

    def face(self, index: int) -> int:
        return self.faces[index]

    def __str__(self) -> str:
        return "[" + ",".join(str(f) for f in self.faces) + "]"


def parse_die(spec: str) -> Die:
    parts = spec.split(",")
    if any(p == "" for p in parts):
        raise InputValidationError(ValidationKind.MALFORMED_DIE, f"got {spec!r}")
    for p in parts:
        if not _FACE_RE.fullmatch(p):
            raise InputValidationError(ValidationKind.NON_INTEGER_FACE, f"got {p!r} in {spec!r}")
    return Die(tuple(int(p) for p in parts))


def parse_dice(args: Iterable[str]) -> list[Die]:
    """Parse command-line die specs such as ``2,2,4,4,9,9``.

    Arguments are re-split on whitespace, so a single quoted string holding
    several dice is accepted too.
    """
    tokens: Sequence[str] = " ".join(args).split()
    if len(tokens) < MIN_DICE:
        raise InputValidationError(ValidationKind.TOO_FEW_DICE, f"got {len(tokens)}")
    return [parse_die(token) for token in tokens]
