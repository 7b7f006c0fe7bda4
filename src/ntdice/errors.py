from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

DEFAULT_EXAMPLE: Final[str] = "Example: 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7"


class ValidationKind(str, Enum):
    TOO_FEW_DICE = "too_few_dice"
    MALFORMED_DIE = "malformed_die"
    NON_INTEGER_FACE = "non_integer_face"


@dataclass(frozen=True)
class _Guidance:
    message: str
    example: str


_GUIDANCE: Final[dict[ValidationKind, _Guidance]] = {
    ValidationKind.TOO_FEW_DICE: _Guidance(
        "Please specify at least three dice.",
        DEFAULT_EXAMPLE,
    ),
    ValidationKind.MALFORMED_DIE: _Guidance(
        "Each die must be comma-separated integers.",
        "Valid: 1,2,3,4,5,6\nInvalid: 1,,2 or 1,2,3,",
    ),
    ValidationKind.NON_INTEGER_FACE: _Guidance(
        "All die faces must be non-negative integers.",
        "Valid: 1,2,3,4,5,6\nInvalid: 1,two,3 or 1.5,2,3 or -1,2,3",
    ),
}


class InputValidationError(ValueError):
    """Bad die specification on the command line."""

    def __init__(self, kind: ValidationKind, detail: str | None = None) -> None:
        guidance = _GUIDANCE[kind]
        self.kind = kind
        self.message = guidance.message if detail is None else f"{guidance.message} ({detail})"
        self.example = guidance.example
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"Error: {self.message}\n{self.example}"


class RandomnessUnavailableError(RuntimeError):
    """The OS could not provide cryptographically secure randomness."""


class ProtocolSequenceError(RuntimeError):
    """A commit-reveal step was used out of order or with out-of-range input."""


class UserAbort(Exception):
    """The user asked to leave the game."""
