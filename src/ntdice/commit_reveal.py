from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Callable, Final

from ntdice.errors import ProtocolSequenceError, RandomnessUnavailableError
from ntdice.protocol import RevealedResult

logger = logging.getLogger(__name__)

KEY_BYTES: Final[int] = 32
DIGEST_ALGORITHM: Final = hashlib.sha3_256


def secure_randint(low: int, high: int) -> int:
    """Uniform integer in ``[low, high]`` from the OS CSPRNG.

    ``secrets.randbelow`` draws ``bit_length(n)`` random bits and rejects
    values ``>= n``, so there is no modulo bias for any range size.
    """
    if low > high:
        raise ValueError(f"empty range {low}..{high}")
    try:
        return low + secrets.randbelow(high - low + 1)
    except (NotImplementedError, OSError) as exc:
        raise RandomnessUnavailableError(f"secure randomness unavailable: {exc}") from exc


def generate_key(num_bytes: int = KEY_BYTES) -> bytes:
    try:
        return secrets.token_bytes(num_bytes)
    except (NotImplementedError, OSError) as exc:
        raise RandomnessUnavailableError(f"secure randomness unavailable: {exc}") from exc


def compute_digest(key: bytes, value: int) -> str:
    return hmac.new(key, str(value).encode("ascii"), DIGEST_ALGORITHM).hexdigest()


def verify_commitment(*, expected_digest: str, key: str, value: int) -> bool:
    """Recompute the HMAC from a revealed ``(key, value)`` pair.

    ``key`` is the hex string shown at reveal time, so any observer can run
    this check with nothing but the transcript.
    """
    try:
        raw = bytes.fromhex(key)
    except ValueError:
        return False
    return secrets.compare_digest(expected_digest.lower(), compute_digest(raw, value))


def combine(secret_value: int, counterpart_value: int, modulus: int) -> int:
    if modulus <= 0:
        raise ProtocolSequenceError(f"modulus must be positive, got {modulus}")
    if not 0 <= counterpart_value < modulus:
        raise ProtocolSequenceError(
            f"counterpart value {counterpart_value} outside 0..{modulus - 1}"
        )
    return (secret_value + counterpart_value) % modulus


class FairRandom:
    """One commit-reveal exchange over ``[low, high]``.

    Single use: ``commit`` once, then ``reveal`` once after the counterpart
    has chosen. ``discard`` drops the secret without revealing it.
    """

    def __init__(
        self,
        low: int,
        high: int,
        *,
        randint: Callable[[int, int], int] = secure_randint,
        key_factory: Callable[[], bytes] = generate_key,
    ) -> None:
        if low > high:
            raise ValueError(f"empty range {low}..{high}")
        self.low = low
        self.high = high
        self._randint = randint
        self._key_factory = key_factory
        self._value: int | None = None
        self._key: bytes | None = None
        self._digest: str | None = None
        self._revealed = False

    @property
    def modulus(self) -> int:
        return self.high - self.low + 1

    @property
    def digest(self) -> str:
        if self._digest is None:
            raise ProtocolSequenceError("no commitment has been made")
        return self._digest

    def commit(self) -> str:
        if self._digest is not None or self._revealed:
            raise ProtocolSequenceError("commitment already made for this exchange")
        value = self._randint(self.low, self.high)
        if not self.low <= value <= self.high:
            raise ProtocolSequenceError(f"secret {value} outside {self.low}..{self.high}")
        key = self._key_factory()
        self._value, self._key = value, key
        self._digest = compute_digest(key, value)
        logger.debug("committed to value in %d..%d digest=%s", self.low, self.high, self._digest)
        return self._digest

    def reveal(self) -> RevealedResult:
        if self._revealed:
            raise ProtocolSequenceError("commitment already revealed or discarded")
        if self._value is None or self._key is None:
            raise ProtocolSequenceError("reveal requested before commit")
        self._revealed = True
        result = RevealedResult(secret_value=self._value, key=self._key.hex())
        logger.debug("revealed value=%d key=%s", result.secret_value, result.key)
        return result

    def discard(self) -> None:
        if self._value is not None and not self._revealed:
            logger.debug("discarding unrevealed commitment digest=%s", self._digest)
        self._value = None
        self._key = None
        self._revealed = True
