"""
Candidate tracking number construction.

A tracking number is 16 characters over ``A-Z0-9``:

    [8 chars time field][8 chars random field]

The time field is the lower 40 bits of the epoch-millisecond timestamp written
in base 36, least-significant digit first. It wraps every 36**8 ms (about 89
years) and does not sort chronologically. The random field is drawn from a
cryptographically secure source.
"""

from __future__ import annotations

import datetime as _dt
import re

from trackgen.application.interfaces.random_source import ISecureRandomSource

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
TIME_FIELD_LENGTH = 8
RANDOM_FIELD_LENGTH = 8
TRACKING_NUMBER_LENGTH = TIME_FIELD_LENGTH + RANDOM_FIELD_LENGTH
TIME_MASK = 0xFF_FFFF_FFFF  # lower 40 bits

_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)
_TRACKING_NUMBER_RE = re.compile(rf"[A-Z0-9]{{{TRACKING_NUMBER_LENGTH}}}")


def epoch_millis(now: _dt.datetime) -> int:
    """Milliseconds since the Unix epoch; naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=_dt.timezone.utc)
    return (now - _EPOCH) // _dt.timedelta(milliseconds=1)


def encode_time_field(millis: int) -> str:
    """Encode the lower 40 bits of ``millis`` as 8 base-36 digits, LSD first."""
    value = millis & TIME_MASK
    base = len(ALPHABET)
    digits = []
    for _ in range(TIME_FIELD_LENGTH):
        digits.append(ALPHABET[value % base])
        value //= base
    return "".join(digits)


def is_valid_tracking_number(value: str) -> bool:
    return isinstance(value, str) and bool(_TRACKING_NUMBER_RE.fullmatch(value))


class TrackingNumberGenerator:
    """Stateless candidate generator; owns nothing but a random source handle."""

    def __init__(self, random_source: ISecureRandomSource) -> None:
        self._random = random_source

    def generate(self, now: _dt.datetime) -> str:
        time_part = encode_time_field(epoch_millis(now))
        return time_part + self._random_field()

    def _random_field(self) -> str:
        size = len(ALPHABET)
        return "".join(
            ALPHABET[self._random.next_symbol(size)] for _ in range(RANDOM_FIELD_LENGTH)
        )
