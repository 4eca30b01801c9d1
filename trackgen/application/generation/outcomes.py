from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from enum import Enum
from typing import Union


class AttemptResult(str, Enum):
    """Result of a single check-then-insert attempt."""

    ACCEPTED = "accepted"
    COLLISION = "collision"
    STORE_ERROR = "store_error"


@dataclass(frozen=True, slots=True)
class Success:
    tracking_number: str
    created_at: _dt.datetime
    attempts: int
    elapsed_ms: float


@dataclass(frozen=True, slots=True)
class Exhausted:
    attempts: int
    elapsed_ms: float


@dataclass(frozen=True, slots=True)
class StoreFailure:
    cause: Exception
    attempts: int
    elapsed_ms: float


GenerationOutcome = Union[Success, Exhausted, StoreFailure]


@dataclass(frozen=True, slots=True)
class Attempt:
    """What one attempt produced; ``cause`` is set only for STORE_ERROR."""

    result: AttemptResult
    tracking_number: str
    created_at: _dt.datetime
    cause: Exception | None = None
