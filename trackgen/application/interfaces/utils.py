from __future__ import annotations
from typing import Protocol
import datetime as _dt


class ITrackingNumberGenerator(Protocol):
    """Builds candidate tracking numbers for a given instant."""

    def generate(self, now: _dt.datetime) -> str:
        ...


class IClock(Protocol):
    """Provides current time for deterministic testing."""

    def now(self) -> _dt.datetime:
        ...
