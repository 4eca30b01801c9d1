from __future__ import annotations

import datetime as _dt
from enum import Enum
from typing import Protocol, runtime_checkable

from trackgen.core.pyd_schemas import ShipmentAttributes


class InsertResult(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"


@runtime_checkable
class IUniquenessStore(Protocol):
    """Persistent index of issued tracking numbers.

    The tracking number column carries a uniqueness constraint; ``insert`` is
    the only operation that decides whether a tracking number is taken.
    ``exists`` is a cheap pre-check and may be stale by the time ``insert``
    runs. Both raise ``StoreUnavailableError`` on I/O failure or timeout.
    """

    def exists(self, tracking_number: str) -> bool:
        """Return True if the tracking number is already persisted."""
        ...

    def insert(
        self,
        tracking_number: str,
        attributes: ShipmentAttributes,
        created_at: _dt.datetime,
    ) -> InsertResult:
        """Persist a record; CONFLICT when the uniqueness constraint rejects it."""
        ...
