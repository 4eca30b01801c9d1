from __future__ import annotations

import datetime as _dt
import threading
from typing import Dict, Optional

from trackgen.application.interfaces import IUniquenessStore, InsertResult
from trackgen.core.pyd_schemas import ShipmentAttributes, TrackingNumberRecord


class InMemoryUniquenessStore(IUniquenessStore):
    """Process-local store; the dict key acts as the uniqueness constraint."""

    def __init__(self) -> None:
        self._records: Dict[str, TrackingNumberRecord] = {}
        self._lock = threading.Lock()

    def exists(self, tracking_number: str) -> bool:
        with self._lock:
            return tracking_number in self._records

    def insert(
        self,
        tracking_number: str,
        attributes: ShipmentAttributes,
        created_at: _dt.datetime,
    ) -> InsertResult:
        with self._lock:
            if tracking_number in self._records:
                return InsertResult.CONFLICT
            self._records[tracking_number] = TrackingNumberRecord(
                tracking_number=tracking_number,
                attributes=attributes,
                created_at=created_at,
            )
            return InsertResult.OK

    def find(self, tracking_number: str) -> Optional[TrackingNumberRecord]:
        with self._lock:
            return self._records.get(tracking_number)
