from __future__ import annotations

import datetime as _dt
import json
import logging
import os
from typing import Any, Dict, Optional

from filelock import FileLock, Timeout

from trackgen.application.interfaces import IUniquenessStore, InsertResult
from trackgen.core.config import settings
from trackgen.core.exceptions import StoreUnavailableError
from trackgen.core.pyd_schemas import ShipmentAttributes, TrackingNumberRecord

logger = logging.getLogger(__name__)


class JsonFileUniquenessStore(IUniquenessStore):
    """Single-host store kept in a JSON document guarded by a file lock.

    ``insert`` re-reads the document under the lock before writing, so the
    check and the write are one atomic step across threads and processes.
    """

    def __init__(self, path: Optional[str] = None, *, lock_timeout: Optional[float] = None) -> None:
        self.path = path or settings.json_store_path
        self.lock_path = f"{self.path}.lock"
        self.lock_timeout = (
            settings.json_store_lock_timeout if lock_timeout is None else lock_timeout
        )
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def exists(self, tracking_number: str) -> bool:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                return tracking_number in self._load()
        except Timeout as e:
            raise StoreUnavailableError(
                f"Timed out waiting for {self.lock_path}", operation="exists"
            ) from e
        except (OSError, ValueError) as e:
            raise StoreUnavailableError(
                f"Could not read {self.path}: {e}", operation="exists"
            ) from e

    def insert(
        self,
        tracking_number: str,
        attributes: ShipmentAttributes,
        created_at: _dt.datetime,
    ) -> InsertResult:
        record = TrackingNumberRecord(
            tracking_number=tracking_number,
            attributes=attributes,
            created_at=created_at,
        )
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                records = self._load()
                if tracking_number in records:
                    return InsertResult.CONFLICT
                records[tracking_number] = record.model_dump(mode="json")
                self._save(records)
        except Timeout as e:
            raise StoreUnavailableError(
                f"Timed out waiting for {self.lock_path}", operation="insert"
            ) from e
        except (OSError, ValueError) as e:
            raise StoreUnavailableError(
                f"Could not write {self.path}: {e}", operation="insert"
            ) from e
        return InsertResult.OK

    def find(self, tracking_number: str) -> Optional[TrackingNumberRecord]:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                raw = self._load().get(tracking_number)
        except Timeout as e:
            raise StoreUnavailableError(
                f"Timed out waiting for {self.lock_path}", operation="find"
            ) from e
        except (OSError, ValueError) as e:
            raise StoreUnavailableError(
                f"Could not read {self.path}: {e}", operation="find"
            ) from e
        if raw is None:
            return None
        return TrackingNumberRecord.model_validate(raw)

    # Callers must hold the file lock.
    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        return data.get("records", {})

    def _save(self, records: Dict[str, Any]) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"records": records}, f)
        os.replace(tmp_path, self.path)
        logger.debug("Saved %d tracking numbers to %s", len(records), self.path)
