"""
Shared test configuration and fixtures for the tracking number service.
"""

import datetime as _dt
import logging
import os
from decimal import Decimal
from typing import Iterable, List
from uuid import UUID

# Settings are read at import time; keep tests off the on-disk database.
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_CALLS", "100000")

import pytest

from trackgen.application.generation.metrics import MetricsRecorder
from trackgen.application.interfaces import InsertResult
from trackgen.core.pyd_schemas import ShipmentAttributes, TrackingNumberRequest
from trackgen.infrastructure.adapters import InMemoryUniquenessStore

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def pytest_configure(config):  # pylint: disable=unused-argument
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)


FIXED_NOW = _dt.datetime(2024, 3, 1, 12, 30, 45, 123000, tzinfo=_dt.timezone.utc)


class FixedClock:
    def __init__(self, now: _dt.datetime = FIXED_NOW):
        self.current = now

    def now(self) -> _dt.datetime:
        return self.current


class SequenceGenerator:
    """Returns the given candidates in order, then repeats the last one."""

    def __init__(self, candidates: Iterable[str]):
        self._candidates: List[str] = list(candidates)
        self.calls = 0

    def generate(self, now: _dt.datetime) -> str:
        idx = min(self.calls, len(self._candidates) - 1)
        self.calls += 1
        return self._candidates[idx]


class ScriptedStore:
    """Store double answering ``exists``/``insert`` from scripted lists.

    When a script runs out, the last answer repeats. An Exception instance in a
    script is raised instead of returned.
    """

    def __init__(self, exists=(False,), inserts=(InsertResult.OK,)):
        self._exists = list(exists)
        self._inserts = list(inserts)
        self.exists_calls: List[str] = []
        self.insert_calls: List[str] = []

    @staticmethod
    def _next(script, n):
        answer = script[min(n, len(script) - 1)]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def exists(self, tracking_number: str) -> bool:
        self.exists_calls.append(tracking_number)
        return self._next(self._exists, len(self.exists_calls) - 1)

    def insert(self, tracking_number, attributes, created_at) -> InsertResult:
        self.insert_calls.append(tracking_number)
        return self._next(self._inserts, len(self.insert_calls) - 1)


@pytest.fixture
def shipment_attributes() -> ShipmentAttributes:
    return ShipmentAttributes(
        origin_country_id="MY",
        destination_country_id="ID",
        weight=Decimal("1.234"),
        customer_id=UUID("de619854-b59b-425e-9db4-943979e1bd49"),
        customer_name="RedBox Logistics",
        customer_slug="redbox-logistics",
    )


@pytest.fixture
def valid_request() -> TrackingNumberRequest:
    return TrackingNumberRequest(
        origin_country_id="MY",
        destination_country_id="ID",
        weight=Decimal("1.234"),
        customer_id=UUID("de619854-b59b-425e-9db4-943979e1bd49"),
        customer_name="RedBox Logistics",
        customer_slug="redbox-logistics",
    )


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def metrics() -> MetricsRecorder:
    return MetricsRecorder()


@pytest.fixture
def memory_store() -> InMemoryUniquenessStore:
    return InMemoryUniquenessStore()
