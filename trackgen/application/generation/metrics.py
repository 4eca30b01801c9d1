from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Point-in-time read of the generation counters."""

    total_generated: int = 0
    total_collisions: int = 0
    total_failures: int = 0
    mean_generation_latency_ms: float = 0.0


class MetricsRecorder:
    """Process-lifetime generation counters shared by concurrent calls.

    Every update and every snapshot goes through one lock, so increments are
    never lost and a snapshot never mixes two updates. Counters only grow.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generated = 0
        self._collisions = 0
        self._failures = 0
        self._latency_total_ms = 0.0
        self._latency_samples = 0

    def record_success(self, duration_ms: float) -> None:
        with self._lock:
            self._generated += 1
            self._latency_total_ms += max(0.0, float(duration_ms))
            self._latency_samples += 1

    def record_collision(self) -> None:
        with self._lock:
            self._collisions += 1

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            mean = (
                self._latency_total_ms / self._latency_samples
                if self._latency_samples
                else 0.0
            )
            return MetricsSnapshot(
                total_generated=self._generated,
                total_collisions=self._collisions,
                total_failures=self._failures,
                mean_generation_latency_ms=mean,
            )


class GenerationStatus(str, Enum):
    HEALTHY = "HEALTHY"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True, slots=True)
class GenerationHealth:
    collision_rate: float
    failure_rate: float
    status: GenerationStatus


def assess_health(snapshot: MetricsSnapshot) -> GenerationHealth:
    """Derive collision/failure percentages and an overall status.

    CRITICAL above 5% failures; WARNING above 1% failures or 10% collisions.
    """
    attempts = snapshot.total_generated + snapshot.total_collisions
    collision_rate = snapshot.total_collisions / attempts * 100 if attempts > 0 else 0.0

    terminal = snapshot.total_generated + snapshot.total_failures
    failure_rate = snapshot.total_failures / terminal * 100 if terminal > 0 else 0.0

    if failure_rate > 5.0:
        status = GenerationStatus.CRITICAL
    elif failure_rate > 1.0 or collision_rate > 10.0:
        status = GenerationStatus.WARNING
    else:
        status = GenerationStatus.HEALTHY

    return GenerationHealth(
        collision_rate=collision_rate, failure_rate=failure_rate, status=status
    )
