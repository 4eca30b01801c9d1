"""
Health check and generation statistics reporting
"""

import psutil
import time
from datetime import datetime, timezone
from typing import Dict, Any
from pydantic import BaseModel, ConfigDict

from trackgen.application.generation.metrics import (
    GenerationStatus,
    MetricsSnapshot,
    assess_health,
)


class SystemHealth(BaseModel):
    """System health status model"""

    status: str
    timestamp: datetime
    uptime: float
    memory_usage: Dict[str, Any]
    cpu_usage: float
    generation_status: GenerationStatus

    model_config = ConfigDict()


class GenerationStatistics(BaseModel):
    totalGenerated: int
    totalCollisions: int
    totalFailures: int
    avgGenerationTimeMs: float


class GenerationPerformance(BaseModel):
    collisionRate: float
    failureRate: float
    status: GenerationStatus


class TrackingNumberStatsReport(BaseModel):
    """Body of the tracking number statistics endpoint"""

    service: str
    statistics: GenerationStatistics
    performance: GenerationPerformance


def build_stats_report(snapshot: MetricsSnapshot, service: str) -> TrackingNumberStatsReport:
    health = assess_health(snapshot)
    return TrackingNumberStatsReport(
        service=service,
        statistics=GenerationStatistics(
            totalGenerated=snapshot.total_generated,
            totalCollisions=snapshot.total_collisions,
            totalFailures=snapshot.total_failures,
            avgGenerationTimeMs=snapshot.mean_generation_latency_ms,
        ),
        performance=GenerationPerformance(
            collisionRate=health.collision_rate,
            failureRate=health.failure_rate,
            status=health.status,
        ),
    )


class HealthChecker:
    """Process health combined with tracking number generation status"""

    def __init__(self):
        self.start_time = time.time()

    def get_memory_info(self) -> Dict[str, Any]:
        """Get memory usage information"""
        memory = psutil.virtual_memory()
        return {
            "total": memory.total,
            "available": memory.available,
            "used": memory.used,
            "percentage": memory.percent,
        }

    def get_cpu_info(self) -> float:
        """CPU usage since the previous call; non-blocking"""
        return psutil.cpu_percent(interval=None)

    def get_system_health(self, snapshot: MetricsSnapshot) -> SystemHealth:
        uptime = time.time() - self.start_time
        memory = self.get_memory_info()
        cpu = self.get_cpu_info()
        generation = assess_health(snapshot).status

        status = "healthy"
        if generation is GenerationStatus.CRITICAL or memory["percentage"] > 95:
            status = "unhealthy"
        elif generation is GenerationStatus.WARNING or memory["percentage"] > 85:
            status = "warning"

        return SystemHealth(
            status=status,
            timestamp=datetime.now(timezone.utc),
            uptime=uptime,
            memory_usage=memory,
            cpu_usage=cpu,
            generation_status=generation,
        )


# Global health checker instance
health_checker = HealthChecker()
