"""
Health, statistics and info endpoints
"""

from fastapi import APIRouter, Depends

from trackgen.application.generation.metrics import MetricsRecorder
from trackgen.core.config import settings
from trackgen.core.monitoring import (
    SystemHealth,
    TrackingNumberStatsReport,
    build_stats_report,
    health_checker,
)
from trackgen.presentation.api.v1.dependencies.tracking import get_metrics_recorder
from trackgen.presentation.api.v1.schemas.tracking import ServiceInfo

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SystemHealth)
async def health_check(metrics: MetricsRecorder = Depends(get_metrics_recorder)):
    """
    Health check endpoint that returns system status and generation status
    """
    return health_checker.get_system_health(metrics.snapshot())


@router.get("/stats", response_model=TrackingNumberStatsReport)
async def tracking_number_stats(
    metrics: MetricsRecorder = Depends(get_metrics_recorder),
):
    """
    Tracking number generation counters, rates and derived status
    """
    return build_stats_report(metrics.snapshot(), service=settings.api_title)


@router.get("/info", response_model=ServiceInfo)
async def info():
    return ServiceInfo(
        service=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
    )


@router.get("/")
async def root():
    """
    Root endpoint
    """
    return {"message": f"{settings.api_title} is running", "status": "healthy"}
