from functools import lru_cache

from trackgen.application.generation.candidate import TrackingNumberGenerator
from trackgen.application.generation.metrics import MetricsRecorder
from trackgen.application.interfaces import ITrackingAdapters
from trackgen.application.use_cases.tracking_number_generate import (
    GenerateTrackingNumberUseCase,
)
from trackgen.core.config import settings
from trackgen.infrastructure.adapters.bundles.tracking import get_tracking_adapter_bundle


@lru_cache(maxsize=1)
def get_metrics_recorder() -> MetricsRecorder:
    """Process-wide recorder; counters live as long as the process."""
    return MetricsRecorder()


@lru_cache(maxsize=1)
def get_tracking_adapters() -> ITrackingAdapters:
    return get_tracking_adapter_bundle()


def build_generate_tracking_number_use_case(
    adapters: ITrackingAdapters, metrics: MetricsRecorder
) -> GenerateTrackingNumberUseCase:
    """Compose the use case from an adapters container and a recorder."""
    return GenerateTrackingNumberUseCase(
        store=adapters.store,
        generator=TrackingNumberGenerator(adapters.random_source),
        clock=adapters.clock,
        metrics=metrics,
        max_attempts=settings.max_generation_attempts,
    )


def get_generate_tracking_number_use_case() -> GenerateTrackingNumberUseCase:
    return build_generate_tracking_number_use_case(
        get_tracking_adapters(), get_metrics_recorder()
    )
