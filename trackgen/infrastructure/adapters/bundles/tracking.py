from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

from trackgen.application.interfaces import ITrackingAdapters, IUniquenessStore
from trackgen.core.config import settings
from trackgen.infrastructure.adapters import (
    InMemoryUniquenessStore,
    JsonFileUniquenessStore,
    SecretsRandomSource,
    SqlUniquenessStore,
    SystemClock,
)


def build_uniqueness_store(backend: Optional[str] = None) -> IUniquenessStore:
    """Pick the uniqueness store implementation named by ``store_backend``."""
    backend = (backend or settings.store_backend).strip().lower()
    if backend == "memory":
        return InMemoryUniquenessStore()
    if backend == "json":
        return JsonFileUniquenessStore()
    if backend == "sql":
        return SqlUniquenessStore()
    raise ValueError(f"Unknown store backend: {backend!r}")


def get_tracking_adapter_bundle(
    *, store: Optional[IUniquenessStore] = None
) -> ITrackingAdapters:
    """Provide the adapters container for tracking number generation."""
    return SimpleNamespace(
        store=store if store is not None else build_uniqueness_store(),
        clock=SystemClock(),
        random_source=SecretsRandomSource(),
    )
