from __future__ import annotations

from typing import Protocol, runtime_checkable

from .uniqueness_store import IUniquenessStore
from .random_source import ISecureRandomSource
from .utils import IClock


@runtime_checkable
class ITrackingAdapters(Protocol):
    store: IUniquenessStore
    clock: IClock
    random_source: ISecureRandomSource
