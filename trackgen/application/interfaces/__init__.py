from .uniqueness_store import IUniquenessStore, InsertResult
from .random_source import ISecureRandomSource
from .utils import ITrackingNumberGenerator, IClock
from .tracking_adapters import ITrackingAdapters

__all__ = [
    "IUniquenessStore",
    "InsertResult",
    "ISecureRandomSource",
    "ITrackingNumberGenerator",
    "IClock",
    "ITrackingAdapters",
]
