from .system_clock import SystemClock
from .secure_random import SecretsRandomSource
from .store_memory import InMemoryUniquenessStore
from .store_sql import SqlUniquenessStore
from .store_json import JsonFileUniquenessStore

__all__ = [
    "SystemClock",
    "SecretsRandomSource",
    "InMemoryUniquenessStore",
    "SqlUniquenessStore",
    "JsonFileUniquenessStore",
]
