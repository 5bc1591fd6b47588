"""Registry key-value stores the collector enumerates UserAssist values from."""

from userassist.stores.base import KeyValueStore, RegistryValue, StorageValueType
from userassist.stores.hive import HiveStore
from userassist.stores.memory import InMemoryStore

__all__ = [
    "HiveStore",
    "InMemoryStore",
    "KeyValueStore",
    "RegistryValue",
    "StorageValueType",
]
