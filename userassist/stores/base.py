"""Base key-value store interface for registry access.

A store answers two questions for an owner identity: which value names live
under a key, and what a single value holds. Enumeration and reads are kept
separate so one unreadable value never hides its siblings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum


class StorageValueType(IntEnum):
    """Registry value type tags (winnt.h REG_* constants)."""

    REG_NONE = 0
    REG_SZ = 1
    REG_EXPAND_SZ = 2
    REG_BINARY = 3
    REG_DWORD = 4
    REG_DWORD_BIG_ENDIAN = 5
    REG_LINK = 6
    REG_MULTI_SZ = 7
    REG_RESOURCE_LIST = 8
    REG_FULL_RESOURCE_DESCRIPTOR = 9
    REG_RESOURCE_REQUIREMENTS_LIST = 10
    REG_QWORD = 11

    @classmethod
    def from_raw(cls, value: int) -> "StorageValueType | int":
        """Map a raw type tag, keeping unknown tags as plain ints."""
        try:
            return cls(value)
        except ValueError:
            return value


@dataclass(frozen=True)
class RegistryValue:
    """A registry value as read from a store."""

    name: str
    value_type: StorageValueType | int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class KeyValueStore(ABC):
    """Abstract registry store, one logical hive per owner identity."""

    @abstractmethod
    def identities(self) -> list[str]:
        """Owner identities this store can answer for."""
        ...

    @abstractmethod
    def list_value_names(self, owner_identity: str, key_path: str) -> list[str]:
        """List the value names under a key.

        Raises:
            StoreUnavailableError: The identity's hive cannot be opened
            KeyNotFoundError: The key does not exist
        """
        ...

    @abstractmethod
    def read_value(self, owner_identity: str, key_path: str, name: str) -> RegistryValue:
        """Read a single value.

        Raises:
            ValueReadError: The value could not be read
        """
        ...

    def close(self) -> None:
        """Release any open handles."""
        return None

    def __enter__(self) -> "KeyValueStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
