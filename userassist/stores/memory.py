"""Dict-backed registry store.

Used for tests and for replaying values captured elsewhere. A value slot may
hold an exception instead of a RegistryValue to simulate a transient read
failure for that one entry.
"""

import logging

from userassist.exceptions import KeyNotFoundError, StoreUnavailableError, ValueReadError
from userassist.stores.base import KeyValueStore, RegistryValue

logger = logging.getLogger(__name__)


class InMemoryStore(KeyValueStore):
    """In-memory registry store keyed by identity, then key path."""

    def __init__(
        self,
        data: dict[str, dict[str, list[RegistryValue | Exception]]] | None = None,
    ):
        self._data: dict[str, dict[str, list[RegistryValue | Exception]]] = {}
        for identity, keys in (data or {}).items():
            for key_path, values in keys.items():
                for value in values:
                    self.add_value(identity, key_path, value)

    @staticmethod
    def _normalize(key_path: str) -> str:
        return key_path.replace("/", "\\").strip("\\").lower()

    def add_identity(self, owner_identity: str) -> None:
        self._data.setdefault(owner_identity, {})

    def add_value(self, owner_identity: str, key_path: str, value: RegistryValue | Exception) -> None:
        keys = self._data.setdefault(owner_identity, {})
        keys.setdefault(self._normalize(key_path), []).append(value)

    def identities(self) -> list[str]:
        return list(self._data)

    def _values(self, owner_identity: str, key_path: str) -> list[RegistryValue | Exception]:
        keys = self._data.get(owner_identity)
        if keys is None:
            raise StoreUnavailableError(owner_identity, "unknown identity")
        values = keys.get(self._normalize(key_path))
        if values is None:
            raise KeyNotFoundError(key_path)
        return values

    def list_value_names(self, owner_identity: str, key_path: str) -> list[str]:
        names = []
        for index, value in enumerate(self._values(owner_identity, key_path)):
            # Failing slots still occupy an index so reads can report them
            names.append(value.name if isinstance(value, RegistryValue) else f"#{index}")
        return names

    def read_value(self, owner_identity: str, key_path: str, name: str) -> RegistryValue:
        try:
            values = self._values(owner_identity, key_path)
        except KeyNotFoundError as e:
            raise ValueReadError(key_path, name, str(e)) from e

        for index, value in enumerate(values):
            if isinstance(value, RegistryValue):
                if value.name == name:
                    return value
            elif name == f"#{index}":
                raise ValueReadError(key_path, name, str(value)) from value

        raise ValueReadError(key_path, name, "no such value")
