"""Offline registry store backed by NTUSER.DAT hive files.

Each owner identity maps to one hive file; the hive root corresponds to
HKEY_CURRENT_USER for that profile. Parsing is done with dissect.regf, so no
live registry access or privilege elevation is involved.
"""

import logging
from pathlib import Path
from typing import Any, BinaryIO

from dissect.regf import RegistryHive
from dissect.regf.exceptions import RegistryKeyNotFoundError, RegistryValueNotFoundError

from userassist.config import get_settings
from userassist.exceptions import (
    KeyNotFoundError,
    KeyUnreadableError,
    StoreUnavailableError,
    ValueReadError,
)
from userassist.stores.base import KeyValueStore, RegistryValue, StorageValueType

logger = logging.getLogger(__name__)

# Registry hive magic bytes
REGF_MAGIC = b"regf"


class HiveStore(KeyValueStore):
    """Registry store reading UserAssist keys from per-profile hive files."""

    def __init__(self, hives: dict[str, Path | str], max_value_size: int | None = None):
        """Initialize hive store.

        Args:
            hives: Mapping of owner identity to hive file path
            max_value_size: Values larger than this are reported unreadable
                (defaults to settings)
        """
        self._paths = {identity: Path(path) for identity, path in hives.items()}
        self._hives: dict[str, Any] = {}
        self._handles: list[BinaryIO] = []
        # (identity, key path lower-cased) -> placeholder name -> failure reason
        self._unreadable: dict[tuple[str, str], dict[str, str]] = {}
        self.max_value_size = max_value_size or get_settings().max_value_size

    @classmethod
    def from_profiles_dir(cls, users_dir: Path | str, hive_name: str | None = None) -> "HiveStore":
        """Discover ``<users_dir>/<profile>/NTUSER.DAT`` hives.

        The profile directory name becomes the owner identity.
        """
        users_dir = Path(users_dir)
        hive_name = hive_name or get_settings().hive_file_name
        hives: dict[str, Path] = {}

        if not users_dir.is_dir():
            raise StoreUnavailableError(str(users_dir), "profiles directory not found")

        for profile in sorted(users_dir.iterdir()):
            if not profile.is_dir():
                continue
            try:
                candidates = list(profile.iterdir())
            except OSError as e:
                logger.warning("Skipping unreadable profile %s: %s", profile, e)
                continue
            for candidate in candidates:
                if candidate.is_file() and candidate.name.lower() == hive_name.lower():
                    hives[profile.name] = candidate
                    break

        logger.info("Discovered %d profile hives under %s", len(hives), users_dir)
        return cls(hives)

    @staticmethod
    def is_hive(path: Path) -> bool:
        """Check a file for the registry hive magic bytes."""
        try:
            with open(path, "rb") as f:
                return f.read(4) == REGF_MAGIC
        except OSError:
            return False

    def identities(self) -> list[str]:
        return list(self._paths)

    def _hive(self, owner_identity: str) -> Any:
        hive = self._hives.get(owner_identity)
        if hive is not None:
            return hive

        path = self._paths.get(owner_identity)
        if path is None:
            raise StoreUnavailableError(owner_identity, "no hive registered for identity")

        try:
            fh = open(path, "rb")
        except OSError as e:
            raise StoreUnavailableError(owner_identity, str(e)) from e

        try:
            hive = RegistryHive(fh)
        except Exception as e:
            fh.close()
            raise StoreUnavailableError(owner_identity, f"not a registry hive: {e}") from e

        self._handles.append(fh)
        self._hives[owner_identity] = hive
        logger.debug("Opened hive %s for %s", path, owner_identity)
        return hive

    def _key(self, owner_identity: str, key_path: str) -> Any:
        hive = self._hive(owner_identity)
        try:
            return hive.open(key_path)
        except RegistryKeyNotFoundError as e:
            raise KeyNotFoundError(key_path) from e
        except Exception as e:
            # Corrupt key cells: invalid signatures, undecodable names
            raise KeyUnreadableError(key_path, str(e)) from e

    def list_value_names(self, owner_identity: str, key_path: str) -> list[str]:
        """List value names, keeping a placeholder for each unreadable cell.

        Enumeration stops at a cell that breaks iteration; names decoded
        before it are kept. Reading a placeholder raises ValueReadError.
        """
        key = self._key(owner_identity, key_path)
        names: list[str] = []
        unreadable: dict[str, str] = {}
        self._unreadable[(owner_identity, key_path.lower())] = unreadable

        try:
            for value in key.values():
                try:
                    names.append(value.name)
                except Exception as e:
                    placeholder = f"#{len(names)}"
                    unreadable[placeholder] = f"undecodable value name: {e}"
                    names.append(placeholder)
        except Exception as e:
            placeholder = f"#{len(names)}"
            unreadable[placeholder] = f"enumeration stopped: {e}"
            names.append(placeholder)
            logger.warning("Enumeration of %s for %s stopped early: %s", key_path, owner_identity, e)

        return names

    def read_value(self, owner_identity: str, key_path: str, name: str) -> RegistryValue:
        reason = self._unreadable.get((owner_identity, key_path.lower()), {}).get(name)
        if reason is not None:
            raise ValueReadError(key_path, name, reason)

        try:
            key = self._key(owner_identity, key_path)
        except KeyNotFoundError as e:
            raise ValueReadError(key_path, name, str(e)) from e

        try:
            value = key.value(name)
            data = bytes(value.data)
        except RegistryValueNotFoundError as e:
            raise ValueReadError(key_path, name, "no such value") from e
        except Exception as e:
            # Corrupt cells surface as struct/EOF errors from dissect
            raise ValueReadError(key_path, name, str(e)) from e

        if len(data) > self.max_value_size:
            raise ValueReadError(key_path, name, f"value exceeds {self.max_value_size} bytes")

        return RegistryValue(
            name=name,
            value_type=StorageValueType.from_raw(value.type),
            data=data,
        )

    def close(self) -> None:
        for fh in self._handles:
            fh.close()
        self._handles.clear()
        self._hives.clear()
        self._unreadable.clear()
