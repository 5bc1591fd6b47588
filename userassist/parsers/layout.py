"""UserAssist binary record layouts.

Modern entries (Windows 7 and later, version 3 or 5) are a 68-byte
little-endian record::

    0x00  u32  size
    0x04  u32  version
    0x08  u32  run count
    0x0C  u32  focus count
    0x10  u32  focus duration (ms)
    0x14  u64  last execution (FILETIME)
    0x1C  u32[10] reserved

Legacy entries only define a u32 run count at offset 4.

Every field is read with an explicit bounds check against the real buffer
length; the embedded size field is never trusted.
"""

import struct
from dataclasses import dataclass

from userassist.models.record import LayoutStatus
from userassist.stores.base import StorageValueType

MODERN_RECORD_SIZE = 68
MODERN_VERSIONS = frozenset({3, 5})
LEGACY_MIN_SIZE = 8

VERSION_OFFSET = 4
RUN_COUNT_OFFSET = 8
FOCUS_COUNT_OFFSET = 12
FOCUS_DURATION_OFFSET = 16
TIMESTAMP_OFFSET = 20
LEGACY_RUN_COUNT_OFFSET = 4

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


@dataclass(frozen=True)
class InterpretedLayout:
    """Fields extracted from one raw UserAssist value."""

    status: LayoutStatus
    run_count: int = 0
    focus_count: int = 0
    focus_duration_ms: int = 0
    raw_timestamp: int | None = None


INVALID_LAYOUT = InterpretedLayout(status=LayoutStatus.INVALID)


def _read(fmt: struct.Struct, raw: bytes, offset: int) -> int | None:
    if offset < 0 or offset + fmt.size > len(raw):
        return None
    return fmt.unpack_from(raw, offset)[0]


def read_u32(raw: bytes, offset: int) -> int | None:
    """Read a little-endian u32, or None if it would run past the buffer."""
    return _read(_U32, raw, offset)


def read_u64(raw: bytes, offset: int) -> int | None:
    """Read a little-endian u64, or None if it would run past the buffer."""
    return _read(_U64, raw, offset)


def interpret(raw: bytes, declared_type: StorageValueType | int) -> InterpretedLayout:
    """Decode a raw UserAssist value into counters and a raw timestamp.

    Args:
        raw: Value data exactly as read from the store
        declared_type: Registry type tag of the value

    Returns:
        InterpretedLayout; malformed input yields an INVALID layout, never an
        exception
    """
    if declared_type != StorageValueType.REG_BINARY or len(raw) < LEGACY_MIN_SIZE:
        return INVALID_LAYOUT

    if len(raw) >= MODERN_RECORD_SIZE and read_u32(raw, VERSION_OFFSET) in MODERN_VERSIONS:
        run_count = read_u32(raw, RUN_COUNT_OFFSET)
        focus_count = read_u32(raw, FOCUS_COUNT_OFFSET)
        focus_duration = read_u32(raw, FOCUS_DURATION_OFFSET)
        timestamp = read_u64(raw, TIMESTAMP_OFFSET)
        if None not in (run_count, focus_count, focus_duration, timestamp):
            return InterpretedLayout(
                status=LayoutStatus.MODERN,
                run_count=run_count,
                focus_count=focus_count,
                focus_duration_ms=focus_duration,
                raw_timestamp=timestamp,
            )

    run_count = read_u32(raw, LEGACY_RUN_COUNT_OFFSET)
    if run_count is None:
        return INVALID_LAYOUT

    return InterpretedLayout(status=LayoutStatus.LEGACY, run_count=run_count)
