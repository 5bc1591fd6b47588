"""Windows FILETIME conversion."""

from datetime import UTC, datetime, timedelta

# 1601-01-01, the FILETIME epoch
FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)
FILETIME_MAX = 0xFFFFFFFFFFFFFFFF


def filetime_to_datetime(filetime: int) -> datetime | None:
    """Convert a Windows FILETIME (100ns ticks since 1601) to an aware datetime.

    Returns None for 0 ("never executed") and for values that do not map to a
    representable date, instead of substituting a default.
    """
    if filetime <= 0 or filetime > FILETIME_MAX:
        return None
    try:
        return FILETIME_EPOCH + timedelta(microseconds=filetime // 10)
    except OverflowError:
        return None
