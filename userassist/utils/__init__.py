"""Time and duration helpers."""

from userassist.utils.duration import format_duration
from userassist.utils.filetime import filetime_to_datetime

__all__ = [
    "filetime_to_datetime",
    "format_duration",
]
