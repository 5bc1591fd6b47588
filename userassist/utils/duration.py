"""Human-readable focus duration."""


def format_duration(milliseconds: int) -> str:
    """Format a millisecond duration as ``1h 02m 05s``, ``2m 05s`` or ``5s``.

    Sub-second remainders are dropped, never rounded.
    """
    seconds = max(milliseconds, 0) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)

    if hours > 0:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    if minutes > 0:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"
