"""Built-in artifact format parsers."""

from userassist.parsers.formats.userassist import UserAssistParser

__all__ = [
    "UserAssistParser",
]
