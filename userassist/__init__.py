"""UserAssist execution-history decoder.

Decodes the ROT13-obfuscated, version-dependent UserAssist registry artifact
into a stable record model for reporting, timeline and CSV export.
"""

__version__ = "1.0.0"
