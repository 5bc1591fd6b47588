"""UserAssist value-name cipher.

Value names are stored ROT13-encoded: ASCII letters rotate by 13 within their
case, every other character (digits, separators, braces, non-ASCII) is left
alone. The transform is its own inverse.
"""

import codecs


def decode_name(name: str) -> str:
    """Reverse the ROT13 obfuscation of a UserAssist value name."""
    return codecs.decode(name, "rot_13")


# ROT13 is self-inverse
encode_name = decode_name
