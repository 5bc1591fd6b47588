"""UserAssist decoding engine and parser framework.

Provides the name cipher, the binary layout interpreter and the
registry-driven parser interface that projects records onto ECS events.
"""

from userassist.parsers.base import BaseParser, ParsedEvent, ParserResult
from userassist.parsers.cipher import decode_name
from userassist.parsers.layout import InterpretedLayout, interpret
from userassist.parsers.registry import ParserRegistry, get_parser, register_parser

__all__ = [
    "BaseParser",
    "InterpretedLayout",
    "ParsedEvent",
    "ParserRegistry",
    "ParserResult",
    "decode_name",
    "get_parser",
    "interpret",
    "register_parser",
]
