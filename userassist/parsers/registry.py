"""Name-indexed parser registry.

Parser classes register themselves with ``@register_parser``; lookups hand out
fresh instances ranked by metadata priority.
"""

import logging
from pathlib import Path
from typing import Any

from userassist.parsers.base import BaseParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Collection of parser classes keyed by parser name."""

    def __init__(self):
        self._parsers: dict[str, type[BaseParser]] = {}

    def __len__(self) -> int:
        return len(self._parsers)

    def __contains__(self, name: str) -> bool:
        return name in self._parsers

    def register(self, parser_class: type[BaseParser]) -> type[BaseParser]:
        name = parser_class.metadata.name
        existing = self._parsers.get(name)
        if existing is not None and existing is not parser_class:
            logger.warning("Replacing parser registered as '%s'", name)
        self._parsers[name] = parser_class
        logger.debug("Registered parser: %s", name)
        return parser_class

    def unregister(self, name: str) -> bool:
        return self._parsers.pop(name, None) is not None

    def get(self, name: str) -> BaseParser | None:
        parser_class = self._parsers.get(name)
        return parser_class() if parser_class else None

    def _ranked(self) -> list[type[BaseParser]]:
        return sorted(self._parsers.values(), key=lambda cls: cls.metadata.priority, reverse=True)

    def get_by_extension(self, extension: str) -> list[BaseParser]:
        """Parsers claiming an extension, highest priority first."""
        return [cls() for cls in self._ranked() if cls.metadata.handles_extension(extension)]

    def find_parser(
        self,
        file_path: Path | None = None,
        content: bytes | None = None,
        hint: str | None = None,
    ) -> BaseParser | None:
        """Pick the parser for an input.

        A named ``hint`` that accepts the input wins. Otherwise parsers are
        tried by priority, those claiming the file's extension first.
        """
        if hint:
            parser = self.get(hint)
            if parser and parser.can_parse(file_path, content):
                return parser

        candidates = self._ranked()
        if file_path is not None:
            candidates.sort(key=lambda cls: not cls.metadata.handles_extension(file_path.suffix))

        for parser_class in candidates:
            parser = parser_class()
            if parser.can_parse(file_path, content):
                return parser
        return None

    def list_parsers(self) -> list[dict[str, Any]]:
        return [
            {
                "name": cls.metadata.name,
                "description": cls.metadata.description,
                "category": cls.metadata.category.value,
                "extensions": list(cls.metadata.supported_extensions),
            }
            for cls in self._ranked()
        ]


_registry = ParserRegistry()


def get_registry() -> ParserRegistry:
    return _registry


def register_parser(parser_class: type[BaseParser]) -> type[BaseParser]:
    """Class decorator adding a parser to the global registry."""
    return _registry.register(parser_class)


def get_parser(
    file_path: Path | None = None,
    content: bytes | None = None,
    hint: str | None = None,
) -> BaseParser | None:
    return _registry.find_parser(file_path, content, hint)


def load_builtin_parsers() -> None:
    """Import the bundled format modules so their parsers register."""
    from userassist.parsers.formats import userassist  # noqa: F401

    logger.info("Loaded %d built-in parsers", len(_registry))
