"""Parser interface and the ECS-shaped timeline event parsers emit."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, ClassVar

logger = logging.getLogger(__name__)


class ParserCategory(str, Enum):
    """Kinds of evidence a parser reads."""

    ARTIFACTS = "artifacts"
    REGISTRY = "registry"


@dataclass(frozen=True)
class ParserMetadata:
    """Static description of a parser."""

    name: str
    display_name: str
    description: str
    category: ParserCategory = ParserCategory.ARTIFACTS
    supported_extensions: tuple[str, ...] = ()
    priority: int = 50  # Higher wins when several parsers accept a file

    def handles_extension(self, suffix: str) -> bool:
        wanted = suffix.lower().lstrip(".")
        return any(ext.lower().lstrip(".") == wanted for ext in self.supported_extensions)


def _drop_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value not in (None, "", [], {})}


@dataclass
class ParsedEvent:
    """One timeline event in Elastic Common Schema layout.

    ``timestamp`` is None when the artifact does not say when it happened.
    """

    timestamp: datetime | None
    message: str
    source_type: str
    source_file: str

    event_category: list[str] = field(default_factory=list)
    event_type: list[str] = field(default_factory=list)
    event_action: str | None = None

    user_name: str | None = None
    process_name: str | None = None
    process_executable: str | None = None
    file_name: str | None = None
    file_path: str | None = None

    labels: dict[str, str] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Nested ECS document, empty sections omitted."""
        doc: dict[str, Any] = {
            "@timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "message": self.message,
            "event": _drop_empty(
                {
                    "kind": "event",
                    "category": self.event_category,
                    "type": self.event_type,
                    "action": self.event_action,
                }
            ),
        }

        sections = {
            "user": {"name": self.user_name},
            "process": {"name": self.process_name, "executable": self.process_executable},
            "file": {"name": self.file_name, "path": self.file_path},
        }
        for section, values in sections.items():
            values = _drop_empty(values)
            if values:
                doc[section] = values

        if self.labels:
            doc["labels"] = self.labels
        if self.tags:
            doc["tags"] = self.tags
        if self.raw:
            doc["_raw"] = self.raw

        doc["_source"] = {"type": self.source_type, "file": self.source_file}
        return doc


@dataclass
class ParserResult:
    """Events collected from one source, plus any error that stopped parsing."""

    events: list[ParsedEvent] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def parsed_records(self) -> int:
        return len(self.events)


class BaseParser(ABC):
    """Base class for artifact parsers.

    Subclasses set ``metadata`` and implement ``parse()``.
    """

    metadata: ClassVar[ParserMetadata]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def category(self) -> ParserCategory:
        return self.metadata.category

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def supported_extensions(self) -> list[str]:
        return list(self.metadata.supported_extensions)

    def can_parse(self, file_path: Path | None = None, content: bytes | None = None) -> bool:
        """Accept by file extension; without a path there is nothing to reject."""
        if file_path is None:
            return True
        return self.metadata.handles_extension(file_path.suffix)

    @abstractmethod
    def parse(
        self,
        source: Path | BinaryIO,
        source_name: str | None = None,
    ) -> Iterator[ParsedEvent]:
        """Yield one ParsedEvent per artifact record in ``source``."""
        ...

    def parse_all(
        self,
        source: Path | BinaryIO,
        source_name: str | None = None,
    ) -> ParserResult:
        """Collect every event; a failure ends parsing and is recorded as an error."""
        result = ParserResult()
        try:
            result.events.extend(self.parse(source, source_name))
        except Exception as e:
            logger.warning("%s parser failed on %s: %s", self.name, source_name or source, e)
            result.errors.append(f"Parser error: {e}")
        return result
