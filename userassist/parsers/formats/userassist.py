"""Windows UserAssist parser.

UserAssist tracks user interaction with Windows shell objects (programs, shortcuts).
Data is stored in the NTUSER.DAT registry hive with ROT13-encoded value names.

Location: NTUSER.DAT
Key: HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\UserAssist
"""

import logging
from collections.abc import Iterator
from pathlib import Path, PureWindowsPath
from typing import BinaryIO

from userassist.models.record import ArtifactRecord
from userassist.parsers.base import BaseParser, ParsedEvent, ParserCategory, ParserMetadata
from userassist.parsers.registry import register_parser
from userassist.services.collector import ArtifactCollector
from userassist.stores.hive import REGF_MAGIC, HiveStore

logger = logging.getLogger(__name__)

HIVE_FILE_NAMES = ("NTUSER.DAT",)


@register_parser
class UserAssistParser(BaseParser):
    """Parser for Windows UserAssist registry entries."""

    metadata = ParserMetadata(
        name="userassist",
        display_name="Windows UserAssist Parser",
        description="Parses Windows UserAssist for user program execution history",
        category=ParserCategory.REGISTRY,
        supported_extensions=(".dat",),
        priority=80,
    )

    def can_parse(self, file_path: Path | None = None, content: bytes | None = None) -> bool:
        """Check for registry hive magic bytes or an NTUSER.DAT file name."""
        if content is not None:
            return len(content) >= 4 and content[:4] == REGF_MAGIC

        if file_path:
            if file_path.name.upper() in HIVE_FILE_NAMES:
                return True
            if file_path.suffix.lower() == ".dat" and file_path.is_file():
                return HiveStore.is_hive(file_path)

        return False

    def parse(
        self,
        source: Path | BinaryIO,
        source_name: str | None = None,
    ) -> Iterator[ParsedEvent]:
        """Parse UserAssist entries from an NTUSER.DAT registry hive.

        The owner identity is ``source_name`` when given, else the name of
        the profile directory holding the hive.
        """
        if not isinstance(source, Path):
            raise TypeError("UserAssistParser reads hive files from a path")

        owner_identity = source_name or source.parent.name or source.name
        with HiveStore({owner_identity: source}) as store:
            result = ArtifactCollector(store).scan(owner_identity)
            for record in result.records:
                yield self._create_event(record, str(source))

        logger.info("Parsed %d UserAssist entries from %s", len(result.records), source)

    def _create_event(self, record: ArtifactRecord, source_file: str) -> ParsedEvent:
        """Create ECS event from a UserAssist record."""
        path = record.path
        name = PureWindowsPath(path).name if path else None

        return ParsedEvent(
            timestamp=record.last_executed,
            message=f"UserAssist: {path} (executed {record.run_count} times)",
            source_type="userassist",
            source_file=source_file,
            event_category=["process"],
            event_type=["start"],
            event_action="user_program_execution",
            user_name=record.owner_identity,
            process_name=name,
            process_executable=path,
            file_name=name,
            file_path=path,
            raw={
                "run_count": record.run_count,
                "focus_count": record.focus_count,
                "focus_time_ms": record.focus_duration_ms,
                "raw_name": record.encoded_name,
                "decoded_name": record.decoded_name,
            },
            labels={
                "guid": record.owner_group.guid,
                "guid_description": record.owner_group.description,
                "layout": record.layout_status.value,
            },
            tags=["userassist", "execution"],
        )
