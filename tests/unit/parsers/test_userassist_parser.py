"""Unit tests for the Windows UserAssist parser.

Tests the UserAssistParser class for hive detection, ECS field mapping
and end-to-end parsing over a mocked dissect.regf hive.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from tests.factories import make_record
from userassist.models.record import LayoutStatus, OwnerGroup

pytestmark = pytest.mark.unit


@pytest.fixture
def userassist_parser():
    """Create a UserAssist parser instance."""
    from userassist.parsers.formats.userassist import UserAssistParser

    return UserAssistParser()


class TestUserAssistParser:
    """Tests for UserAssistParser metadata."""

    def test_parser_name(self, userassist_parser):
        """Test parser name property."""
        assert userassist_parser.name == "userassist"

    def test_parser_category(self, userassist_parser):
        """Test windows parsers map to the REGISTRY category."""
        from userassist.parsers.base import ParserCategory

        assert userassist_parser.category == ParserCategory.REGISTRY

    def test_parser_description(self, userassist_parser):
        """Test parser has a description."""
        assert "userassist" in userassist_parser.description.lower()

    def test_supported_extensions(self, userassist_parser):
        """Test parser supports .dat hives."""
        assert ".dat" in userassist_parser.supported_extensions

    def test_registered_globally(self):
        """Test the parser is reachable through the global registry."""
        from userassist.parsers.registry import get_registry, load_builtin_parsers

        load_builtin_parsers()
        assert get_registry().get("userassist") is not None


class TestUserAssistCanParse:
    """Tests for can_parse detection."""

    def test_can_parse_by_magic_bytes(self, userassist_parser, minimal_registry_header):
        """Test detection by registry magic bytes."""
        assert userassist_parser.can_parse(content=minimal_registry_header) is True

    def test_can_parse_invalid_magic_bytes(self, userassist_parser):
        """Test rejection of non-registry content."""
        assert userassist_parser.can_parse(content=b"NOT_REGF_FILE") is False

    def test_can_parse_short_content(self, userassist_parser):
        """Test handling of content shorter than magic bytes."""
        assert userassist_parser.can_parse(content=b"reg") is False

    def test_can_parse_by_ntuser_name(self, userassist_parser, tmp_path):
        """Test detection of NTUSER.DAT by filename."""
        assert userassist_parser.can_parse(file_path=tmp_path / "ntuser.dat") is True

    def test_can_parse_dat_with_magic(self, userassist_parser, tmp_path):
        """Test a renamed .dat hive is detected by content."""
        hive = tmp_path / "alice_export.dat"
        hive.write_bytes(b"regf" + b"\x00" * 100)
        assert userassist_parser.can_parse(file_path=hive) is True

    def test_cannot_parse_dat_without_magic(self, userassist_parser, tmp_path):
        """Test a .dat file that is not a hive."""
        other = tmp_path / "game.dat"
        other.write_bytes(b"SAVEGAME")
        assert userassist_parser.can_parse(file_path=other) is False


class TestUserAssistEventFields:
    """Tests for ParsedEvent field mapping."""

    def test_event_from_modern_record(self, userassist_parser):
        """Test process/file fields strip the known-folder GUID."""
        ts = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)
        record = make_record(
            decoded_name="{1AC14E77-02E7-4E5D-B744-2EB1AE5198B7}\\notepad.exe",
            run_count=12,
            focus_count=4,
            focus_duration_ms=65000,
            last_executed=ts,
        )
        event = userassist_parser._create_event(record, "NTUSER.DAT")

        assert event.timestamp == ts
        assert event.process_executable == "notepad.exe"
        assert event.process_name == "notepad.exe"
        assert event.user_name == "alice"
        assert event.event_category == ["process"]
        assert event.event_action == "user_program_execution"
        assert event.raw["run_count"] == 12
        assert event.raw["focus_time_ms"] == 65000
        assert event.labels["guid"] == OwnerGroup.EXECUTABLE.guid
        assert event.labels["layout"] == "modern"
        assert "12 times" in event.message

    def test_event_without_timestamp(self, userassist_parser):
        """Test records without an execution time keep timestamp None."""
        record = make_record(decoded_name="C:\\Tools\\old.exe", layout_status=LayoutStatus.LEGACY)
        event = userassist_parser._create_event(record, "NTUSER.DAT")

        assert event.timestamp is None
        assert event.to_dict()["@timestamp"] is None
        assert event.file_name == "old.exe"

    def test_to_dict_ecs_shape(self, userassist_parser):
        """Test ECS serialization of a UserAssist event."""
        record = make_record(decoded_name="C:\\Windows\\cmd.exe")
        doc = userassist_parser._create_event(record, "/cases/NTUSER.DAT").to_dict()

        assert doc["event"]["action"] == "user_program_execution"
        assert doc["process"]["executable"] == "C:\\Windows\\cmd.exe"
        assert doc["user"]["name"] == "alice"
        assert doc["_source"] == {"type": "userassist", "file": "/cases/NTUSER.DAT"}


class TestUserAssistParse:
    """End-to-end parsing over a mocked hive."""

    def test_parse_yields_event_per_record(self, userassist_parser, ntuser_file, patched_hive):
        """Test both categories are parsed and owner comes from the profile dir."""
        events = list(userassist_parser.parse(ntuser_file))

        assert len(events) == 2
        assert {e.user_name for e in events} == {"alice"}
        notepad, shortcut = events
        assert notepad.process_executable == "notepad.exe"
        assert notepad.timestamp == datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert shortcut.file_path == "C:\\Users\\Public\\Desktop\\Game.lnk"
        assert shortcut.labels["layout"] == "legacy"
        assert shortcut.labels["guid"] == OwnerGroup.SHORTCUT.guid

    def test_parse_source_name_overrides_owner(self, userassist_parser, ntuser_file, patched_hive):
        """Test an explicit source name becomes the owner identity."""
        events = list(userassist_parser.parse(ntuser_file, source_name="CORP\\bob"))
        assert {e.user_name for e in events} == {"CORP\\bob"}

    def test_parse_rejects_file_objects(self, userassist_parser):
        """Test file-like sources are refused."""
        from io import BytesIO

        with pytest.raises(TypeError):
            list(userassist_parser.parse(BytesIO(b"regf")))

    def test_parse_all_reports_unreadable_hive(self, userassist_parser, tmp_path):
        """Test parse_all turns an unopenable hive into an error entry."""
        result = userassist_parser.parse_all(tmp_path / "missing" / "NTUSER.DAT")

        assert result.success is False
        assert result.events == []
        assert "unavailable" in result.errors[0]

    def test_parse_all_success(self, userassist_parser, ntuser_file, patched_hive):
        """Test parse_all statistics on a good hive."""
        result = userassist_parser.parse_all(ntuser_file)

        assert result.success is True
        assert result.parsed_records == 2
