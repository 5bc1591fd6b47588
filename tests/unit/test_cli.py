"""Unit tests for the command-line interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from tests.factories import SAMPLE_FILETIME, count_key, legacy_entry, make_fake_hive, modern_entry
from userassist.cli import app
from userassist.models.record import OwnerGroup
from userassist.services.export import EXPORT_COLUMNS
from userassist.services.reporter import REPORT_TITLE

pytestmark = pytest.mark.unit

runner = CliRunner()


@pytest.fixture
def users_dir(tmp_path):
    users = tmp_path / "Users"
    for name in ("alice", "bob"):
        (users / name).mkdir(parents=True)
        (users / name / "NTUSER.DAT").write_bytes(b"regf" + b"\x00" * 60)
    (users / "Public").mkdir()
    return users


@pytest.fixture
def fake_hive():
    return make_fake_hive(
        {
            count_key(OwnerGroup.EXECUTABLE): [
                (
                    "P:\\Jvaqbjf\\abgrcnq.rkr",
                    3,
                    modern_entry(run_count=12, focus_ms=125000, timestamp=SAMPLE_FILETIME),
                ),
                ("P:\\Gbbyf\\byq.rkr", 3, legacy_entry(run_count=2)),
            ],
        }
    )


@pytest.fixture
def patched_hive(fake_hive):
    with patch("userassist.stores.hive.RegistryHive", return_value=fake_hive):
        yield


class TestScanCommand:
    """Tests for the ``scan`` command."""

    def test_scan_prints_records(self, users_dir, patched_hive):
        """Test records are printed one per line."""
        result = runner.invoke(app, ["scan", str(users_dir / "alice" / "NTUSER.DAT")])

        assert result.exit_code == 0, result.output
        assert "alice\t12\t2026-01-15 10:30:00\t2m 05s\tC:\\Windows\\notepad.exe" in result.output
        assert "alice\t2\tUnknown (legacy format)\t0s\tC:\\Tools\\old.exe" in result.output

    def test_scan_with_owner_and_report(self, users_dir, patched_hive):
        """Test --owner names the identity and --report prints the comparison."""
        result = runner.invoke(
            app, ["scan", str(users_dir / "alice" / "NTUSER.DAT"), "--owner", "CORP\\alice", "--report"]
        )

        assert result.exit_code == 0, result.output
        assert REPORT_TITLE in result.output
        assert "User: CORP\\alice" in result.output

    def test_owner_with_several_hives(self, users_dir):
        """Test --owner is rejected for more than one hive."""
        result = runner.invoke(
            app,
            [
                "scan",
                str(users_dir / "alice" / "NTUSER.DAT"),
                str(users_dir / "bob" / "NTUSER.DAT"),
                "--owner",
                "x",
            ],
        )
        assert result.exit_code == 2

    def test_scan_writes_csv(self, users_dir, patched_hive, tmp_path):
        """Test --csv exports the scanned records."""
        target = tmp_path / "out.csv"

        result = runner.invoke(app, ["scan", str(users_dir / "alice" / "NTUSER.DAT"), "--csv", str(target)])

        assert result.exit_code == 0, result.output
        lines = target.read_text(encoding="utf-8-sig").splitlines()
        assert lines[0] == ",".join(f'"{c}"' for c in EXPORT_COLUMNS)
        assert len(lines) == 3

    def test_unreadable_hive(self, tmp_path):
        """Test a hive that cannot be opened exits with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "alice" / "NTUSER.DAT")])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCompareCommand:
    """Tests for the ``compare`` command."""

    def test_compare_profiles(self, users_dir, patched_hive):
        """Test every profile is scanned and compared."""
        result = runner.invoke(app, ["compare", str(users_dir)])

        assert result.exit_code == 0, result.output
        assert REPORT_TITLE in result.output
        assert "User: alice" in result.output
        assert "User: bob" in result.output
        assert "    1. C:\\Windows\\notepad.exe (12 times)" in result.output

    def test_compare_missing_dir(self, tmp_path):
        """Test a missing Users directory."""
        result = runner.invoke(app, ["compare", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "profiles directory not found" in result.output

    def test_compare_without_hives(self, tmp_path):
        """Test a Users directory with no hives."""
        (tmp_path / "Public").mkdir()

        result = runner.invoke(app, ["compare", str(tmp_path)])

        assert result.exit_code == 0
        assert "No NTUSER.DAT hives found" in result.output
