"""Shared fixtures for parser unit tests."""

from pathlib import Path
from unittest.mock import patch

import pytest

from tests.factories import SAMPLE_FILETIME, count_key, legacy_entry, make_fake_hive, modern_entry
from userassist.models.record import OwnerGroup


@pytest.fixture
def minimal_registry_header() -> bytes:
    """Registry hive magic only, not a complete hive."""
    return b"regf"


@pytest.fixture
def ntuser_file(tmp_path: Path) -> Path:
    """A placeholder NTUSER.DAT inside an ``alice`` profile folder."""
    profile = tmp_path / "Users" / "alice"
    profile.mkdir(parents=True)
    hive = profile / "NTUSER.DAT"
    hive.write_bytes(b"regf" + b"\x00" * 508)
    return hive


@pytest.fixture
def userassist_hive():
    """Fake hive with one executable entry, one legacy shortcut entry."""
    return make_fake_hive(
        {
            count_key(OwnerGroup.EXECUTABLE): [
                (
                    "{1NP14R77-02R7-4R5Q-O744-2RO1NR5198O7}\\abgrcnq.rkr",
                    3,
                    modern_entry(run_count=12, focus_count=4, focus_ms=65000, timestamp=SAMPLE_FILETIME),
                ),
            ],
            count_key(OwnerGroup.SHORTCUT): [
                ("P:\\Hfref\\Choyvp\\Qrfxgbc\\Tnzr.yax", 3, legacy_entry(run_count=2)),
            ],
        }
    )


@pytest.fixture
def patched_hive(userassist_hive):
    """Route dissect.regf hive construction to the fake hive."""
    with patch("userassist.stores.hive.RegistryHive", return_value=userassist_hive) as hive_cls:
        yield hive_cls
