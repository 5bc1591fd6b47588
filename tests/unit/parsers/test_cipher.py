"""Unit tests for the UserAssist name cipher."""

import string

import pytest

from userassist.parsers.cipher import decode_name, encode_name

pytestmark = pytest.mark.unit


class TestDecodeName:
    """Tests for ROT13 value-name decoding."""

    def test_decodes_known_marker(self):
        """Test the UEME_ marker found in UserAssist keys."""
        assert decode_name("HRZR_PGYFRFFVBA") == "UEME_CTLSESSION"

    def test_decodes_guid_prefixed_path(self):
        """Test a known-folder GUID path keeps braces and separators."""
        encoded = "{1NP14R77-02R7-4R5Q-O744-2RO1NR5198O7}\\abgrcnq.rkr"
        assert decode_name(encoded) == "{1AC14E77-02E7-4E5D-B744-2EB1AE5198B7}\\notepad.exe"

    def test_preserves_case(self):
        """Test upper and lower case rotate within their own alphabet."""
        assert decode_name("Uryyb") == "Hello"

    def test_empty_string(self):
        """Test the empty string is a valid input."""
        assert decode_name("") == ""

    def test_non_ascii_untouched(self):
        """Test non-ASCII letters pass through."""
        assert decode_name("C:\\Ünïcödé\\ß") == "P:\\Ügïpöqé\\ß"

    def test_encode_is_decode(self):
        """Test the encoder is the same transform."""
        assert encode_name is decode_name


class TestCipherProperties:
    """Property checks over the printable ASCII range."""

    @pytest.fixture
    def samples(self) -> list[str]:
        printable = string.printable
        return [
            printable,
            printable[::-1],
            "C:\\Program Files\\App\\app.exe",
            "{6D809377-6AF0-444B-8957-A3773F02200E}\\7-Zip\\7zFM.exe",
            "Microsoft.Windows.Explorer",
        ]

    def test_self_inverse(self, samples):
        """Test decoding twice yields the input."""
        for s in samples:
            assert decode_name(decode_name(s)) == s

    def test_preserves_length_and_non_letters(self, samples):
        """Test every non-letter stays at its position."""
        for s in samples:
            decoded = decode_name(s)
            assert len(decoded) == len(s)
            for original, result in zip(s, decoded):
                if original not in string.ascii_letters:
                    assert result == original
                else:
                    assert result in string.ascii_letters
                    assert result.isupper() == original.isupper()

    def test_every_letter_moves(self):
        """Test no ASCII letter maps onto itself."""
        for letter in string.ascii_letters:
            assert decode_name(letter) != letter
