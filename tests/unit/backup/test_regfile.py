"""Unit tests for .reg value encoding."""

import pytest
from regctl.backup.regfile import (
    encode_utf16,
    escape_reg_string,
    format_hex_bytes,
    format_key_header,
    format_value,
    format_value_name,
)
from regctl.store.base import RegistryValue, ValueKind


class TestEscaping:
    """Tests for string escaping and value names."""

    def test_escape_backslash_and_quote(self) -> None:
        """Backslashes are doubled and quotes are escaped."""
        assert escape_reg_string('C:\\"Program"') == 'C:\\\\\\"Program\\"'

    def test_default_value_name(self) -> None:
        """The default value is written as @."""
        assert format_value_name("") == "@"
        assert format_value_name('say "hi"') == '"say \\"hi\\""'


class TestFormatHexBytes:
    """Tests for format_hex_bytes function."""

    def test_short_data_single_line(self) -> None:
        """Up to 25 bytes stay on one line."""
        assert format_hex_bytes(bytes([0x02, 0x00, 0xFF])) == "02,00,ff"
        assert "\\" not in format_hex_bytes(bytes(25))

    def test_wraps_after_25_bytes(self) -> None:
        """A continuation is inserted before the 26th byte."""
        text = format_hex_bytes(bytes(range(30)))
        first, second = text.split("\\\n  ")

        assert first.rstrip(",").count(",") == 24
        assert first.endswith("18,")
        assert second == "19,1a,1b,1c,1d"

    def test_no_wrap(self) -> None:
        """Wrapping can be disabled."""
        assert "\\" not in format_hex_bytes(bytes(60), wrap=False)

    def test_empty(self) -> None:
        """No bytes give empty text."""
        assert format_hex_bytes(b"") == ""


class TestFormatValue:
    """Tests for format_value function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (
                RegistryValue("", ValueKind.STRING, '"C:\\Apps\\Code.exe" "%1"'),
                '@="\\"C:\\\\Apps\\\\Code.exe\\" \\"%1\\""',
            ),
            (RegistryValue("Count", ValueKind.DWORD, 42), '"Count"=dword:0000002a'),
            (RegistryValue("Neg", ValueKind.DWORD, -1), '"Neg"=dword:ffffffff'),
            (RegistryValue("Big", ValueKind.QWORD, 42), '"Big"=qword:000000000000002a'),
            (
                RegistryValue("State", ValueKind.BINARY, bytes([2, 0, 0])),
                '"State"=hex:02,00,00',
            ),
            (
                RegistryValue("Path", ValueKind.EXPAND_STRING, "%A%"),
                '"Path"=hex(2):25,00,41,00,25,00,00,00',
            ),
            (
                RegistryValue("List", ValueKind.MULTI_STRING, ["a", "b"]),
                '"List"=hex(7):61,00,00,00,62,00,00,00,00,00',
            ),
        ],
    )
    def test_kinds(self, value: RegistryValue, expected: str) -> None:
        """Each supported kind uses its .reg notation."""
        assert format_value(value) == expected

    def test_expand_string_not_wrapped(self) -> None:
        """Long expandable strings stay on one line."""
        value = RegistryValue("Path", ValueKind.EXPAND_STRING, "%ProgramFiles%\\Vendor\\app.exe")

        line = format_value(value)

        assert line is not None
        assert "\n" not in line
        assert line.endswith(format_hex_bytes(encode_utf16(value.data), wrap=False))

    def test_unsupported_kind_becomes_comment(self) -> None:
        """Unknown kinds are written as comments."""
        assert format_value(RegistryValue("X", ValueKind.OTHER, b"\x00")) == (
            "; Unsupported value type: other"
        )

    def test_no_data(self) -> None:
        """Values without data are omitted."""
        assert format_value(RegistryValue("X", ValueKind.STRING, None)) is None


def test_key_header() -> None:
    """Key lines are bracketed full paths."""
    assert format_key_header("HKEY_CURRENT_USER\\Software") == "[HKEY_CURRENT_USER\\Software]"
