"""Encoding of registry values in the ``.reg`` interchange format.

The output must stay importable by ``regedit``/``reg import``, so the
escaping and hex layouts here follow the format produced by regedit
itself:

- ``"name"="text"`` for ``REG_SZ`` with ``\\`` and ``"`` escaped
- ``dword:0000002a`` / ``qword:000000000000002a`` for integers
- ``hex:`` comma separated byte pairs for ``REG_BINARY``, continued with
  ``\\`` every 25 bytes
- ``hex(2):`` / ``hex(7):`` UTF-16LE bytes for expandable and multi strings

Lines are produced with ``\\n``; the writer converts them to ``\\r\\n``.
"""

from regctl.store.base import RegistryValue, ValueKind

REG_HEADER = "Windows Registry Editor Version 5.00"
BYTES_PER_LINE = 25
CONTINUATION = "\\\n  "

_DWORD_MASK = 0xFFFFFFFF
_QWORD_MASK = 0xFFFFFFFFFFFFFFFF


def escape_reg_string(text: str) -> str:
    """Escape backslashes and double quotes for a quoted ``.reg`` string."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def format_value_name(name: str) -> str:
    """Format a value name: ``@`` for the default value, else quoted and escaped."""
    if not name:
        return "@"
    return f'"{escape_reg_string(name)}"'


def format_hex_bytes(data: bytes, *, wrap: bool = True) -> str:
    """Format bytes as comma separated lowercase hex pairs.

    Args:
        data: Bytes to format.
        wrap: Insert a line continuation after every 25th byte.

    Returns:
        Hex text, e.g. ``01,02,ff``.
    """
    parts: list[str] = []
    for index, byte in enumerate(data):
        if index > 0:
            parts.append(",")
            if wrap and index % BYTES_PER_LINE == 0:
                parts.append(CONTINUATION)
        parts.append(f"{byte:02x}")
    return "".join(parts)


def encode_utf16(text: str) -> bytes:
    """Encode text as NUL-terminated UTF-16LE, the native string layout."""
    return (text + "\0").encode("utf-16-le")


def format_value(value: RegistryValue) -> str | None:
    """Format one value as a ``.reg`` line.

    Args:
        value: Value read from the store.

    Returns:
        The formatted line, a comment for unsupported kinds, or None if
        the value carries no data.
    """
    if value.data is None:
        return None

    name = format_value_name(value.name)

    match value.kind:
        case ValueKind.STRING:
            return f'{name}="{escape_reg_string(str(value.data))}"'
        case ValueKind.DWORD:
            return f"{name}=dword:{int(value.data) & _DWORD_MASK:08x}"
        case ValueKind.QWORD:
            return f"{name}=qword:{int(value.data) & _QWORD_MASK:016x}"
        case ValueKind.BINARY:
            return f"{name}=hex:{format_hex_bytes(bytes(value.data))}"
        case ValueKind.EXPAND_STRING:
            return f"{name}=hex(2):{format_hex_bytes(encode_utf16(str(value.data)), wrap=False)}"
        case ValueKind.MULTI_STRING:
            combined = "\0".join(str(item) for item in value.data) + "\0"
            return f"{name}=hex(7):{format_hex_bytes(encode_utf16(combined), wrap=False)}"
        case _:
            return f"; Unsupported value type: {value.kind.value}"


def format_key_header(full_path: str) -> str:
    """Format a bracketed key line."""
    return f"[{full_path}]"
