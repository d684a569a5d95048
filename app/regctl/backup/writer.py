"""Backup of entries to ``.reg`` files.

Context-menu backups export the full key tree of every location of every
entry, read live from the store. Startup backups are built from the
discovered entries, grouped by their Run/RunOnce path.

Read errors are written into the file as comments and the export
continues; only a destination that cannot be written fails the call.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from regctl.backup.regfile import (
    REG_HEADER,
    escape_reg_string,
    format_key_header,
    format_value,
)
from regctl.models.context_menu import ContextMenuEntry
from regctl.models.result import BackupResult
from regctl.models.startup import StartupEntry
from regctl.store.base import RegistryKey, RegistryStore, StoreError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def _header(title: str, count: int, now: datetime | None = None) -> list[str]:
    created = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return [
        REG_HEADER,
        "",
        f"; {title}",
        f"; Created: {created}",
        f"; Total Items: {count}",
        "",
    ]


def _value_lines(key: RegistryKey) -> list[str]:
    lines: list[str] = []
    for name in key.value_names():
        value = key.get_value(name)
        if value is None:
            continue
        line = format_value(value)
        if line is not None:
            lines.append(line)
    return lines


def _key_tree_lines(key: RegistryKey, full_path: str) -> list[str]:
    """Export a key and all its subkeys, depth first.

    Each subkey block is preceded by an empty line.
    """
    lines = [format_key_header(full_path), *_value_lines(key)]
    for child_name in key.subkey_names():
        child = key.open_subkey(child_name)
        if child is None:
            continue
        with child:
            lines.append("")
            lines.extend(_key_tree_lines(child, f"{full_path}\\{child_name}"))
    return lines


def write_reg_file(destination: Path, lines: Sequence[str]) -> None:
    """Write lines as a UTF-16LE ``.reg`` file with BOM and CRLF line endings.

    Unpaired surrogates read from the registry are written back as the
    original UTF-16 code units.

    Raises:
        OSError: If the destination cannot be created or written.
    """
    text = BOM + "\n".join(lines) + "\n"
    destination.parent.mkdir(parents=True, exist_ok=True)
    with open(
        destination, "w", encoding="utf-16-le", errors="surrogatepass", newline="\r\n"
    ) as f:
        f.write(text)


def context_menu_lines(
    store: RegistryStore,
    entries: Sequence[ContextMenuEntry],
    *,
    now: datetime | None = None,
    errors: list[str] | None = None,
) -> list[str]:
    """Build the ``.reg`` lines for context-menu entries.

    Args:
        store: Registry store to read the key trees from.
        entries: Entries to export.
        now: Timestamp for the header (defaults to the current time).
        errors: If given, collects the per-location read errors.

    Returns:
        Lines of the backup file, without line terminators.
    """
    lines = _header("regctl context menu backup", len(entries), now)

    for entry in entries:
        lines.append(f"; {entry.display_name} ({entry.contexts_display})")
        for location in entry.locations:
            try:
                key = store.try_open_key(location.root, location.sub_path)
                if key is None:
                    logger.debug("Skipping missing key %s", location.full_path)
                    continue
                with key:
                    block = _key_tree_lines(key, location.full_path)
            except StoreError as e:
                message = f"Error reading {location.sub_path}: {e}"
                logger.warning("Backup: %s", message)
                lines.append(f"; {message}")
                if errors is not None:
                    errors.append(message)
                continue
            lines.extend(block)
            lines.append("")

    return lines


def startup_lines(
    entries: Sequence[StartupEntry],
    *,
    now: datetime | None = None,
) -> list[str]:
    """Build the ``.reg`` lines for startup entries.

    Entries are grouped by owning registry path in first-seen order.
    """
    lines = _header("regctl startup backup", len(entries), now)

    groups: dict[str, list[StartupEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.registry_path, []).append(entry)

    for registry_path, group in groups.items():
        lines.append(format_key_header(registry_path))
        for entry in group:
            lines.append(
                f'"{escape_reg_string(entry.name)}"="{escape_reg_string(entry.command)}"'
            )
        lines.append("")

    return lines


def export_context_menu(
    store: RegistryStore,
    entries: Sequence[ContextMenuEntry],
    destination: Path,
) -> BackupResult:
    """Export context-menu entries and their key trees to a ``.reg`` file.

    Args:
        store: Registry store to read from.
        entries: Entries to export.
        destination: Output file path.

    Returns:
        BackupResult; ``success`` is False only if the file could not be written.
    """
    errors: list[str] = []
    lines = context_menu_lines(store, entries, errors=errors)
    blocks = sum(1 for line in lines if line.startswith("["))
    return _write(destination, lines, blocks, errors)


def export_startup(entries: Sequence[StartupEntry], destination: Path) -> BackupResult:
    """Export startup entries to a ``.reg`` file.

    Args:
        entries: Entries to export.
        destination: Output file path.

    Returns:
        BackupResult; ``success`` is False only if the file could not be written.
    """
    lines = startup_lines(entries)
    blocks = sum(1 for line in lines if line.startswith("["))
    return _write(destination, lines, blocks, [])


def _write(destination: Path, lines: list[str], blocks: int, errors: list[str]) -> BackupResult:
    try:
        write_reg_file(destination, lines)
    except OSError as e:
        logger.error("Cannot write backup %s: %s", destination, e)
        return BackupResult(path=str(destination), success=False, errors=errors, error=str(e))

    logger.info("Wrote %d key blocks to %s", blocks, destination)
    return BackupResult(
        path=str(destination),
        success=True,
        blocks_written=blocks,
        errors=errors,
    )
