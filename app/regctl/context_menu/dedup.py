"""Deduplication of context-menu candidates.

The same program is often registered several times: under both the
classes root and the user's classes, or for files, folders and the
folder background at once. Candidates that share the same key name and
executable are merged into a single entry that remembers every location.
"""

from collections.abc import Iterable

from regctl.models.context_menu import ContextMenuEntry, MenuContext
from regctl.utils.commands import normalize_executable

EquivalenceKey = tuple[str, str]


def equivalence_key(entry: ContextMenuEntry) -> EquivalenceKey:
    """Return the merge key of an entry.

    The key is the raw sub-key name and the executable path with quotes
    and arguments removed, both compared case-insensitively.
    """
    return (entry.key.casefold(), normalize_executable(entry.command))


def _candidate_order(entry: ContextMenuEntry) -> tuple[bool, str, str, str, str]:
    """Order candidates so the display source is chosen deterministically.

    System-level candidates come first; ties are broken by display name
    and then by the first location, so the outcome does not depend on the
    order candidates were discovered in.
    """
    first = entry.locations[0]
    return (
        not entry.is_system_level,
        entry.display_name.casefold(),
        entry.display_name,
        first.root.value,
        first.sub_path.casefold(),
    )


def merge_group(group: list[ContextMenuEntry]) -> ContextMenuEntry:
    """Merge equivalent candidates into one entry.

    Display fields come from the first candidate after ordering
    (system-level first). Locations and contexts are the union of all
    candidates; the merged entry is enabled only if every candidate is.

    Args:
        group: Non-empty list of equivalent candidates.

    Returns:
        New merged entry; the candidates are not modified.
    """
    ordered = sorted(group, key=_candidate_order)
    primary = ordered[0]

    contexts: set[MenuContext] = set()
    for candidate in ordered:
        contexts.update(candidate.contexts)

    publisher = primary.publisher
    if publisher is None:
        publisher = next((c.publisher for c in ordered if c.publisher is not None), None)

    return ContextMenuEntry(
        key=primary.key,
        display_name=primary.display_name,
        command=primary.command,
        contexts=frozenset(contexts),
        locations=[location for candidate in ordered for location in candidate.locations],
        enabled=all(candidate.enabled for candidate in ordered),
        publisher=publisher,
        visibility=primary.visibility,
    )


def deduplicate(candidates: Iterable[ContextMenuEntry]) -> list[ContextMenuEntry]:
    """Group candidates by equivalence key and merge each group.

    Args:
        candidates: Raw candidates in any order.

    Returns:
        Merged entries sorted by primary context, then display name.
    """
    groups: dict[EquivalenceKey, list[ContextMenuEntry]] = {}
    for candidate in candidates:
        groups.setdefault(equivalence_key(candidate), []).append(candidate)

    merged = [merge_group(group) for group in groups.values()]
    merged.sort(key=lambda entry: entry.sort_key)
    return merged
