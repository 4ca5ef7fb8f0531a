"""
Query Engine - Read-only filtering over a built CatalogIndex.

Every function here is stateless and never mutates the index. Matching is
plain case-insensitive substring containment; no tokenizing or ranking.

Group labels come back sorted; records inside a group keep the order the
source listed them in.
"""

from typing import Any, Iterable, Optional

from .index import CatalogIndex
from .models import Record


DEFAULT_FIELDS = ("key",)


def _field_text(record: Record, field: str) -> str:
    value: Any = getattr(record, field, None)
    if value is None:
        value = record.extra.get(field)
    if value is None:
        return ""
    return str(value)


def record_matches(record: Record, needle: str, fields: Iterable[str] = DEFAULT_FIELDS) -> bool:
    """
    Check whether any of the record's fields contains the needle.

    Args:
        record: Record to test
        needle: Already lowercased filter text (empty matches everything)
        fields: Record attributes (or extra keys) to search
    """
    if not needle:
        return True
    return any(needle in _field_text(record, f).lower() for f in fields)


def _visible_groups(index: CatalogIndex, hidden_groups: Iterable[str]) -> list[str]:
    hidden = set(hidden_groups)
    return [g for g in index.group_labels() if g not in hidden]


def list_groups(
    index: CatalogIndex,
    filter_text: str = "",
    hidden_groups: Iterable[str] = (),
    fields: Iterable[str] = DEFAULT_FIELDS,
) -> list[str]:
    """
    Group labels for the group picker.

    A group is listed when the filter is empty, or the label contains it,
    or at least one of its records matches it.

    Returns:
        Sorted list of group labels
    """
    needle = (filter_text or "").lower()
    fields = tuple(fields)

    result = []
    for group in _visible_groups(index, hidden_groups):
        if (
            not needle
            or needle in group.lower()
            or any(record_matches(r, needle, fields) for r in index.by_group[group])
        ):
            result.append(group)
    return result


def list_records_in_group(
    index: CatalogIndex,
    group: str,
    filter_text: str = "",
    fields: Iterable[str] = DEFAULT_FIELDS,
) -> list[Record]:
    """
    Records of one group matching the filter, in stored order.

    An unknown group yields an empty list.
    """
    needle = (filter_text or "").lower()
    fields = tuple(fields)
    return [r for r in index.records_for_group(group) if record_matches(r, needle, fields)]


def list_all_records(
    index: CatalogIndex,
    filter_text: str = "",
    hidden_groups: Iterable[str] = (),
    fields: Iterable[str] = DEFAULT_FIELDS,
) -> list[tuple[str, list[Record]]]:
    """
    Global search, grouped.

    Walks groups in sorted order, filters each one's records, and drops
    groups with nothing left.

    Returns:
        List of (group, matching records) pairs
    """
    results = []
    for group in _visible_groups(index, hidden_groups):
        matches = list_records_in_group(index, group, filter_text, fields)
        if matches:
            results.append((group, matches))
    return results


def get_by_key(index: CatalogIndex, key: str) -> Optional[Record]:
    """Direct key lookup. Returns None when absent."""
    return index.lookup_key(key)


def summarize_index(index: CatalogIndex, hidden_groups: Iterable[str] = ()) -> dict:
    """
    Counts for status displays.

    Returns:
        Dict with total records, group count and per-group record counts
    """
    groups = _visible_groups(index, hidden_groups)
    counts = {g: len(index.by_group[g]) for g in groups}
    return {
        "total": sum(counts.values()),
        "groups": len(groups),
        "by_group": counts,
        "unique_keys": len(index.by_key),
    }
