"""
Catalog Index - Lookup structures for browsing and search.

Instead of scanning every record on each keystroke, we build two
dictionaries once per load:
- by_group: group label -> records in source order (browsing, filtering)
- by_key: O(1) lookup of a record by its primary key (detail view)
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import Record, SourceKind


@dataclass
class CatalogIndex:
    """
    Indexed catalog for one loaded source.

    Attributes:
        by_group: Dict mapping group -> list of Records (encounter order, unsorted)
        by_key: Dict mapping key -> Record (last write wins for dupes)
        record_count: Total number of records indexed
        source_kind: Shape of the source the index was built from
        version: Catalog version, when the source declares one
        declared_count: Item count the source claims to hold, if any
    """
    by_group: dict[str, list[Record]] = field(default_factory=dict)
    by_key: dict[str, Record] = field(default_factory=dict)
    record_count: int = 0
    source_kind: Optional[SourceKind] = None
    version: Optional[str] = None
    declared_count: Optional[int] = None

    def lookup_key(self, key: str) -> Optional[Record]:
        """Look up a record by exact key."""
        return self.by_key.get(key)

    def records_for_group(self, group: str) -> list[Record]:
        """Records stored under a group, or an empty list."""
        return self.by_group.get(group, [])

    def group_labels(self) -> list[str]:
        """Group labels in presentation order (sorted)."""
        return sorted(self.by_group)


def build_index(
    records: Iterable[Record],
    declared_groups: Iterable[str] = (),
) -> CatalogIndex:
    """
    Build lookup index from normalized records.

    Args:
        records: Normalized Records in adapter-output order
        declared_groups: Labels that get a bucket even with no records

    Returns:
        CatalogIndex with group and key lookups
    """
    index = CatalogIndex()

    for group in declared_groups:
        index.by_group.setdefault(group, [])

    count = 0
    for record in records:
        # Group index - bucket per primary group, encounter order kept
        group = record.primary_group
        if group not in index.by_group:
            index.by_group[group] = []
        index.by_group[group].append(record)

        # Key index - simple dict, last write wins for duplicates
        index.by_key[record.key] = record
        count += 1

    index.record_count = count
    return index
