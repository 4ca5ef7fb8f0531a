"""
Tests for index building and the query engine.

Run with: pytest nativedb/catalog/tests/test_index_query.py -v
"""

import pytest

from nativedb.catalog.index import CatalogIndex, build_index
from nativedb.catalog.models import Record
from nativedb.catalog.query import (
    get_by_key,
    list_all_records,
    list_groups,
    list_records_in_group,
    record_matches,
    summarize_index,
)


def _records():
    return [
        Record(key="SET_ENTITY_HEALTH", hash="0x6B76", groups=["ENTITY"], comment="health >= 0"),
        Record(key="PLAYER_PED_ID", hash="0xD809", groups=["PLAYER"]),
        Record(key="GET_ENTITY_HEALTH", hash="0xEEF0", groups=["ENTITY"]),
        Record(key="GET_PLAYER_NAME", hash="0x6D0D", groups=["PLAYER"]),
        Record(key="REDHOOK_PRINT", hash="0x1111", groups=["REDHOOK"]),
        Record(key="0xFF", groups=["CATEGORY_GUNS", "CATEGORY_SIDEARMS"], extra={"price": 1500}),
    ]


class TestBuildIndex:
    """Test index building."""

    @pytest.fixture
    def index(self):
        return build_index(_records())

    def test_counts(self, index):
        assert index.record_count == 6
        assert len(index.by_key) == 6
        assert len(index.by_group) == 4

    def test_primary_group_only(self, index):
        assert "CATEGORY_SIDEARMS" not in index.by_group
        assert [r.key for r in index.by_group["CATEGORY_GUNS"]] == ["0xFF"]

    def test_encounter_order_kept(self, index):
        assert [r.key for r in index.by_group["ENTITY"]] == ["SET_ENTITY_HEALTH", "GET_ENTITY_HEALTH"]

    def test_group_insertion_order_unsorted(self, index):
        assert list(index.by_group) == ["ENTITY", "PLAYER", "REDHOOK", "CATEGORY_GUNS"]

    def test_group_labels_sorted(self, index):
        assert index.group_labels() == ["CATEGORY_GUNS", "ENTITY", "PLAYER", "REDHOOK"]

    def test_lookup_key(self, index):
        assert index.lookup_key("PLAYER_PED_ID").hash == "0xD809"

    def test_lookup_key_missing(self, index):
        assert index.lookup_key("NONEXISTENT") is None

    def test_records_for_unknown_group(self, index):
        assert index.records_for_group("NOPE") == []

    def test_declared_groups(self):
        index = build_index([Record(key="A", groups=["X"])], declared_groups=["EMPTY", "X"])
        assert list(index.by_group) == ["EMPTY", "X"]
        assert index.by_group["EMPTY"] == []
        assert index.record_count == 1

    def test_accepts_generator(self):
        index = build_index(r for r in _records())
        assert index.record_count == 6


class TestIndexEdgeCases:
    """Test edge cases for index."""

    def test_empty_records(self):
        index = build_index([])
        assert index.record_count == 0
        assert index.by_group == {}
        assert index.by_key == {}
        assert index.lookup_key("anything") is None

    def test_duplicate_keys(self):
        """Last write wins for duplicate keys; group listings keep both."""
        records = [
            Record(key="DUP", hash="0x1", groups=["A"], comment="First"),
            Record(key="DUP", hash="0x2", groups=["B"], comment="Second"),
        ]
        index = build_index(records)

        record = get_by_key(index, "DUP")
        assert record.hash == "0x2"
        assert record.comment == "Second"

        assert [r.comment for r in index.by_group["A"]] == ["First"]
        assert [r.comment for r in index.by_group["B"]] == ["Second"]
        assert index.record_count == 2
        assert len(index.by_key) == 1


class TestQueries:
    """Test the query engine."""

    @pytest.fixture
    def index(self):
        return build_index(_records(), declared_groups=["EMPTY_NS"])

    def test_list_groups_no_filter(self, index):
        assert list_groups(index) == ["CATEGORY_GUNS", "EMPTY_NS", "ENTITY", "PLAYER", "REDHOOK"]

    def test_list_groups_by_label(self, index):
        assert list_groups(index, "play") == ["PLAYER"]

    def test_list_groups_by_member_key(self, index):
        assert list_groups(index, "health") == ["ENTITY"]

    def test_list_groups_label_or_key(self, index):
        # "red" matches REDHOOK's label; "0xff" only a member key
        assert list_groups(index, "RED") == ["REDHOOK"]
        assert list_groups(index, "0xff") == ["CATEGORY_GUNS"]

    def test_list_groups_never_lists_non_matching(self, index):
        for needle in ["get", "ped", "x", "zzz"]:
            for group in list_groups(index, needle):
                assert needle in group.lower() or any(
                    needle in r.key.lower() for r in index.by_group[group]
                )

    def test_list_groups_hidden(self, index):
        assert "REDHOOK" not in list_groups(index, hidden_groups=["REDHOOK"])

    def test_list_records_in_group(self, index):
        records = list_records_in_group(index, "PLAYER")
        assert [r.key for r in records] == ["PLAYER_PED_ID", "GET_PLAYER_NAME"]

    def test_list_records_in_group_filtered(self, index):
        records = list_records_in_group(index, "PLAYER", "name")
        assert [r.key for r in records] == ["GET_PLAYER_NAME"]

    def test_list_records_in_unknown_group(self, index):
        assert list_records_in_group(index, "NOPE") == []

    def test_filter_matches_key_only_by_default(self, index):
        # "0x6b76" is a hash, ">=" is in a comment; neither is a key
        assert list_records_in_group(index, "ENTITY", "0x6b76") == []
        assert list_records_in_group(index, "ENTITY", ">=") == []

    def test_filter_extra_fields(self, index):
        records = list_records_in_group(index, "ENTITY", ">=", fields=("key", "comment"))
        assert [r.key for r in records] == ["SET_ENTITY_HEALTH"]
        records = list_records_in_group(index, "ENTITY", "0xeef0", fields=("key", "hash"))
        assert [r.key for r in records] == ["GET_ENTITY_HEALTH"]

    def test_list_all_records_no_filter(self, index):
        grouped = list_all_records(index)
        # EMPTY_NS has no records, so it is omitted
        assert [g for g, _ in grouped] == ["CATEGORY_GUNS", "ENTITY", "PLAYER", "REDHOOK"]
        assert sum(len(rs) for _, rs in grouped) == 6
        for group, records in grouped:
            assert records == index.by_group[group]

    def test_list_all_records_filtered(self, index):
        grouped = list_all_records(index, "GET_")
        assert grouped == [
            ("ENTITY", [index.by_key["GET_ENTITY_HEALTH"]]),
            ("PLAYER", [index.by_key["GET_PLAYER_NAME"]]),
        ]

    def test_list_all_records_no_matches(self, index):
        assert list_all_records(index, "does-not-exist") == []

    def test_list_all_records_hidden(self, index):
        grouped = list_all_records(index, hidden_groups=["REDHOOK"])
        assert "REDHOOK" not in [g for g, _ in grouped]

    def test_get_by_key(self, index):
        assert get_by_key(index, "0xFF").extra == {"price": 1500}

    def test_get_by_key_missing(self, index):
        assert get_by_key(index, "missing") is None

    def test_hidden_group_still_reachable_by_key(self, index):
        list_groups(index, hidden_groups=["REDHOOK"])
        assert get_by_key(index, "REDHOOK_PRINT") is not None

    def test_queries_do_not_mutate(self, index):
        before = {g: list(rs) for g, rs in index.by_group.items()}
        list_groups(index, "x")
        list_all_records(index, "get")
        list_records_in_group(index, "PLAYER", "ped")
        assert index.by_group == before

    def test_summarize(self, index):
        summary = summarize_index(index)
        assert summary["total"] == 6
        assert summary["groups"] == 5
        assert summary["by_group"]["ENTITY"] == 2
        assert summary["by_group"]["EMPTY_NS"] == 0
        assert summary["unique_keys"] == 6

    def test_summarize_hidden(self, index):
        summary = summarize_index(index, hidden_groups=["REDHOOK"])
        assert summary["total"] == 5
        assert "REDHOOK" not in summary["by_group"]


class TestRecordMatches:
    """Substring matching."""

    def test_empty_needle(self):
        assert record_matches(Record(key="A"), "")

    def test_case_insensitive(self):
        # needle is expected lowercased by callers
        assert record_matches(Record(key="GET_PLAYER_PED"), "player")

    def test_extra_field(self):
        record = Record(key="A", extra={"price": 1500})
        assert record_matches(record, "150", fields=("price",))

    def test_missing_field(self):
        assert not record_matches(Record(key="A"), "a", fields=("nonexistent",))
