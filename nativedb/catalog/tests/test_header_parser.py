"""
Tests for the header text parser.

Run with: pytest nativedb/catalog/tests/test_header_parser.py -v
"""

import pytest
from pathlib import Path

from nativedb.catalog.header_parser import (
    OUTSIDE_GROUP,
    NamespaceScope,
    ScopeState,
    find_invoke_hash,
    parse_header,
    split_params,
)
from nativedb.catalog.models import DEFAULT_HASH, Parameter


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_HEADER = FIXTURES_DIR / "natives_sample.h"


class TestFindInvokeHash:
    """Bounded lookahead for Invoke<0x...>."""

    def test_first_line(self):
        assert find_invoke_hash(["Invoke<0xABCD1234>(a);", "}"]) == "0xABCD1234"

    def test_second_line(self):
        assert find_invoke_hash(["{", "return Invoke<0x275F255ED201B937, Ped>(p);"]) == "0x275F255ED201B937"

    def test_not_found(self):
        assert find_invoke_hash(["{", "return 0;"]) is None

    def test_empty_window(self):
        assert find_invoke_hash([]) is None

    def test_case_insensitive(self):
        assert find_invoke_hash(["invoke< 0xabcdef, void>()"]) == "0xabcdef"

    def test_spacing(self):
        assert find_invoke_hash(["Invoke <  0x1F>()"]) == "0x1F"

    def test_max_sixteen_digits(self):
        assert find_invoke_hash(["Invoke<0x0123456789ABCDEF0>"]) == "0x0123456789ABCDEF"


class TestSplitParams:
    """Parameter text splitting."""

    def test_empty(self):
        assert split_params("") == []

    def test_whitespace_only(self):
        assert split_params("   ") == []

    def test_single(self):
        assert split_params("int a") == [Parameter("int", "a")]

    def test_multiple(self):
        assert split_params("Entity entity, int health") == [
            Parameter("Entity", "entity"),
            Parameter("int", "health"),
        ]

    def test_multi_word_type(self):
        assert split_params("const char* text, unsigned int  flags") == [
            Parameter("const char*", "text"),
            Parameter("unsigned int", "flags"),
        ]

    def test_name_only(self):
        assert split_params("p0") == [Parameter("", "p0")]


class TestNamespaceScope:
    """Two-state scope machine."""

    def test_starts_outside(self):
        scope = NamespaceScope()
        assert scope.state is ScopeState.OUTSIDE
        assert scope.group == OUTSIDE_GROUP
        assert not scope.is_inside

    def test_enter_and_leave(self):
        scope = NamespaceScope()
        scope.enter("WEAPON")
        assert scope.is_inside
        assert scope.group == "WEAPON"

        scope.leave()
        assert scope.state is ScopeState.OUTSIDE
        assert scope.group == OUTSIDE_GROUP

    def test_switch_namespace_directly(self):
        scope = NamespaceScope()
        scope.enter("PLAYER")
        scope.enter("WEAPON")
        assert scope.group == "WEAPON"
        assert scope.declared == ["PLAYER", "WEAPON"]

    def test_declared_once(self):
        scope = NamespaceScope()
        scope.enter("PLAYER")
        scope.leave()
        scope.enter("PLAYER")
        assert scope.declared == ["PLAYER"]


class TestParseHeader:
    """Full header parsing."""

    def test_empty_text(self):
        records, declared = parse_header("")
        assert records == []
        assert declared == []

    def test_anonymous_native(self):
        text = "\n".join([
            "namespace WEAPON",
            "static void _0x1234(int a)",
            "{",
            "Invoke<0xABCD1234>(...)",
            "}",
            "}",
            "static void AFTER_CLOSE(int b)",
            "{",
            "Invoke<0x99>(b)",
            "}",
        ])
        records, declared = parse_header(text)

        assert len(records) == 1
        record = records[0]
        assert record["groups"] == ["WEAPON"]
        assert record["key"] == "0xABCD1234"
        assert record["hash"] == "0xABCD1234"
        assert record["parameters"] == [Parameter("int", "a")]
        assert declared == ["WEAPON"]

    def test_declaration_outside_namespace_dropped(self):
        text = "static void LOOSE(int a)\n{\nInvoke<0x1>(a)\n}"
        records, declared = parse_header(text)
        assert records == []
        assert declared == []

    def test_hash_beyond_lookahead_not_used(self):
        text = "\n".join([
            "namespace CAM",
            "static void FAR_AWAY()",
            "{",
            "// comment",
            "Invoke<0xABC>()",
        ])
        records, _ = parse_header(text)
        assert records[0]["hash"] == DEFAULT_HASH
        assert records[0]["key"] == "FAR_AWAY"

    def test_short_window_at_end_of_file_keeps_default(self):
        """A declaration needs two following lines before its hash is read."""
        text = "namespace CAM\nstatic void LAST()\nInvoke<0xAB>()"
        records, _ = parse_header(text)
        assert records[0]["hash"] == DEFAULT_HASH
        assert records[0]["key"] == "LAST"

    def test_full_window_at_end_of_file(self):
        text = "namespace CAM\nstatic void LAST()\nInvoke<0xAB>()\n}"
        records, _ = parse_header(text)
        assert records[0]["hash"] == "0xAB"

    def test_anonymous_without_hash_uses_default(self):
        text = "namespace CAM\nstatic void _0xDEAD()\n{\n}"
        records, _ = parse_header(text)
        assert records[0]["key"] == DEFAULT_HASH

    def test_return_type_trimmed(self):
        text = "namespace UI\n  static   const char*   GET_LABEL(Hash h) { return Invoke<0x1>(h); }"
        records, _ = parse_header(text)
        assert records[0]["return_type"] == "const char*"
        assert records[0]["key"] == "GET_LABEL"

    def test_empty_params(self):
        text = "namespace PLAYER\nstatic Ped PLAYER_PED_ID()\n{ return Invoke<0x4F8644AF03D0E0D6, Ped>(); }"
        records, _ = parse_header(text)
        assert records[0]["parameters"] == []

    def test_non_matching_lines_ignored(self):
        text = "#pragma once\n// namespace FAKE\nnamespace REAL\ntypedef int Ped;\n"
        records, declared = parse_header(text)
        assert records == []
        assert declared == ["REAL"]

    def test_sample_file(self):
        records, declared = parse_header(SAMPLE_HEADER.read_text())

        assert declared == ["PLAYER", "WEAPON", "CAM"]
        keys = [r["key"] for r in records]
        assert keys == [
            "GET_PLAYER_PED",
            "0x4A5E53A0D3ABA1B5",
            "IS_PLAYER_DEAD",
            "GIVE_WEAPON_TO_PED",
            "GET_MISSING_HASH",
        ]
        assert "ORPHAN_NATIVE" not in keys

    def test_sample_file_fields(self):
        records, _ = parse_header(SAMPLE_HEADER.read_text())
        by_key = {r["key"]: r for r in records}

        give = by_key["GIVE_WEAPON_TO_PED"]
        assert give["groups"] == ["WEAPON"]
        assert give["hash"] == "0xB282DC6EBD803C75"
        assert give["return_type"] == "void"
        assert [p.name for p in give["parameters"]] == ["ped", "weaponHash", "ammoCount"]

        missing = by_key["GET_MISSING_HASH"]
        assert missing["hash"] == DEFAULT_HASH
        assert missing["return_type"] == "Any*"

    @pytest.mark.parametrize("newline", ["\n", "\r\n"])
    def test_line_endings(self, newline):
        text = newline.join(["namespace A", "static int X(int a)", "{ return Invoke<0x5, int>(a); }", "}"])
        records, _ = parse_header(text)
        assert records[0]["hash"] == "0x5"
