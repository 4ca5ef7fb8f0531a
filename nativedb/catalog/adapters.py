"""
Source Adapters - Bridge raw source payloads to pre-normalization records.

The adapter pattern lets us support several incompatible source shapes
without the normalizer or index knowing where a record came from. Each
adapter turns one payload into plain dicts using canonical field names;
the normalizer fills whatever is missing.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from .header_parser import parse_header
from .models import IngestError, SourceKind, UNKNOWN_GROUP

logger = logging.getLogger(__name__)


# Field aliases seen across native dumps (first match wins)
FIELD_ALIASES = {
    "key": ["name", "NativeName", "hashName"],
    "hash": ["hash", "Hash", "native"],
    "secondary_hash": ["jhash"],
    "comment": ["comment", "desc", "description"],
    "parameters": ["params", "Params", "arguments", "args"],
    "return_type": ["returns", "return", "return_type"],
}


@dataclass
class AdapterOutput:
    """
    Result of running one adapter over one payload.

    Attributes:
        records: Raw record dicts in source order (may be missing fields)
        declared_groups: Group labels the source names, even if empty
        metadata: Source-level info (e.g. catalog version)
    """
    records: list[dict[str, Any]] = field(default_factory=list)
    declared_groups: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


class SourceAdapter(ABC):
    """
    Abstract interface for turning a payload into raw records.

    Implementations never raise for a single bad entry; they skip it.
    They raise IngestError only when the payload itself has the wrong type.
    """

    kind: SourceKind

    @abstractmethod
    def parse(self, payload: Any) -> AdapterOutput:
        """
        Convert a payload into raw records.

        Args:
            payload: Parsed JSON value or raw text, depending on the adapter

        Returns:
            AdapterOutput with records in source order
        """
        pass


def _pick(fields: dict, aliases: list[str]) -> Optional[Any]:
    """Return the first truthy value among the alias keys."""
    for alias in aliases:
        value = fields.get(alias)
        if value not in (None, ""):
            return value
    return None


class MapAdapter(SourceAdapter):
    """
    Native dump keyed by namespace, then by hash.

    Expected format:
        {"PLAYER": {"0x6D0DE6A7B5DA71F8": {"name": "GET_PLAYER_NAME", ...}}}
    """

    kind = SourceKind.MAP

    def parse(self, payload: Any) -> AdapterOutput:
        if not isinstance(payload, dict):
            raise IngestError(f"Map source must be a JSON object, got {type(payload).__name__}")

        output = AdapterOutput()
        consumed = {alias for aliases in FIELD_ALIASES.values() for alias in aliases}

        for group, natives in payload.items():
            if not isinstance(natives, dict):
                logger.debug(f"Skipping namespace {group!r}: not an object")
                continue

            output.declared_groups.append(group)

            for hash_key, fields in natives.items():
                if not isinstance(fields, dict):
                    logger.debug(f"Skipping {group}/{hash_key}: not an object")
                    continue

                record = {"groups": [group]}
                for canonical, aliases in FIELD_ALIASES.items():
                    value = _pick(fields, aliases)
                    if value is not None:
                        record[canonical] = value

                # The inner key is the hash unless the entry says otherwise
                record.setdefault("hash", hash_key)

                record["extra"] = {k: v for k, v in fields.items() if k not in consumed}
                output.records.append(record)

        return output


class ArrayAdapter(SourceAdapter):
    """
    Flat item catalog.

    Expected format (bare list or catalog envelope):
        [{"key": 255, "category": ["CATEGORY_GUNS"], "price": 1500}, ...]
        {"version": "1.0", "numberItems": 1, "items": [...]}
    """

    kind = SourceKind.ARRAY

    def parse(self, payload: Any) -> AdapterOutput:
        output = AdapterOutput()

        if isinstance(payload, dict) and isinstance(payload.get("items"), list):
            items = payload["items"]
            if payload.get("version") is not None:
                output.metadata["version"] = str(payload["version"])
            if payload.get("numberItems") is not None:
                output.metadata["declared_count"] = payload["numberItems"]
        elif isinstance(payload, list):
            items = payload
        else:
            raise IngestError(f"Array source must be a JSON array, got {type(payload).__name__}")

        for position, item in enumerate(items):
            if not isinstance(item, dict):
                logger.debug(f"Skipping catalog entry {position}: not an object")
                continue

            category = item.get("category")
            if isinstance(category, str):
                category = [category]
            elif not isinstance(category, (list, tuple)):
                if category is not None:
                    logger.debug(f"Catalog entry {position}: ignoring category of type {type(category).__name__}")
                category = []
            groups = [str(c) for c in category if c not in (None, "")]

            record = {
                "key": item.get("key"),
                "groups": groups or [UNKNOWN_GROUP],
                "extra": {k: v for k, v in item.items() if k not in ("key", "category")},
            }
            output.records.append(record)

        return output


class HeaderTextAdapter(SourceAdapter):
    """
    C-style header with namespace blocks and Invoke<> bodies.

    See header_parser for the format and its limitations.
    """

    kind = SourceKind.HEADER_TEXT

    def parse(self, payload: Any) -> AdapterOutput:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        if not isinstance(payload, str):
            raise IngestError(f"Header source must be text, got {type(payload).__name__}")

        records, declared = parse_header(payload)
        return AdapterOutput(records=records, declared_groups=declared)


ADAPTERS: dict[SourceKind, type[SourceAdapter]] = {
    SourceKind.MAP: MapAdapter,
    SourceKind.ARRAY: ArrayAdapter,
    SourceKind.HEADER_TEXT: HeaderTextAdapter,
}


def get_adapter(kind: SourceKind | str) -> SourceAdapter:
    """Instantiate the adapter for a source kind."""
    return ADAPTERS[SourceKind.parse(kind)]()
