"""
Data models for the native / catalog browser.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Every adapter's output ends up as a Record once the normalizer has run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


DEFAULT_HASH = "0x0000000000000000"
UNKNOWN_GROUP = "UNKNOWN"


class SourceKind(Enum):
    """
    Shape of a raw source payload.

    Selects the adapter at the ingest boundary:
    - MAP: {"NAMESPACE": {"0xHASH": {...fields}}} (native JSON dumps)
    - ARRAY: [{"key": ..., "category": [...]}] (item catalogs)
    - HEADER_TEXT: C-style header with namespace blocks and Invoke<> bodies
    """
    MAP = "map"
    ARRAY = "array"
    HEADER_TEXT = "header_text"

    @classmethod
    def parse(cls, value: "SourceKind | str") -> "SourceKind":
        """Accept an enum member or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown source kind: {value!r} (expected one of: {choices})") from None


class IngestError(ValueError):
    """The payload as a whole cannot be ingested (wrong type, bad JSON, fetch failure)."""


class CatalogNotLoadedError(RuntimeError):
    """A query was made before any catalog was loaded into the session."""


class UnknownSourceError(LookupError):
    """A configured source name was requested that does not exist."""


@dataclass
class Parameter:
    """A single declared parameter of a native."""
    type: str
    name: str

    def __str__(self) -> str:
        return f"{self.type} {self.name}".strip()


@dataclass
class Record:
    """
    Canonical catalog entry.

    Natives and catalog items share this shape. Fields a source does not
    provide hold their defaults, never None.
    """
    key: str                                 # Primary identifier (name, or hash for anonymous natives)
    hash: str = DEFAULT_HASH
    secondary_hash: str = ""                 # e.g. jhash in native dumps
    comment: str = ""
    parameters: list[Parameter] = field(default_factory=list)
    return_type: str = ""
    groups: list[str] = field(default_factory=lambda: [UNKNOWN_GROUP])
    extra: dict[str, Any] = field(default_factory=dict)  # Display-only fields (price, build, ...)

    @property
    def primary_group(self) -> str:
        """Group used for bucketing and breadcrumbs."""
        return self.groups[0] if self.groups else UNKNOWN_GROUP

    @property
    def signature(self) -> str:
        """C-like signature, e.g. 'void SET_ENTITY_HEALTH(Entity entity, int health)'."""
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.return_type} {self.key}({params})".strip()

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for reports and JSON responses."""
        return {
            "key": self.key,
            "hash": self.hash,
            "secondary_hash": self.secondary_hash,
            "comment": self.comment,
            "parameters": [{"type": p.type, "name": p.name} for p in self.parameters],
            "return_type": self.return_type,
            "groups": list(self.groups),
            "extra": dict(self.extra),
        }
