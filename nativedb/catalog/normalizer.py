"""
Normalizer - Turn raw adapter output into canonical Records.

Runs the same way after every adapter:
- numeric keys become "0x" + uppercase hex (catalog items use int keys)
- a missing key falls back to the hash
- every missing field gets its default, never None

Duplicates are left alone; the by-key index resolves them later.
"""

import logging
from typing import Any, Iterable

from .header_parser import split_params
from .models import DEFAULT_HASH, Parameter, Record, UNKNOWN_GROUP

logger = logging.getLogger(__name__)


def format_key(value: Any) -> str:
    """
    Render a raw key as a string.

    Examples:
        255 -> "0xFF"
        255.0 -> "0xFF"
        "GET_PLAYER_PED" -> "GET_PLAYER_PED"
        None -> ""
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return f"0x{value:X}"
    return str(value).strip()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_parameters(value: Any) -> list[Parameter]:
    """
    Coerce the raw parameter field into a list of Parameters.

    Accepts Parameter objects, {"type": ..., "name": ...} dicts, or a
    comma-separated string. Entries in any other shape are dropped.
    """
    if not value:
        return []
    if isinstance(value, str):
        return split_params(value)
    if not isinstance(value, (list, tuple)):
        logger.debug(f"Dropping parameters of unexpected type {type(value).__name__}")
        return []

    params = []
    for entry in value:
        if isinstance(entry, Parameter):
            params.append(entry)
        elif isinstance(entry, dict):
            params.append(Parameter(
                type=_text(entry.get("type")).strip(),
                name=_text(entry.get("name")).strip(),
            ))
        elif isinstance(entry, str) and entry.strip():
            params.extend(split_params(entry))
    return params


def normalize_groups(value: Any) -> list[str]:
    """Coerce the raw groups field into a non-empty list of labels."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return [UNKNOWN_GROUP]
    groups = [str(g) for g in value if g not in (None, "")]
    return groups or [UNKNOWN_GROUP]


def normalize_record(raw: dict[str, Any]) -> Record:
    """
    Build a Record from one raw adapter dict.

    Args:
        raw: Dict with canonical field names, any of which may be missing

    Returns:
        Record with every field populated
    """
    hash_value = _text(raw.get("hash")).strip() or DEFAULT_HASH
    key = format_key(raw.get("key")) or hash_value

    extra = raw.get("extra")
    return Record(
        key=key,
        hash=hash_value,
        secondary_hash=_text(raw.get("secondary_hash")).strip(),
        comment=_text(raw.get("comment")),
        parameters=normalize_parameters(raw.get("parameters")),
        return_type=_text(raw.get("return_type")).strip(),
        groups=normalize_groups(raw.get("groups")),
        extra=dict(extra) if isinstance(extra, dict) else {},
    )


def normalize_records(raws: Iterable[dict[str, Any]]) -> list[Record]:
    """Normalize raw records, preserving order."""
    return [normalize_record(raw) for raw in raws]
