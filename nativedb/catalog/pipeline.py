"""
Ingest pipeline: adapter -> normalizer -> index builder.

The caller picks the adapter with an explicit SourceKind; the payload is
never sniffed to guess its shape. No I/O happens here.
"""

import logging
from typing import Any

from .adapters import get_adapter
from .index import CatalogIndex, build_index
from .models import SourceKind
from .normalizer import normalize_records

logger = logging.getLogger(__name__)


def ingest(source_kind: SourceKind | str, payload: Any) -> CatalogIndex:
    """
    Run the full pipeline over one already-retrieved payload.

    Args:
        source_kind: Which adapter to use (SourceKind or its string value)
        payload: Parsed JSON (map/array) or raw text (header_text)

    Returns:
        Freshly built CatalogIndex

    Raises:
        IngestError: If the payload has the wrong top-level type
        ValueError: If source_kind is not a known kind
    """
    kind = SourceKind.parse(source_kind)
    output = get_adapter(kind).parse(payload)

    records = normalize_records(output.records)
    index = build_index(records, declared_groups=output.declared_groups)

    index.source_kind = kind
    index.version = output.metadata.get("version")
    declared_count = output.metadata.get("declared_count")
    if declared_count is not None:
        try:
            index.declared_count = int(declared_count)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric declared item count {declared_count!r}")

    logger.info(
        f"Ingested {index.record_count} {kind.value} records "
        f"into {len(index.by_group)} groups ({len(index.by_key)} unique keys)"
    )
    return index
