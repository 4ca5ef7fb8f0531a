"""
Catalog Session - The currently loaded index, owned explicitly.

Callers hold a CatalogSession and pass it wherever queries are answered,
instead of reaching for module-level globals. A load builds a complete new
index first and only then swaps the reference, so queries never see a
half-built index. A failed load keeps whatever was loaded before.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Iterable, Optional

from .index import CatalogIndex
from .models import CatalogNotLoadedError, Record, SourceKind
from .pipeline import ingest
from . import query

logger = logging.getLogger(__name__)


class CatalogSession:
    """
    Holder for one process-wide catalog index.

    Attributes:
        hidden_groups: Groups left out of listings (e.g. "REDHOOK")
        fields: Record fields the filter text is matched against
    """

    def __init__(
        self,
        hidden_groups: Iterable[str] = (),
        fields: Iterable[str] = query.DEFAULT_FIELDS,
    ):
        self.hidden_groups = tuple(hidden_groups)
        self.fields = tuple(fields)
        self._index: Optional[CatalogIndex] = None
        self._source: Optional[str] = None
        self._loaded_at: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._reload_lock = threading.Lock()

    @property
    def index(self) -> CatalogIndex:
        """The loaded index. Raises CatalogNotLoadedError before the first load."""
        index = self._index
        if index is None:
            raise CatalogNotLoadedError("No catalog loaded")
        return index

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    def load(self, source_kind: SourceKind | str, payload: Any, source: Optional[str] = None) -> CatalogIndex:
        """
        Ingest a payload and replace the current index with the result.

        Args:
            source_kind: Adapter selector
            payload: Parsed JSON or raw text
            source: Label for status reporting (path, URL, preset name)

        Returns:
            The new index

        Raises:
            IngestError: Payload could not be ingested; previous index kept
        """
        with self._reload_lock:
            try:
                new_index = ingest(source_kind, payload)
            except ValueError as e:
                self._last_error = str(e)
                if self._index is not None:
                    logger.warning(f"Reload from {source or 'payload'} failed, keeping previous catalog: {e}")
                raise

            self._index = new_index
            self._source = source
            self._loaded_at = datetime.now()
            self._last_error = None

        logger.info(f"Catalog loaded from {source or 'payload'}: {new_index.record_count} records")
        return new_index

    def clear(self):
        """Drop the loaded index."""
        with self._reload_lock:
            self._index = None
            self._source = None
            self._loaded_at = None

    def status(self) -> dict:
        """Summary of what is loaded, for status endpoints and the CLI."""
        index = self._index
        return {
            "loaded": index is not None,
            "source": self._source,
            "source_kind": index.source_kind.value if index and index.source_kind else None,
            "version": index.version if index else None,
            "loaded_at": self._loaded_at.isoformat() if self._loaded_at else None,
            "record_count": index.record_count if index else 0,
            "group_count": len(index.by_group) if index else 0,
            "last_error": self._last_error,
        }

    # Query delegates - same semantics as the query module, bound to this session

    def list_groups(self, filter_text: str = "") -> list[str]:
        return query.list_groups(self.index, filter_text, self.hidden_groups, self.fields)

    def list_records_in_group(self, group: str, filter_text: str = "") -> list[Record]:
        return query.list_records_in_group(self.index, group, filter_text, self.fields)

    def list_all_records(self, filter_text: str = "") -> list[tuple[str, list[Record]]]:
        return query.list_all_records(self.index, filter_text, self.hidden_groups, self.fields)

    def get_by_key(self, key: str) -> Optional[Record]:
        return query.get_by_key(self.index, key)

    def summarize(self) -> dict:
        return query.summarize_index(self.index, self.hidden_groups)
