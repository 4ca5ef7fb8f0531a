# Native / catalog browser engine
# Ingests map, array and header sources into one index; no UI code here

from .models import (
    Record,
    Parameter,
    SourceKind,
    IngestError,
    CatalogNotLoadedError,
    UnknownSourceError,
    DEFAULT_HASH,
    UNKNOWN_GROUP,
)
from .config import load_config, get_source, CatalogConfig, SourceConfig
from .adapters import MapAdapter, ArrayAdapter, HeaderTextAdapter, get_adapter
from .header_parser import find_invoke_hash, split_params
from .normalizer import normalize_record, normalize_records
from .index import build_index, CatalogIndex
from .pipeline import ingest
from .query import (
    list_groups,
    list_records_in_group,
    list_all_records,
    get_by_key,
    summarize_index,
)
from .session import CatalogSession
from .loader import load_payload, load_catalog
from .report import format_console, format_record_detail, export_csv, export_xlsx

__version__ = "1.0.0"

__all__ = [
    # Models
    "Record",
    "Parameter",
    "SourceKind",
    "IngestError",
    "CatalogNotLoadedError",
    "UnknownSourceError",
    "DEFAULT_HASH",
    "UNKNOWN_GROUP",
    # Config
    "CatalogConfig",
    "SourceConfig",
    "load_config",
    "get_source",
    # Adapters
    "MapAdapter",
    "ArrayAdapter",
    "HeaderTextAdapter",
    "get_adapter",
    "find_invoke_hash",
    "split_params",
    # Pipeline
    "normalize_record",
    "normalize_records",
    "build_index",
    "CatalogIndex",
    "ingest",
    # Query
    "list_groups",
    "list_records_in_group",
    "list_all_records",
    "get_by_key",
    "summarize_index",
    "CatalogSession",
    # Loader
    "load_payload",
    "load_catalog",
    # Report
    "format_console",
    "format_record_detail",
    "export_csv",
    "export_xlsx",
]
