"""
Source Loader - Retrieve a raw payload and hand it to the pipeline.

This is the only part of the package that touches the filesystem or the
network. JSON sources are decoded here; header sources stay text.
"""

import json
import logging
from pathlib import Path
from typing import Any

import requests

from .config import CatalogConfig, SourceConfig, get_source
from .index import CatalogIndex
from .models import IngestError, SourceKind
from .pipeline import ingest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _fetch_text(url: str, timeout: float) -> str:
    """Download a source file. Any HTTP or connection failure is fatal for the load."""
    try:
        resp = requests.get(url, timeout=timeout, headers={"Cache-Control": "no-cache"})
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Fetching {url} failed: {e}")
        raise IngestError(f"Could not fetch {url}: {e}") from e
    return resp.text


def _read_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def decode_payload(text: str, kind: SourceKind | str) -> Any:
    """
    Turn raw source text into the payload the adapter expects.

    Raises:
        IngestError: If a JSON source does not contain valid JSON
    """
    kind = SourceKind.parse(kind)
    if kind is SourceKind.HEADER_TEXT:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise IngestError(f"Source is not valid JSON: {e}") from e


def load_payload(location: str | Path, kind: SourceKind | str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Read a local file or fetch a URL and decode it for the given kind.

    Args:
        location: Filesystem path or http(s) URL
        kind: Source kind, decides whether the text is JSON-decoded
        timeout: HTTP timeout in seconds

    Returns:
        Parsed JSON value or raw text
    """
    location = str(location)
    if _is_url(location):
        logger.info(f"Downloading {location}")
        text = _fetch_text(location, timeout)
    else:
        text = _read_text(Path(location))
    return decode_payload(text, kind)


def load_catalog(location: str | Path, kind: SourceKind | str, timeout: float = DEFAULT_TIMEOUT) -> CatalogIndex:
    """Load and ingest one source in a single call."""
    return ingest(kind, load_payload(location, kind, timeout))


def load_configured_source(name: str, config: CatalogConfig) -> tuple[SourceConfig, Any]:
    """
    Retrieve the payload of a source named in the config.

    Returns:
        (source config, payload)
    """
    source = get_source(name, config)
    payload = load_payload(source.location, source.kind, config.settings.fetch_timeout_seconds)
    return source, payload
