"""
Configuration for the catalog browser.

Handles known source locations and default query settings.
Config is declarative JSON - edit the file, not the code.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from .models import SourceKind, UnknownSourceError
from .query import DEFAULT_FIELDS


DEFAULT_CONFIG_PATH = Path(__file__).parent / "catalog_sources.json"


@dataclass
class SourceConfig:
    """A named source: where to get it and which adapter reads it."""
    name: str
    kind: SourceKind
    location: str               # Local path or http(s) URL
    description: str = ""


@dataclass
class QuerySettings:
    """Defaults applied to listings and fetches."""
    hidden_groups: list[str] = field(default_factory=list)
    search_fields: list[str] = field(default_factory=lambda: list(DEFAULT_FIELDS))
    fetch_timeout_seconds: float = 30.0


@dataclass
class CatalogConfig:
    """Full configuration for the catalog browser."""
    sources: dict[str, SourceConfig] = field(default_factory=dict)
    settings: QuerySettings = field(default_factory=QuerySettings)
    default_source: str | None = None


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> CatalogConfig:
    """
    Load configuration from JSON file.

    Relative local source paths are resolved against the config file's
    directory.

    Args:
        config_path: Path to catalog_sources.json

    Returns:
        CatalogConfig with sources and settings
    """
    path = Path(config_path)
    with open(path, "r") as f:
        data = json.load(f)

    # Parse sources
    sources = {}
    for name, source_data in data.get("sources", {}).items():
        location = source_data.get("url") or source_data.get("path", "")
        if location and not source_data.get("url") and not Path(location).is_absolute():
            location = str((path.parent / location).resolve())
        sources[name] = SourceConfig(
            name=name,
            kind=SourceKind.parse(source_data.get("kind", "map")),
            location=location,
            description=source_data.get("description", ""),
        )

    # Parse settings
    settings_data = data.get("settings", {})
    settings = QuerySettings(
        hidden_groups=list(settings_data.get("hidden_groups", [])),
        search_fields=list(settings_data.get("search_fields", DEFAULT_FIELDS)),
        fetch_timeout_seconds=float(settings_data.get("fetch_timeout_seconds", 30)),
    )

    return CatalogConfig(
        sources=sources,
        settings=settings,
        default_source=data.get("default_source"),
    )


def get_source(name: str, config: CatalogConfig) -> SourceConfig:
    """
    Look up a configured source by name (case-insensitive).

    Raises:
        UnknownSourceError: If no source has that name
    """
    source = config.sources.get(name)
    if source is None:
        for key, candidate in config.sources.items():
            if key.lower() == name.lower():
                return candidate
        known = ", ".join(sorted(config.sources)) or "none"
        raise UnknownSourceError(f"Unknown source: {name} (configured: {known})")
    return source
