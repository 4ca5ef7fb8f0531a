"""
CLI entry point for the catalog browser.

Usage:
    python -m nativedb.catalog --source gta5 --filter health
    python -m nativedb.catalog --file Natives.h --kind header_text --group WEAPON
    python -m nativedb.catalog --source rdr3 --key GET_PLAYER_PED
    python -m nativedb.catalog --file netCatalog.json --kind array --all --output-csv items.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_CONFIG_PATH, load_config
from .loader import load_configured_source, load_payload
from .models import IngestError, SourceKind, UnknownSourceError
from .report import export_csv, export_xlsx, format_console, format_record_detail
from .session import CatalogSession


def main():
    parser = argparse.ArgumentParser(
        prog="nativedb.catalog",
        description="Browse game natives and item catalogs by group, key, and text filter",
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--source",
        help="Configured source name (e.g., gta5, rdr3, rdr, catalog)",
    )
    source_group.add_argument(
        "--file",
        metavar="PATH_OR_URL",
        help="Source file path or URL (requires --kind)",
    )

    parser.add_argument(
        "--kind",
        choices=[k.value for k in SourceKind],
        help="Source shape for --file",
    )

    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Source config file (default: module's catalog_sources.json)",
    )

    parser.add_argument(
        "--filter",
        default="",
        metavar="TEXT",
        help="Case-insensitive substring to match",
    )

    view = parser.add_mutually_exclusive_group()
    view.add_argument("--group", help="List records of one group")
    view.add_argument("--key", help="Show details of one record")
    view.add_argument("--all", action="store_true", help="List matching records across all groups")

    parser.add_argument(
        "--hide",
        nargs="+",
        default=None,
        metavar="GROUP",
        help="Groups to leave out of listings (e.g., REDHOOK)",
    )

    parser.add_argument("--output-csv", metavar="FILE", help="Output CSV file path")
    parser.add_argument("--output-xlsx", metavar="FILE", help="Output XLSX file path")

    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file and not args.kind:
        parser.error("--file requires --kind")

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)

        if args.source:
            source, payload = load_configured_source(args.source, config)
            kind, label = source.kind, source.name
        else:
            kind, label = SourceKind.parse(args.kind), args.file
            payload = load_payload(args.file, kind, config.settings.fetch_timeout_seconds)

        hidden = args.hide if args.hide is not None else config.settings.hidden_groups
        session = CatalogSession(hidden_groups=hidden, fields=config.settings.search_fields)
        index = session.load(kind, payload, source=label)
        print(f"Indexed {index.record_count} records in {len(index.by_group)} groups from {label}")

        if args.key:
            record = session.get_by_key(args.key)
            if record is None:
                print(f"No record with key {args.key}")
                sys.exit(0)
            print(format_record_detail(record))
            return

        if args.group:
            records = session.list_records_in_group(args.group, args.filter)
            grouped = [(args.group, records)] if records else []
        elif args.all or args.filter:
            grouped = session.list_all_records(args.filter)
        else:
            summary = session.summarize()
            for group in session.list_groups():
                print(f"  {group:<40} {summary['by_group'][group]:>6}")
            return

        print(format_console(grouped, filter_text=args.filter))

        if args.output_csv:
            output_path = Path(args.output_csv)
            with open(output_path, "w", newline="") as f:
                export_csv(grouped, output=f)
            print(f"\nCSV exported to: {output_path}")

        if args.output_xlsx:
            output_path = Path(args.output_xlsx)
            output_path.write_bytes(export_xlsx(grouped).getvalue())
            print(f"\nXLSX exported to: {output_path}")

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except UnknownSourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except IngestError as e:
        print(f"Error: Could not load source: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
