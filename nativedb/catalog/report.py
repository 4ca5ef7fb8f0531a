"""
Report Generator - Format listings for human consumption.

Produces console output, a single-record detail view, and CSV / XLSX
export of grouped listings.
"""

import csv
import io
import json
from datetime import datetime
from typing import TextIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .models import DEFAULT_HASH, Record


GroupedRecords = list[tuple[str, list[Record]]]

EXPORT_COLUMNS = [
    "group",
    "key",
    "hash",
    "secondary_hash",
    "return_type",
    "parameters",
    "comment",
    "extra",
]


def format_console(grouped: GroupedRecords, filter_text: str = "") -> str:
    """
    Format a grouped listing for console display.

    Args:
        grouped: (group, records) pairs as returned by list_all_records
        filter_text: Filter that produced the listing, echoed in messages

    Returns:
        Formatted string for console output
    """
    if not grouped:
        if filter_text:
            return f'No records found for "{filter_text}".\n'
        return "No records to report.\n"

    lines = []
    total = 0

    for group, records in grouped:
        lines.append(f"\n{group} ({len(records)})")
        lines.append("=" * 70)
        lines.append(f"{'KEY':<40} {'HASH':<20}")
        lines.append("-" * 70)
        for record in records:
            lines.append(f"{record.key[:40]:<40} {record.hash:<20}")
        total += len(records)

    # Summary
    lines.append("\n" + "=" * 70)
    lines.append("SUMMARY")
    lines.append(f"  Groups:  {len(grouped)}")
    lines.append(f"  Records: {total}")
    lines.append("=" * 70)

    return "\n".join(lines)


def format_record_detail(record: Record) -> str:
    """
    Detail view for a single record.

    Natives get their signature; catalog items list their extra fields.
    """
    lines = [record.key, "=" * 70]

    if record.return_type or record.parameters:
        lines.append("Signature:")
        lines.append(f"  {record.signature}")

    lines.append(f"Group:    {', '.join(record.groups)}")
    if record.hash != DEFAULT_HASH or not record.extra:
        lines.append(f"Hash:     {record.hash}")
    if record.secondary_hash:
        lines.append(f"JHash:    {record.secondary_hash}")

    if record.comment:
        lines.append("")
        lines.append("Comment:")
        lines.append(f"  {record.comment}")

    if record.extra:
        lines.append("")
        lines.append("Properties:")
        for name, value in record.extra.items():
            lines.append(f"  {name}: {json.dumps(value, default=str)}")

    return "\n".join(lines)


def _export_rows(grouped: GroupedRecords) -> list[list[str]]:
    rows = []
    for group, records in grouped:
        for r in records:
            rows.append([
                group,
                r.key,
                r.hash,
                r.secondary_hash,
                r.return_type,
                ", ".join(str(p) for p in r.parameters),
                r.comment,
                json.dumps(r.extra, default=str) if r.extra else "",
            ])
    return rows


def export_csv(grouped: GroupedRecords, output: TextIO | None = None) -> str:
    """
    Export a grouped listing to CSV format.

    Args:
        grouped: (group, records) pairs
        output: Optional file handle to write to

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(_export_rows(grouped))

    csv_content = buffer.getvalue()

    if output:
        output.write(csv_content)

    return csv_content


def export_xlsx(grouped: GroupedRecords) -> io.BytesIO:
    """
    Export a grouped listing to an Excel workbook.

    Returns:
        BytesIO buffer containing the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Catalog"

    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in _export_rows(grouped):
        ws.append(row)

    column_widths = [20, 40, 22, 22, 15, 50, 60, 30]
    for col_idx, width in enumerate(column_widths, 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def generate_report_filename(source: str | None = None, extension: str = "csv") -> str:
    """
    Generate a filename for the report.

    Returns:
        Filename like "catalog_gta5_2026-01-08.csv"
    """
    date_str = datetime.now().strftime("%Y-%m-%d")
    if source:
        return f"catalog_{source}_{date_str}.{extension}"
    return f"catalog_{date_str}.{extension}"
