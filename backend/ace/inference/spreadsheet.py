"""
Spreadsheet reading for schema inference.

Reads the first sheet of an .xlsx (openpyxl), .xls (xlrd) or .csv upload
into a header row plus a sample of data rows, then runs column analysis.
"""

from __future__ import annotations

import csv
import io
import os
import zipfile
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ace.core.errors import SpreadsheetError
from ace.core.logging import get_logger
from ace.inference.columns import ColumnAnalysis, analyze_columns

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = (".xlsx", ".xls", ".csv")
ALLOWED_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
    "text/csv",
    "application/csv",
}
SAMPLE_ROWS = 10

# Japanese municipal CSVs are frequently Shift_JIS
_CSV_ENCODINGS = ("utf-8-sig", "cp932")


@dataclass
class SheetAnalysis:
    """Header, sample rows and per-column analysis of one sheet."""

    filename: str
    sheet_name: str
    headers: list[str]
    sample_data: list[list[Any]]
    total_rows: int
    columns: list[ColumnAnalysis]


def is_allowed_upload(filename: str, content_type: str | None) -> bool:
    return (
        (content_type or "") in ALLOWED_MIME_TYPES
        or filename.lower().endswith(ALLOWED_EXTENSIONS)
    )


def _cell(value: Any) -> Any:
    """Normalise a raw cell: blanks to None, dates to ISO strings."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == time(0) else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _read_xlsx(content: bytes) -> tuple[str, list[list[Any]]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise SpreadsheetError(f"Could not read Excel workbook: {exc}") from exc
    try:
        sheet = workbook.worksheets[0]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
        return sheet.title, rows
    finally:
        workbook.close()


def _read_xls(content: bytes) -> tuple[str, list[list[Any]]]:
    try:
        workbook = xlrd.open_workbook(file_contents=content)
    except xlrd.XLRDError as exc:
        raise SpreadsheetError(f"Could not read Excel workbook: {exc}") from exc
    sheet = workbook.sheet_by_index(0)
    rows = []
    for r in range(sheet.nrows):
        row = []
        for c in range(sheet.ncols):
            cell = sheet.cell(r, c)
            if cell.ctype == xlrd.XL_CELL_DATE:
                row.append(xlrd.xldate_as_datetime(cell.value, workbook.datemode))
            else:
                row.append(cell.value)
        rows.append(row)
    return sheet.name, rows


def _read_csv(content: bytes) -> tuple[str, list[list[Any]]]:
    for encoding in _CSV_ENCODINGS:
        try:
            text = content.decode(encoding)
            break
        except UnicodeDecodeError:
            continue
    else:
        raise SpreadsheetError("CSV file is neither UTF-8 nor Shift_JIS encoded")
    return "Sheet1", [list(row) for row in csv.reader(io.StringIO(text))]


_READERS = {
    ".xlsx": _read_xlsx,
    ".xls": _read_xls,
    ".csv": _read_csv,
}

# Fallback for uploads whose filename carries no spreadsheet extension
_MIME_READERS = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": _read_xlsx,
    "application/vnd.ms-excel": _read_xls,
    "text/csv": _read_csv,
    "application/csv": _read_csv,
}


def read_rows(
    content: bytes, filename: str, content_type: str | None = None
) -> tuple[str, list[list[Any]]]:
    """Return (sheet name, non-blank rows) of the first sheet."""
    extension = os.path.splitext(filename)[1].lower()
    reader = _READERS.get(extension) or _MIME_READERS.get(content_type or "")
    if reader is None:
        raise SpreadsheetError("Only Excel (.xlsx, .xls) and CSV files are allowed")

    sheet_name, raw_rows = reader(content)
    rows = [[_cell(v) for v in row] for row in raw_rows]
    return sheet_name, [row for row in rows if any(v is not None for v in row)]


def parse_spreadsheet(
    content: bytes, filename: str, content_type: str | None = None
) -> SheetAnalysis:
    """
    Read an upload and analyse its columns.

    Raises:
        SpreadsheetError: unreadable file, or fewer than one data row.
    """
    sheet_name, rows = read_rows(content, filename, content_type)
    if len(rows) < 2:
        raise SpreadsheetError("Excel file must have headers and at least one data row")

    headers = [str(h).strip() if h is not None else "" for h in rows[0]]
    keep = [i for i, header in enumerate(headers) if header]
    sample = rows[1:1 + SAMPLE_ROWS]

    filtered_headers = [headers[i] for i in keep]
    filtered_rows = [[row[i] if i < len(row) else None for i in keep] for row in sample]

    analysis = SheetAnalysis(
        filename=filename,
        sheet_name=sheet_name,
        headers=filtered_headers,
        sample_data=filtered_rows,
        total_rows=len(rows) - 1,
        columns=analyze_columns(filtered_headers, filtered_rows),
    )
    logger.info(
        "Spreadsheet analysed",
        filename=filename,
        sheet=sheet_name,
        columns=len(filtered_headers),
        total_rows=analysis.total_rows,
    )
    return analysis
