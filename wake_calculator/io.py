"""
Lightweight readers for wake traverse tables (CSV and Excel exports).

Readers return a list of row dicts keyed by the header cells. Values are left
as read (text for CSV, native cell values for XLSX); numeric coercion happens
in analysis.normalize_table.
"""
from __future__ import annotations

from typing import Any, Dict, List
import csv
import io as _io
import logging
import os

from openpyxl import load_workbook

logger = logging.getLogger(__name__)

_DELIMITERS = ",;\t"


def _is_blank(row: Dict[str, Any]) -> bool:
    return all(v is None or str(v).strip() == "" for v in row.values())


def _clean_header(cells: List[Any]) -> List[str]:
    return [("" if c is None else str(c)).strip() for c in cells]


def parse_csv_text(text: str) -> List[Dict[str, Any]]:
    """Parse CSV text with a header row.

    The delimiter is the most frequent of ',', ';' and tab in the header line,
    so semicolon files with decimal commas in the data rows parse correctly.
    """
    text = text.lstrip("\ufeff").lstrip("\r\n")
    if not text.strip():
        return []
    first_line = text.splitlines()[0]
    # ties (including none found) fall back to ','
    delimiter = max(_DELIMITERS, key=first_line.count)
    reader = csv.reader(_io.StringIO(text), delimiter=delimiter)
    try:
        header = _clean_header(next(reader))
    except StopIteration:
        return []
    rows: List[Dict[str, Any]] = []
    for cells in reader:
        row = {h: (cells[i].strip() if i < len(cells) else "") for i, h in enumerate(header) if h}
        if _is_blank(row):
            continue
        rows.append(row)
    logger.debug("Parsed %d CSV rows (delimiter %r, %d columns)", len(rows), delimiter, len(header))
    return rows


def read_csv(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return parse_csv_text(f.read())


def read_xlsx(path: str) -> List[Dict[str, Any]]:
    """Read the first worksheet; first row is the header, empty cells become ''."""
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        it = ws.iter_rows(values_only=True)
        try:
            header = _clean_header(list(next(it)))
        except StopIteration:
            return []
        rows: List[Dict[str, Any]] = []
        for cells in it:
            row = {
                h: ("" if i >= len(cells) or cells[i] is None else cells[i])
                for i, h in enumerate(header) if h
            }
            if _is_blank(row):
                continue
            rows.append(row)
    finally:
        wb.close()
    logger.debug("Read %d rows from sheet '%s'", len(rows), ws.title)
    return rows


def read_table(path: str) -> List[Dict[str, Any]]:
    """Read a traverse table from .csv or .xlsx based on the file extension."""
    ext = os.path.splitext(path)[1].lower()
    if ext == ".csv":
        return read_csv(path)
    if ext == ".xlsx":
        return read_xlsx(path)
    raise ValueError(f"Unsupported table format: '{ext}' (use .csv or .xlsx)")
