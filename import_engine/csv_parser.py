"""
import_engine.csv_parser - Turn an uploaded file into ImportedRow records.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG) and header whitespace stripping
  • CSV via csv.DictReader, .xlsx via openpyxl (first sheet)
  • Header → attribute resolution (see field_map)
  • Type coercion into ImportedRow

Anything that prevents producing rows at all (empty file, missing
required columns, unreadable workbook, a value that is not of the
column's type) raises ImportParseError and no rows are returned.
The one exception is product_mrp: a blank or non-numeric price becomes
NaN so the validator reports it against the row instead.
"""

from __future__ import annotations

import csv
import io
import math
import zipfile
from typing import Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from import_engine.field_map import (
    resolve_header, REQUIRED_FIELDS, OPTIONAL_FLOAT_FIELDS, OPTIONAL_INT_FIELDS,
)
from import_engine.records import ImportedRow
from schema.vocab import normalize_uom, normalize_status, normalize_yes_no

XLSX_SUFFIXES = (".xlsx", ".xlsm")


class ImportParseError(Exception):
    """Raised when an upload cannot be turned into rows."""


def parse_rows(raw: str | bytes, filename: Optional[str] = None) -> list[ImportedRow]:
    """Parse CSV or Excel content into ImportedRow records, in file order."""
    if _looks_like_xlsx(raw, filename):
        headers, records = _read_xlsx(raw)
    else:
        reader = prepare_reader(raw)
        if reader is None:
            raise ImportParseError("File is empty")
        headers, records = reader.fieldnames, list(reader)

    mapping: dict[str, str] = {}
    for header in headers:
        attr = resolve_header(header)
        if attr and attr not in mapping.values():
            mapping[header] = attr

    missing = [c for c in REQUIRED_FIELDS if c not in mapping.values()]
    if missing:
        raise ImportParseError(f"Missing required columns: {', '.join(missing)}")

    rows: list[ImportedRow] = []
    for line_no, record in enumerate(records, start=2):   # line 1 = header
        values = {attr: _text(record.get(header)) for header, attr in mapping.items()}
        if not any(values.values()):
            continue
        rows.append(_coerce(values, line_no))

    if not rows:
        raise ImportParseError(
            "File must contain a header row and at least one data row")
    return rows


def prepare_reader(raw: str | bytes) -> Optional[csv.DictReader]:
    """
    Accept raw file content (bytes or str), clean it,
    and return a DictReader.  Returns None if content is empty.
    """
    text = _decode(raw)
    if not text or not text.strip():
        return None

    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        return None

    # Strip whitespace from every header
    reader.fieldnames = [h.strip() for h in reader.fieldnames]
    return reader


# ── Private helpers ────────────────────────────────────────────────────

def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def _looks_like_xlsx(raw: str | bytes, filename: Optional[str]) -> bool:
    if filename and filename.lower().endswith(XLSX_SUFFIXES):
        return True
    return isinstance(raw, bytes) and raw[:4] == b"PK\x03\x04"


def _read_xlsx(raw: str | bytes) -> tuple[list[str], list[dict]]:
    if isinstance(raw, str):
        raw = raw.encode("latin-1", errors="replace")
    if not raw:
        raise ImportParseError("File is empty")
    try:
        wb = load_workbook(filename=io.BytesIO(raw), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ImportParseError(f"Invalid Excel file: {exc}") from exc

    try:
        ws = wb.active
        it = ws.iter_rows(values_only=True)
        header_row = next(it, None)
        if header_row is None:
            raise ImportParseError("File is empty")
        headers = [_text(h) for h in header_row]
        records = []
        for row in it:
            records.append({
                h: (row[j] if j < len(row) else None)
                for j, h in enumerate(headers) if h
            })
    finally:
        wb.close()
    return [h for h in headers if h], records


def _text(value) -> str:
    """Cell/field value → stripped string.  Integral floats lose the '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _coerce(values: dict[str, str], line_no: int) -> ImportedRow:
    data: dict = {k: v for k, v in values.items()}

    data["product_mrp"] = _price(values.get("product_mrp", ""))

    for name in OPTIONAL_FLOAT_FIELDS:
        if name in values:
            data[name] = _optional_number(values[name], name, line_no, float)
    for name in OPTIONAL_INT_FIELDS:
        if name in values:
            data[name] = _optional_number(values[name], name, line_no, int)

    if values.get("uom"):
        uom = normalize_uom(values["uom"])
        if uom is None:
            raise ImportParseError(f"Row {line_no}: Invalid UOM: {values['uom']}")
        data["uom"] = uom
    else:
        data.pop("uom", None)

    for flag in ("is_box", "is_combo"):
        if values.get(flag):
            v = normalize_yes_no(values[flag], default="")
            if not v:
                raise ImportParseError(
                    f"Row {line_no}: Invalid {flag} value: {values[flag]}")
            data[flag] = v
        else:
            data.pop(flag, None)

    if values.get("product_status"):
        status = normalize_status(values["product_status"])
        if status is None:
            raise ImportParseError(
                f"Row {line_no}: Invalid SKU status: {values['product_status']}")
        data["product_status"] = status
    else:
        data.pop("product_status", None)

    return ImportedRow(**data)


def _price(text: str) -> float:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return math.nan
    return value if math.isfinite(value) else math.nan


def _optional_number(text: str, name: str, line_no: int, kind):
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise ImportParseError(f"Row {line_no}: {name} is not a number: {text}")
    if not math.isfinite(value):
        raise ImportParseError(f"Row {line_no}: {name} must be a finite number: {text}")
    return int(value) if kind is int else value
