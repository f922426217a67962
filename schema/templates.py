"""
schema.templates - The bulk-import column template.

Defines the ordered set of columns an import file may carry, which of
them are required, and renders downloadable CSV / Excel templates with
one header line and one example line.
"""

from __future__ import annotations

import csv
import io

from openpyxl import Workbook

# (column, required, note)
IMPORT_COLUMNS: list[tuple[str, bool, str]] = [
    ("business_product_id", True,  "Your SKU code, unique per tenant"),
    ("pricelist_id",        True,  "Pricelist / upload version"),
    ("product_name",        True,  "Display name"),
    ("description",         False, "Free text"),
    ("uom",                 False, "Kg, mg, Lit, ml or units"),
    ("uom_value",           False, "Quantity per unit of measure"),
    ("is_box",              False, "yes / no"),
    ("in_box_units",        False, "Units per box"),
    ("is_combo",            False, "yes / no"),
    ("cgst_rate",           False, "Percent"),
    ("sgst_rate",           False, "Percent"),
    ("igst_rate",           False, "Percent"),
    ("product_mrp",         True,  "Maximum retail price, >= 0"),
    ("currency",            True,  "Rs or EUR"),
    ("remark",              False, "Free text"),
    ("category_name",       False, "Created if missing"),
    ("group_name",          False, "Created if missing"),
    ("product_status",      False, "active, inactive or paused"),
]

SAMPLE_ROW: dict[str, str] = {
    "business_product_id": "IPH15PRO",
    "pricelist_id": "PL-2024-01",
    "product_name": "iPhone 15 Pro",
    "description": "128 GB, titanium",
    "uom": "units",
    "uom_value": "1",
    "is_box": "yes",
    "in_box_units": "1",
    "is_combo": "no",
    "cgst_rate": "9",
    "sgst_rate": "9",
    "igst_rate": "18",
    "product_mrp": "134900",
    "currency": "Rs",
    "remark": "",
    "category_name": "Electronics",
    "group_name": "Smartphones",
    "product_status": "active",
}


def column_names() -> list[str]:
    return [c for c, _req, _note in IMPORT_COLUMNS]


def required_columns() -> list[str]:
    return [c for c, req, _note in IMPORT_COLUMNS if req]


def optional_columns() -> list[str]:
    return [c for c, req, _note in IMPORT_COLUMNS if not req]


def template_csv() -> str:
    """Header line + one example line."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(column_names())
    writer.writerow([SAMPLE_ROW.get(c, "") for c in column_names()])
    return buf.getvalue()


def template_xlsx() -> bytes:
    """Same template as an .xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Products"
    ws.append(column_names())
    ws.append([SAMPLE_ROW.get(c, "") for c in column_names()])

    for i, col in enumerate(column_names(), start=1):
        letter = ws.cell(row=1, column=i).column_letter
        ws.column_dimensions[letter].width = max(14, len(col) + 2)

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
