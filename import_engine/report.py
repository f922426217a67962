"""
import_engine.report - Structured results of an import run.

ValidationVerdict / ValidatedRow / ValidationSummary are produced by the
validator and aggregator and never mutated afterwards.  SyncReport is
the running tally of the confirmed sync step.  format_report() renders
validated rows as the downloadable results CSV.
"""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass, field

from import_engine.records import CatalogProduct, ImportedRow

STATUS_ACCEPTED = "accepted"
STATUS_ERROR    = "error"
STATUS_WARNING  = "warning"
STATUSES = (STATUS_ACCEPTED, STATUS_ERROR, STATUS_WARNING)

ACTION_INSERT = "insert"
ACTION_UPDATE = "update"
ACTION_SKIP   = "skip"
ACTIONS = (ACTION_INSERT, ACTION_UPDATE, ACTION_SKIP)

REPORT_HEADERS = (
    "Row", "Status", "Action", "Business Product ID", "Pricelist ID",
    "Product Name", "MRP", "Currency", "Remark",
)


@dataclass(frozen=True)
class ValidationVerdict:
    status: str
    action: str
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    remark: str = ""

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "action": self.action,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "remark": self.remark,
        }


@dataclass(frozen=True)
class ValidatedRow:
    row: ImportedRow
    verdict: ValidationVerdict
    row_index: int

    def to_dict(self) -> dict:
        d = self.row.to_dict()
        if isinstance(d["product_mrp"], float) and math.isnan(d["product_mrp"]):
            d["product_mrp"] = None
        d["row_index"] = self.row_index
        d["validation"] = self.verdict.to_dict()
        return d


@dataclass(frozen=True)
class ValidationSummary:
    total_rows: int
    accepted_rows: int
    error_rows: int
    warning_rows: int
    insert_count: int
    update_count: int
    skip_count: int
    missing_products: tuple[CatalogProduct, ...]
    validated_rows: tuple[ValidatedRow, ...]

    def rows_with_status(self, status: str | None) -> list[ValidatedRow]:
        if not status or status == "all":
            return list(self.validated_rows)
        return [r for r in self.validated_rows if r.verdict.status == status]

    def to_dict(self, include_rows: bool = True) -> dict:
        d = {
            "total_rows": self.total_rows,
            "accepted_rows": self.accepted_rows,
            "error_rows": self.error_rows,
            "warning_rows": self.warning_rows,
            "insert_count": self.insert_count,
            "update_count": self.update_count,
            "skip_count": self.skip_count,
            "missing_products": [p.to_dict() for p in self.missing_products],
        }
        if include_rows:
            d["validated_rows"] = [r.to_dict() for r in self.validated_rows]
        return d


@dataclass
class SyncReport:
    total_rows: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[dict] = field(default_factory=list)   # [{row, reason}]

    def add_error(self, row: int, reason: str):
        self.errors.append({"row": row, "reason": reason})

    @property
    def failed(self) -> int:
        return len(self.errors)

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": self.errors,
        }


# ── Results CSV ────────────────────────────────────────────────────────

def format_report(rows) -> str:
    """
    Render validated rows as CSV: fixed header, one line per row in the
    order given, every field double-quoted, '\\n' between lines.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    for r in rows:
        writer.writerow([
            r.row_index + 1,
            r.verdict.status,
            r.verdict.action,
            r.row.business_product_id,
            r.row.pricelist_id,
            r.row.product_name,
            _fmt_number(r.row.product_mrp),
            r.row.currency,
            r.verdict.remark,
        ])
    return buf.getvalue().rstrip("\n")


def _fmt_number(value) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
    return str(value)
