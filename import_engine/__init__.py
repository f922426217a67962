"""
import_engine - CSV / Excel import pipeline.

Public API:
    parse_rows(file_content, filename)          → list[ImportedRow]
    validate(row, row_index, catalog, batch)    → ValidationVerdict
    aggregate(batch, catalog)                   → ValidationSummary
    can_sync(summary)                           → bool
    format_report(validated_rows)               → str (results CSV)

The database side (validate_upload, sync_batch, …) lives in
import_engine.importer, which depends on the service layer.
"""

from import_engine.csv_parser import ImportParseError, parse_rows      # noqa: F401
from import_engine.records import CatalogProduct, ImportedRow          # noqa: F401
from import_engine.validator import ProductValidator, validate         # noqa: F401
from import_engine.aggregator import aggregate, can_sync, find_missing  # noqa: F401
from import_engine.report import (                                     # noqa: F401
    SyncReport, ValidatedRow, ValidationSummary, ValidationVerdict, format_report,
)
