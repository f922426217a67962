"""
import_engine.aggregator - Batch-level view of a validation run.

aggregate() validates every row, counts statuses and actions, and finds
the active catalog products the file does not mention.  can_sync() is
the gate consulted before anything is written to the catalog.
Both are pure: same inputs, same (equal) result.
"""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from import_engine.records import CatalogProduct, ImportedRow
from import_engine.report import (
    ValidatedRow, ValidationSummary,
    STATUS_ACCEPTED, STATUS_ERROR, STATUS_WARNING,
    ACTION_INSERT, ACTION_UPDATE, ACTION_SKIP,
)
from import_engine.validator import ProductValidator


def aggregate(
    full_batch: Sequence[ImportedRow],
    existing_catalog: Sequence[CatalogProduct],
    currencies: Optional[Sequence[str]] = None,
) -> ValidationSummary:
    """Validate the whole batch against a catalog snapshot."""
    validator = ProductValidator(existing_catalog, full_batch, currencies)
    validated = tuple(
        ValidatedRow(row=row, verdict=validator.validate(row, idx), row_index=idx)
        for idx, row in enumerate(full_batch)
    )

    return ValidationSummary(
        total_rows=len(full_batch),
        missing_products=tuple(find_missing(full_batch, existing_catalog)),
        validated_rows=validated,
        **_counts(validated),
    )


def find_missing(
    full_batch: Sequence[ImportedRow],
    existing_catalog: Sequence[CatalogProduct],
) -> list[CatalogProduct]:
    """Active catalog products whose business id appears in no row."""
    seen = {r.business_product_id for r in full_batch}
    return [
        p for p in existing_catalog
        if p.status == "active" and p.business_product_id not in seen
    ]


def can_sync(summary: ValidationSummary) -> bool:
    """Sync is allowed only when no row is in error.  Warnings never block."""
    return summary.error_rows == 0


def _counts(validated: Sequence[ValidatedRow]) -> dict[str, int]:
    statuses: Counter = Counter()
    actions: Counter = Counter()
    for vr in validated:
        statuses[vr.verdict.status] += 1
        actions[vr.verdict.action] += 1
    return {
        "accepted_rows": statuses[STATUS_ACCEPTED],
        "error_rows": statuses[STATUS_ERROR],
        "warning_rows": statuses[STATUS_WARNING],
        "insert_count": actions[ACTION_INSERT],
        "update_count": actions[ACTION_UPDATE],
        "skip_count": actions[ACTION_SKIP],
    }
