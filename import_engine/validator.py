"""
import_engine.validator - Validate one ImportedRow against the rule set.

Given the row, its position, the existing catalog and the whole batch,
produce a ValidationVerdict.  Row content problems are reported in the
verdict; nothing here raises for bad data.

Rules (every failing rule contributes; order only affects the remark):
  1. action is 'update' when the business id exists in the catalog,
     otherwise 'insert'
  2. MRP must be >= 0 (NaN fails)
  3. currency must be in the allow-list
  4. no other row may share (pricelist id, business id)
  5. business id, pricelist id and product name are required
  6. any error → status 'error', action forced to 'skip'
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

import config
from import_engine.records import CatalogProduct, ImportedRow
from import_engine.report import (
    ValidationVerdict,
    STATUS_ACCEPTED, STATUS_ERROR, STATUS_WARNING,
    ACTION_INSERT, ACTION_UPDATE, ACTION_SKIP,
)

REMARK_UPDATE = "Product will be updated"
REMARK_INSERT = "New product will be added"


class ProductValidator:
    """
    Holds the per-batch lookups (catalog ids, pricelist/id pair counts)
    so validating N rows does not rescan the catalog and batch N times.
    """

    def __init__(
        self,
        existing_catalog: Iterable[CatalogProduct],
        full_batch: Sequence[ImportedRow],
        currencies: Optional[Sequence[str]] = None,
    ):
        self._existing_ids = {p.business_product_id for p in existing_catalog}
        self._batch = full_batch
        self._pair_counts = Counter(_pair(r) for r in full_batch)
        self._currencies = tuple(
            config.ALLOWED_CURRENCIES if currencies is None else currencies
        )

    def validate(self, row: ImportedRow, row_index: int) -> ValidationVerdict:
        errors: list[str] = []
        warnings: list[str] = []

        action = (ACTION_UPDATE if row.business_product_id in self._existing_ids
                  else ACTION_INSERT)

        if not _non_negative(row.product_mrp):
            errors.append("MRP must be greater than or equal to 0")

        if row.currency not in self._currencies:
            errors.append(f"Currency must be one of: {', '.join(self._currencies)}")

        key = _pair(row)
        own = 1 if (0 <= row_index < len(self._batch)
                    and _pair(self._batch[row_index]) == key) else 0
        if self._pair_counts[key] - own > 0:
            errors.append(
                f"Duplicate entry: ({row.pricelist_id}, {row.business_product_id}) "
                f"appears multiple times in import file"
            )

        if not (row.business_product_id or "").strip():
            errors.append("Business Product ID is required")
        if not (row.pricelist_id or "").strip():
            errors.append("Pricelist ID is required")
        if not (row.product_name or "").strip():
            errors.append("Product Name is required")

        if errors:
            status, action = STATUS_ERROR, ACTION_SKIP
            remark = "; ".join(errors)
        elif warnings:
            status = STATUS_WARNING
            remark = "; ".join(warnings)
        else:
            status = STATUS_ACCEPTED
            remark = REMARK_UPDATE if action == ACTION_UPDATE else REMARK_INSERT

        return ValidationVerdict(
            status=status,
            action=action,
            errors=tuple(errors),
            warnings=tuple(warnings),
            remark=remark,
        )


def validate(
    row: ImportedRow,
    row_index: int,
    existing_catalog: Iterable[CatalogProduct],
    full_batch: Sequence[ImportedRow],
    currencies: Optional[Sequence[str]] = None,
) -> ValidationVerdict:
    """Validate a single row.  See ProductValidator for batch use."""
    return ProductValidator(existing_catalog, full_batch, currencies).validate(
        row, row_index)


def _pair(row: ImportedRow) -> tuple[str, str]:
    return (row.pricelist_id, row.business_product_id)


def _non_negative(value) -> bool:
    try:
        return float(value) >= 0      # NaN compares False
    except (TypeError, ValueError):
        return False
