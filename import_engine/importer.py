"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → aggregator → ImportBatch persistence, and the
confirmed sync of a validated batch into the product store.

Flow:
    validate_upload()   parse + validate, store the rows, return summary
    summarize_batch()   re-run validation for display
    apply_missing_disposition()  show / hide / deactivate / delete the
                        catalog products the file does not mention
    sync_batch()        gate, then push accepted rows to the catalog
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from db.models import ImportBatch
from import_engine.aggregator import aggregate, can_sync, find_missing
from import_engine.csv_parser import parse_rows
from import_engine.records import ImportedRow
from import_engine.report import (
    SyncReport, ValidationSummary,
    STATUS_ACCEPTED, ACTION_INSERT, ACTION_UPDATE,
)
from schema.vocab import MISSING_ACTIONS
from services.catalog_service import CategoryService, GroupService
from services.errors import CatalogError, NotFoundError
from services.products_service import ProductsService
from services.tenant_context import Actor

logger = logging.getLogger(__name__)

STATE_VALIDATED = "validated"
STATE_SYNCED    = "synced"


class SyncBlockedError(Exception):
    """Raised when the sync gate refuses a batch."""


# ── Validate ───────────────────────────────────────────────────────────

def validate_upload(
    session: Session,
    file_content: str | bytes,
    filename: str,
    actor: Actor,
) -> tuple[ImportBatch, ValidationSummary]:
    """
    Parse and validate an upload against the tenant's current catalog.

    Raises ImportParseError (nothing is stored) when the file cannot be
    parsed.  Otherwise the rows are stored as an ImportBatch; the caller
    commits.
    """
    rows = parse_rows(file_content, filename)
    summary = aggregate(rows, ProductsService.snapshot(session, actor.tenant_id))

    batch = ImportBatch(
        id=uuid.uuid4().hex,
        tenant_id=actor.tenant_id,
        filename=filename or "",
        rows_json=json.dumps([r.to_dict() for r in rows], ensure_ascii=False),
        state=STATE_VALIDATED,
        created_by=actor.user_id,
    )
    session.add(batch)
    session.flush()

    logger.info(
        "Import %s (%s): %d rows, %d accepted, %d errors, %d missing",
        batch.id, batch.filename, summary.total_rows, summary.accepted_rows,
        summary.error_rows, len(summary.missing_products),
    )
    return batch, summary


def get_batch(session: Session, tenant_id: str, batch_id: str) -> ImportBatch | None:
    batch = session.get(ImportBatch, batch_id)
    if batch is None or batch.tenant_id != tenant_id:
        return None
    return batch


def batch_rows(batch: ImportBatch) -> list[ImportedRow]:
    return [ImportedRow.from_dict(d) for d in batch.rows]


def summarize_batch(session: Session, batch: ImportBatch) -> ValidationSummary:
    """Validate the stored rows against the catalog as it is now."""
    return aggregate(batch_rows(batch),
                     ProductsService.snapshot(session, batch.tenant_id))


# ── Missing products ───────────────────────────────────────────────────

def apply_missing_disposition(
    session: Session,
    batch: ImportBatch,
    action: str,
    actor: Actor,
) -> list[str]:
    """
    Apply the chosen action to every active product the batch does not
    mention.  Returns the affected business ids.

      show        no change
      hide        is_hidden = True (kept, excluded from listings)
      deactivate  sku_status = 'inactive'
      delete      removed from the catalog
    """
    if action not in MISSING_ACTIONS:
        raise CatalogError(
            f"Action must be one of: {', '.join(MISSING_ACTIONS)}")

    snapshot = ProductsService.snapshot(session, batch.tenant_id)
    missing = find_missing(batch_rows(batch), snapshot)
    affected = [p.business_product_id for p in missing]
    if action == "show":
        return affected

    for item in missing:
        product = ProductsService.get(session, batch.tenant_id, item.id)
        if product is None:
            continue
        if action == "hide":
            ProductsService.update(session, product, {"is_hidden": True}, actor)
        elif action == "deactivate":
            ProductsService.update(session, product, {"sku_status": "inactive"}, actor)
        elif action == "delete":
            ProductsService.delete(session, product, actor)

    logger.info("Import %s: %s applied to %d missing products",
                batch.id, action, len(affected))
    return affected


# ── Sync ───────────────────────────────────────────────────────────────

def sync_batch(session: Session, batch: ImportBatch, actor: Actor) -> SyncReport:
    """
    Push the batch's accepted rows into the catalog.

    The catalog is snapshotted once at the start; insert/update is decided
    from that snapshot and not re-checked while rows are written.  Each row
    runs in its own SAVEPOINT: a failing row is recorded in the report and
    the remaining rows still go through (best-effort, not all-or-nothing).
    The caller commits.
    """
    if batch.state == STATE_SYNCED:
        raise SyncBlockedError("Batch has already been synced")

    summary = summarize_batch(session, batch)
    if not can_sync(summary):
        raise SyncBlockedError(
            f"{summary.error_rows} row(s) have errors - fix the file and re-import")

    report = SyncReport(total_rows=summary.total_rows)
    for vr in summary.validated_rows:
        line = vr.row_index + 1
        if vr.verdict.status != STATUS_ACCEPTED:
            report.skipped += 1
            continue
        replay_key = f"import:{batch.id}:{vr.row_index}"
        try:
            with session.begin_nested():
                if vr.verdict.action == ACTION_UPDATE:
                    _update_row(session, vr.row, actor, replay_key)
                    report.updated += 1
                elif vr.verdict.action == ACTION_INSERT:
                    _insert_row(session, vr.row, actor, replay_key)
                    report.inserted += 1
                else:
                    report.skipped += 1
        except CatalogError as exc:
            report.add_error(line, str(exc))
        except Exception as exc:
            logger.exception("Import %s row %d failed", batch.id, line)
            report.add_error(line, f"Unexpected: {exc}")

    batch.state = STATE_SYNCED
    batch.synced_on = datetime.now(timezone.utc)
    session.flush()

    logger.info("Import %s synced: %d inserted, %d updated, %d failed",
                batch.id, report.inserted, report.updated, report.failed)
    return report


def _row_values(row: ImportedRow) -> dict:
    values = {
        "business_product_id": row.business_product_id,
        "pricelist_id": row.pricelist_id,
        "product_name": row.product_name,
        "description": row.description,
        "remark": row.remark,
        "uom": row.uom,
        "is_box": row.is_box,
        "is_combo": row.is_combo,
        "product_mrp": row.product_mrp,
        "currency": row.currency,
        "sku_status": row.product_status,
    }
    # Blank optional numbers leave the stored value alone
    for name in ("uom_value", "in_box_units", "cgst_rate", "sgst_rate", "igst_rate"):
        value = getattr(row, name)
        if value is not None:
            values[name] = value
    return values


def _placement(session: Session, row: ImportedRow, actor: Actor) -> dict:
    if not row.category_name:
        return {}
    category = CategoryService.get_or_create(session, row.category_name, actor)
    if not row.group_name:
        return {}
    group = GroupService.get_or_create(session, category, row.group_name, actor)
    return {"product_group_id": group.id}


def _insert_row(session: Session, row: ImportedRow, actor: Actor, replay_key: str):
    values = _row_values(row)
    values.update(_placement(session, row, actor))
    ProductsService.create(session, values, actor, replay_key=replay_key)


def _update_row(session: Session, row: ImportedRow, actor: Actor, replay_key: str):
    product = ProductsService.get_by_business_id(
        session, actor.tenant_id, row.business_product_id)
    if product is None:
        raise NotFoundError(f"Product {row.business_product_id} no longer exists")
    values = _row_values(row)
    values.update(_placement(session, row, actor))
    ProductsService.update(session, product, values, actor, replay_key=replay_key)
