"""
ui.routes_import - Import page: upload, summary, missing products, sync.
"""

from flask import request, render_template, redirect, url_for, flash, abort
from werkzeug.utils import secure_filename

from ui import ui_bp
from db import get_session
from import_engine.aggregator import can_sync
from import_engine.csv_parser import ImportParseError
from import_engine.importer import (
    SyncBlockedError, apply_missing_disposition, get_batch, summarize_batch,
    sync_batch, validate_upload,
)
from import_engine.report import STATUSES
from schema.templates import IMPORT_COLUMNS
from schema.vocab import MISSING_ACTIONS
from services.errors import CatalogError
from services.tenant_context import actor_from_headers


@ui_bp.route("/import", methods=["GET", "POST"])
def import_page():
    if request.method == "GET":
        return render_template("import.html", batch=None, columns=IMPORT_COLUMNS)

    f = request.files.get("file")
    if not f or not f.filename:
        flash("No file selected", "danger")
        return render_template("import.html", batch=None, columns=IMPORT_COLUMNS)

    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch, summary = validate_upload(
            session, f.read(), secure_filename(f.filename) or "upload.csv", actor)
        session.commit()
        batch_id = batch.id
    except ImportParseError as exc:
        session.rollback()
        flash(f"Could not read file: {exc}", "danger")
        return render_template("import.html", batch=None, columns=IMPORT_COLUMNS)
    finally:
        session.close()

    if summary.error_rows:
        flash(f"{summary.error_rows} row(s) have errors - download the results, "
              "fix the file and upload it again.", "warning")
    return redirect(url_for("ui.import_batch", batch_id=batch_id))


@ui_bp.route("/import/<batch_id>")
def import_batch(batch_id: str):
    actor = actor_from_headers(request.headers)
    status = request.args.get("status", "all").strip()
    if status != "all" and status not in STATUSES:
        status = "all"

    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            abort(404)
        summary = summarize_batch(session, batch)
        return render_template(
            "import.html", batch=batch, summary=summary,
            rows=summary.rows_with_status(status), status=status,
            statuses=STATUSES, missing_actions=MISSING_ACTIONS,
            can_sync=can_sync(summary) and batch.state != "synced",
            columns=IMPORT_COLUMNS,
        )
    finally:
        session.close()


@ui_bp.route("/import/<batch_id>/missing", methods=["POST"])
def import_missing(batch_id: str):
    actor = actor_from_headers(request.headers)
    action = request.form.get("action", "").strip()
    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            abort(404)
        affected = apply_missing_disposition(session, batch, action, actor)
        session.commit()
        flash(f"{action.capitalize()}: {len(affected)} missing product(s).", "success")
    except CatalogError as exc:
        session.rollback()
        flash(f"Error: {exc}", "danger")
    finally:
        session.close()
    return redirect(url_for("ui.import_batch", batch_id=batch_id))


@ui_bp.route("/import/<batch_id>/sync", methods=["POST"])
def import_sync(batch_id: str):
    actor = actor_from_headers(request.headers)
    if request.form.get("confirm") != "1":
        flash("Tick the confirmation box to sync.", "warning")
        return redirect(url_for("ui.import_batch", batch_id=batch_id))

    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            abort(404)
        report = sync_batch(session, batch, actor)
        session.commit()
    except SyncBlockedError as exc:
        session.rollback()
        flash(f"Sync refused: {exc}", "danger")
        return redirect(url_for("ui.import_batch", batch_id=batch_id))
    finally:
        session.close()

    flash(f"Synced: {report.inserted} inserted, {report.updated} updated, "
          f"{report.failed} failed.", "success" if not report.failed else "warning")
    for err in report.errors[:10]:
        flash(f"Row {err['row']}: {err['reason']}", "danger")
    return redirect(url_for("ui.index"))
