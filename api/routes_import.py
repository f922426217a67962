"""
api.routes_import - /api/v1/import endpoints.

Two-step workflow: POST /import/validate stores the parsed rows as a
batch and returns its summary; POST /import/<batch_id>/sync writes the
accepted rows once the batch is free of errors.  Uploads come as a
multipart file (field 'file') or as the raw request body with
?filename= telling CSV from Excel.
"""

from flask import Response, request, jsonify
from werkzeug.utils import secure_filename

from api import api_bp
from api.errors import error_response
from db import get_session
from import_engine.aggregator import can_sync
from import_engine.csv_parser import ImportParseError
from import_engine.importer import (
    SyncBlockedError, apply_missing_disposition, get_batch, summarize_batch,
    sync_batch, validate_upload,
)
from import_engine.report import STATUSES, format_report
from schema.templates import template_csv, template_xlsx
from services.errors import CatalogError
from services.tenant_context import actor_from_headers

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _summary_payload(batch, summary) -> dict:
    return {
        "batch": batch.to_dict(),
        "summary": summary.to_dict(),
        "can_sync": can_sync(summary) and batch.state != "synced",
    }


# ── Templates ──────────────────────────────────────────────────────────

@api_bp.route("/import/template.csv")
def import_template_csv():
    return Response(
        template_csv(), mimetype="text/csv",
        headers={"Content-Disposition":
                 "attachment; filename=product_import_template.csv"},
    )


@api_bp.route("/import/template.xlsx")
def import_template_xlsx():
    return Response(
        template_xlsx(), mimetype=XLSX_MIMETYPE,
        headers={"Content-Disposition":
                 "attachment; filename=product_import_template.xlsx"},
    )


# ── Validate ───────────────────────────────────────────────────────────

@api_bp.route("/import/validate", methods=["POST"])
def api_import_validate():
    """
    POST /api/v1/import/validate

    Multipart: field name 'file'
    Or: raw file as request body, ?filename=products.csv|products.xlsx
    """
    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("file")
        if not f:
            return error_response("no file in upload", 400)
        filename = f.filename or ""
        content = f.read()
    else:
        filename = request.args.get("filename", "upload.csv")
        content = request.get_data()

    if not content:
        return error_response("empty body", 400)

    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch, summary = validate_upload(
            session, content, secure_filename(filename) or "upload.csv", actor)
        session.commit()
        return jsonify(_summary_payload(batch, summary)), 201
    except ImportParseError as exc:
        session.rollback()
        return error_response(str(exc), 400)
    finally:
        session.close()


@api_bp.route("/import/<batch_id>")
def api_import_summary(batch_id: str):
    """GET /api/v1/import/{batch_id}  - summary against the current catalog"""
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            return error_response("not found", 404)
        return jsonify(_summary_payload(batch, summarize_batch(session, batch)))
    finally:
        session.close()


@api_bp.route("/import/<batch_id>/report.csv")
def api_import_report(batch_id: str):
    """GET /api/v1/import/{batch_id}/report.csv?status=all|accepted|error|warning"""
    status = request.args.get("status", "all").strip()
    if status != "all" and status not in STATUSES:
        return error_response(f"status must be one of: all, {', '.join(STATUSES)}", 400)

    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            return error_response("not found", 404)
        summary = summarize_batch(session, batch)
    finally:
        session.close()

    return Response(
        format_report(summary.rows_with_status(status)), mimetype="text/csv",
        headers={"Content-Disposition":
                 f"attachment; filename=import_results_{batch_id}.csv"},
    )


# ── Missing products / sync ────────────────────────────────────────────

@api_bp.route("/import/<batch_id>/missing", methods=["POST"])
def api_import_missing(batch_id: str):
    """POST /api/v1/import/{batch_id}/missing  {"action": show|hide|delete|deactivate}"""
    data = request.get_json(silent=True) or {}
    action = str(data.get("action") or "").strip()
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            return error_response("not found", 404)
        affected = apply_missing_disposition(session, batch, action, actor)
        session.commit()
        return jsonify({"action": action, "affected": affected,
                        "count": len(affected)})
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/import/<batch_id>/sync", methods=["POST"])
def api_import_sync(batch_id: str):
    """
    POST /api/v1/import/{batch_id}/sync  {"confirm": true}

    409 when the batch still has error rows or was already synced.
    """
    data = request.get_json(silent=True) or {}
    if data.get("confirm") is not True:
        return error_response("sync must be confirmed with {\"confirm\": true}", 400)

    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        batch = get_batch(session, actor.tenant_id, batch_id)
        if not batch:
            return error_response("not found", 404)
        report = sync_batch(session, batch, actor)
        session.commit()
        return jsonify({"batch": batch.to_dict(), "report": report.to_dict()})
    except SyncBlockedError as exc:
        session.rollback()
        return error_response(str(exc), 409)
    finally:
        session.close()
