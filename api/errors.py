"""
api.errors - JSON error handlers for the API blueprint.

Service exceptions carry their own HTTP status (CatalogError.status_code);
routes that don't catch them still answer with JSON.
"""

import logging

from flask import jsonify

from api import api_bp
from services.errors import CatalogError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


@api_bp.errorhandler(CatalogError)
def api_catalog_error(exc: CatalogError):
    return error_response(str(exc), exc.status_code)


@api_bp.errorhandler(400)
def api_bad_request(e):
    return error_response(getattr(e, "description", None) or "bad request", 400)


@api_bp.errorhandler(404)
def api_not_found(_e):
    return error_response("not found", 404)


@api_bp.errorhandler(405)
def api_method_not_allowed(_e):
    return error_response("method not allowed", 405)


@api_bp.errorhandler(409)
def api_conflict(e):
    return error_response(getattr(e, "description", None) or "conflict", 409)


@api_bp.errorhandler(413)
def api_too_large(_e):
    return error_response("upload too large", 413)


@api_bp.errorhandler(500)
def api_server_error(e):
    logger.error("API error: %s", e)
    return error_response("internal server error", 500)
