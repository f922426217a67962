"""
api.routes_outbox - /api/v1/outbox endpoints.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services import outbox_service
from services.tenant_context import actor_from_headers
import config


@api_bp.route("/outbox")
def list_outbox():
    """GET /api/v1/outbox?pending=0|1&limit=100"""
    actor = actor_from_headers(request.headers)
    limit = min(request.args.get("limit", config.API_DEFAULT_LIMIT, type=int),
                config.API_MAX_LIMIT)
    session = get_session()
    try:
        if request.args.get("pending", "0") == "1":
            entries = outbox_service.pending(session, actor.tenant_id)
        else:
            entries = outbox_service.history(session, actor.tenant_id, limit)
        return jsonify({
            "pending": len(outbox_service.pending(session, actor.tenant_id)),
            "entries": [e.to_dict() for e in entries],
        })
    finally:
        session.close()


@api_bp.route("/outbox/replay", methods=["POST"])
def replay_outbox():
    """POST /api/v1/outbox/replay  - deliver pending entries in order"""
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        delivered = outbox_service.replay(session, actor.tenant_id)
        session.commit()
        return jsonify({"replayed": delivered})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
