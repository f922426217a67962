"""
api.routes_catalog - /api/v1/categories and /api/v1/groups endpoints.
"""

from flask import request, jsonify

from api import api_bp
from api.errors import error_response
from db import get_session
from services.catalog_service import CategoryService, GroupService
from services.errors import CatalogError
from services.tenant_context import actor_from_headers


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


# ── Categories ─────────────────────────────────────────────────────────

@api_bp.route("/categories")
def list_categories():
    """GET /api/v1/categories"""
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        cats = CategoryService.list(session, actor.tenant_id)
        return jsonify({"categories": [c.to_dict() for c in cats]})
    finally:
        session.close()


@api_bp.route("/categories/<int:category_id>")
def get_category(category_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        cat = CategoryService.get(session, actor.tenant_id, category_id)
        if not cat:
            return error_response("not found", 404)
        return jsonify(cat.to_dict())
    finally:
        session.close()


@api_bp.route("/categories", methods=["POST"])
def create_category():
    """POST /api/v1/categories  {catg_name, catg_status?}"""
    data = _json_body()
    if data is None:
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        cat = CategoryService.create(session, data, actor)
        session.commit()
        return jsonify(cat.to_dict()), 201
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/categories/<int:category_id>", methods=["PUT"])
def update_category(category_id: int):
    data = _json_body()
    if data is None:
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        cat = CategoryService.get(session, actor.tenant_id, category_id)
        if not cat:
            return error_response("not found", 404)
        CategoryService.update(session, cat, data, actor)
        session.commit()
        return jsonify(cat.to_dict())
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/categories/<int:category_id>", methods=["DELETE"])
def delete_category(category_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        cat = CategoryService.get(session, actor.tenant_id, category_id)
        if not cat:
            return error_response("not found", 404)
        CategoryService.delete(session, cat, actor)
        session.commit()
        return jsonify({"deleted": category_id})
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


# ── Groups ─────────────────────────────────────────────────────────────

@api_bp.route("/groups")
def list_groups():
    """GET /api/v1/groups?category_id="""
    actor = actor_from_headers(request.headers)
    category_id = request.args.get("category_id", type=int)
    session = get_session()
    try:
        groups = GroupService.list(session, actor.tenant_id, category_id)
        return jsonify({"groups": [g.to_dict() for g in groups]})
    finally:
        session.close()


@api_bp.route("/groups/<int:group_id>")
def get_group(group_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        group = GroupService.get(session, actor.tenant_id, group_id)
        if not group:
            return error_response("not found", 404)
        return jsonify(group.to_dict())
    finally:
        session.close()


@api_bp.route("/groups", methods=["POST"])
def create_group():
    """POST /api/v1/groups  {product_group_name, category_id, product_group_image?}"""
    data = _json_body()
    if data is None:
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        group = GroupService.create(session, data, actor)
        session.commit()
        return jsonify(group.to_dict()), 201
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/groups/<int:group_id>", methods=["PUT"])
def update_group(group_id: int):
    data = _json_body()
    if data is None:
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        group = GroupService.get(session, actor.tenant_id, group_id)
        if not group:
            return error_response("not found", 404)
        GroupService.update(session, group, data, actor)
        session.commit()
        return jsonify(group.to_dict())
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/groups/<int:group_id>", methods=["DELETE"])
def delete_group(group_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        group = GroupService.get(session, actor.tenant_id, group_id)
        if not group:
            return error_response("not found", 404)
        GroupService.delete(session, group, actor)
        session.commit()
        return jsonify({"deleted": group_id})
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()
