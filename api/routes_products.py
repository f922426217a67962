"""
api.routes_products - /api/v1/products CRUD, inline cell edit and export.
"""

from datetime import date

from flask import Response, request, jsonify

from api import api_bp
from api.errors import error_response
from db import get_session
from services.errors import CatalogError
from services.export_service import export_catalog_csv
from services.products_service import ProductsService
from services.search_service import SearchService
from services.tenant_context import actor_from_headers
import config


def _date_arg(name: str):
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    return date.fromisoformat(raw)


def _search_args() -> dict:
    """Filter/sort query-string arguments shared by list and export."""
    sort_by = request.args.get("sort", SearchService.DEFAULT_SORT).strip()
    sort_order = request.args.get("order", "desc").strip()
    if sort_by not in SearchService.SORTABLE_COLUMNS:
        sort_by = SearchService.DEFAULT_SORT
    if sort_order not in ("asc", "desc"):
        sort_order = "desc"

    return dict(
        q=request.args.get("q", "").strip(),
        status=request.args.get("status", "").strip(),
        uom=request.args.get("uom", "").strip(),
        category_id=request.args.get("category_id", type=int),
        group_id=request.args.get("group_id", type=int),
        is_box=request.args.get("is_box", "").strip(),
        is_combo=request.args.get("is_combo", "").strip(),
        min_uom_value=request.args.get("min_uom_value", type=float),
        max_uom_value=request.args.get("max_uom_value", type=float),
        created_from=_date_arg("created_from"),
        created_to=_date_arg("created_to"),
        include_hidden=request.args.get("include_hidden", "0") == "1",
        sort_by=sort_by,
        sort_order=sort_order,
    )


@api_bp.route("/products")
def list_products():
    """
    GET /api/v1/products?q=&status=&uom=&category_id=&group_id=&is_box=
        &is_combo=&min_uom_value=&max_uom_value=&created_from=&created_to=
        &include_hidden=0|1&sort=&order=asc|desc&limit=100&offset=0
    """
    actor = actor_from_headers(request.headers)
    try:
        filters = _search_args()
    except ValueError:
        return error_response("dates must be YYYY-MM-DD", 400)
    limit = min(max(request.args.get("limit", config.API_DEFAULT_LIMIT, type=int), 1),
                config.API_MAX_LIMIT)
    offset = max(request.args.get("offset", 0, type=int), 0)

    session = get_session()
    try:
        products, total = SearchService.search(
            session, actor.tenant_id, limit=limit, offset=offset, **filters)
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "products": [p.to_dict() for p in products],
        })
    finally:
        session.close()


@api_bp.route("/products/export.csv")
def export_products():
    """GET /api/v1/products/export.csv  (same filters as the listing, no paging)"""
    actor = actor_from_headers(request.headers)
    try:
        filters = _search_args()
    except ValueError:
        return error_response("dates must be YYYY-MM-DD", 400)

    session = get_session()
    try:
        products, total = SearchService.search(
            session, actor.tenant_id, limit=None, offset=0, **filters)
        body = export_catalog_csv(products)
    finally:
        session.close()
    return Response(
        body, mimetype="text/csv",
        headers={"Content-Disposition":
                 f"attachment; filename=products_{date.today().isoformat()}.csv"},
    )


@api_bp.route("/products/<int:product_id>")
def get_product(product_id: int):
    """GET /api/v1/products/{id}"""
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            return error_response("not found", 404)
        return jsonify(product.to_dict())
    finally:
        session.close()


@api_bp.route("/products", methods=["POST"])
def create_product():
    """
    POST /api/v1/products

    JSON body with product fields; business_product_id and product_name
    are required.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.create(session, data, actor)
        session.commit()
        return jsonify(product.to_dict()), 201
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/products/<int:product_id>", methods=["PUT"])
def update_product(product_id: int):
    """PUT /api/v1/products/{id}  (JSON body with fields to update)"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("JSON object body required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            return error_response("not found", 404)
        ProductsService.update(session, product, data, actor)
        session.commit()
        return jsonify(product.to_dict())
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/products/<int:product_id>/cell", methods=["PATCH"])
def update_product_cell(product_id: int):
    """
    PATCH /api/v1/products/{id}/cell

    JSON body: {"field": "<column>", "value": <new value>}.  Used by the
    product table's inline editing.
    """
    data = request.get_json(silent=True) or {}
    field = str(data.get("field") or "").strip()
    if not field:
        return error_response("field is required", 400)
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            return error_response("not found", 404)
        ProductsService.update_cell(session, product, field, data.get("value"), actor)
        session.commit()
        return jsonify(product.to_dict())
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()


@api_bp.route("/products/<int:product_id>", methods=["DELETE"])
def delete_product(product_id: int):
    """DELETE /api/v1/products/{id}"""
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            return error_response("not found", 404)
        business_id = product.business_product_id
        ProductsService.delete(session, product, actor)
        session.commit()
        return jsonify({"deleted": business_id})
    except CatalogError as exc:
        session.rollback()
        return error_response(str(exc), exc.status_code)
    finally:
        session.close()
