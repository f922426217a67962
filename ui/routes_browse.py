"""
ui.routes_browse - Main product table page.
"""

from datetime import date

from flask import request, render_template

from ui import ui_bp
from db import get_session
from services.catalog_service import CategoryService, GroupService
from services.search_service import SearchService
from services.tenant_context import actor_from_headers
from schema.vocab import ENTITY_STATUSES, UOM_TYPES
import config

# Columns shown in the table, in order: (field, label, inline-editable)
TABLE_COLUMNS = (
    ("business_product_id", "SKU ID",       False),
    ("product_name",        "Product Name", True),
    ("pricelist_id",        "Pricelist",    True),
    ("uom",                 "UOM",          True),
    ("uom_value",           "UOM Value",    True),
    ("is_box",              "Box",          True),
    ("is_combo",            "Combo",        True),
    ("product_mrp",         "MRP",          True),
    ("currency",            "Currency",     True),
    ("sku_status",          "Status",       True),
    ("group_name",          "Group",        False),
    ("category_name",       "Category",     False),
)


def _parse_date(raw: str):
    try:
        return date.fromisoformat(raw) if raw else None
    except ValueError:
        return None


@ui_bp.route("/")
def index():
    actor = actor_from_headers(request.headers)
    q        = request.args.get("q", "").strip()
    status   = request.args.get("status", "").strip()
    uom      = request.args.get("uom", "").strip()
    is_box   = request.args.get("is_box", "").strip()
    is_combo = request.args.get("is_combo", "").strip()
    category_id = request.args.get("category_id", type=int)
    group_id    = request.args.get("group_id", type=int)
    min_uom_value = request.args.get("min_uom_value", type=float)
    max_uom_value = request.args.get("max_uom_value", type=float)
    created_from = request.args.get("created_from", "").strip()
    created_to   = request.args.get("created_to", "").strip()
    include_hidden = request.args.get("include_hidden", "0") == "1"
    page = max(request.args.get("page", 1, type=int), 1)
    page_size = request.args.get("page_size", config.DEFAULT_PAGE_SIZE, type=int)
    sort_by = request.args.get("sort", SearchService.DEFAULT_SORT).strip()
    sort_order = request.args.get("order", "desc").strip()

    # Validate sort / paging params
    if page_size not in config.PAGE_SIZE_CHOICES:
        page_size = config.DEFAULT_PAGE_SIZE
    if sort_by not in SearchService.SORTABLE_COLUMNS:
        sort_by = SearchService.DEFAULT_SORT
    if sort_order not in ("asc", "desc"):
        sort_order = "desc"

    session = get_session()
    try:
        products, total = SearchService.search(
            session, actor.tenant_id,
            q=q, status=status, uom=uom, category_id=category_id,
            group_id=group_id, is_box=is_box, is_combo=is_combo,
            min_uom_value=min_uom_value, max_uom_value=max_uom_value,
            created_from=_parse_date(created_from),
            created_to=_parse_date(created_to),
            include_hidden=include_hidden,
            sort_by=sort_by, sort_order=sort_order,
            limit=page_size, offset=(page - 1) * page_size,
        )
        total_pages = max((total + page_size - 1) // page_size, 1)
        return render_template(
            "index.html",
            products=products, total=total, page=page,
            total_pages=total_pages, page_size=page_size,
            page_sizes=config.PAGE_SIZE_CHOICES,
            columns=TABLE_COLUMNS,
            sort_by=sort_by, sort_order=sort_order,
            filters={
                "q": q, "status": status, "uom": uom, "is_box": is_box,
                "is_combo": is_combo, "category_id": category_id or "",
                "group_id": group_id or "",
                "min_uom_value": "" if min_uom_value is None else min_uom_value,
                "max_uom_value": "" if max_uom_value is None else max_uom_value,
                "created_from": created_from, "created_to": created_to,
                "include_hidden": "1" if include_hidden else "",
            },
            statuses=ENTITY_STATUSES, uom_types=UOM_TYPES,
            currencies=config.ALLOWED_CURRENCIES,
            categories=CategoryService.list(session, actor.tenant_id),
            groups=GroupService.list(session, actor.tenant_id, category_id),
        )
    finally:
        session.close()
