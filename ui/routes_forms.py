"""
ui.routes_forms - Add / Edit / Delete product forms.
"""

from flask import request, render_template, redirect, url_for, flash, abort

import config
from ui import ui_bp
from db import get_session
from services.catalog_service import GroupService
from services.errors import CatalogError
from services.products_service import ProductsService
from services.tenant_context import actor_from_headers
from schema.vocab import ENTITY_STATUSES, UOM_TYPES, YES_NO


def _form_data() -> dict:
    """Form fields as a dict; the hidden-flag checkbox is absent when unticked."""
    data = dict(request.form)
    data["is_hidden"] = "yes" if request.form.get("is_hidden") else "no"
    return data


def _render_form(session, tenant_id: str, product, mode: str, values=None):
    return render_template(
        "add_edit.html", product=product, mode=mode, values=values or {},
        groups=GroupService.list(session, tenant_id),
        statuses=ENTITY_STATUSES, uom_types=UOM_TYPES, yes_no=YES_NO,
        currencies=config.ALLOWED_CURRENCIES,
    )


# ── Add ────────────────────────────────────────────────────────────────

@ui_bp.route("/product/add", methods=["GET", "POST"])
def product_add():
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        if request.method == "GET":
            return _render_form(session, actor.tenant_id, None, "add")

        data = _form_data()
        try:
            product = ProductsService.create(session, data, actor)
            session.commit()
        except CatalogError as exc:
            session.rollback()
            flash(f"Error: {exc}", "danger")
            return _render_form(session, actor.tenant_id, None, "add", data)
        flash(f"Product {product.business_product_id} created.", "success")
        return redirect(url_for("ui.index"))
    finally:
        session.close()


# ── Edit ───────────────────────────────────────────────────────────────

@ui_bp.route("/product/<int:product_id>/edit", methods=["GET", "POST"])
def product_edit(product_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            abort(404)

        if request.method == "GET":
            return _render_form(session, actor.tenant_id, product, "edit")

        try:
            ProductsService.update(session, product, _form_data(), actor)
            session.commit()
        except CatalogError as exc:
            session.rollback()
            flash(f"Error: {exc}", "danger")
            return redirect(url_for("ui.product_edit", product_id=product_id))
        flash(f"Product {product.business_product_id} updated.", "success")
        return redirect(url_for("ui.index"))
    finally:
        session.close()


# ── Delete ─────────────────────────────────────────────────────────────

@ui_bp.route("/product/<int:product_id>/delete", methods=["POST"])
def product_delete(product_id: int):
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        product = ProductsService.get(session, actor.tenant_id, product_id)
        if not product:
            abort(404)
        business_id = product.business_product_id
        ProductsService.delete(session, product, actor)
        session.commit()
        flash(f"Product {business_id} deleted.", "success")
        return redirect(url_for("ui.index"))
    except CatalogError as exc:
        session.rollback()
        flash(f"Error: {exc}", "danger")
        return redirect(url_for("ui.product_edit", product_id=product_id))
    finally:
        session.close()
