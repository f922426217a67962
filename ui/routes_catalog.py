"""
ui.routes_catalog - Categories & product groups page.
"""

from flask import request, render_template, redirect, url_for, flash, abort

from ui import ui_bp
from db import get_session
from services.catalog_service import CategoryService, GroupService
from services.errors import CatalogError
from services.tenant_context import actor_from_headers
from schema.vocab import ENTITY_STATUSES


@ui_bp.route("/categories")
def categories_page():
    actor = actor_from_headers(request.headers)
    session = get_session()
    try:
        return render_template(
            "categories.html",
            categories=CategoryService.list(session, actor.tenant_id),
            groups=GroupService.list(session, actor.tenant_id),
            statuses=ENTITY_STATUSES,
        )
    finally:
        session.close()


def _mutate(action, success: str):
    """Run one catalog mutation, flash the outcome, go back to the page."""
    session = get_session()
    try:
        action(session)
        session.commit()
        flash(success, "success")
    except CatalogError as exc:
        session.rollback()
        if exc.status_code == 404:
            abort(404)
        flash(f"Error: {exc}", "danger")
    finally:
        session.close()
    return redirect(url_for("ui.categories_page"))


# ── Categories ─────────────────────────────────────────────────────────

@ui_bp.route("/categories/add", methods=["POST"])
def category_add():
    actor = actor_from_headers(request.headers)
    data = dict(request.form)
    return _mutate(lambda s: CategoryService.create(s, data, actor),
                   f"Category {data.get('catg_name', '').strip()} created.")


@ui_bp.route("/categories/<int:category_id>/edit", methods=["POST"])
def category_edit(category_id: int):
    actor = actor_from_headers(request.headers)
    data = dict(request.form)

    def _update(session):
        cat = CategoryService.get(session, actor.tenant_id, category_id)
        if not cat:
            abort(404)
        CategoryService.update(session, cat, data, actor)

    return _mutate(_update, "Category updated.")


@ui_bp.route("/categories/<int:category_id>/delete", methods=["POST"])
def category_delete(category_id: int):
    actor = actor_from_headers(request.headers)

    def _delete(session):
        cat = CategoryService.get(session, actor.tenant_id, category_id)
        if not cat:
            abort(404)
        CategoryService.delete(session, cat, actor)

    return _mutate(_delete, "Category deleted.")


# ── Groups ─────────────────────────────────────────────────────────────

@ui_bp.route("/groups/add", methods=["POST"])
def group_add():
    actor = actor_from_headers(request.headers)
    data = dict(request.form)
    return _mutate(lambda s: GroupService.create(s, data, actor),
                   f"Group {data.get('product_group_name', '').strip()} created.")


@ui_bp.route("/groups/<int:group_id>/edit", methods=["POST"])
def group_edit(group_id: int):
    actor = actor_from_headers(request.headers)
    data = dict(request.form)

    def _update(session):
        group = GroupService.get(session, actor.tenant_id, group_id)
        if not group:
            abort(404)
        GroupService.update(session, group, data, actor)

    return _mutate(_update, "Group updated.")


@ui_bp.route("/groups/<int:group_id>/delete", methods=["POST"])
def group_delete(group_id: int):
    actor = actor_from_headers(request.headers)

    def _delete(session):
        group = GroupService.get(session, actor.tenant_id, group_id)
        if not group:
            abort(404)
        GroupService.delete(session, group, actor)

    return _mutate(_delete, "Group deleted.")
