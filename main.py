#!/usr/bin/env python3
"""
PCMDB - Product Catalog Manager Web Application
================================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

import logging

from flask import Flask, jsonify, render_template, request

import config
from db import init_db, get_session, ProductSKU
from api import api_bp
from ui import ui_bp

logger = logging.getLogger(__name__)


def create_app(db_url: str | None = None, testing: bool = False) -> Flask:
    """Flask application factory."""

    app = Flask(
        __name__,
        template_folder=str(config.BASE_DIR / "templates"),
        static_folder=str(config.BASE_DIR / "static"),
    )
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_BYTES
    app.config["TESTING"] = testing

    # ── Initialise database ─────────────────────────────────────────
    db_url = db_url or config.DB_URL
    init_db(db_url)
    logger.info("Database: %s", db_url)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)
    app.register_blueprint(ui_bp)

    # ── Error handlers ──────────────────────────────────────────────
    # Routing errors never reach the API blueprint's handlers, so answer
    # JSON for /api/ paths here.
    def _wants_json() -> bool:
        return request.path.startswith(api_bp.url_prefix + "/")

    @app.errorhandler(404)
    def _404(e):
        if _wants_json():
            return jsonify({"error": "not found"}), 404
        return render_template("error.html", code=404,
                               message="Page not found"), 404

    @app.errorhandler(405)
    def _405(e):
        if _wants_json():
            return jsonify({"error": "method not allowed"}), 405
        return render_template("error.html", code=405,
                               message="Method not allowed"), 405

    @app.errorhandler(413)
    def _413(e):
        message = f"Upload larger than {config.MAX_UPLOAD_BYTES // (1024 * 1024)} MB"
        if _wants_json():
            return jsonify({"error": message}), 413
        return render_template("error.html", code=413, message=message), 413

    @app.errorhandler(500)
    def _500(e):
        if _wants_json():
            return jsonify({"error": "internal server error"}), 500
        return render_template("error.html", code=500,
                               message="Internal server error"), 500

    return app


def _seed_if_empty():
    """Create a small demo catalog for the default tenant when it is empty."""
    from services.catalog_service import CategoryService, GroupService
    from services.products_service import ProductsService
    from services.tenant_context import default_actor

    actor = default_actor()
    session = get_session()
    try:
        count = (session.query(ProductSKU)
                 .filter(ProductSKU.tenant_id == actor.tenant_id).count())
        if count > 0:
            print(f"\n  Database has {count} products for {actor.tenant_id}.")
            return

        print(f"\n  Database empty → seeding demo catalog for {actor.tenant_id} …")
        electronics = CategoryService.create(session, {"catg_name": "Electronics"}, actor)
        phones = GroupService.create(
            session, {"product_group_name": "Smartphones",
                      "category_id": electronics.id}, actor)
        grocery = CategoryService.create(session, {"catg_name": "Grocery"}, actor)
        oils = GroupService.create(
            session, {"product_group_name": "Cooking Oils",
                      "category_id": grocery.id}, actor)

        demo = [
            {"business_product_id": "IPH15PRO", "pricelist_id": "PL-2024-01",
             "product_name": "iPhone 15 Pro", "product_mrp": 134900,
             "currency": "Rs", "is_box": "yes", "in_box_units": 1,
             "product_group_id": phones.id},
            {"business_product_id": "PIX8", "pricelist_id": "PL-2024-01",
             "product_name": "Pixel 8", "product_mrp": 699, "currency": "EUR",
             "product_group_id": phones.id},
            {"business_product_id": "SUNOIL-1L", "pricelist_id": "PL-2024-01",
             "product_name": "Sunflower Oil 1L", "product_mrp": 185,
             "currency": "Rs", "uom": "Lit", "uom_value": 1,
             "product_group_id": oils.id},
        ]
        for data in demo:
            ProductsService.create(session, data, actor)
        session.commit()
        print(f"  Done: {len(demo)} products.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  PCMDB - Product Catalog Manager")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    if config.SEED_DEMO_DATA:
        _seed_if_empty()

    print(f"\n  http://{config.HOST}:{config.PORT}")
    print(f"  API: http://{config.HOST}:{config.PORT}/api/v1/products")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
