"""
services.products_service - CRUD operations on ProductSKU records.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and allows
the caller to batch multiple operations in one transaction, which the
import sync relies on (one SAVEPOINT per row).
"""

from __future__ import annotations

import math

from sqlalchemy.orm import Session

import config
from db.models import ProductGroup, ProductSKU
from import_engine.records import CatalogProduct
from schema.vocab import (
    ENTITY_STATUSES, UOM_TYPES, normalize_status, normalize_uom, normalize_yes_no,
)
from services import outbox_service
from services.errors import DuplicateProductError, InvalidFieldError, NotFoundError
from services.tenant_context import Actor

TEXT_FIELDS = (
    "business_product_id", "pricelist_id", "product_name", "description",
    "remark", "product_sku_image", "parent_product_sku_id",
)
OPTIONAL_FLOAT_FIELDS = ("uom_value", "cgst_rate", "sgst_rate", "igst_rate")

# Columns the product table lets users edit in place
EDITABLE_FIELDS = frozenset(
    TEXT_FIELDS + OPTIONAL_FLOAT_FIELDS + (
        "uom", "is_box", "in_box_units", "is_combo", "product_mrp",
        "currency", "sku_status", "is_hidden", "product_group_id",
    )
)


# ── Field coercion ─────────────────────────────────────────────────────

def _float(name: str, value, required: bool = False):
    if value is None or str(value).strip() == "":
        if required:
            raise InvalidFieldError(f"{name} is required")
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise InvalidFieldError(f"{name} must be a number, got {value!r}")
    if math.isnan(num) or math.isinf(num):
        raise InvalidFieldError(f"{name} must be a finite number")
    return num


def _coerce(session: Session, tenant_id: str, name: str, value):
    """Convert one incoming (form/JSON) value to its column type."""
    if name in TEXT_FIELDS:
        return str(value if value is not None else "").strip()
    if name in OPTIONAL_FLOAT_FIELDS:
        return _float(name, value)
    if name == "in_box_units":
        num = _float(name, value)
        return int(num) if num is not None else None
    if name == "product_mrp":
        num = _float("MRP", value, required=True)
        if num < 0:
            raise InvalidFieldError("MRP must be greater than or equal to 0")
        return num
    if name == "currency":
        cur = str(value or "").strip()
        if cur not in config.ALLOWED_CURRENCIES:
            raise InvalidFieldError(
                f"Currency must be one of: {', '.join(config.ALLOWED_CURRENCIES)}")
        return cur
    if name == "uom":
        uom = normalize_uom(value)
        if uom is None:
            raise InvalidFieldError(f"UOM must be one of: {', '.join(UOM_TYPES)}")
        return uom
    if name in ("is_box", "is_combo"):
        flag = normalize_yes_no(value, default="")
        if not flag:
            raise InvalidFieldError(f"{name} must be yes or no")
        return flag
    if name == "sku_status":
        status = normalize_status(value)
        if status is None:
            raise InvalidFieldError(
                f"Status must be one of: {', '.join(ENTITY_STATUSES)}")
        return status
    if name == "is_hidden":
        return normalize_yes_no(value) == "yes" if not isinstance(value, bool) else value
    if name == "product_group_id":
        if value in (None, ""):
            return None
        try:
            group_id = int(value)
        except (TypeError, ValueError):
            raise InvalidFieldError(f"Invalid group id {value!r}")
        group = session.get(ProductGroup, group_id)
        if group is None or group.tenant_id != tenant_id:
            raise NotFoundError(f"Group {group_id} not found")
        return group_id
    raise InvalidFieldError(f"Unknown field {name!r}")


class ProductsService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict, actor: Actor,
               replay_key: str | None = None) -> ProductSKU:
        """
        Create a new SKU from a dict of field values.
        Required keys: business_product_id, product_name.  product_mrp
        defaults to 0 and currency to the first allowed currency.
        """
        values = {}
        for name in EDITABLE_FIELDS:
            if name in data:
                values[name] = _coerce(session, actor.tenant_id, name, data[name])

        if not values.get("business_product_id"):
            raise InvalidFieldError("Business Product ID is required")
        if not values.get("product_name"):
            raise InvalidFieldError("Product Name is required")
        if ProductsService.get_by_business_id(
                session, actor.tenant_id, values["business_product_id"]):
            raise DuplicateProductError(
                f"Product {values['business_product_id']} already exists")

        values.setdefault("product_mrp", 0.0)
        values.setdefault("currency", config.ALLOWED_CURRENCIES[0])
        if values.get("uom_value") is None:
            values["uom_value"] = 1.0

        product = ProductSKU(
            tenant_id=actor.tenant_id,
            created_by=actor.user_id,
            modified_by=actor.user_id,
            **values,
        )
        session.add(product)
        session.flush()
        outbox_service.enqueue(session, actor.tenant_id, "CREATE", "sku",
                               product.to_dict(), replay_key=replay_key)
        return product

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, tenant_id: str, product_id: int) -> ProductSKU | None:
        product = session.get(ProductSKU, product_id)
        if product is None or product.tenant_id != tenant_id:
            return None
        return product

    @staticmethod
    def get_by_business_id(session: Session, tenant_id: str,
                           business_product_id: str) -> ProductSKU | None:
        return (session.query(ProductSKU)
                .filter(ProductSKU.tenant_id == tenant_id,
                        ProductSKU.business_product_id == business_product_id)
                .one_or_none())

    @staticmethod
    def list_all(session: Session, tenant_id: str) -> list[ProductSKU]:
        return (session.query(ProductSKU)
                .filter(ProductSKU.tenant_id == tenant_id)
                .order_by(ProductSKU.id).all())

    @staticmethod
    def snapshot(session: Session, tenant_id: str) -> list[CatalogProduct]:
        """Detached copy of the tenant's catalog for the import pipeline."""
        return [CatalogProduct.from_sku(p)
                for p in ProductsService.list_all(session, tenant_id)]

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, product: ProductSKU, data: dict, actor: Actor,
               replay_key: str | None = None) -> ProductSKU:
        """Apply every known field present in data.  Unknown keys are ignored."""
        values = {}
        for name in EDITABLE_FIELDS:
            if name in data:
                values[name] = _coerce(session, product.tenant_id, name, data[name])

        if "business_product_id" in values:
            new_id = values["business_product_id"]
            if not new_id:
                raise InvalidFieldError("Business Product ID is required")
            other = ProductsService.get_by_business_id(session, product.tenant_id, new_id)
            if other is not None and other.id != product.id:
                raise DuplicateProductError(f"Product {new_id} already exists")
        if "product_name" in values and not values["product_name"]:
            raise InvalidFieldError("Product Name is required")

        for name, value in values.items():
            setattr(product, name, value)
        product.modified_by = actor.user_id
        session.flush()
        if "product_group_id" in values:
            session.expire(product, ["product_group"])
        outbox_service.enqueue(session, product.tenant_id, "UPDATE", "sku",
                               product.to_dict(), replay_key=replay_key)
        return product

    @staticmethod
    def update_cell(session: Session, product: ProductSKU, field: str, value,
                    actor: Actor) -> ProductSKU:
        """Inline edit of a single table cell."""
        if field not in EDITABLE_FIELDS:
            raise InvalidFieldError(f"Field {field!r} is not editable")
        return ProductsService.update(session, product, {field: value}, actor)

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, product: ProductSKU, actor: Actor) -> None:
        outbox_service.enqueue(session, product.tenant_id, "DELETE", "sku",
                               {"id": product.id,
                                "business_product_id": product.business_product_id,
                                "deleted_by": actor.user_id})
        session.delete(product)
        session.flush()
