"""
db.models - SQLAlchemy ORM declarations.

Tables
------
categories      - top level of the catalog hierarchy, one set per tenant.
product_groups  - groups of SKUs inside a category.
product_skus    - one row per sellable SKU.  ``business_product_id`` is the
                  tenant-defined key used by imports; ``id`` is internal.
import_batches  - parsed rows of an uploaded file, kept between the
                  "validate" and "sync" requests.
outbox_entries  - append-only log of catalog mutations awaiting replay.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, Text, Boolean, ForeignKey,
    Index, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str:
    return value.isoformat() if value else ""


class Base(DeclarativeBase):
    pass


class AuditMixin:
    created_by  = Column(String(100), default="")
    created_on  = Column(DateTime, default=_utcnow)
    modified_by = Column(String(100), default="")
    modified_on = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def audit_dict(self) -> dict:
        return {
            "created_by": self.created_by or "",
            "created_on": _iso(self.created_on),
            "modified_by": self.modified_by or "",
            "modified_on": _iso(self.modified_on),
        }


class Category(AuditMixin, Base):
    __tablename__ = "categories"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id   = Column(String(100), nullable=False, index=True)
    catg_name   = Column(String(200), nullable=False)
    catg_status = Column(String(20), nullable=False, default="active")

    groups = relationship("ProductGroup", back_populates="category",
                          lazy="selectin")

    __table_args__ = (
        UniqueConstraint("tenant_id", "catg_name", name="uq_category_name"),
    )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "catg_name": self.catg_name,
            "catg_status": self.catg_status,
            "group_count": len(self.groups),
        }
        d.update(self.audit_dict())
        return d


class ProductGroup(AuditMixin, Base):
    __tablename__ = "product_groups"

    id                  = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id           = Column(String(100), nullable=False, index=True)
    product_group_name  = Column(String(200), nullable=False)
    product_group_image = Column(String(500), default="")
    category_id         = Column(Integer, ForeignKey("categories.id"),
                                 nullable=False, index=True)

    category = relationship("Category", back_populates="groups",
                            lazy="joined")
    skus = relationship("ProductSKU", back_populates="product_group",
                        lazy="select")

    __table_args__ = (
        UniqueConstraint("tenant_id", "category_id", "product_group_name",
                         name="uq_group_name"),
    )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "product_group_name": self.product_group_name,
            "product_group_image": self.product_group_image or "",
            "category_id": self.category_id,
            "category_name": self.category.catg_name if self.category else "",
        }
        d.update(self.audit_dict())
        return d


class ProductSKU(AuditMixin, Base):
    __tablename__ = "product_skus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(100), nullable=False, index=True)

    # ── Business keys ──────────────────────────────────────────────────
    business_product_id = Column(String(100), nullable=False)
    pricelist_id        = Column(String(100), default="", index=True)

    # ── Descriptive ────────────────────────────────────────────────────
    product_name = Column(String(300), nullable=False)
    description  = Column(Text, default="")
    remark       = Column(Text, default="")
    product_sku_image = Column(String(500), default="")

    # ── Packaging ──────────────────────────────────────────────────────
    uom          = Column(String(20), default="units")
    uom_value    = Column(Float, default=1.0)
    is_box       = Column(String(3), default="no")
    in_box_units = Column(Integer, nullable=True)
    is_combo     = Column(String(3), default="no")
    parent_product_sku_id = Column(String(100), default="")

    # ── Pricing / tax ──────────────────────────────────────────────────
    product_mrp = Column(Float, default=0.0)
    currency    = Column(String(10), default="Rs")
    cgst_rate   = Column(Float, nullable=True)
    sgst_rate   = Column(Float, nullable=True)
    igst_rate   = Column(Float, nullable=True)

    # ── Lifecycle ──────────────────────────────────────────────────────
    sku_status = Column(String(20), nullable=False, default="active", index=True)
    is_hidden  = Column(Boolean, nullable=False, default=False)

    product_group_id = Column(Integer, ForeignKey("product_groups.id"),
                              nullable=True, index=True)
    product_group = relationship("ProductGroup", back_populates="skus",
                                 lazy="joined")

    __table_args__ = (
        UniqueConstraint("tenant_id", "business_product_id",
                         name="uq_sku_business_id"),
        Index("ix_sku_tenant_status", "tenant_id", "sku_status"),
    )

    @property
    def group_name(self) -> str:
        return self.product_group.product_group_name if self.product_group else ""

    @property
    def category_name(self) -> str:
        if self.product_group and self.product_group.category:
            return self.product_group.category.catg_name
        return ""

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "business_product_id": self.business_product_id,
            "pricelist_id": self.pricelist_id or "",
            "product_name": self.product_name,
            "description": self.description or "",
            "remark": self.remark or "",
            "product_sku_image": self.product_sku_image or "",
            "uom": self.uom,
            "uom_value": self.uom_value,
            "is_box": self.is_box,
            "in_box_units": self.in_box_units,
            "is_combo": self.is_combo,
            "parent_product_sku_id": self.parent_product_sku_id or "",
            "product_mrp": self.product_mrp,
            "currency": self.currency,
            "cgst_rate": self.cgst_rate,
            "sgst_rate": self.sgst_rate,
            "igst_rate": self.igst_rate,
            "sku_status": self.sku_status,
            "is_hidden": bool(self.is_hidden),
            "product_group_id": self.product_group_id,
            "group_name": self.group_name,
            "category_name": self.category_name,
        }
        d.update(self.audit_dict())
        return d


class ImportBatch(Base):
    """
    One uploaded file.  The parsed rows are stored as JSON so the sync
    request can re-run the pipeline without the client re-uploading.
    """
    __tablename__ = "import_batches"

    id         = Column(String(32), primary_key=True)        # uuid4 hex
    tenant_id  = Column(String(100), nullable=False, index=True)
    filename   = Column(String(300), default="")
    rows_json  = Column(Text, nullable=False, default="[]")
    state      = Column(String(20), nullable=False, default="validated")
    created_by = Column(String(100), default="")
    created_on = Column(DateTime, default=_utcnow)
    synced_on  = Column(DateTime, nullable=True)

    @property
    def rows(self) -> list[dict]:
        return json.loads(self.rows_json or "[]")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "filename": self.filename or "",
            "state": self.state,
            "created_by": self.created_by or "",
            "created_on": _iso(self.created_on),
            "synced_on": _iso(self.synced_on) or None,
        }


class OutboxEntry(Base):
    """
    Append-only record of a catalog mutation.  ``replay_key`` is unique so
    enqueueing the same mutation twice is a no-op.
    """
    __tablename__ = "outbox_entries"

    seq         = Column(Integer, primary_key=True, autoincrement=True)
    replay_key  = Column(String(64), nullable=False, unique=True)
    tenant_id   = Column(String(100), nullable=False, index=True)
    action      = Column(String(10), nullable=False)      # CREATE / UPDATE / DELETE
    entity      = Column(String(20), nullable=False)      # category / group / sku
    payload     = Column(Text, nullable=False, default="{}")
    created_on  = Column(DateTime, default=_utcnow)
    replayed_on = Column(DateTime, nullable=True, index=True)

    def to_dict(self) -> dict:
        return {
            "seq": self.seq,
            "replay_key": self.replay_key,
            "tenant_id": self.tenant_id,
            "action": self.action,
            "entity": self.entity,
            "payload": json.loads(self.payload or "{}"),
            "created_on": _iso(self.created_on),
            "replayed_on": _iso(self.replayed_on) or None,
        }
