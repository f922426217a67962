"""
services.search_service - Filtered, sorted, paginated product listing.

Builds SQLAlchemy queries with optional filters and ILIKE matching
across the name / business id / pricelist columns.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, Query

from db.models import ProductGroup, ProductSKU


class SearchService:

    # Sortable columns mapping
    SORTABLE_COLUMNS = {
        "product_name": ProductSKU.product_name,
        "business_product_id": ProductSKU.business_product_id,
        "pricelist_id": ProductSKU.pricelist_id,
        "uom": ProductSKU.uom,
        "uom_value": ProductSKU.uom_value,
        "is_box": ProductSKU.is_box,
        "is_combo": ProductSKU.is_combo,
        "product_mrp": ProductSKU.product_mrp,
        "currency": ProductSKU.currency,
        "sku_status": ProductSKU.sku_status,
        "created_on": ProductSKU.created_on,
        "modified_on": ProductSKU.modified_on,
    }
    DEFAULT_SORT = "created_on"

    @staticmethod
    def search(
        session: Session,
        tenant_id: str,
        *,
        q: str = "",
        status: str = "",
        uom: str = "",
        category_id: Optional[int] = None,
        group_id: Optional[int] = None,
        is_box: str = "",
        is_combo: str = "",
        min_uom_value: Optional[float] = None,
        max_uom_value: Optional[float] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
        include_hidden: bool = False,
        sort_by: str = "created_on",
        sort_order: str = "desc",
        limit: Optional[int] = 100,
        offset: int = 0,
    ) -> tuple[list[ProductSKU], int]:
        """
        Search products.  Returns (products_list, total_count).
        """
        query = session.query(ProductSKU).filter(ProductSKU.tenant_id == tenant_id)
        if not include_hidden:
            query = query.filter(ProductSKU.is_hidden.is_(False))
        if q:
            query = SearchService._apply_text_filter(query, q)
        if status:
            query = query.filter(ProductSKU.sku_status == status)
        if uom:
            query = query.filter(ProductSKU.uom == uom)
        if group_id:
            query = query.filter(ProductSKU.product_group_id == group_id)
        if category_id:
            group_ids = select(ProductGroup.id).where(
                ProductGroup.category_id == category_id)
            query = query.filter(ProductSKU.product_group_id.in_(group_ids))
        if is_box:
            query = query.filter(ProductSKU.is_box == is_box)
        if is_combo:
            query = query.filter(ProductSKU.is_combo == is_combo)
        if min_uom_value is not None:
            query = query.filter(ProductSKU.uom_value >= min_uom_value)
        if max_uom_value is not None:
            query = query.filter(ProductSKU.uom_value <= max_uom_value)
        if created_from:
            query = query.filter(
                ProductSKU.created_on >= datetime.combine(created_from, time.min))
        if created_to:
            # Inclusive of the whole end day
            query = query.filter(
                ProductSKU.created_on < datetime.combine(
                    created_to + timedelta(days=1), time.min))

        total = query.count()

        sort_col = SearchService.SORTABLE_COLUMNS.get(
            sort_by, SearchService.SORTABLE_COLUMNS[SearchService.DEFAULT_SORT])
        if sort_order == "desc":
            query = query.order_by(sort_col.desc(), ProductSKU.id.desc())
        else:
            query = query.order_by(sort_col.asc(), ProductSKU.id.asc())

        products = query.offset(offset).limit(limit).all()
        return products, total

    @staticmethod
    def _apply_text_filter(query: Query, q: str) -> Query:
        like = f"%{q}%"
        return query.filter(
            ProductSKU.product_name.ilike(like)
            | ProductSKU.business_product_id.ilike(like)
            | ProductSKU.pricelist_id.ilike(like)
        )
