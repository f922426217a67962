"""
services.export_service - Catalog CSV export.

Fixed 18-column layout: business columns first, then tenant and audit
columns.  Rows are written in the order given (the caller's current
filter/sort).
"""

from __future__ import annotations

import csv
import io
from typing import Iterable

from db.models import ProductSKU

EXPORT_HEADERS = (
    "Product Name", "SKU ID", "UOM", "UOM Value", "Status", "Group", "Category",
    "Is Box", "In Box Units", "Is Combo", "Parent SKU ID", "Product Image",
    "Group Image", "Tenant ID", "Created By", "Created On", "Modified By",
    "Modified On",
)


def export_catalog_csv(products: Iterable[ProductSKU]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for p in products:
        group = p.product_group
        writer.writerow([
            p.product_name,
            p.business_product_id,
            p.uom,
            _num(p.uom_value),
            p.sku_status,
            group.product_group_name if group else "",
            p.category_name,
            p.is_box,
            p.in_box_units if p.in_box_units is not None else "",
            p.is_combo,
            p.parent_product_sku_id or "",
            p.product_sku_image or "",
            (group.product_group_image or "") if group else "",
            p.tenant_id,
            p.created_by or "",
            p.created_on.isoformat() if p.created_on else "",
            p.modified_by or "",
            p.modified_on.isoformat() if p.modified_on else "",
        ])
    return buf.getvalue()


def _num(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
