"""
import_engine.field_map - Column-name ↔ ImportedRow attribute mapping.

Headers are matched case-insensitively after collapsing spaces, dashes
and underscores, so "Business Product ID", "business-product-id" and
"BUSINESS_PRODUCT_ID" all land on the same attribute.
"""

from __future__ import annotations

import re

from schema.templates import column_names, required_columns

# Extra spellings seen in customer files  →  ImportedRow attribute
_ALIASES: dict[str, str] = {
    "sku id":           "business_product_id",
    "product sku id":   "business_product_id",
    "product id":       "business_product_id",
    "pricelist":        "pricelist_id",
    "price list id":    "pricelist_id",
    "name":             "product_name",
    "product sku name": "product_name",
    "product description": "description",
    "uom value":        "uom_value",
    "box":              "is_box",
    "combo":            "is_combo",
    "cgst":             "cgst_rate",
    "sgst":             "sgst_rate",
    "igst":             "igst_rate",
    "mrp":              "product_mrp",
    "price":            "product_mrp",
    "catg name":        "category_name",
    "category":         "category_name",
    "product group name": "group_name",
    "group":            "group_name",
    "sku stat":         "product_status",
    "status":           "product_status",
}

REQUIRED_FIELDS = tuple(required_columns())

# Float-valued columns other than product_mrp (which gets a NaN sentinel)
OPTIONAL_FLOAT_FIELDS = ("uom_value", "cgst_rate", "sgst_rate", "igst_rate")
OPTIONAL_INT_FIELDS   = ("in_box_units",)


def _norm(header: str) -> str:
    return re.sub(r"[\s_\-]+", " ", header.strip().lower())


HEADER_ALIASES: dict[str, str] = {_norm(c): c for c in column_names()}
HEADER_ALIASES.update({_norm(k): v for k, v in _ALIASES.items()})


def resolve_header(header: str) -> str | None:
    """Return the ImportedRow attribute for a file header, or None."""
    if header is None:
        return None
    return HEADER_ALIASES.get(_norm(str(header)))
