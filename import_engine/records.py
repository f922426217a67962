"""
import_engine.records - Immutable inputs of the validation pipeline.

ImportedRow     - one parsed line of an upload.
CatalogProduct  - snapshot of an existing SKU, detached from the ORM so
                  the pipeline never holds a session-bound object.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImportedRow:
    business_product_id: str = ""
    pricelist_id: str = ""
    product_name: str = ""
    description: str = ""
    uom: str = "units"
    uom_value: Optional[float] = None
    is_box: str = "no"
    in_box_units: Optional[int] = None
    is_combo: str = "no"
    cgst_rate: Optional[float] = None
    sgst_rate: Optional[float] = None
    igst_rate: Optional[float] = None
    product_mrp: float = 0.0
    currency: str = ""
    remark: str = ""
    category_name: str = ""
    group_name: str = ""
    product_status: str = "active"

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ImportedRow":
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class CatalogProduct:
    id: int
    business_product_id: str
    pricelist_id: str = ""
    product_name: str = ""
    status: str = "active"

    @classmethod
    def from_sku(cls, sku) -> "CatalogProduct":
        return cls(
            id=sku.id,
            business_product_id=sku.business_product_id,
            pricelist_id=sku.pricelist_id or "",
            product_name=sku.product_name,
            status=sku.sku_status,
        )

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)
