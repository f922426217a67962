import math

import pytest

from import_engine.records import CatalogProduct, ImportedRow
from import_engine.validator import ProductValidator, validate


def _row(**kw):
    base = dict(business_product_id="P1", pricelist_id="PL1",
                product_name="Widget", product_mrp=100.0, currency="Rs")
    base.update(kw)
    return ImportedRow(**base)


def _verdict(row, catalog=(), batch=None, index=0):
    batch = [row] if batch is None else batch
    return validate(row, index, list(catalog), batch)


def test_new_valid_row_is_accepted_insert():
    v = _verdict(_row())
    assert v.status == "accepted"
    assert v.action == "insert"
    assert v.errors == () and v.warnings == ()
    assert v.remark == "New product will be added"


def test_negative_mrp_is_error_and_skipped():
    v = _verdict(_row(product_mrp=-5))
    assert v.status == "error"
    assert v.action == "skip"
    assert "MRP must be greater than or equal to 0" in v.errors


def test_zero_mrp_is_allowed():
    assert _verdict(_row(product_mrp=0)).status == "accepted"


def test_nan_mrp_fails_price_rule():
    v = _verdict(_row(product_mrp=math.nan))
    assert v.status == "error"
    assert "MRP must be greater than or equal to 0" in v.errors


def test_existing_id_is_update():
    catalog = [CatalogProduct(id=1, business_product_id="P1", pricelist_id="PL0")]
    v = _verdict(_row(), catalog=catalog)
    assert v.status == "accepted"
    assert v.action == "update"
    assert v.remark == "Product will be updated"


def test_existing_id_with_error_is_still_skip():
    catalog = [CatalogProduct(id=1, business_product_id="P1")]
    v = _verdict(_row(currency="USD"), catalog=catalog)
    assert (v.status, v.action) == ("error", "skip")


def test_unknown_currency():
    v = _verdict(_row(currency="USD"))
    assert v.errors == ("Currency must be one of: Rs, EUR",)


def test_currency_allow_list_can_be_overridden():
    row = _row(currency="USD")
    v = validate(row, 0, [], [row], currencies=("USD",))
    assert v.status == "accepted"


def test_duplicates_flag_every_copy():
    a = _row(business_product_id="P5")
    b = _row(business_product_id="P5", product_name="Widget again")
    batch = [a, b]
    validator = ProductValidator([], batch)
    for idx, row in enumerate(batch):
        v = validator.validate(row, idx)
        assert v.status == "error"
        assert v.action == "skip"
        assert v.errors == (
            "Duplicate entry: (PL1, P5) appears multiple times in import file",)


def test_same_id_on_different_pricelists_is_not_duplicate():
    a = _row(business_product_id="P5", pricelist_id="PL1")
    b = _row(business_product_id="P5", pricelist_id="PL2")
    validator = ProductValidator([], [a, b])
    assert validator.validate(a, 0).status == "accepted"
    assert validator.validate(b, 1).status == "accepted"


def test_each_missing_required_field_has_its_own_error():
    v = _verdict(_row(business_product_id="  ", pricelist_id="", product_name=""))
    assert "Business Product ID is required" in v.errors
    assert "Pricelist ID is required" in v.errors
    assert "Product Name is required" in v.errors


def test_error_remark_joins_all_errors_in_rule_order():
    v = _verdict(_row(product_mrp=-1, currency="XX", product_name=""))
    assert v.remark == ("MRP must be greater than or equal to 0; "
                        "Currency must be one of: Rs, EUR; "
                        "Product Name is required")


@pytest.mark.parametrize("row", [
    _row(),
    _row(product_mrp=-1),
    _row(currency=""),
    _row(pricelist_id=""),
    _row(product_mrp=math.nan, product_name=""),
])
def test_status_matches_errors(row):
    v = _verdict(row)
    assert (v.status == "error") == bool(v.errors)
    if v.status == "error":
        assert v.action == "skip"
    if v.status == "accepted":
        assert not v.errors and not v.warnings
