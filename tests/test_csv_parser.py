import io
import math

import pytest
from openpyxl import Workbook

from import_engine.csv_parser import ImportParseError, parse_rows
from schema.templates import template_csv, template_xlsx

HEADER = "business_product_id,pricelist_id,product_name,product_mrp,currency"


def test_basic_csv():
    rows = parse_rows(f"{HEADER}\nP1,PL1,Widget,100,Rs\nP2,PL1,Gadget,12.5,EUR\n")
    assert [r.business_product_id for r in rows] == ["P1", "P2"]
    assert rows[1].product_mrp == 12.5
    assert rows[0].uom == "units"
    assert rows[0].product_status == "active"


def test_bom_and_header_spelling_variants():
    raw = ("\ufeff Business Product ID , Pricelist ID,Product Name,MRP,Currency\n"
           "P1,PL1,Widget,5,Rs\n").encode("utf-8")
    rows = parse_rows(raw, "x.csv")
    assert rows[0].business_product_id == "P1"
    assert rows[0].product_mrp == 5.0


def test_blank_lines_are_skipped():
    rows = parse_rows(f"{HEADER}\n\nP1,PL1,Widget,1,Rs\n,,,,\n")
    assert len(rows) == 1


def test_bad_price_becomes_nan_for_the_validator():
    rows = parse_rows(f"{HEADER}\nP1,PL1,Widget,abc,Rs\nP2,PL1,Gadget,,Rs\n")
    assert math.isnan(rows[0].product_mrp)
    assert math.isnan(rows[1].product_mrp)


def test_optional_columns_are_typed():
    raw = (f"{HEADER},uom,uom_value,is_box,in_box_units,is_combo,cgst_rate,category_name,group_name,product_status\n"
           "P1,PL1,Oil,185,Rs,lit,0.5,Yes,12,false,2.5,Grocery,Oils,Paused\n")
    row = parse_rows(raw)[0]
    assert row.uom == "Lit"
    assert row.uom_value == 0.5
    assert row.is_box == "yes"
    assert row.in_box_units == 12
    assert row.is_combo == "no"
    assert row.cgst_rate == 2.5
    assert row.sgst_rate is None
    assert (row.category_name, row.group_name) == ("Grocery", "Oils")
    assert row.product_status == "paused"


@pytest.mark.parametrize("extra,value,message", [
    ("uom", "litre", "Row 2: Invalid UOM: litre"),
    ("is_box", "maybe", "Row 2: Invalid is_box value: maybe"),
    ("product_status", "gone", "Row 2: Invalid SKU status: gone"),
    ("uom_value", "lots", "Row 2: uom_value is not a number: lots"),
])
def test_bad_typed_values_are_structural_errors(extra, value, message):
    with pytest.raises(ImportParseError, match=message):
        parse_rows(f"{HEADER},{extra}\nP1,PL1,Widget,1,Rs,{value}\n")


@pytest.mark.parametrize("raw", ["", "   \n", b""])
def test_empty_file(raw):
    with pytest.raises(ImportParseError, match="File is empty"):
        parse_rows(raw)


def test_header_only():
    with pytest.raises(ImportParseError, match="at least one data row"):
        parse_rows(HEADER + "\n")


def test_missing_required_columns():
    with pytest.raises(ImportParseError) as exc:
        parse_rows("business_product_id,product_name\nP1,Widget\n")
    assert str(exc.value) == "Missing required columns: pricelist_id, product_mrp, currency"


def test_xlsx_upload():
    wb = Workbook()
    ws = wb.active
    ws.append(["Business Product ID", "Pricelist ID", "Product Name", "MRP", "Currency", "In Box Units"])
    ws.append(["P1", "PL1", "Widget", 99, "Rs", 6])
    ws.append([None, None, None, None, None, None])
    ws.append([1001, "PL1", "Numeric id", 10.5, "EUR", None])
    bio = io.BytesIO()
    wb.save(bio)

    rows = parse_rows(bio.getvalue(), "products.xlsx")
    assert [r.business_product_id for r in rows] == ["P1", "1001"]
    assert rows[0].product_mrp == 99.0
    assert rows[0].in_box_units == 6
    assert rows[1].in_box_units is None


def test_corrupt_xlsx():
    with pytest.raises(ImportParseError, match="Invalid Excel file"):
        parse_rows(b"definitely not a workbook", "broken.xlsx")


def test_templates_parse_back():
    csv_rows = parse_rows(template_csv(), "template.csv")
    xlsx_rows = parse_rows(template_xlsx(), "template.xlsx")
    assert csv_rows == xlsx_rows
    assert csv_rows[0].business_product_id == "IPH15PRO"
    assert csv_rows[0].category_name == "Electronics"


@pytest.mark.parametrize("value", ["inf", "-inf", "1e999", "nan"])
def test_non_finite_price_becomes_nan_for_the_validator(value):
    row = parse_rows(f"{HEADER}\nP1,PL1,Widget,{value},Rs\n")[0]
    assert math.isnan(row.product_mrp)


@pytest.mark.parametrize("extra,value", [
    ("cgst_rate", "nan"),
    ("uom_value", "inf"),
    ("in_box_units", "1e999"),
])
def test_non_finite_optional_numbers_are_structural_errors(extra, value):
    with pytest.raises(ImportParseError, match=f"Row 2: {extra} must be a finite number"):
        parse_rows(f"{HEADER},{extra}\nP1,PL1,Widget,1,Rs,{value}\n")
