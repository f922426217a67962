import math

from import_engine.aggregator import aggregate
from import_engine.records import ImportedRow
from import_engine.report import REPORT_HEADERS, SyncReport, format_report


def _summary(*rows):
    return aggregate(list(rows), [])


def test_header_and_row_layout():
    summary = _summary(ImportedRow(business_product_id="P1", pricelist_id="PL1",
                                   product_name="Widget", product_mrp=100.0,
                                   currency="Rs"))
    lines = format_report(summary.validated_rows).split("\n")
    assert lines[0] == ",".join(f'"{h}"' for h in REPORT_HEADERS)
    assert lines[1] == ('"1","accepted","insert","P1","PL1","Widget","100","Rs",'
                        '"New product will be added"')
    assert len(lines) == 2


def test_error_row_carries_joined_remark_and_nan_price():
    summary = _summary(ImportedRow(business_product_id="P2", pricelist_id="PL1",
                                   product_name="", product_mrp=math.nan,
                                   currency="Rs"))
    line = format_report(summary.validated_rows).split("\n")[1]
    assert line.startswith('"1","error","skip","P2","PL1","","NaN","Rs",')
    assert line.endswith('"MRP must be greater than or equal to 0; Product Name is required"')


def test_embedded_quotes_are_doubled():
    summary = _summary(ImportedRow(business_product_id="P3", pricelist_id="PL1",
                                   product_name='15" monitor', product_mrp=9.5,
                                   currency="EUR"))
    line = format_report(summary.validated_rows).split("\n")[1]
    assert '"15"" monitor"' in line
    assert '"9.5"' in line


def test_order_is_preserved_for_filtered_rows():
    rows = [ImportedRow(business_product_id=f"P{i}", pricelist_id="PL1",
                        product_name="x", product_mrp=1.0,
                        currency="Rs" if i % 2 else "??")
            for i in range(6)]
    summary = _summary(*rows)
    lines = format_report(summary.rows_with_status("error")).split("\n")[1:]
    assert [l.split(",")[0] for l in lines] == ['"1"', '"3"', '"5"']


def test_empty_report_is_just_the_header():
    assert format_report([]) == ",".join(f'"{h}"' for h in REPORT_HEADERS)


def test_sync_report_tally():
    report = SyncReport(total_rows=3, inserted=1, updated=1)
    report.add_error(3, "boom")
    assert report.failed == 1
    assert report.to_dict() == {
        "total_rows": 3, "inserted": 1, "updated": 1, "skipped": 0,
        "failed": 1, "errors": [{"row": 3, "reason": "boom"}],
    }
