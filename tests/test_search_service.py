from datetime import date, datetime, timedelta

from services.search_service import SearchService
from tests.factories import ProductGroupFactory, ProductSKUFactory


def _ids(products):
    return [p.business_product_id for p in products]


def test_text_filter_matches_name_id_and_pricelist(session, actor):
    ProductSKUFactory(business_product_id="A1", product_name="Green Tea", pricelist_id="PL1")
    ProductSKUFactory(business_product_id="B2", product_name="Coffee", pricelist_id="SPRING")
    ProductSKUFactory(business_product_id="TEA-9", product_name="Mug", pricelist_id="PL1")

    rows, total = SearchService.search(session, actor.tenant_id, q="tea",
                                       sort_by="business_product_id", sort_order="asc")
    assert total == 2
    assert _ids(rows) == ["A1", "TEA-9"]

    rows, _ = SearchService.search(session, actor.tenant_id, q="spring")
    assert _ids(rows) == ["B2"]


def test_structured_filters(session, actor):
    group = ProductGroupFactory()
    ProductSKUFactory(business_product_id="K", uom="Kg", uom_value=5, is_box="yes",
                      product_group=group)
    ProductSKUFactory(business_product_id="L", uom="Lit", uom_value=1, sku_status="paused")
    ProductSKUFactory(business_product_id="U", uom="units", uom_value=12, is_combo="yes")

    def ids(**kw):
        rows, _ = SearchService.search(session, actor.tenant_id,
                                       sort_by="business_product_id", sort_order="asc", **kw)
        return _ids(rows)

    assert ids(uom="Kg") == ["K"]
    assert ids(status="paused") == ["L"]
    assert ids(is_box="yes") == ["K"]
    assert ids(is_combo="yes") == ["U"]
    assert ids(group_id=group.id) == ["K"]
    assert ids(category_id=group.category_id) == ["K"]
    assert ids(min_uom_value=2) == ["K", "U"]
    assert ids(min_uom_value=2, max_uom_value=10) == ["K"]


def test_hidden_products_need_opt_in(session, actor):
    ProductSKUFactory(business_product_id="V")
    ProductSKUFactory(business_product_id="H", is_hidden=True)
    rows, total = SearchService.search(session, actor.tenant_id)
    assert (_ids(rows), total) == (["V"], 1)
    _, total = SearchService.search(session, actor.tenant_id, include_hidden=True)
    assert total == 2


def test_created_date_range_includes_end_day(session, actor):
    today = datetime.now().replace(hour=12, minute=0, second=0, microsecond=0)
    ProductSKUFactory(business_product_id="OLD", created_on=today - timedelta(days=10))
    ProductSKUFactory(business_product_id="NEW", created_on=today)

    rows, _ = SearchService.search(session, actor.tenant_id, created_to=today.date())
    assert sorted(_ids(rows)) == ["NEW", "OLD"]
    rows, _ = SearchService.search(session, actor.tenant_id,
                                   created_from=today.date() - timedelta(days=1))
    assert _ids(rows) == ["NEW"]
    rows, _ = SearchService.search(session, actor.tenant_id,
                                   created_from=date(2000, 1, 1),
                                   created_to=today.date() - timedelta(days=5))
    assert _ids(rows) == ["OLD"]


def test_sort_and_paginate(session, actor):
    for i, mrp in enumerate([30, 10, 20, 40, 50]):
        ProductSKUFactory(business_product_id=f"S{i}", product_mrp=mrp)

    rows, total = SearchService.search(session, actor.tenant_id, sort_by="product_mrp",
                                       sort_order="asc", limit=2, offset=2)
    assert total == 5
    assert [p.product_mrp for p in rows] == [30, 40]

    rows, _ = SearchService.search(session, actor.tenant_id, sort_by="no_such_column",
                                   sort_order="desc", limit=1)
    assert len(rows) == 1


def test_other_tenants_are_invisible(session, other_actor):
    ProductSKUFactory()
    rows, total = SearchService.search(session, other_actor.tenant_id)
    assert (rows, total) == ([], 0)
