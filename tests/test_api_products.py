import csv
import io

from services.tenant_context import TENANT_HEADER, USER_HEADER


def _create(client, **kw):
    body = {"business_product_id": "P1", "product_name": "Widget",
            "product_mrp": 100, "currency": "Rs"}
    body.update(kw)
    return client.post("/api/v1/products", json=body)


def test_create_get_update_delete(client):
    resp = _create(client)
    assert resp.status_code == 201
    pid = resp.get_json()["id"]

    resp = client.get(f"/api/v1/products/{pid}")
    assert resp.status_code == 200
    assert resp.get_json()["product_name"] == "Widget"

    resp = client.put(f"/api/v1/products/{pid}", json={"product_mrp": 120, "uom": "kg"})
    assert resp.status_code == 200
    assert (resp.get_json()["product_mrp"], resp.get_json()["uom"]) == (120.0, "Kg")

    resp = client.delete(f"/api/v1/products/{pid}")
    assert resp.get_json() == {"deleted": "P1"}
    assert client.get(f"/api/v1/products/{pid}").status_code == 404


def test_duplicate_is_conflict(client):
    _create(client)
    resp = _create(client)
    assert resp.status_code == 409
    assert "already exists" in resp.get_json()["error"]


def test_validation_error_is_bad_request(client):
    resp = _create(client, product_mrp=-4)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "MRP must be greater than or equal to 0"}


def test_non_json_body(client):
    resp = client.post("/api/v1/products", data="nope", content_type="text/plain")
    assert resp.status_code == 400


def test_inline_cell_edit(client):
    pid = _create(client).get_json()["id"]

    resp = client.patch(f"/api/v1/products/{pid}/cell",
                        json={"field": "currency", "value": "EUR"})
    assert resp.status_code == 200
    assert resp.get_json()["currency"] == "EUR"

    resp = client.patch(f"/api/v1/products/{pid}/cell",
                        json={"field": "currency", "value": "USD"})
    assert resp.status_code == 400

    resp = client.patch(f"/api/v1/products/{pid}/cell",
                        json={"field": "tenant_id", "value": "x"})
    assert resp.status_code == 400
    assert "not editable" in resp.get_json()["error"]


def test_tenant_isolation(client):
    pid = _create(client).get_json()["id"]
    other = {TENANT_HEADER: "tenant-2", USER_HEADER: "bob"}

    assert client.get(f"/api/v1/products/{pid}", headers=other).status_code == 404
    assert client.get("/api/v1/products", headers=other).get_json()["total"] == 0

    resp = client.post("/api/v1/products", headers=other,
                       json={"business_product_id": "P1", "product_name": "Mine"})
    assert resp.status_code == 201
    assert resp.get_json()["created_by"] == "bob"


def test_list_filters_sort_and_paging(client):
    for i, (name, uom) in enumerate([("Tea", "Kg"), ("Coffee", "Kg"), ("Milk", "Lit")]):
        _create(client, business_product_id=f"P{i}", product_name=name, uom=uom,
                product_mrp=10 * (i + 1))

    data = client.get("/api/v1/products?uom=Kg&sort=product_mrp&order=asc").get_json()
    assert data["total"] == 2
    assert [p["product_name"] for p in data["products"]] == ["Tea", "Coffee"]

    data = client.get("/api/v1/products?limit=1&offset=1&sort=product_mrp&order=desc").get_json()
    assert (data["total"], data["limit"], data["offset"]) == (3, 1, 1)
    assert data["products"][0]["product_name"] == "Coffee"

    assert client.get("/api/v1/products?created_from=yesterday").status_code == 400


def test_export_csv(client):
    _create(client, business_product_id="E1", product_name="Exported")
    resp = client.get("/api/v1/products/export.csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert len(rows[0]) == 18
    assert rows[1][:2] == ["Exported", "E1"]


def test_unknown_api_route_and_method_are_json(client):
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "not found"}

    resp = client.post("/api/v1/products/export.csv")
    assert resp.status_code == 405
    assert resp.get_json() == {"error": "method not allowed"}
