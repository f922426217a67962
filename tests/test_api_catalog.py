def test_category_and_group_lifecycle(client):
    resp = client.post("/api/v1/categories", json={"catg_name": "Drinks"})
    assert resp.status_code == 201
    cid = resp.get_json()["id"]

    resp = client.post("/api/v1/groups", json={"product_group_name": "Juice",
                                               "category_id": cid})
    assert resp.status_code == 201
    gid = resp.get_json()["id"]
    assert resp.get_json()["category_name"] == "Drinks"

    cats = client.get("/api/v1/categories").get_json()["categories"]
    assert [(c["catg_name"], c["group_count"]) for c in cats] == [("Drinks", 1)]

    # A category with groups cannot go
    resp = client.delete(f"/api/v1/categories/{cid}")
    assert resp.status_code == 400

    resp = client.put(f"/api/v1/groups/{gid}", json={"product_group_name": "Juices"})
    assert resp.get_json()["product_group_name"] == "Juices"

    groups = client.get(f"/api/v1/groups?category_id={cid}").get_json()["groups"]
    assert [g["id"] for g in groups] == [gid]

    assert client.delete(f"/api/v1/groups/{gid}").status_code == 200
    assert client.delete(f"/api/v1/categories/{cid}").status_code == 200
    assert client.get(f"/api/v1/categories/{cid}").status_code == 404


def test_duplicate_category_name(client):
    client.post("/api/v1/categories", json={"catg_name": "Dup"})
    resp = client.post("/api/v1/categories", json={"catg_name": "Dup"})
    assert resp.status_code == 400
    assert "already exists" in resp.get_json()["error"]


def test_group_with_unknown_category(client):
    resp = client.post("/api/v1/groups", json={"product_group_name": "G",
                                               "category_id": 42})
    assert resp.status_code == 404


def test_outbox_listing_and_replay(client):
    client.post("/api/v1/categories", json={"catg_name": "Queued"})
    data = client.get("/api/v1/outbox").get_json()
    assert data["pending"] == 1
    assert data["entries"][0]["action"] == "CREATE"
    assert data["entries"][0]["entity"] == "category"

    assert client.post("/api/v1/outbox/replay").get_json() == {"replayed": 1}
    assert client.post("/api/v1/outbox/replay").get_json() == {"replayed": 0}
    assert client.get("/api/v1/outbox?pending=1").get_json()["entries"] == []
