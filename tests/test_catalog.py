import uuid


async def test_create_and_get_product(client, auth_headers, product, product_payload):
    assert product["name"] == product_payload["name"]
    assert product["price"] == 9.99
    assert product["stock"] == 50
    assert product["is_active"] is True

    r = await client.get(f"/products/{product['id']}", headers=auth_headers)

    assert r.status_code == 200
    assert r.json() == product


async def test_create_rejects_negative_price_and_stock(client, auth_headers, product_payload):
    for field in ("price", "stock"):
        payload = dict(product_payload, **{field: -1})
        r = await client.post("/products", json=payload, headers=auth_headers)
        assert r.status_code == 400, field
        assert r.json()["errors"][0]["field"] == field


async def test_create_rejects_missing_description(client, auth_headers, product_payload):
    payload = dict(product_payload)
    del payload["description"]

    r = await client.post("/products", json=payload, headers=auth_headers)

    assert r.status_code == 400


async def test_list_returns_only_active_products(client, auth_headers, product, product_payload):
    r = await client.post("/products", json=dict(product_payload, name="Spark plug"), headers=auth_headers)
    other_id = r.json()["id"]

    assert (await client.delete(f"/products/{other_id}", headers=auth_headers)).status_code == 200

    r = await client.get("/products", headers=auth_headers)
    assert [p["id"] for p in r.json()] == [product["id"]]


async def test_partial_update_changes_only_sent_fields(client, auth_headers, product):
    r = await client.put(f"/products/{product['id']}", json={"stock": 3}, headers=auth_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["stock"] == 3
    assert body["name"] == product["name"]
    assert body["price"] == product["price"]


async def test_update_missing_product_is_404(client, auth_headers):
    r = await client.put(f"/products/{uuid.uuid4()}", json={"stock": 3}, headers=auth_headers)
    assert r.status_code == 404


async def test_soft_deleted_product_is_hidden_but_hard_deletable(client, auth_headers, product):
    pid = product["id"]

    r = await client.delete(f"/products/{pid}", headers=auth_headers)
    assert r.status_code == 200

    assert (await client.get(f"/products/{pid}", headers=auth_headers)).status_code == 404
    assert (await client.put(f"/products/{pid}", json={"stock": 1}, headers=auth_headers)).status_code == 404
    assert (await client.delete(f"/products/{pid}", headers=auth_headers)).status_code == 404

    r = await client.delete(f"/products/{pid}/hard", headers=auth_headers)
    assert r.status_code == 200

    assert (await client.delete(f"/products/{pid}/hard", headers=auth_headers)).status_code == 404


async def test_malformed_product_id_is_400(client, auth_headers):
    r = await client.get("/products/12345", headers=auth_headers)

    assert r.status_code == 400
    assert r.json()["field"] == "product_id"


async def test_create_rejects_stock_beyond_integer_column(client, auth_headers, product_payload):
    r = await client.post("/products", json=dict(product_payload, stock=2**40), headers=auth_headers)

    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "stock"
