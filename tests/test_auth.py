PASSWORD = "password123"


async def test_register_returns_user_without_password(client):
    r = await client.post("/auth/register", json={"email": "Ann@Example.com", "password": PASSWORD, "name": "Ann"})

    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "ann@example.com"
    assert body["name"] == "Ann"
    assert "id" in body
    assert "password" not in body and "password_hash" not in body


async def test_register_duplicate_email_is_rejected(client):
    payload = {"email": "dup@example.com", "password": PASSWORD, "name": "Dup"}
    assert (await client.post("/auth/register", json=payload)).status_code == 201

    r = await client.post("/auth/register", json=payload)

    assert r.status_code == 400
    assert "already exists" in r.json()["detail"]


async def test_register_missing_field_is_a_400(client):
    r = await client.post("/auth/register", json={"email": "x@example.com", "password": PASSWORD})

    assert r.status_code == 400
    assert any(err["field"] == "name" for err in r.json()["errors"])


async def test_login_issues_bearer_token(client):
    await client.post("/auth/register", json={"email": "bob@example.com", "password": PASSWORD, "name": "Bob"})

    r = await client.post("/auth/login", json={"email": "bob@example.com", "password": PASSWORD})

    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {r.json()['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "bob@example.com"


async def test_login_with_wrong_password_is_401(client):
    await client.post("/auth/register", json={"email": "eve@example.com", "password": PASSWORD, "name": "Eve"})

    r = await client.post("/auth/login", json={"email": "eve@example.com", "password": "not-the-password"})

    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


async def test_login_unknown_user_is_401(client):
    r = await client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert r.status_code == 401


async def test_protected_routes_require_token(client):
    for method, path in [("GET", "/products"), ("GET", "/cart"), ("GET", "/auth/me")]:
        r = await client.request(method, path)
        assert r.status_code == 401, path


async def test_invalid_token_is_rejected(client):
    r = await client.get("/cart", headers={"Authorization": "Bearer not.a.token"})
    assert r.status_code == 401


async def test_health_is_public(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_register_blank_name_is_rejected_without_creating_user(client):
    payload = {"email": "blank@example.com", "password": PASSWORD, "name": "   "}

    r = await client.post("/auth/register", json=payload)

    assert r.status_code == 400
    assert r.json()["field"] == "name"
    r = await client.post("/auth/register", json=dict(payload, name="Blank"))
    assert r.status_code == 201
