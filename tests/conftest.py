import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.config import Settings
from storefront.database import init_models
from storefront.main import create_app

PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file per test."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        jwt_secret="test-secret",
        access_token_expire_minutes=10,
        log_level="WARNING",
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings, bootstrap_database=False)
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    # ASGITransport does not run the lifespan; tables are created in the app fixture
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def session(app):
    async with app.state.session_maker() as session:
        yield session


async def register_and_login(client: AsyncClient, email: str = None) -> dict:
    email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
    r = await client.post("/auth/register", json={"email": email, "password": PASSWORD, "name": "Test User"})
    assert r.status_code == 201, r.text
    r = await client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client) -> dict:
    return await register_and_login(client)


@pytest.fixture
def product_payload() -> dict:
    return {"name": "Oil filter", "price": 9.99, "description": "Spin-on oil filter", "stock": 50}


@pytest.fixture
async def product(client, auth_headers, product_payload) -> dict:
    r = await client.post("/products", json=product_payload, headers=auth_headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def login(client):
    """Register and log in another user; returns their auth headers."""
    async def _login(email: str = None) -> dict:
        return await register_and_login(client, email)
    return _login
