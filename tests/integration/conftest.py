"""Integration-test fixtures (requires a migrated PostgreSQL).

Run: RC_INTEGRATION=1 pytest tests/integration -v
Pre-condition: DATABASE_URL points at a database after ``alembic upgrade head``.

ASGITransport does not run the application lifespan, so the engine and
session factory are put on ``app.state`` here. Everything shares one
session-scoped event loop so the pool stays valid across tests.
"""

import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app
from src.rc_common.database import build_engine, build_session_factory

API = "/api/v1"
ADMIN_EMAIL = "admin@residencial.example.com"
ADMIN_PASSWORD = "admin12345"


def pytest_collection_modifyitems(config, items):
    if os.environ.get("RC_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set RC_INTEGRATION=1 to run against PostgreSQL")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await engine.dispose()


async def login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    resp = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


def unique_resident() -> dict[str, str]:
    uid = uuid.uuid4().hex[:8]
    return {
        "email": f"resident_{uid}@example.com",
        "password": "TestPass1",
        "name": f"Resident {uid}",
        "houseNumber": f"T-{uid}",
    }


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    return await login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest_asyncio.fixture(loop_scope="session")
async def resident(client: AsyncClient) -> dict:
    """A freshly registered resident with its auth headers and resident id."""
    creds = unique_resident()
    resp = await client.post(f"{API}/auth/register", json=creds)
    assert resp.status_code == 201, resp.text
    user = resp.json()["user"]
    headers = await login(client, creds["email"], creds["password"])
    return {"headers": headers, "resident_id": user["resident"]["id"], **creds}
