"""
Shared test fixtures.
"""

import pytest
from fakeredis import aioredis
from fastapi.testclient import TestClient

from ecotrack.app import create_app
from ecotrack.core.service.user.store.kv_store import KVUserStore
from ecotrack.core.service.user.store.memory_store import InMemoryUserStore
from ecotrack.infra.config.settings import get_settings

settings = get_settings()

TEST_PHONE = "5551234567"
TEST_PROFILE = {
    "full_name": "Ana",
    "address": "12 Green Street",
    "household_size": "3",
    "community": "Riverside",
}


@pytest.fixture
async def redis_client():
    client = aioredis.FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture(params=["memory", "kv"])
async def store(request, redis_client):
    """Every test using this fixture runs against both record stores."""
    if request.param == "memory":
        yield InMemoryUserStore()
    else:
        yield KVUserStore(redis_client)


@pytest.fixture
async def registered_user(store):
    return await store.register(TEST_PHONE, **TEST_PROFILE)


@pytest.fixture
def memory_store():
    return InMemoryUserStore()


@pytest.fixture
def app(memory_store):
    return create_app(user_store=memory_store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client):
    """Register a user through the API and return (user, auth headers)."""
    def _signup(phone: str = TEST_PHONE, full_name: str = "Ana"):
        response = client.post("/api/v1/auth/signup", json={
            "phone": phone,
            "fullName": full_name,
            "address": "12 Green Street",
            "householdSize": "3",
            "community": "Riverside",
        })
        assert response.status_code == 200, response.text
        data = response.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}
    return _signup


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": settings.ADMIN_API_KEY}
