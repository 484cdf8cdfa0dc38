"""
Remote API facade: request shaping and error mapping against a mocked
transport, then the same operations against the real application.
"""

import json

import httpx
import pytest

from ecotrack.app import create_app
from ecotrack.core.exceptions.base import (
    DuplicatePhoneError,
    InsufficientPointsError,
    NotFoundError,
    RemoteRequestFailedError,
    UnauthorizedError,
)
from ecotrack.core.http_client import create_api_client
from ecotrack.core.service.user.models.entries import BagEntry, ReportEntry
from ecotrack.core.service.user.models.user import UserLevel
from ecotrack.core.service.user.store.memory_store import InMemoryUserStore
from ecotrack.core.service.user.store.remote_store import RemoteUserStore
from ecotrack.infra.config.settings import get_settings

settings = get_settings()

BASE_URL = "http://api.test/api/v1"
TEST_PHONE = "5551234567"
TEST_PROFILE = {
    "full_name": "Ana",
    "address": "12 Green Street",
    "household_size": "3",
    "community": "Riverside",
}


class RecordingHandler:
    """Mock transport handler answering every request with one canned response"""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {"success": True}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


def remote_with(handler, token=None) -> RemoteUserStore:
    client = create_api_client(BASE_URL, transport=httpx.MockTransport(handler))
    return RemoteUserStore(token=token, client=client)


@pytest.mark.asyncio
async def test_anonymous_key_sent_without_token():
    handler = RecordingHandler(body={"rewards": []})

    async with remote_with(handler) as remote:
        await remote.get_available_rewards()

    request = handler.requests[0]
    assert request.headers["Authorization"] == f"Bearer {settings.PUBLIC_ANON_KEY}"
    assert request.headers["Content-Type"] == "application/json"
    assert request.url.path == "/api/v1/rewards/available"


@pytest.mark.asyncio
async def test_session_token_sent_when_set():
    handler = RecordingHandler()

    async with remote_with(handler, token="mock-token-user-1") as remote:
        assert await remote.set_training_progress(TEST_PHONE, "Composting 101", 40)

    request = handler.requests[0]
    assert request.headers["Authorization"] == "Bearer mock-token-user-1"
    assert request.method == "POST"
    assert json.loads(request.content) == {"moduleName": "Composting 101", "progress": 40}


@pytest.mark.asyncio
async def test_update_sends_camel_case_body():
    handler = RecordingHandler(body={"success": True, "profile": {}})

    async with remote_with(handler) as remote:
        remote.set_token("t", TEST_PHONE)
        assert await remote.update(TEST_PHONE, {"full_name": "Ana B", "household_size": "4"})

    request = handler.requests[0]
    assert request.url.path == "/api/v1/user/profile/update"
    assert json.loads(request.content) == {"fullName": "Ana B", "householdSize": "4"}


@pytest.mark.asyncio
async def test_update_of_points_goes_through_admin_endpoint():
    handler = RecordingHandler()

    async with remote_with(handler) as remote:
        remote.set_token("t", TEST_PHONE)
        assert await remote.update(TEST_PHONE, {"total_points": 600})

    request = handler.requests[0]
    assert request.url.path == "/api/v1/admin/users/update"
    assert request.headers["X-Admin-Key"] == settings.ADMIN_API_KEY
    assert json.loads(request.content) == {"phone": TEST_PHONE, "totalPoints": 600}


@pytest.mark.asyncio
async def test_update_of_other_user_addressed_by_phone():
    handler = RecordingHandler(status_code=404, body={"success": False})

    async with remote_with(handler) as remote:
        remote.set_token("t", TEST_PHONE)
        assert await remote.update("0000000000", {"bio": "x"}) is False

    assert handler.requests[0].url.path == "/api/v1/admin/users/update"


@pytest.mark.asyncio
async def test_update_rejects_managed_fields_without_request():
    handler = RecordingHandler()

    async with remote_with(handler, token="t") as remote:
        with pytest.raises(ValueError):
            await remote.update(TEST_PHONE, {"level": "Gold Citizen"})

    assert handler.requests == []


@pytest.mark.asyncio
async def test_append_report_body():
    handler = RecordingHandler()
    report = ReportEntry(
        location="Main St",
        type="Overflowing Bin",
        image_url="https://img.example/1.jpg",
        coordinates={"lat": 40.1, "lng": -3.5},
    )

    async with remote_with(handler, token="t") as remote:
        assert await remote.append_report(TEST_PHONE, report)

    assert json.loads(handler.requests[0].content) == {
        "location": "Main St",
        "type": "Overflowing Bin",
        "imageUrl": "https://img.example/1.jpg",
        "coordinates": {"lat": 40.1, "lng": -3.5},
    }


@pytest.mark.asyncio
async def test_unauthorized_maps_to_error():
    handler = RecordingHandler(status_code=401, body={"success": False})

    async with remote_with(handler, token="expired") as remote:
        with pytest.raises(UnauthorizedError):
            await remote.get_bags()


@pytest.mark.asyncio
async def test_server_error_carries_status_and_body():
    handler = RecordingHandler(status_code=500, body={"detail": "boom"})

    async with remote_with(handler, token="t") as remote:
        with pytest.raises(RemoteRequestFailedError) as exc_info:
            await remote.get_reports()

    error = exc_info.value
    assert error.status_code == 500
    assert error.message.startswith("API Error: 500 - ")
    assert "boom" in error.body


@pytest.mark.asyncio
async def test_not_found_append_returns_false():
    handler = RecordingHandler(status_code=404, body={"success": False})

    async with remote_with(handler, token="t") as remote:
        assert await remote.append_bag(TEST_PHONE, BagEntry(type="Glass", weight="1kg", qr_code="QR")) is False


@pytest.mark.asyncio
async def test_redeem_unknown_reward_raises_not_found():
    handler = RecordingHandler(status_code=404, body={
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Reward not found", "details": {"reward_id": 99}},
    })

    async with remote_with(handler, token="t") as remote:
        with pytest.raises(NotFoundError) as exc_info:
            await remote.redeem_reward(TEST_PHONE, reward_id=99, points=10)

    assert exc_info.value.details == {"reward_id": 99}


@pytest.mark.asyncio
async def test_redeem_unknown_user_returns_none():
    handler = RecordingHandler(status_code=404, body={
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "User not found", "details": {"user_id": "user-1"}},
    })

    async with remote_with(handler, token="t") as remote:
        assert await remote.redeem_reward(TEST_PHONE, reward_id=1, points=10) is None


@pytest.mark.asyncio
async def test_admin_calls_send_admin_key():
    handler = RecordingHandler(body={"users": []})

    async with remote_with(handler) as remote:
        assert await remote.list_all() == []

    assert handler.requests[0].headers["X-Admin-Key"] == settings.ADMIN_API_KEY


@pytest.fixture
async def api_remote():
    """Remote store talking to an in-process application"""
    app = create_app(user_store=InMemoryUserStore())
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL)
    remote = RemoteUserStore(client=client)
    try:
        yield remote
    finally:
        await remote.aclose()


@pytest.mark.asyncio
async def test_remote_register_and_login(api_remote):
    user = await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    assert api_remote.token == f"{settings.TOKEN_PREFIX}{user.id}"
    assert user.total_points == 0

    with pytest.raises(DuplicatePhoneError):
        await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    api_remote.set_token(None)
    found = await api_remote.find_by_phone(TEST_PHONE)
    assert found.id == user.id
    assert api_remote.token is not None

    assert await api_remote.find_by_phone("0000000000") is None


@pytest.mark.asyncio
async def test_remote_sub_resources_and_points(api_remote):
    user = await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    assert await api_remote.append_bag(TEST_PHONE, BagEntry(type="Plastic", weight="2kg", qr_code="QR-7"))
    assert await api_remote.set_training_progress(TEST_PHONE, "Waste Sorting Basics", 100)
    assert await api_remote.set_training_progress(TEST_PHONE, "Unknown Module", 10) is False

    with pytest.raises(InsufficientPointsError) as exc_info:
        await api_remote.redeem_reward(TEST_PHONE, reward_id=1, points=150)
    assert exc_info.value.available == 100

    assert await api_remote.set_training_progress(TEST_PHONE, "Composting 101", 100)
    redemption = await api_remote.redeem_reward(TEST_PHONE, reward_id=1, points=150)
    assert redemption.reward_id == 1

    record = await api_remote.get_user(user.id)
    assert [bag.qr_code for bag in record.bags] == ["QR-7"]
    assert record.total_points == 50
    assert [r.id for r in record.rewards] == [redemption.id]
    assert sum(1 for m in record.training if m.completed) == 2

    assert await api_remote.get_user("user-someone-else") is None


@pytest.mark.asyncio
async def test_remote_profile_update(api_remote):
    user = await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    assert await api_remote.update(TEST_PHONE, {"bio": "Recycler"})
    await api_remote.update_household(emergency_contact="Luis", waste_preferences=["glass"])

    profile = (await api_remote.get_profile())["profile"]
    assert profile["id"] == user.id
    assert profile["bio"] == "Recycler"
    assert profile["emergencyContact"] == "Luis"
    assert profile["wastePreferences"] == ["glass"]


@pytest.mark.asyncio
async def test_remote_admin_reset(api_remote):
    user = await api_remote.register(TEST_PHONE, **TEST_PROFILE)
    assert [u.id for u in await api_remote.list_all()] == [user.id]

    await api_remote.clear()

    assert await api_remote.list_all() == []
    assert await api_remote.get_user(user.id) is None


@pytest.mark.asyncio
async def test_remote_update_matches_local_contract(api_remote):
    user = await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    assert await api_remote.update(TEST_PHONE, {"total_points": 600, "bio": "Recycler"})
    assert await api_remote.update("0000000000", {"address": "nowhere"}) is False
    with pytest.raises(ValueError):
        await api_remote.update(TEST_PHONE, {"level": "Gold Citizen"})

    record = await api_remote.get_user(user.id)
    assert record.total_points == 600
    assert record.level == UserLevel.SILVER
    assert record.bio == "Recycler"


@pytest.mark.asyncio
async def test_remote_redeem_unknown_reward(api_remote):
    await api_remote.register(TEST_PHONE, **TEST_PROFILE)

    with pytest.raises(NotFoundError):
        await api_remote.redeem_reward(TEST_PHONE, reward_id=99, points=10)
