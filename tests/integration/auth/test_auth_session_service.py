import pytest

from ecotrack.core.exceptions.base import DuplicatePhoneError, UnauthorizedError
from ecotrack.core.service.auth.session_service import AuthSessionService
from ecotrack.core.service.user.store.memory_store import InMemoryUserStore
from ecotrack.infra.config.settings import get_settings

settings = get_settings()

TEST_PHONE = "5551234567"


@pytest.fixture
def auth_service():
    return AuthSessionService(InMemoryUserStore())


async def sign_up_ana(service: AuthSessionService):
    return await service.sign_up(
        phone=TEST_PHONE,
        full_name="Ana",
        address="12 Green Street",
        household_size="3",
        community="Riverside",
    )


@pytest.mark.asyncio
async def test_request_code_always_accepted(auth_service):
    assert await auth_service.request_verification_code(TEST_PHONE) is True


@pytest.mark.asyncio
@pytest.mark.parametrize("code,expected", [
    ("123456", True),
    ("abcdef", True),
    ("12345", False),
    ("1234567", False),
    ("", False),
])
async def test_verification_code_length(auth_service, code, expected):
    assert await auth_service.complete_verification(code) is expected


@pytest.mark.asyncio
async def test_sign_up_establishes_session(auth_service):
    """Sign-up of a new phone yields a Bronze user with a token naming its id"""
    user = await sign_up_ana(auth_service)

    current, token = auth_service.current_session()
    assert current.id == user.id
    assert token == f"{settings.TOKEN_PREFIX}{user.id}"
    assert user.total_points == 0
    assert user.level.value == "Bronze Citizen"


@pytest.mark.asyncio
async def test_sign_up_duplicate_phone(auth_service):
    await sign_up_ana(auth_service)
    auth_service.end_session()

    with pytest.raises(DuplicatePhoneError):
        await sign_up_ana(auth_service)

    assert auth_service.current_session() == (None, None)


@pytest.mark.asyncio
async def test_sign_in_returning_user(auth_service):
    user = await sign_up_ana(auth_service)
    auth_service.end_session()

    signed_in = await auth_service.sign_in(TEST_PHONE)

    assert signed_in.id == user.id
    assert auth_service.access_token == auth_service.issue_token(user)


@pytest.mark.asyncio
async def test_sign_in_unknown_phone(auth_service):
    assert await auth_service.sign_in("0000000000") is None
    assert auth_service.current_session() == (None, None)


@pytest.mark.asyncio
async def test_end_session(auth_service):
    await sign_up_ana(auth_service)

    auth_service.end_session()

    assert auth_service.current_user is None
    assert auth_service.access_token is None


@pytest.mark.asyncio
async def test_resolve_token(auth_service):
    user = await sign_up_ana(auth_service)

    resolved = await auth_service.resolve_token(auth_service.access_token)

    assert resolved.id == user.id
    assert resolved.phone == TEST_PHONE


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [
    None,
    "",
    "not-a-session-token",
    f"{settings.TOKEN_PREFIX}user-unknown",
])
async def test_resolve_token_rejected(auth_service, token):
    with pytest.raises(UnauthorizedError):
        await auth_service.resolve_token(token)
