"""
FastAPI dependency injection functions.
The active user store is created once per application and kept on ``app.state``.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.api.middleware.authentication.session_bearer import SessionBearer
from ecotrack.core.exceptions.base import UnauthorizedError
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.auth.session_service import AuthSessionService
from ecotrack.core.service.user.models.user import UserRecord
from ecotrack.core.service.user.store.base import UserDataStore
from ecotrack.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()

bearer_scheme = SessionBearer()


async def get_user_store(request: Request) -> UserDataStore:
    """Get the application's user store."""
    return request.app.state.user_store


async def get_auth_service(store: UserDataStore = Depends(get_user_store)) -> AuthSessionService:
    """Get an auth service bound to the active store."""
    return AuthSessionService(store)


async def get_user_controller(store: UserDataStore = Depends(get_user_store)) -> UserController:
    """Get user controller with store dependency."""
    return UserController(store)


async def get_current_user(
    token: str = Depends(bearer_scheme),
    auth_service: AuthSessionService = Depends(get_auth_service)
) -> UserRecord:
    """Resolve the bearer token to the acting user."""
    return await auth_service.resolve_token(token)


async def require_admin(x_admin_key: Optional[str] = Header(default=None)) -> None:
    """Guard for administrative endpoints."""
    if x_admin_key != settings.ADMIN_API_KEY:
        logger.warning("Rejected admin request")
        raise UnauthorizedError("Admin key required")
