from typing import Optional

from fastapi import Request
from fastapi.security import HTTPBearer

from ecotrack.core.exceptions.base import UnauthorizedError
from ecotrack.core.logger.logger import logger
from ecotrack.infra.config.settings import settings


class SessionBearer(HTTPBearer):
    """
    Extracts the bearer token of a request.

    The public anonymous key identifies the client app but no user, so it is
    rejected like a missing token.
    """

    async def __call__(self, request: Request) -> Optional[str]:
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            logger.warning("Authentication error: no authorization header", extra={"path": request.url.path})
            raise UnauthorizedError("No authorization header")

        try:
            scheme, credentials = auth_header.split()
        except ValueError:
            raise UnauthorizedError("Invalid authorization header")

        if scheme.lower() != "bearer":
            raise UnauthorizedError("Invalid authentication scheme")

        if credentials == settings.PUBLIC_ANON_KEY:
            raise UnauthorizedError("Anonymous key cannot access user data")

        return credentials
