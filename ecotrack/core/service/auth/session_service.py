from typing import Optional, Tuple

from ecotrack.core.exceptions.base import UnauthorizedError
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.user import UserRecord
from ecotrack.core.service.user.store.base import UserDataStore
from ecotrack.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()


class AuthSessionService:
    """
    Phone sign-in shim around a user store.

    Holds at most one current user and its token. Tokens are
    ``<TOKEN_PREFIX><user id>`` and only correlate requests to a user; they
    are not signed. Verification codes are never sent and any code of the
    configured length is accepted.
    """

    def __init__(self, store: UserDataStore):
        self.store = store
        self.token_prefix = settings.TOKEN_PREFIX
        self.code_length = settings.OTP_CODE_LENGTH
        self.current_user: Optional[UserRecord] = None
        self.access_token: Optional[str] = None

    def issue_token(self, user: UserRecord) -> str:
        return f"{self.token_prefix}{user.id}"

    async def request_verification_code(self, phone: str) -> bool:
        logger.info("Verification code requested", extra={"phone": phone})
        return True

    async def complete_verification(self, code: str) -> bool:
        verified = len(code) == self.code_length
        if not verified:
            logger.warning("Verification code rejected", extra={"code_length": len(code)})
        return verified

    def establish_session(self, user: UserRecord) -> str:
        self.current_user = user
        self.access_token = self.issue_token(user)
        logger.info("Session established", extra={"user_id": user.id})
        return self.access_token

    def current_session(self) -> Tuple[Optional[UserRecord], Optional[str]]:
        if self.current_user is None:
            return None, None
        return self.current_user, self.access_token

    def end_session(self) -> None:
        if self.current_user:
            logger.info("Session ended", extra={"user_id": self.current_user.id})
        self.current_user = None
        self.access_token = None

    async def sign_up(
        self,
        phone: str,
        full_name: str,
        address: str,
        household_size: str,
        community: str,
    ) -> UserRecord:
        """Register a new user and make it the current session"""
        user = await self.store.register(phone, full_name, address, household_size, community)
        self.establish_session(user)
        return user

    async def sign_in(self, phone: str) -> Optional[UserRecord]:
        """
        Start a session for a returning user.

        Returns:
            The user, or None when the phone is not registered and the caller
            should continue with sign-up
        """
        user = await self.store.find_by_phone(phone)
        if user is None:
            logger.info("Sign-in for unregistered phone", extra={"phone": phone})
            return None

        self.establish_session(user)
        return user

    async def resolve_token(self, token: Optional[str]) -> UserRecord:
        """
        Map a bearer token back to its user.

        Raises:
            UnauthorizedError: if the token is missing, malformed or names no user
        """
        if not token:
            raise UnauthorizedError("No token provided")
        if not token.startswith(self.token_prefix):
            raise UnauthorizedError("Invalid token")

        user = await self.store.get_user(token[len(self.token_prefix):])
        if user is None:
            raise UnauthorizedError("Invalid token")
        return user
