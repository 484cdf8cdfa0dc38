"""
Remote API facade.

Speaks to the EcoTrack REST API with a bearer token and exposes the same
operations as the local stores. The remote service scopes every call to the
user behind the token, so ``phone`` arguments only identify the caller in logs.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ecotrack.core.exceptions.base import (
    DuplicatePhoneError,
    InsufficientPointsError,
    NotFoundError,
    RemoteRequestFailedError,
    UnauthorizedError,
)
from ecotrack.core.exceptions.handler import ServiceErrorCode
from ecotrack.core.http_client import create_api_client
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.entries import (
    BagEntry,
    RedemptionEntry,
    ReportEntry,
    TrainingModule,
)
from ecotrack.core.service.user.models.reward import Reward
from ecotrack.core.service.user.models.user import EDITABLE_FIELDS, UserRecord
from ecotrack.core.service.user.store.base import UserDataStore
from ecotrack.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()


def _to_wire(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Rename record attributes to their camelCase wire names"""
    body = {}
    for name, value in fields.items():
        field = UserRecord.model_fields.get(name)
        body[field.alias if field and field.alias else name] = value
    return body


class RemoteUserStore(UserDataStore):
    """User store backed by the remote REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        admin_key: Optional[str] = None,
    ):
        self.token = token
        self.session_phone: Optional[str] = None
        self.admin_key = admin_key or settings.ADMIN_API_KEY
        self.client = client or create_api_client(base_url)

    async def __aenter__(self) -> "RemoteUserStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def set_token(self, token: Optional[str], phone: Optional[str] = None) -> None:
        self.token = token
        self.session_phone = phone

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token or settings.PUBLIC_ANON_KEY}"}

    async def request(
        self,
        method: str,
        endpoint: str,
        json_body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Issue one API call and decode the JSON response.

        Raises:
            UnauthorizedError: on 401
            RemoteRequestFailedError: on any other non-2xx status
        """
        request_headers = self._auth_headers()
        if headers:
            request_headers.update(headers)

        start_time = datetime.utcnow()
        try:
            response = await self.client.request(
                method,
                endpoint,
                json=json_body,
                headers=request_headers,
            )
        except httpx.TimeoutException:
            logger.error("API request timeout", extra={"method": method, "endpoint": endpoint})
            raise
        except httpx.RequestError as e:
            logger.error(
                "API connection error",
                extra={"method": method, "endpoint": endpoint, "error": str(e)}
            )
            raise

        duration = (datetime.utcnow() - start_time).total_seconds()
        logger.debug(
            "API response received",
            extra={
                "method": method,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "duration_seconds": duration
            }
        )

        if response.is_success:
            return response.json()

        logger.error(
            f"API Error {response.status_code}",
            extra={
                "method": method,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "response_text": response.text[:500]
            }
        )
        if response.status_code == 401:
            raise UnauthorizedError("Authentication failed", details={"endpoint": endpoint})
        raise RemoteRequestFailedError(response.status_code, response.text)

    @staticmethod
    def _error_body(exc: RemoteRequestFailedError) -> Dict[str, Any]:
        """The ``error`` object of a failed response, empty if absent"""
        try:
            error = json.loads(exc.body).get("error")
        except (ValueError, AttributeError):
            return {}
        return error if isinstance(error, dict) else {}

    # Auth

    async def register(
        self,
        phone: str,
        full_name: str,
        address: str,
        household_size: str,
        community: str,
    ) -> UserRecord:
        try:
            data = await self.request("POST", "/auth/signup", {
                "phone": phone,
                "fullName": full_name,
                "address": address,
                "householdSize": household_size,
                "community": community,
            })
        except RemoteRequestFailedError as e:
            if e.status_code == 409:
                raise DuplicatePhoneError(phone)
            raise

        user = UserRecord.model_validate(data["user"])
        self.set_token(data.get("token"), user.phone)
        return user

    async def find_by_phone(self, phone: str) -> Optional[UserRecord]:
        try:
            data = await self.request("POST", "/auth/login", {"phone": phone})
        except RemoteRequestFailedError as e:
            if e.status_code == 404:
                return None
            raise

        user = UserRecord.model_validate(data["user"])
        self.set_token(data.get("token"), user.phone)
        return user

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Assemble the session user's full record; None if it is not ``user_id``"""
        try:
            profile = (await self.get_profile())["profile"]
        except UnauthorizedError:
            return None

        if profile.get("id") != user_id:
            return None

        profile["bags"] = await self.get_bags()
        profile["reports"] = await self.get_reports()
        profile["rewards"] = await self.get_redemptions()
        profile["training"] = await self.get_training()
        return UserRecord.model_validate(profile)

    # Profile

    async def get_profile(self) -> Dict[str, Any]:
        """Returns ``{profile, stats}``"""
        return await self.request("GET", "/user/profile")

    async def update(self, phone: str, fields: Dict[str, Any]) -> bool:
        """
        Merge fields into a user. Profile edits of the session user go through
        its own endpoint; other users and point balances are addressed by phone
        through the admin endpoint.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        body = _to_wire(fields)

        try:
            if phone != self.session_phone or "total_points" in fields:
                await self.request(
                    "POST",
                    "/admin/users/update",
                    {"phone": phone, **body},
                    headers={"X-Admin-Key": self.admin_key},
                )
            else:
                await self.request("POST", "/user/profile/update", body)
        except RemoteRequestFailedError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def update_household(self, **household: Any) -> Dict[str, Any]:
        body = _to_wire(household)
        return await self.request("POST", "/user/household/update", body)

    # Sub-resources

    async def append_bag(self, phone: str, bag: BagEntry) -> bool:
        try:
            await self.request("POST", "/bags/add", {
                "type": bag.type,
                "weight": bag.weight,
                "qrCode": bag.qr_code,
            })
        except RemoteRequestFailedError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def get_bags(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/bags"))["bags"]

    async def append_report(self, phone: str, report: ReportEntry) -> bool:
        body = {
            "location": report.location,
            "type": report.type.value,
            "imageUrl": report.image_url,
        }
        if report.coordinates:
            body["coordinates"] = report.coordinates.model_dump()

        try:
            await self.request("POST", "/reports/submit", body)
        except RemoteRequestFailedError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def get_reports(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/reports"))["reports"]

    async def append_reward(self, phone: str, reward: RedemptionEntry) -> bool:
        # The API only records redemptions through the redeem endpoint
        return await self.redeem_reward(phone, reward.reward_id, reward.points) is not None

    async def get_available_rewards(self) -> List[Reward]:
        data = await self.request("GET", "/rewards/available")
        return [Reward.model_validate(reward) for reward in data["rewards"]]

    async def get_redemptions(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/rewards/history"))["rewards"]

    async def redeem_reward(self, phone: str, reward_id: int, points: int) -> Optional[RedemptionEntry]:
        try:
            data = await self.request("POST", "/rewards/redeem", {
                "rewardId": reward_id,
                "points": points,
            })
        except RemoteRequestFailedError as e:
            error = self._error_body(e)
            details = error.get("details", {})
            if error.get("code") == ServiceErrorCode.INSUFFICIENT_POINTS:
                raise InsufficientPointsError(
                    requested=details.get("requested", points),
                    available=details.get("available", 0),
                )
            if e.status_code == 404:
                if "reward_id" in details:
                    raise NotFoundError(error.get("message", "Reward not found"), details=details)
                return None
            raise

        return RedemptionEntry.model_validate(data["redemption"])

    async def get_training(self) -> List[TrainingModule]:
        data = await self.request("GET", "/training")
        return [TrainingModule.model_validate(module) for module in data["training"]]

    async def set_training_progress(self, phone: str, module_name: str, progress: int) -> bool:
        try:
            await self.request("POST", "/training/update", {
                "moduleName": module_name,
                "progress": progress,
            })
        except RemoteRequestFailedError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    # Administration

    async def list_all(self) -> List[UserRecord]:
        data = await self.request("GET", "/admin/users", headers={"X-Admin-Key": self.admin_key})
        return [UserRecord.model_validate(user) for user in data["users"]]

    async def clear(self) -> None:
        await self.request("POST", "/admin/reset", headers={"X-Admin-Key": self.admin_key})
