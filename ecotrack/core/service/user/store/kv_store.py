import json
from typing import Dict, Iterable, List, Optional

from redis.asyncio import Redis

from ecotrack.core.exceptions.base import DuplicatePhoneError
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.user import UserRecord
from ecotrack.core.service.user.store.base import RecordUserStore, SUB_RESOURCES

logger = get_logger(__name__)


class KVUserStore(RecordUserStore):
    """
    Redis-backed user store.

    Layout:
        users                 set of user ids
        user:phone:<phone>    user id
        user:<id>:profile     JSON profile, points and level
        user:<id>:<resource>  JSON list for bags, reports, rewards, training
    """

    def __init__(self, redis_client: Redis, completion_bonus: Optional[int] = None):
        super().__init__(completion_bonus)
        self.redis = redis_client
        self.users_key = "users"
        self.phone_key_prefix = "user:phone:"

    def _phone_key(self, phone: str) -> str:
        return f"{self.phone_key_prefix}{phone}"

    def _resource_key(self, user_id: str, resource: str) -> str:
        return f"user:{user_id}:{resource}"

    def _serialize_profile(self, user: UserRecord) -> str:
        return json.dumps(user.to_profile())

    def _serialize_resource(self, user: UserRecord, resource: str) -> str:
        data = user.model_dump(by_alias=True, mode="json", include={resource})
        return json.dumps(data[resource])

    async def _load(self, user_id: str) -> Optional[UserRecord]:
        try:
            profile = await self.redis.get(self._resource_key(user_id, "profile"))
            if not profile:
                return None

            data = json.loads(profile)
            lists = await self.redis.mget(
                [self._resource_key(user_id, resource) for resource in SUB_RESOURCES]
            )
            for resource, raw in zip(SUB_RESOURCES, lists):
                if raw is not None:
                    data[resource] = json.loads(raw)

            return UserRecord.model_validate(data)

        except Exception as e:
            logger.error(
                "Failed to load user",
                extra={"user_id": user_id, "error": str(e)}
            )
            raise

    async def _load_by_phone(self, phone: str) -> Optional[UserRecord]:
        user_id = await self.redis.get(self._phone_key(phone))
        if not user_id:
            return None
        return await self._load(user_id)

    async def _insert(self, user: UserRecord) -> None:
        # Claim the phone first so a second registration cannot slip in
        claimed = await self.redis.set(self._phone_key(user.phone), user.id, nx=True)
        if not claimed:
            raise DuplicatePhoneError(user.phone)

        try:
            await self.redis.set(
                self._resource_key(user.id, "profile"),
                self._serialize_profile(user)
            )
            for resource in SUB_RESOURCES:
                await self.redis.set(
                    self._resource_key(user.id, resource),
                    self._serialize_resource(user, resource)
                )
            await self.redis.sadd(self.users_key, user.id)

        except Exception as e:
            logger.error(
                "Failed to store new user",
                extra={"user_id": user.id, "phone": user.phone, "error": str(e)}
            )
            raise

    async def _save(self, user: UserRecord, fields: Iterable[str]) -> None:
        fields = set(fields)
        try:
            if fields - set(SUB_RESOURCES):
                await self.redis.set(
                    self._resource_key(user.id, "profile"),
                    self._serialize_profile(user)
                )
            for resource in fields & set(SUB_RESOURCES):
                await self.redis.set(
                    self._resource_key(user.id, resource),
                    self._serialize_resource(user, resource)
                )

        except Exception as e:
            logger.error(
                "Failed to save user",
                extra={"user_id": user.id, "fields": sorted(fields), "error": str(e)}
            )
            raise

    async def list_all(self) -> List[UserRecord]:
        user_ids = await self.redis.smembers(self.users_key)
        users = []
        for user_id in sorted(user_ids):
            user = await self._load(user_id)
            if user:
                users.append(user)
        return sorted(users, key=lambda u: u.join_date)

    async def clear(self) -> None:
        users = await self.list_all()
        keys: List[str] = [self.users_key]
        for user in users:
            keys.append(self._phone_key(user.phone))
            keys.append(self._resource_key(user.id, "profile"))
            keys.extend(self._resource_key(user.id, resource) for resource in SUB_RESOURCES)

        await self.redis.delete(*keys)
        logger.info("All users cleared from KV store", extra={"cleared": len(users)})

    async def ping(self) -> Dict[str, str]:
        try:
            await self.redis.ping()
            return {"status": "healthy", "message": "Connected"}
        except Exception as e:
            return {"status": "unhealthy", "message": f"Connection failed: {str(e)}"}
