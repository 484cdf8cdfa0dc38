"""
User data store abstraction.

Every backend (in-process, Redis KV, remote API) implements the same
``UserDataStore`` contract so callers never branch on which one is active.
Backends that hold the records themselves derive from ``RecordUserStore``,
which implements all sub-resource operations on top of two primitives:
``append_to_list`` and ``update_in_list``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from ecotrack.core.exceptions.base import DuplicatePhoneError, InsufficientPointsError
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.entries import (
    BagEntry,
    RedemptionEntry,
    ReportEntry,
)
from ecotrack.core.service.user.models.user import EDITABLE_FIELDS, UserRecord
from ecotrack.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()

SUB_RESOURCES = ("bags", "reports", "rewards", "training")


def append_to_list(user: UserRecord, field: str, entry: BaseModel) -> None:
    """Push one entry onto a sub-resource list of ``user``"""
    if field not in SUB_RESOURCES:
        raise ValueError(f"Unknown sub-resource: {field}")
    getattr(user, field).append(entry)


def update_in_list(
    user: UserRecord,
    field: str,
    match_key: str,
    match_value: Any,
    patch: Dict[str, Any],
) -> Optional[BaseModel]:
    """
    Patch the first entry of a sub-resource list whose ``match_key`` equals
    ``match_value``.

    Returns:
        The updated entry, or None when nothing matched
    """
    if field not in SUB_RESOURCES:
        raise ValueError(f"Unknown sub-resource: {field}")
    entries = getattr(user, field)
    for index, entry in enumerate(entries):
        if getattr(entry, match_key) == match_value:
            entries[index] = entry.model_copy(update=patch)
            return entries[index]
    return None


class UserDataStore(ABC):
    """Operations every user data backend provides"""

    @abstractmethod
    async def register(
        self,
        phone: str,
        full_name: str,
        address: str,
        household_size: str,
        community: str,
    ) -> UserRecord:
        """Create a user; raises DuplicatePhoneError if the phone is taken"""
        pass

    @abstractmethod
    async def find_by_phone(self, phone: str) -> Optional[UserRecord]:
        """Look up a user and refresh its last login time"""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def update(self, phone: str, fields: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def append_bag(self, phone: str, bag: BagEntry) -> bool:
        pass

    @abstractmethod
    async def append_report(self, phone: str, report: ReportEntry) -> bool:
        pass

    @abstractmethod
    async def append_reward(self, phone: str, reward: RedemptionEntry) -> bool:
        pass

    @abstractmethod
    async def set_training_progress(self, phone: str, module_name: str, progress: int) -> bool:
        pass

    @abstractmethod
    async def redeem_reward(self, phone: str, reward_id: int, points: int) -> Optional[RedemptionEntry]:
        """Spend points on a reward; raises InsufficientPointsError"""
        pass

    @abstractmethod
    async def list_all(self) -> List[UserRecord]:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


class RecordUserStore(UserDataStore):
    """
    Base for backends that own the user records.

    Subclasses provide loading and saving; the aggregate rules (unique phone,
    one-time training bonus, non-negative points) live here.
    """

    def __init__(self, completion_bonus: Optional[int] = None):
        self.completion_bonus = (
            settings.TRAINING_COMPLETION_BONUS if completion_bonus is None else completion_bonus
        )

    @abstractmethod
    async def _load(self, user_id: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def _load_by_phone(self, phone: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def _insert(self, user: UserRecord) -> None:
        pass

    @abstractmethod
    async def _save(self, user: UserRecord, fields: Iterable[str]) -> None:
        """Persist the given top-level fields of an existing user"""
        pass

    async def register(
        self,
        phone: str,
        full_name: str,
        address: str,
        household_size: str,
        community: str,
    ) -> UserRecord:
        if await self._load_by_phone(phone) is not None:
            logger.warning("Registration rejected, phone exists", extra={"phone": phone})
            raise DuplicatePhoneError(phone)

        user = UserRecord(
            phone=phone,
            full_name=full_name,
            address=address,
            household_size=household_size,
            community=community,
        )
        await self._insert(user)

        logger.info(
            "User registered",
            extra={"user_id": user.id, "phone": phone, "community": community}
        )
        return user

    async def find_by_phone(self, phone: str) -> Optional[UserRecord]:
        user = await self._load_by_phone(phone)
        if user is None:
            return None

        user.touch_login()
        await self._save(user, ["last_login"])
        return user

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        return await self._load(user_id)

    async def update(self, phone: str, fields: Dict[str, Any]) -> bool:
        user = await self._load_by_phone(phone)
        if user is None:
            return False

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        # Re-validate through the model so bad values are rejected
        merged = UserRecord.model_validate({**user.model_dump(), **fields})
        await self._save(merged, fields.keys())

        logger.info(
            "User updated",
            extra={"user_id": user.id, "fields": sorted(fields)}
        )
        return True

    async def _append(self, phone: str, field: str, entry: BaseModel) -> bool:
        user = await self._load_by_phone(phone)
        if user is None:
            logger.warning(
                "Append to unknown user",
                extra={"phone": phone, "resource": field}
            )
            return False

        append_to_list(user, field, entry)
        await self._save(user, [field])

        logger.info(
            "Sub-resource appended",
            extra={"user_id": user.id, "resource": field, "entry_id": getattr(entry, "id", None)}
        )
        return True

    async def append_bag(self, phone: str, bag: BagEntry) -> bool:
        return await self._append(phone, "bags", bag)

    async def append_report(self, phone: str, report: ReportEntry) -> bool:
        return await self._append(phone, "reports", report)

    async def append_reward(self, phone: str, reward: RedemptionEntry) -> bool:
        return await self._append(phone, "rewards", reward)

    async def set_training_progress(self, phone: str, module_name: str, progress: int) -> bool:
        user = await self._load_by_phone(phone)
        if user is None:
            return False

        progress = max(0, min(100, progress))
        previous = next((m for m in user.training if m.name == module_name), None)
        if previous is None:
            logger.warning(
                "Unknown training module",
                extra={"user_id": user.id, "module_name": module_name}
            )
            return False

        patch = {"progress": progress, "completed": progress >= 100}
        grant_bonus = progress >= 100 and not (previous.bonus_awarded or previous.completed)
        if grant_bonus:
            patch["bonus_awarded"] = True
        update_in_list(user, "training", "name", module_name, patch)

        changed = ["training"]
        if grant_bonus:
            user.total_points += self.completion_bonus
            changed.append("total_points")
            logger.info(
                "Training module completed",
                extra={
                    "user_id": user.id,
                    "module_name": module_name,
                    "bonus_points": self.completion_bonus,
                    "total_points": user.total_points,
                    "level": user.level.value
                }
            )

        await self._save(user, changed)
        return True

    async def redeem_reward(self, phone: str, reward_id: int, points: int) -> Optional[RedemptionEntry]:
        user = await self._load_by_phone(phone)
        if user is None:
            return None

        if points < 0:
            raise ValueError("Points must be non-negative")
        if points > user.total_points:
            logger.warning(
                "Redemption rejected, insufficient points",
                extra={"user_id": user.id, "requested": points, "available": user.total_points}
            )
            raise InsufficientPointsError(requested=points, available=user.total_points)

        redemption = RedemptionEntry(reward_id=reward_id, points=points)
        user.total_points -= points
        append_to_list(user, "rewards", redemption)
        await self._save(user, ["total_points", "rewards"])

        logger.info(
            "Reward redeemed",
            extra={
                "user_id": user.id,
                "reward_id": reward_id,
                "points": points,
                "total_points": user.total_points
            }
        )
        return redemption
