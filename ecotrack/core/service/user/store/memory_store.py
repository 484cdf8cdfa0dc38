from typing import Dict, Iterable, List, Optional

from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.user import UserRecord
from ecotrack.core.service.user.store.base import RecordUserStore

logger = get_logger(__name__)


class InMemoryUserStore(RecordUserStore):
    """Process-local user store, used for demos and tests"""

    def __init__(self, completion_bonus: Optional[int] = None):
        super().__init__(completion_bonus)
        self.users: Dict[str, UserRecord] = {}

    def _copy(self, user: Optional[UserRecord]) -> Optional[UserRecord]:
        return user.model_copy(deep=True) if user else None

    async def _load(self, user_id: str) -> Optional[UserRecord]:
        return self._copy(self.users.get(user_id))

    async def _load_by_phone(self, phone: str) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.phone == phone:
                return self._copy(user)
        return None

    async def _insert(self, user: UserRecord) -> None:
        self.users[user.id] = self._copy(user)

    async def _save(self, user: UserRecord, fields: Iterable[str]) -> None:
        self.users[user.id] = self._copy(user)

    async def list_all(self) -> List[UserRecord]:
        return [self._copy(user) for user in self.users.values()]

    async def clear(self) -> None:
        count = len(self.users)
        self.users.clear()
        logger.info("All users cleared from store", extra={"cleared": count})

    def __len__(self) -> int:
        return len(self.users)
