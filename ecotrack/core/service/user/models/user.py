"""
User record aggregate: profile, points and the nested sub-resource lists.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from ecotrack.core.service.user.models.entries import (
    BagEntry,
    ReportEntry,
    RedemptionEntry,
    TrainingModule,
)


class UserLevel(str, Enum):
    """Citizen level derived from the point total"""
    BRONZE = "Bronze Citizen"
    SILVER = "Silver Citizen"
    GOLD = "Gold Citizen"


def calculate_level(points: int) -> UserLevel:
    if points >= 1000:
        return UserLevel.GOLD
    if points >= 500:
        return UserLevel.SILVER
    if points >= 100:
        return UserLevel.BRONZE
    return UserLevel.BRONZE


STARTER_TRAINING_MODULES = (
    "Waste Sorting Basics",
    "Recycling Guidelines",
    "Composting 101",
    "Community Impact",
)


def starter_training() -> List[TrainingModule]:
    return [TrainingModule(name=name) for name in STARTER_TRAINING_MODULES]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(BaseModel):
    """Profile fields a user may edit after registration"""
    full_name: str = Field(..., alias="fullName")
    address: str
    household_size: str = Field(..., alias="householdSize")
    community: str
    bio: Optional[str] = None
    emergency_contact: Optional[str] = Field(default=None, alias="emergencyContact")
    emergency_phone: Optional[str] = Field(default=None, alias="emergencyPhone")
    special_needs: Optional[str] = Field(default=None, alias="specialNeeds")
    waste_preferences: List[str] = Field(default_factory=list, alias="wastePreferences")

    class Config:
        populate_by_name = True


# Fields ``update`` may merge into a record; everything else is managed by the store
EDITABLE_FIELDS = frozenset(UserProfile.model_fields) | {"total_points"}


class UserRecord(UserProfile):
    """One registered user, keyed by phone number"""
    id: str = Field(default_factory=lambda: f"user-{uuid4().hex}")
    phone: str
    total_points: int = Field(default=0, ge=0, alias="totalPoints")
    join_date: datetime = Field(default_factory=_utcnow, alias="joinDate")
    last_login: datetime = Field(default_factory=_utcnow, alias="lastLogin")
    bags: List[BagEntry] = Field(default_factory=list)
    reports: List[ReportEntry] = Field(default_factory=list)
    rewards: List[RedemptionEntry] = Field(default_factory=list)
    training: List[TrainingModule] = Field(default_factory=starter_training)

    @computed_field
    @property
    def level(self) -> UserLevel:
        return calculate_level(self.total_points)

    def touch_login(self) -> None:
        """Update last login timestamp"""
        self.last_login = _utcnow()

    def to_profile(self) -> dict:
        """Profile metadata as exposed by the API (no sub-resource lists)"""
        return self.model_dump(
            by_alias=True,
            mode="json",
            exclude={"bags", "reports", "rewards", "training"},
        )
