"""
Output DTOs for the user data API endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ecotrack.core.service.user.models.entries import (
    BagEntry,
    RedemptionEntry,
    ReportEntry,
    TrainingModule,
)
from ecotrack.core.service.user.models.reward import Reward
from ecotrack.core.service.user.models.user import UserRecord


class SuccessResponseDto(BaseModel):
    success: bool = True
    error: Optional[str] = None


class AuthResponseDto(BaseModel):
    """DTO for signup and login responses."""

    success: bool = True
    user: UserRecord
    token: str = Field(..., description="Bearer token for subsequent requests")


class ProfileStatsDto(BaseModel):
    total_bags: int = Field(..., alias="totalBags")
    collected_bags: int = Field(..., alias="collectedBags")
    resolved_reports: int = Field(..., alias="resolvedReports")
    total_points: int = Field(..., alias="totalPoints")

    class Config:
        populate_by_name = True


class ProfileResponseDto(BaseModel):
    profile: Dict[str, Any]
    stats: ProfileStatsDto


class ProfileUpdateResponseDto(BaseModel):
    success: bool = True
    profile: Dict[str, Any]


class BagResponseDto(BaseModel):
    success: bool = True
    bag: BagEntry


class BagsResponseDto(BaseModel):
    bags: List[BagEntry]


class ReportResponseDto(BaseModel):
    success: bool = True
    report: ReportEntry


class ReportsResponseDto(BaseModel):
    reports: List[ReportEntry]


class RewardsResponseDto(BaseModel):
    rewards: List[Reward]


class RedemptionsResponseDto(BaseModel):
    rewards: List[RedemptionEntry]


class RedeemResponseDto(BaseModel):
    success: bool = True
    redemption: RedemptionEntry
    new_points: int = Field(..., alias="newPoints")

    class Config:
        populate_by_name = True


class TrainingResponseDto(BaseModel):
    training: List[TrainingModule]


class TrainingUpdateResponseDto(BaseModel):
    success: bool = True
    training: List[TrainingModule]
    bonus_points: Optional[int] = Field(default=None, alias="bonusPoints")

    class Config:
        populate_by_name = True


class UsersResponseDto(BaseModel):
    users: List[UserRecord]
