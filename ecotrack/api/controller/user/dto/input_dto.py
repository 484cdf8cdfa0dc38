"""
Input DTOs for the user data API endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, validator

from ecotrack.core.service.user.models.entries import Coordinates, ReportType


def _not_blank(value: str) -> str:
    if not value or not value.strip():
        raise ValueError('Value cannot be empty')
    return value.strip()


class PhoneRequestDto(BaseModel):
    """DTO carrying only a phone number (OTP request, login)."""

    phone: str = Field(..., min_length=1, max_length=32, description="Phone number")

    @validator('phone')
    def validate_phone(cls, v):
        return _not_blank(v)


class OtpVerifyRequestDto(PhoneRequestDto):
    """DTO for verification code submission."""

    code: str = Field(..., description="Verification code received by SMS")


class SignupRequestDto(BaseModel):
    """DTO for user registration."""

    phone: str = Field(..., min_length=1, max_length=32)
    full_name: str = Field(..., alias="fullName", min_length=1)
    address: str
    household_size: str = Field(..., alias="householdSize")
    community: str

    @validator('phone', 'full_name')
    def validate_required(cls, v):
        return _not_blank(v)

    class Config:
        populate_by_name = True


class HouseholdUpdateRequestDto(BaseModel):
    """DTO for household information edits."""

    address: Optional[str] = None
    household_size: Optional[str] = Field(default=None, alias="householdSize")
    community: Optional[str] = None
    emergency_contact: Optional[str] = Field(default=None, alias="emergencyContact")
    emergency_phone: Optional[str] = Field(default=None, alias="emergencyPhone")
    special_needs: Optional[str] = Field(default=None, alias="specialNeeds")
    waste_preferences: Optional[List[str]] = Field(default=None, alias="wastePreferences")

    class Config:
        populate_by_name = True
        extra = "forbid"


class ProfileUpdateRequestDto(HouseholdUpdateRequestDto):
    """DTO for profile edits; accepts every user-editable profile field."""

    full_name: Optional[str] = Field(default=None, alias="fullName")
    bio: Optional[str] = None


class AdminUserUpdateRequestDto(ProfileUpdateRequestDto):
    """DTO for administrative edits, which may also set the point balance."""

    phone: str = Field(..., min_length=1, max_length=32)
    total_points: Optional[int] = Field(default=None, alias="totalPoints", ge=0)


class AddBagRequestDto(BaseModel):
    """DTO for a scanned bag."""

    type: str = Field(..., min_length=1)
    weight: str
    qr_code: str = Field(..., alias="qrCode", min_length=1)

    class Config:
        populate_by_name = True


class SubmitReportRequestDto(BaseModel):
    """DTO for a litter report."""

    location: str = Field(..., min_length=1)
    type: ReportType
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    coordinates: Optional[Coordinates] = None

    class Config:
        populate_by_name = True


class RedeemRewardRequestDto(BaseModel):
    """DTO for a reward redemption; points default to the catalog price."""

    reward_id: int = Field(..., alias="rewardId")
    points: Optional[int] = Field(default=None, ge=0)

    class Config:
        populate_by_name = True


class TrainingUpdateRequestDto(BaseModel):
    """DTO for training progress."""

    module_name: str = Field(..., alias="moduleName", min_length=1)
    progress: int = Field(..., ge=0, le=100)

    class Config:
        populate_by_name = True
