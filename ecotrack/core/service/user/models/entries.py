"""
Sub-resource entries nested inside a user record: bags, reports, redemptions
and training modules.
"""

import secrets
import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def generate_entry_id(prefix: str) -> str:
    """Short human-readable id, e.g. ``BG042917``"""
    return f"{prefix}{secrets.randbelow(10 ** 6):06d}"


class BagStatus(str, Enum):
    PENDING = "pending"
    COLLECTED = "collected"
    REJECTED = "rejected"


class ReportType(str, Enum):
    ILLEGAL_DUMPING = "Illegal Dumping"
    OVERFLOWING_BIN = "Overflowing Bin"
    LITTERING = "Littering"
    HAZARDOUS_WASTE = "Hazardous Waste"


class ReportStatus(str, Enum):
    PENDING = "pending"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


class RedemptionStatus(str, Enum):
    REDEEMED = "redeemed"


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class BagEntry(BaseModel):
    """A scanned waste bag"""
    id: str = Field(default_factory=lambda: generate_entry_id("BG"))
    type: str
    weight: str
    qr_code: str = Field(..., alias="qrCode")
    status: BagStatus = BagStatus.PENDING
    score: int = Field(default=0, ge=0)
    date: datetime.date = Field(default_factory=datetime.date.today)

    class Config:
        populate_by_name = True


class ReportEntry(BaseModel):
    """A litter report submitted by a user"""
    id: str = Field(default_factory=lambda: generate_entry_id("RPT"))
    location: str
    type: ReportType
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    coordinates: Optional[Coordinates] = None
    status: ReportStatus = ReportStatus.PENDING
    date: datetime.date = Field(default_factory=datetime.date.today)
    points: int = Field(default=0, ge=0)  # awarded on verification

    class Config:
        populate_by_name = True


class RedemptionEntry(BaseModel):
    """Points spent on a catalog reward"""
    id: str = Field(default_factory=lambda: generate_entry_id("RDM"))
    reward_id: int = Field(..., alias="rewardId")
    points: int = Field(..., ge=0)
    date: datetime.date = Field(default_factory=datetime.date.today)
    status: RedemptionStatus = RedemptionStatus.REDEEMED

    class Config:
        populate_by_name = True


class TrainingModule(BaseModel):
    """Progress through one training module"""
    name: str
    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False
    # Set once the completion bonus has been paid; never reset
    bonus_awarded: bool = Field(default=False, alias="bonusAwarded")

    class Config:
        populate_by_name = True
