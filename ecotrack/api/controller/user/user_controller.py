"""
User data controller: turns API requests into store operations for the
authenticated user.
"""

from typing import Union

from ecotrack.api.controller.user.dto.input_dto import (
    AddBagRequestDto,
    AdminUserUpdateRequestDto,
    HouseholdUpdateRequestDto,
    ProfileUpdateRequestDto,
    RedeemRewardRequestDto,
    SubmitReportRequestDto,
    TrainingUpdateRequestDto,
)
from ecotrack.api.controller.user.dto.output_dto import (
    BagResponseDto,
    ProfileResponseDto,
    ProfileStatsDto,
    ProfileUpdateResponseDto,
    RedeemResponseDto,
    ReportResponseDto,
    TrainingUpdateResponseDto,
)
from ecotrack.core.exceptions.base import NotFoundError
from ecotrack.core.logger.logger import get_logger
from ecotrack.core.service.user.models.entries import BagEntry, BagStatus, ReportEntry, ReportStatus
from ecotrack.core.service.user.models.reward import find_reward
from ecotrack.core.service.user.models.user import UserRecord
from ecotrack.core.service.user.store.base import UserDataStore

logger = get_logger(__name__)


class UserController:
    """Controller for per-user operations."""

    def __init__(self, store: UserDataStore):
        self.store = store

    async def _reload(self, user: UserRecord) -> UserRecord:
        fresh = await self.store.get_user(user.id)
        if fresh is None:
            raise NotFoundError("User not found", details={"user_id": user.id})
        return fresh

    def build_profile(self, user: UserRecord) -> ProfileResponseDto:
        """Profile metadata plus bag/report statistics"""
        stats = ProfileStatsDto(
            total_bags=len(user.bags),
            collected_bags=sum(1 for bag in user.bags if bag.status == BagStatus.COLLECTED),
            resolved_reports=sum(1 for report in user.reports if report.status == ReportStatus.RESOLVED),
            total_points=user.total_points,
        )
        return ProfileResponseDto(profile=user.to_profile(), stats=stats)

    async def update_profile(
        self,
        user: UserRecord,
        request: Union[ProfileUpdateRequestDto, HouseholdUpdateRequestDto]
    ) -> ProfileUpdateResponseDto:
        fields = {
            name: value
            for name, value in request.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if fields and not await self.store.update(user.phone, fields):
            raise NotFoundError("User not found", details={"user_id": user.id})

        user = await self._reload(user)
        return ProfileUpdateResponseDto(profile=user.to_profile())

    async def update_user(self, request: AdminUserUpdateRequestDto) -> None:
        """Apply an administrative edit to the user owning ``request.phone``"""
        fields = {
            name: value
            for name, value in request.model_dump(exclude_unset=True, exclude={"phone"}).items()
            if value is not None
        }
        if not await self.store.update(request.phone, fields):
            raise NotFoundError("User not found", details={"phone": request.phone})

        logger.info("User updated by admin", extra={"phone": request.phone, "fields": sorted(fields)})

    async def add_bag(self, user: UserRecord, request: AddBagRequestDto) -> BagResponseDto:
        bag = BagEntry(type=request.type, weight=request.weight, qr_code=request.qr_code)
        if not await self.store.append_bag(user.phone, bag):
            raise NotFoundError("User not found", details={"user_id": user.id})

        logger.info("Bag added", extra={"user_id": user.id, "bag_id": bag.id, "qr_code": bag.qr_code})
        return BagResponseDto(bag=bag)

    async def submit_report(self, user: UserRecord, request: SubmitReportRequestDto) -> ReportResponseDto:
        report = ReportEntry(
            location=request.location,
            type=request.type,
            image_url=request.image_url,
            coordinates=request.coordinates,
        )
        if not await self.store.append_report(user.phone, report):
            raise NotFoundError("User not found", details={"user_id": user.id})

        logger.info(
            "Report submitted",
            extra={"user_id": user.id, "report_id": report.id, "report_type": report.type.value}
        )
        return ReportResponseDto(report=report)

    async def redeem_reward(self, user: UserRecord, request: RedeemRewardRequestDto) -> RedeemResponseDto:
        reward = find_reward(request.reward_id)
        if reward is None or not reward.available:
            raise NotFoundError("Reward not found", details={"reward_id": request.reward_id})

        points = reward.points if request.points is None else request.points
        redemption = await self.store.redeem_reward(user.phone, reward.id, points)
        if redemption is None:
            raise NotFoundError("User not found", details={"user_id": user.id})

        user = await self._reload(user)
        return RedeemResponseDto(redemption=redemption, new_points=user.total_points)

    async def update_training(
        self,
        user: UserRecord,
        request: TrainingUpdateRequestDto
    ) -> TrainingUpdateResponseDto:
        points_before = user.total_points
        if not await self.store.set_training_progress(user.phone, request.module_name, request.progress):
            raise NotFoundError("Training module not found", details={"module": request.module_name})

        user = await self._reload(user)
        bonus = user.total_points - points_before
        return TrainingUpdateResponseDto(
            training=user.training,
            bonus_points=bonus if bonus > 0 else None,
        )
