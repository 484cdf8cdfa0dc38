from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import RedeemRewardRequestDto
from ecotrack.api.controller.user.dto.output_dto import (
    RedeemResponseDto,
    RedemptionsResponseDto,
    RewardsResponseDto,
)
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_current_user, get_user_controller
from ecotrack.core.service.user.models.reward import REWARD_CATALOG
from ecotrack.core.service.user.models.user import UserRecord

router = APIRouter(prefix="/rewards", tags=["Rewards"])


@router.get("/available", response_model=RewardsResponseDto)
async def get_available_rewards():
    """Reward catalog. Public, no session required."""
    return RewardsResponseDto(rewards=REWARD_CATALOG)


@router.post(
    "/redeem",
    response_model=RedeemResponseDto,
    responses={400: {"description": "Insufficient points"}, 404: {"description": "Unknown reward"}}
)
async def redeem_reward(
    request: RedeemRewardRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    return await controller.redeem_reward(user, request)


@router.get("/history", response_model=RedemptionsResponseDto)
async def get_redemptions(user: UserRecord = Depends(get_current_user)):
    return RedemptionsResponseDto(rewards=user.rewards)
