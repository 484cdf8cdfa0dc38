from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import (
    HouseholdUpdateRequestDto,
    ProfileUpdateRequestDto,
)
from ecotrack.api.controller.user.dto.output_dto import (
    ProfileResponseDto,
    ProfileUpdateResponseDto,
)
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_current_user, get_user_controller
from ecotrack.core.service.user.models.user import UserRecord

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/profile", response_model=ProfileResponseDto)
async def get_profile(
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    """Profile metadata and bag/report statistics of the current user."""
    return controller.build_profile(user)


@router.post("/profile/update", response_model=ProfileUpdateResponseDto)
async def update_profile(
    request: ProfileUpdateRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    return await controller.update_profile(user, request)


@router.post("/household/update", response_model=ProfileUpdateResponseDto)
async def update_household(
    request: HouseholdUpdateRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    return await controller.update_profile(user, request)
