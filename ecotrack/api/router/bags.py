from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import AddBagRequestDto
from ecotrack.api.controller.user.dto.output_dto import BagResponseDto, BagsResponseDto
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_current_user, get_user_controller
from ecotrack.core.service.user.models.user import UserRecord

router = APIRouter(prefix="/bags", tags=["Bags"])


@router.post("/add", response_model=BagResponseDto)
async def add_bag(
    request: AddBagRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    """Record a bag scanned by QR code. New bags start as pending with no score."""
    return await controller.add_bag(user, request)


@router.get("", response_model=BagsResponseDto)
async def get_bags(user: UserRecord = Depends(get_current_user)):
    return BagsResponseDto(bags=user.bags)
