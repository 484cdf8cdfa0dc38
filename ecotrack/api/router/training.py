from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import TrainingUpdateRequestDto
from ecotrack.api.controller.user.dto.output_dto import (
    TrainingResponseDto,
    TrainingUpdateResponseDto,
)
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_current_user, get_user_controller
from ecotrack.core.service.user.models.user import UserRecord

router = APIRouter(prefix="/training", tags=["Training"])


@router.get("", response_model=TrainingResponseDto)
async def get_training(user: UserRecord = Depends(get_current_user)):
    return TrainingResponseDto(training=user.training)


@router.post("/update", response_model=TrainingUpdateResponseDto, response_model_exclude_none=True)
async def update_training(
    request: TrainingUpdateRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    """
    Set progress on a training module.

    ``bonusPoints`` is present only when this update completed the module for
    the first time.
    """
    return await controller.update_training(user, request)
