from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import AdminUserUpdateRequestDto
from ecotrack.api.controller.user.dto.output_dto import SuccessResponseDto, UsersResponseDto
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_user_controller, get_user_store, require_admin
from ecotrack.core.logger.logger import logger
from ecotrack.core.service.user.store.base import UserDataStore

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=UsersResponseDto)
async def list_users(store: UserDataStore = Depends(get_user_store)):
    """All registered users, for administrative inspection."""
    return UsersResponseDto(users=await store.list_all())


@router.post("/users/update", response_model=SuccessResponseDto, response_model_exclude_none=True)
async def update_user(
    request: AdminUserUpdateRequestDto,
    controller: UserController = Depends(get_user_controller)
):
    """Edit any user by phone, including the point balance (verification credit)."""
    await controller.update_user(request)
    return SuccessResponseDto()


@router.post("/reset", response_model=SuccessResponseDto, response_model_exclude_none=True)
async def reset_users(store: UserDataStore = Depends(get_user_store)):
    """Remove every user from the store."""
    await store.clear()
    logger.warning("User store reset by admin")
    return SuccessResponseDto()
