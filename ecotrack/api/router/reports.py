from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import SubmitReportRequestDto
from ecotrack.api.controller.user.dto.output_dto import ReportResponseDto, ReportsResponseDto
from ecotrack.api.controller.user.user_controller import UserController
from ecotrack.core.dependencies import get_current_user, get_user_controller
from ecotrack.core.service.user.models.user import UserRecord

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/submit", response_model=ReportResponseDto)
async def submit_report(
    request: SubmitReportRequestDto,
    user: UserRecord = Depends(get_current_user),
    controller: UserController = Depends(get_user_controller)
):
    """Submit a litter report. Points stay at 0 until the report is verified."""
    return await controller.submit_report(user, request)


@router.get("", response_model=ReportsResponseDto)
async def get_reports(user: UserRecord = Depends(get_current_user)):
    return ReportsResponseDto(reports=user.reports)
