"""
Phone sign-in endpoints: verification code placeholder, signup and login.
"""

from fastapi import APIRouter, Depends

from ecotrack.api.controller.user.dto.input_dto import (
    OtpVerifyRequestDto,
    PhoneRequestDto,
    SignupRequestDto,
)
from ecotrack.api.controller.user.dto.output_dto import AuthResponseDto, SuccessResponseDto
from ecotrack.core.dependencies import get_auth_service
from ecotrack.core.exceptions.base import NotFoundError
from ecotrack.core.service.auth.session_service import AuthSessionService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/otp/request", response_model=SuccessResponseDto)
async def request_code(
    request: PhoneRequestDto,
    auth_service: AuthSessionService = Depends(get_auth_service)
):
    """Accept a verification code request. No code is actually sent."""
    await auth_service.request_verification_code(request.phone)
    return SuccessResponseDto()


@router.post("/otp/verify", response_model=SuccessResponseDto, response_model_exclude_none=True)
async def verify_code(
    request: OtpVerifyRequestDto,
    auth_service: AuthSessionService = Depends(get_auth_service)
):
    """Check a verification code. Any code of the expected length passes."""
    if await auth_service.complete_verification(request.code):
        return SuccessResponseDto()
    return SuccessResponseDto(success=False, error="Invalid OTP")


@router.post("/signup", response_model=AuthResponseDto)
async def signup(
    request: SignupRequestDto,
    auth_service: AuthSessionService = Depends(get_auth_service)
):
    """Register a new user and return a bearer token for it."""
    user = await auth_service.sign_up(
        phone=request.phone,
        full_name=request.full_name,
        address=request.address,
        household_size=request.household_size,
        community=request.community,
    )
    return AuthResponseDto(user=user, token=auth_service.access_token)


@router.post("/login", response_model=AuthResponseDto)
async def login(
    request: PhoneRequestDto,
    auth_service: AuthSessionService = Depends(get_auth_service)
):
    """Start a session for a returning user."""
    user = await auth_service.sign_in(request.phone)
    if user is None:
        raise NotFoundError("Phone number not registered", details={"phone": request.phone})
    return AuthResponseDto(user=user, token=auth_service.access_token)
