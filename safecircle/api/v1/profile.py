# ============================================
# safecircle/api/v1/profile.py - 프로필 API 라우터
# ============================================
# 프로필 조회/수정과 Aadhaar 본인 인증 API를 제공합니다.
# ============================================

from fastapi import APIRouter, Depends

from safecircle.api.deps import get_current_user, get_safety_service, get_store
from safecircle.models import Profile
from safecircle.schemas.common import BaseResponse
from safecircle.schemas.profile import (
    AadhaarOtpRequest,
    AadhaarVerifyRequest,
    ProfileSchema,
    UpdateProfileRequest,
)
from safecircle.services.mock_data_service import MockDataService
from safecircle.services.safety_service import SafetyService


router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=BaseResponse[ProfileSchema], summary="프로필 조회")
def get_profile(current_user: Profile = Depends(get_current_user)):
    return BaseResponse(data=ProfileSchema.model_validate(current_user))


@router.patch("", response_model=BaseResponse[ProfileSchema], summary="프로필 수정")
def update_profile(
    request: UpdateProfileRequest,
    store: MockDataService = Depends(get_store)
):
    profile = store.update_user_profile(**request.model_dump(exclude_unset=True))
    return BaseResponse(data=ProfileSchema.model_validate(profile), message="Profile Updated")


@router.post(
    "/aadhaar/otp",
    response_model=BaseResponse,
    summary="Aadhaar OTP 요청",
    description="12자리 Aadhaar 번호를 확인하고 등록된 휴대폰으로 OTP 를 보냅니다 (데모)."
)
def request_aadhaar_otp(
    request: AadhaarOtpRequest,
    service: SafetyService = Depends(get_safety_service)
):
    toast = service.request_aadhaar_otp(request.aadhaar_number)
    return BaseResponse(message=toast.description)


@router.post(
    "/aadhaar/verify",
    response_model=BaseResponse[ProfileSchema],
    summary="Aadhaar OTP 확인",
    description="6자리 OTP 를 확인하고 프로필을 인증 완료로 표시합니다."
)
def verify_aadhaar(
    request: AadhaarVerifyRequest,
    service: SafetyService = Depends(get_safety_service)
):
    profile = service.confirm_aadhaar(request.aadhaar_number, request.otp)
    return BaseResponse(
        data=ProfileSchema.model_validate(profile),
        message="Your identity has been verified with Aadhaar"
    )
