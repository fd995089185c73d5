# ============================================
# safecircle/api/v1/safety.py - 안전 기능 API 라우터
# ============================================
# 안전점수, SOS, 안전 체크인, 보호자 모드 API를 제공합니다.
# ============================================

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from safecircle.api.deps import get_geolocation, get_now, get_safety_service
from safecircle.core.exceptions import ValidationException
from safecircle.schemas.common import BaseResponse, LocationFixSchema
from safecircle.schemas.contact import ContactSchema
from safecircle.schemas.safety import (
    CheckInRequest,
    CheckInResultSchema,
    CheckInStatusSchema,
    GuardianModeSchema,
    RouteShareSchema,
    SafetyFactorsSchema,
    SafetyScoreSchema,
    ShareRouteRequest,
    SosRequest,
    SosResultSchema,
    UpdateGuardianModeRequest,
)
from safecircle.services.geolocation_service import GeolocationService
from safecircle.services.safety_service import SafetyService
from safecircle.utils.geometry import GeoPoint
from safecircle.utils.safety_score import (
    compute_safety_factors,
    compute_safety_score,
    score_description,
    score_level,
)


router = APIRouter(tags=["Safety"])


# ============================================
# 안전점수
# ============================================

@router.get(
    "/safety/score",
    response_model=BaseResponse[SafetyScoreSchema],
    summary="안전점수 조회",
    description="""
    위치와 시각으로 1~10 안전점수를 계산합니다.

    **가중치:**
    - 시간대 30%, 범죄율 25%, 혼잡도 15%, 조명 15%, 안전 구역 15%

    위치를 보내지 않으면 기본 위치를 쓰고 location.is_approximate=true 가 됩니다.
    lat, lng 중 하나만 보내면 400 VALIDATION_ERROR 입니다.
    at 을 보내지 않으면 서버 현재 시각(TIMEZONE)을 씁니다.
    """
)
def get_safety_score(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="위도"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="경도"),
    at: Optional[datetime] = Query(None, description="평가 시각 (ISO 8601)"),
    geolocation: GeolocationService = Depends(get_geolocation),
    now: datetime = Depends(get_now)
):
    if (lat is None) != (lng is None):
        raise ValidationException(
            message="lat and lng must be sent together",
            field="location"
        )

    reading = GeoPoint(lat, lng) if lat is not None else None
    fix = geolocation.resolve(reading)
    evaluated_at = at or now

    try:
        factors = compute_safety_factors(fix.point, evaluated_at)
        score = compute_safety_score(fix.point, evaluated_at)
    except ValueError as e:
        raise ValidationException(message=str(e), field="location")

    return BaseResponse(data=SafetyScoreSchema(
        score=score,
        level=score_level(score),
        description=score_description(score),
        factors=SafetyFactorsSchema(**factors.to_dict()),
        location=LocationFixSchema.from_fix(fix),
        evaluated_at=evaluated_at
    ))


# ============================================
# SOS
# ============================================

@router.post(
    "/sos",
    response_model=BaseResponse[SosResultSchema],
    summary="SOS 발생",
    description="""
    SOS 를 기록하고 비상연락처에 이메일을 보냅니다.

    위치를 못 얻었으면 location 을 생략하세요. 기본 위치로 보내고
    이메일과 토스트에 approximate 표시가 붙습니다.
    """
)
def trigger_sos(
    request: Optional[SosRequest] = Body(None),
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    request = request or SosRequest()
    outcome = service.trigger_sos(request.reading(), now)

    return BaseResponse(
        data=SosResultSchema(
            event_id=outcome.event.id,
            location=LocationFixSchema.from_fix(outcome.fix),
            recipients=outcome.recipients,
            email_sent=outcome.email.success,
            mailto=outcome.email.mailto
        ),
        message=outcome.toast.description
    )


# ============================================
# 안전 체크인
# ============================================

@router.post("/check-ins/start", response_model=BaseResponse[CheckInStatusSchema], summary="체크인 시작")
def start_check_ins(
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    return BaseResponse(data=CheckInStatusSchema(**asdict(service.start_check_ins(now))))


@router.post("/check-ins/stop", response_model=BaseResponse[CheckInStatusSchema], summary="체크인 중지")
def stop_check_ins(
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    return BaseResponse(data=CheckInStatusSchema(**asdict(service.stop_check_ins(now))))


@router.post(
    "/check-ins",
    response_model=BaseResponse[CheckInResultSchema],
    summary="체크인",
    description="안전하다고 알리고 체크인 타이머를 다시 시작합니다. 체크인이 켜져 있어야 합니다."
)
def check_in(
    request: Optional[CheckInRequest] = Body(None),
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    request = request or CheckInRequest()
    outcome = service.check_in(request.reading(), now)

    return BaseResponse(
        data=CheckInResultSchema(
            check_in_id=outcome.check_in.id,
            location=LocationFixSchema.from_fix(outcome.fix),
            next_due_at=outcome.next_due_at
        ),
        message=outcome.toast.description
    )


@router.get(
    "/check-ins/status",
    response_model=BaseResponse[CheckInStatusSchema],
    summary="체크인 상태",
    description="""
    다음 체크인까지 남은 시간을 조회합니다.

    기한이 지났으면 그 기한마다 한 번씩 "Check-In Required" 토스트와
    "Missed Check-in" 알림이 만들어집니다.
    """
)
def get_check_in_status(
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    return BaseResponse(data=CheckInStatusSchema(**asdict(service.check_in_status(now))))


# ============================================
# 보호자 모드
# ============================================

@router.get("/guardian", response_model=BaseResponse[GuardianModeSchema], summary="보호자 모드 조회")
def get_guardian_mode(service: SafetyService = Depends(get_safety_service)):
    return BaseResponse(data=GuardianModeSchema.model_validate(service.store.get_guardian_mode()))


@router.put("/guardian", response_model=BaseResponse[GuardianModeSchema], summary="보호자 모드 변경")
def update_guardian_mode(
    request: UpdateGuardianModeRequest,
    service: SafetyService = Depends(get_safety_service),
    now: datetime = Depends(get_now)
):
    guardian = service.set_guardian_mode(request.is_active, now)
    return BaseResponse(data=GuardianModeSchema.model_validate(guardian))


@router.post(
    "/guardian/share-route",
    response_model=BaseResponse[RouteShareSchema],
    summary="보호자에게 경로 공유",
    description="보호자 모드가 켜져 있을 때 현재 위치를 보호자(비상연락처)에게 공유합니다."
)
def share_route(
    request: Optional[ShareRouteRequest] = Body(None),
    service: SafetyService = Depends(get_safety_service)
):
    request = request or ShareRouteRequest()
    outcome = service.share_route(request.reading())

    return BaseResponse(
        data=RouteShareSchema(
            location=LocationFixSchema.from_fix(outcome.fix),
            guardians=[ContactSchema.model_validate(g) for g in outcome.guardians]
        ),
        message=outcome.toast.description
    )
