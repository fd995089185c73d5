# ============================================
# safecircle/schemas/safety.py - 안전 기능 스키마
# ============================================
# 안전점수, SOS, 체크인, 보호자 모드 요청/응답 스키마를 정의합니다.
# ============================================

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from safecircle.schemas.common import LocationFixSchema, LocationRequest
from safecircle.schemas.contact import ContactSchema


# ============================================
# 안전점수
# ============================================

class SafetyFactorsSchema(BaseModel):
    """요인별 점수 (0~10)"""
    time_of_day: float
    crime_rate: float
    crowdedness: float
    lighting: float
    known_safe_zones: float


class SafetyScoreSchema(BaseModel):
    """안전점수 응답"""
    score: int = Field(..., ge=1, le=10, description="안전점수 (1~10)")
    level: str = Field(..., description="Safe / Moderate / Caution")
    description: str
    factors: SafetyFactorsSchema
    location: LocationFixSchema
    evaluated_at: datetime


# ============================================
# SOS
# ============================================

class SosRequest(LocationRequest):
    """SOS 요청 (위치를 못 얻었으면 location 생략)"""


class SosResultSchema(BaseModel):
    event_id: str
    location: LocationFixSchema
    recipients: List[str]
    email_sent: bool
    mailto: Optional[str] = None


# ============================================
# 체크인
# ============================================

class CheckInRequest(LocationRequest):
    """체크인 요청"""


class CheckInResultSchema(BaseModel):
    check_in_id: str
    location: LocationFixSchema
    next_due_at: datetime


class CheckInStatusSchema(BaseModel):
    """체크인 상태"""
    is_active: bool
    interval_minutes: int
    last_check_in_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    seconds_remaining: Optional[int] = None
    overdue: bool
    missed_alert_raised: bool

    class Config:
        from_attributes = True


# ============================================
# 보호자 모드
# ============================================

class GuardianModeSchema(BaseModel):
    is_active: bool

    class Config:
        from_attributes = True


class UpdateGuardianModeRequest(BaseModel):
    is_active: bool = Field(..., description="보호자 모드 활성화 여부")


class ShareRouteRequest(LocationRequest):
    """경로 공유 요청"""


class RouteShareSchema(BaseModel):
    location: LocationFixSchema
    guardians: List[ContactSchema]
