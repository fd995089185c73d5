# ============================================
# safecircle/schemas/settings.py - 설정 관련 스키마
# ============================================
# 사용자 설정 관련 요청/응답 스키마를 정의합니다.
# ============================================

from typing import Literal, Optional

from pydantic import BaseModel, Field


PrivacyMode = Literal["standard", "enhanced", "maximum"]


class UserSettingsSchema(BaseModel):
    """사용자 설정 응답 스키마"""

    # 화면/알림
    dark_mode: bool = Field(..., description="다크 모드")
    notifications: bool = Field(..., description="알림 허용")
    sound: bool = Field(..., description="소리")

    # 위치/개인정보
    location_tracking: bool = Field(..., description="위치 추적")
    privacy_mode: PrivacyMode = Field(..., description="개인정보 보호 수준")

    # 안전 기능
    check_in_interval: int = Field(..., description="체크인 간격 (분)")
    safety_radius: int = Field(..., description="안전 반경 (m)")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "dark_mode": False,
                "notifications": True,
                "sound": True,
                "location_tracking": True,
                "privacy_mode": "standard",
                "check_in_interval": 15,
                "safety_radius": 50
            }
        }


class UpdateUserSettingsRequest(BaseModel):
    """
    사용자 설정 업데이트 요청 스키마

    - check_in_interval: 5~60분, 5분 단위
    - safety_radius: 10~200m, 10m 단위
    """
    dark_mode: Optional[bool] = Field(None, description="다크 모드")
    notifications: Optional[bool] = Field(None, description="알림 허용")
    sound: Optional[bool] = Field(None, description="소리")
    location_tracking: Optional[bool] = Field(None, description="위치 추적")
    privacy_mode: Optional[PrivacyMode] = Field(None, description="개인정보 보호 수준")
    check_in_interval: Optional[int] = Field(None, ge=5, le=60, multiple_of=5, description="체크인 간격 (분)")
    safety_radius: Optional[int] = Field(None, ge=10, le=200, multiple_of=10, description="안전 반경 (m)")

    class Config:
        json_schema_extra = {
            "example": {
                "privacy_mode": "enhanced",
                "check_in_interval": 30
            }
        }
