# ============================================
# safecircle/schemas/common.py - 공통 스키마
# ============================================
# 여러 곳에서 공통으로 사용되는 스키마들을 정의합니다.
# ============================================

from datetime import datetime
from typing import TypeVar, Generic, Optional

from pydantic import BaseModel, Field

from safecircle.services.geolocation_service import LocationFix
from safecircle.utils.geometry import GeoPoint


# 제네릭 타입 변수 (다양한 타입의 데이터를 담을 수 있음)
DataType = TypeVar("DataType")


class BaseResponse(BaseModel, Generic[DataType]):
    """
    API 응답 기본 형식

    모든 API 응답은 이 형식을 따릅니다.

    [응답 형식]
    {
        "success": true,
        "data": { ... },
        "message": "성공 메시지"
    }
    """
    success: bool = True
    data: Optional[DataType] = None
    message: Optional[str] = None

    class Config:
        # ORM 모델을 스키마로 변환할 때 사용
        from_attributes = True


class CoordinateSchema(BaseModel):
    """
    좌표 스키마

    NaN / 무한대는 받지 않습니다.
    """
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False, description="위도")
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False, description="경도")

    def to_point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    @classmethod
    def from_point(cls, point: GeoPoint) -> "CoordinateSchema":
        return cls(lat=point.lat, lng=point.lng)


class LocationFixSchema(BaseModel):
    """확정된 위치 (기본 위치로 대신했으면 is_approximate=True)"""
    lat: float
    lng: float
    is_approximate: bool

    @classmethod
    def from_fix(cls, fix: LocationFix) -> "LocationFixSchema":
        return cls(lat=fix.point.lat, lng=fix.point.lng, is_approximate=fix.is_approximate)


class LocationRequest(BaseModel):
    """단말 위치를 함께 보내는 요청 (위치를 못 얻었으면 생략)"""
    location: Optional[CoordinateSchema] = Field(None, description="단말 위치")

    def reading(self) -> Optional[GeoPoint]:
        return self.location.to_point() if self.location else None


class ToastSchema(BaseModel):
    """화면 토스트"""
    title: str
    description: str
    variant: str = Field(..., description="default / destructive")
    created_at: datetime
