# ============================================
# safecircle/schemas/map.py - 지역 안전 평가 지도 스키마
# ============================================
# 지도 세션, 포인터 이벤트, 평가, 렌더링 값 스키마를 정의합니다.
# ============================================

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from safecircle.schemas.common import CoordinateSchema
from safecircle.services.area_rating_map import (
    DEFAULT_DRAFT_SCORE,
    Click,
    PointerDown,
    PointerMove,
    PointerUp,
    ZoomIn,
    ZoomOut,
)


# ============================================
# 세션
# ============================================

class ViewportSchema(BaseModel):
    """화면 크기 (px)"""
    width: float = Field(..., gt=0, allow_inf_nan=False)
    height: float = Field(..., gt=0, allow_inf_nan=False)


class CreateMapSessionRequest(BaseModel):
    """
    지도 세션 생성 요청

    anchor 가 없으면 단말 위치 대신 기본 위치를 씁니다.
    """
    anchor: Optional[CoordinateSchema] = Field(None, description="화면 중앙 기준 좌표")
    viewport: Optional[ViewportSchema] = Field(None, description="화면 크기")


# ============================================
# 포인터 이벤트 (type 으로 구분)
# ============================================

class PointerDownEvent(BaseModel):
    type: Literal["pointer_down"]
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)

    def to_event(self) -> PointerDown:
        return PointerDown(self.x, self.y)


class PointerMoveEvent(BaseModel):
    type: Literal["pointer_move"]
    dx: float = Field(..., allow_inf_nan=False)
    dy: float = Field(..., allow_inf_nan=False)

    def to_event(self) -> PointerMove:
        return PointerMove(self.dx, self.dy)


class PointerUpEvent(BaseModel):
    type: Literal["pointer_up"]

    def to_event(self) -> PointerUp:
        return PointerUp()


class ClickEvent(BaseModel):
    type: Literal["click"]
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)

    def to_event(self) -> Click:
        return Click(self.x, self.y)


class ZoomInEvent(BaseModel):
    type: Literal["zoom_in"]

    def to_event(self) -> ZoomIn:
        return ZoomIn()


class ZoomOutEvent(BaseModel):
    type: Literal["zoom_out"]

    def to_event(self) -> ZoomOut:
        return ZoomOut()


# type 필드로 구분 (라우터에서 Body(discriminator="type") 로 받음)
MapEventRequest = Union[
    PointerDownEvent, PointerMoveEvent, PointerUpEvent, ClickEvent, ZoomInEvent, ZoomOutEvent
]


# ============================================
# 평가
# ============================================

class RatingAuthorSchema(BaseModel):
    name: str
    is_verified: bool


class AreaRatingSchema(BaseModel):
    """지역 안전 평가"""
    id: str
    lat: float
    lng: float
    score: int
    comment: str
    created_at: datetime
    created_by: RatingAuthorSchema


class MapMarkerSchema(BaseModel):
    """저장 전 평가 마커"""
    lat: float
    lng: float
    screen_x: float
    screen_y: float


class SaveRatingRequest(BaseModel):
    """작성 중인 평가 저장 (점수 1~10)"""
    score: int = Field(..., ge=1, le=10, description="안전 점수")
    comment: str = Field("", max_length=1000, description="코멘트")

    class Config:
        json_schema_extra = {
            "example": {
                "score": 8,
                "comment": "Well-lit, shops open late."
            }
        }


class DiscardRatingRequest(BaseModel):
    """
    작성 중인 평가 버리기

    점수를 바꿨거나 코멘트를 썼다면 confirmed=true 가 필요합니다.
    """
    score: int = Field(DEFAULT_DRAFT_SCORE, description="입력창의 현재 점수")
    comment: str = Field("", description="입력창의 현재 코멘트")
    confirmed: bool = Field(False, description="사용자가 버리기를 확인했는지")


# ============================================
# 렌더링 / 결과
# ============================================

class ScreenPointSchema(BaseModel):
    x: float
    y: float


class RenderedMarkerSchema(BaseModel):
    rating: AreaRatingSchema
    x: float
    y: float
    level: str = Field(..., description="safe / moderate / unsafe")
    visible: bool


class MapFrameSchema(BaseModel):
    """화면 한 장을 그리는 데 필요한 값"""
    markers: List[RenderedMarkerSchema]
    user_pin: ScreenPointSchema
    grid_size: float
    grid_offset: ScreenPointSchema
    zoom: float
    pan_offset: ScreenPointSchema


class MapIntentSchema(BaseModel):
    """클릭 결과: 기존 평가 선택 또는 새 평가 시작"""
    type: Literal["select_rating", "begin_rating"]
    rating: Optional[AreaRatingSchema] = None
    marker: Optional[MapMarkerSchema] = None


class MapSessionSchema(BaseModel):
    session_id: str
    anchor: CoordinateSchema
    viewport: ViewportSchema
    pending_marker: Optional[MapMarkerSchema] = None
    selected_rating: Optional[AreaRatingSchema] = None
    frame: MapFrameSchema


class MapEventResultSchema(BaseModel):
    intent: Optional[MapIntentSchema] = None
    frame: MapFrameSchema
