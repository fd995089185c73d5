# ============================================
# safecircle/api/v1/map.py - 지역 안전 평가 지도 API 라우터
# ============================================
# 지도 세션을 만들고, 포인터 이벤트를 전달하고,
# 새 평가를 저장/취소하는 API를 제공합니다.
# ============================================

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, status

from safecircle.api.deps import get_current_user, get_geolocation, get_map_sessions
from safecircle.core.exceptions import (
    ConfirmationRequiredException,
    NoPendingRatingException,
    ValidationException,
)
from safecircle.models import Profile
from safecircle.schemas.common import BaseResponse, CoordinateSchema
from safecircle.schemas.map import (
    AreaRatingSchema,
    CreateMapSessionRequest,
    DiscardRatingRequest,
    MapEventRequest,
    MapEventResultSchema,
    MapFrameSchema,
    MapIntentSchema,
    MapMarkerSchema,
    MapSessionSchema,
    RatingAuthorSchema,
    RenderedMarkerSchema,
    SaveRatingRequest,
    ScreenPointSchema,
    ViewportSchema,
)
from safecircle.services.area_rating_map import (
    AreaRating,
    AreaRatingMap,
    MapFrame,
    MapIntent,
    MapMarker,
    RatingAuthor,
    SelectRating,
    StaleMarkerError,
    draft_needs_confirmation,
)
from safecircle.services.geolocation_service import GeolocationService
from safecircle.services.map_session_service import MapSessionRegistry
from safecircle.utils.geometry import ScreenPoint, Viewport


router = APIRouter(prefix="/map/sessions", tags=["Map"])


# ============================================
# 응답 변환 헬퍼
# ============================================

def _point(point: ScreenPoint) -> ScreenPointSchema:
    return ScreenPointSchema(x=point.x, y=point.y)


def _rating(rating: AreaRating) -> AreaRatingSchema:
    return AreaRatingSchema(
        id=rating.id,
        lat=rating.location.lat,
        lng=rating.location.lng,
        score=rating.score,
        comment=rating.comment,
        created_at=rating.created_at,
        created_by=RatingAuthorSchema(
            name=rating.created_by.name,
            is_verified=rating.created_by.is_verified
        )
    )


def _marker(marker: Optional[MapMarker]) -> Optional[MapMarkerSchema]:
    if marker is None:
        return None
    return MapMarkerSchema(
        lat=marker.location.lat,
        lng=marker.location.lng,
        screen_x=marker.screen_x,
        screen_y=marker.screen_y
    )


def _frame(frame: MapFrame) -> MapFrameSchema:
    return MapFrameSchema(
        markers=[
            RenderedMarkerSchema(
                rating=_rating(m.rating), x=m.x, y=m.y, level=m.level, visible=m.visible
            )
            for m in frame.markers
        ],
        user_pin=_point(frame.user_pin),
        grid_size=frame.grid_size,
        grid_offset=_point(frame.grid_offset),
        zoom=frame.zoom,
        pan_offset=_point(frame.pan_offset)
    )


def _intent(intent: Optional[MapIntent]) -> Optional[MapIntentSchema]:
    if intent is None:
        return None
    if isinstance(intent, SelectRating):
        return MapIntentSchema(type="select_rating", rating=_rating(intent.rating))
    return MapIntentSchema(type="begin_rating", marker=_marker(intent.marker))


def _session(session_id: str, area_map: AreaRatingMap) -> MapSessionSchema:
    selected = area_map.selected_rating
    return MapSessionSchema(
        session_id=session_id,
        anchor=CoordinateSchema.from_point(area_map.anchor),
        viewport=ViewportSchema(width=area_map.viewport.width, height=area_map.viewport.height),
        pending_marker=_marker(area_map.pending_marker),
        selected_rating=_rating(selected) if selected is not None else None,
        frame=_frame(area_map.render())
    )


# ============================================
# 세션
# ============================================

@router.post(
    "",
    response_model=BaseResponse[MapSessionSchema],
    status_code=status.HTTP_201_CREATED,
    summary="지도 세션 생성",
    description="""
    기준 좌표 주변의 시드 평가 3개로 지도 세션을 엽니다.

    anchor 를 보내지 않으면 기본 위치를 씁니다.
    세션에서 추가한 평가는 세션이 닫히면 사라집니다.
    """
)
def create_session(
    request: Optional[CreateMapSessionRequest] = Body(None),
    sessions: MapSessionRegistry = Depends(get_map_sessions),
    geolocation: GeolocationService = Depends(get_geolocation)
):
    request = request or CreateMapSessionRequest()
    fix = geolocation.resolve(request.anchor.to_point() if request.anchor else None)
    viewport = Viewport(request.viewport.width, request.viewport.height) if request.viewport else None

    session_id = sessions.create(fix.point, viewport)
    return BaseResponse(
        data=_session(session_id, sessions.get(session_id)),
        message="Map session created"
    )


@router.get("/{session_id}", response_model=BaseResponse[MapSessionSchema], summary="지도 세션 조회")
def get_session(
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    return BaseResponse(data=_session(session_id, sessions.get(session_id)))


@router.delete("/{session_id}", response_model=BaseResponse, summary="지도 세션 종료")
def close_session(
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    sessions.close(session_id)
    return BaseResponse(message="Map session closed")


# ============================================
# 포인터 이벤트 / 화면
# ============================================

@router.post(
    "/{session_id}/events",
    response_model=BaseResponse[MapEventResultSchema],
    summary="포인터 이벤트 전달",
    description="""
    포인터/줌 이벤트를 전달합니다. type 으로 구분합니다.

    - pointer_down {x, y}, pointer_move {dx, dy}, pointer_up: 드래그로 화면 이동
    - click {x, y}: 마커 위면 select_rating, 빈 곳이면 begin_rating
    - zoom_in, zoom_out: 1.2배 확대/축소 (0.5 ~ 5.0)

    드래그 직후의 click 과, 상세 보기/입력창이 열려 있을 때의 click 은 무시됩니다.
    """
)
def dispatch_event(
    session_id: str = Path(..., description="세션 ID"),
    event: MapEventRequest = Body(..., discriminator="type"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    area_map = sessions.get(session_id)
    intent = area_map.dispatch(event.to_event())
    return BaseResponse(data=MapEventResultSchema(intent=_intent(intent), frame=_frame(area_map.render())))


@router.put("/{session_id}/viewport", response_model=BaseResponse[MapFrameSchema], summary="화면 크기 변경")
def resize_viewport(
    viewport: ViewportSchema,
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    area_map = sessions.get(session_id)
    area_map.resize(Viewport(viewport.width, viewport.height))
    return BaseResponse(data=_frame(area_map.render()))


@router.get("/{session_id}/frame", response_model=BaseResponse[MapFrameSchema], summary="화면 값 조회")
def get_frame(
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    return BaseResponse(data=_frame(sessions.get(session_id).render()))


@router.post(
    "/{session_id}/selection/close",
    response_model=BaseResponse[MapSessionSchema],
    summary="평가 상세 보기 닫기"
)
def close_selection(
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    area_map = sessions.get(session_id)
    area_map.close_details()
    return BaseResponse(data=_session(session_id, area_map))


# ============================================
# 평가
# ============================================

@router.get("/{session_id}/ratings", response_model=BaseResponse[List[AreaRatingSchema]], summary="평가 목록")
def list_ratings(
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    return BaseResponse(data=[_rating(r) for r in sessions.get(session_id).ratings])


@router.post(
    "/{session_id}/ratings",
    response_model=BaseResponse[AreaRatingSchema],
    status_code=status.HTTP_201_CREATED,
    summary="작성 중인 평가 저장",
    description="""
    begin_rating 으로 열린 평가를 저장합니다.

    작성자는 현재 사용자이고, Aadhaar 인증 여부가 함께 표시됩니다.
    """
)
def save_rating(
    request: SaveRatingRequest,
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions),
    current_user: Profile = Depends(get_current_user)
):
    area_map = sessions.get(session_id)
    marker = area_map.pending_marker
    if marker is None:
        raise NoPendingRatingException()

    author = RatingAuthor(name=current_user.full_name, is_verified=current_user.aadhaar_verified)
    try:
        rating = area_map.save_rating(marker, request.score, request.comment, author)
    except StaleMarkerError:
        # 같은 평가를 동시에 저장한 다른 요청이 먼저 끝난 경우
        raise NoPendingRatingException()
    except ValueError as e:
        raise ValidationException(message=str(e), field="score")

    return BaseResponse(data=_rating(rating), message="Safety rating saved")


@router.post(
    "/{session_id}/ratings/discard",
    response_model=BaseResponse[MapSessionSchema],
    summary="작성 중인 평가 취소",
    description="""
    작성 중인 평가를 버립니다.

    점수를 기본값(5)에서 바꿨거나 코멘트를 입력했다면
    confirmed=true 없이는 409 CONFIRMATION_REQUIRED 를 반환합니다.
    """
)
def discard_rating(
    request: Optional[DiscardRatingRequest] = Body(None),
    session_id: str = Path(..., description="세션 ID"),
    sessions: MapSessionRegistry = Depends(get_map_sessions)
):
    request = request or DiscardRatingRequest()
    area_map = sessions.get(session_id)
    marker = area_map.pending_marker
    if marker is None:
        raise NoPendingRatingException()

    if draft_needs_confirmation(request.score, request.comment) and not request.confirmed:
        raise ConfirmationRequiredException()

    area_map.discard_rating(marker)
    return BaseResponse(data=_session(session_id, area_map), message="Safety rating discarded")
