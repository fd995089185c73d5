# ============================================
# safecircle/services/area_rating_map.py - 지역 안전 평가 지도 모델
# ============================================
# 사용자들이 남긴 지역 안전 평가(AreaRating)를 들고 있고,
# 화면 이동/확대 상태에 맞춰 좌표를 변환하고,
# 클릭이 기존 마커 선택인지 새 평가 시작인지 판단합니다.
#
# 모든 상태는 지도 세션 하나가 소유하며 메모리에만 존재합니다.
# ============================================

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from safecircle.utils.geometry import (
    MAX_ZOOM,
    MIN_ZOOM,
    ZOOM_STEP,
    GeoPoint,
    ScreenPoint,
    Viewport,
    ViewTransform,
    grid_phase,
    project,
    project_many,
    unproject,
)

logger = logging.getLogger(__name__)


# ---------- 상수 ----------
MIN_RATING_SCORE = 1
MAX_RATING_SCORE = 10

# 평가 입력창을 열 때의 기본 점수
DEFAULT_DRAFT_SCORE = 5

# 기본 마커 클릭 반경 (px)
DEFAULT_HIT_RADIUS_PX = 10.0

# 화면 밖이라도 이 여백(px) 안이면 마커를 그립니다
RENDER_MARGIN_PX = 20.0

# zoom=1 일 때 격자 한 칸 크기 (px)
GRID_CELL_PX = 40.0


# ============================================
# 데이터 타입
# ============================================

@dataclass(frozen=True)
class RatingAuthor:
    """평가 작성자"""
    name: str
    is_verified: bool = False


@dataclass(frozen=True)
class AreaRating:
    """
    지역 안전 평가 (지도 마커 하나)

    한 번 만들어지면 바뀌지 않습니다. 세션이 끝나면 사라집니다.
    """
    id: str
    location: GeoPoint
    score: int
    comment: str
    created_at: datetime
    created_by: RatingAuthor


@dataclass(frozen=True)
class MapMarker:
    """빈 곳을 눌렀을 때 생기는, 아직 저장되지 않은 평가 위치"""
    location: GeoPoint
    screen_x: float
    screen_y: float


# ---------- 포인터 이벤트 ----------
@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    dx: float
    dy: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class Click:
    x: float
    y: float


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


MapEvent = Union[PointerDown, PointerMove, PointerUp, Click, ZoomIn, ZoomOut]


# ---------- 클릭 결과 ----------
@dataclass(frozen=True)
class SelectRating:
    """기존 마커를 눌렀음 -> 상세 보기"""
    rating: AreaRating


@dataclass(frozen=True)
class BeginRating:
    """빈 곳을 눌렀음 -> 새 평가 입력"""
    marker: MapMarker


MapIntent = Union[SelectRating, BeginRating]


# ---------- 렌더링 ----------
@dataclass(frozen=True)
class RenderedMarker:
    rating: AreaRating
    x: float
    y: float
    level: str
    visible: bool


@dataclass(frozen=True)
class MapFrame:
    """화면 한 장을 그리는 데 필요한 값"""
    markers: List[RenderedMarker]
    user_pin: ScreenPoint
    grid_size: float
    grid_offset: ScreenPoint
    zoom: float
    pan_offset: ScreenPoint


# ============================================
# 시드 데이터
# ============================================

# (id, 위도 차이, 경도 차이, 점수, 코멘트, 작성일, 작성자)
SEED_RATINGS: Tuple[Tuple[str, float, float, int, str, str, RatingAuthor], ...] = (
    (
        "safety-1", 0.003, 0.002, 9,
        "Well-lit area with regular police patrols. Safe for walking even at night.",
        "2023-05-15T14:30:00+00:00",
        RatingAuthor(name="Priya S.", is_verified=True),
    ),
    (
        "safety-2", -0.002, 0.004, 3,
        "Poorly lit street with few people around. Avoid at night.",
        "2023-05-10T18:45:00+00:00",
        RatingAuthor(name="Anjali K.", is_verified=True),
    ),
    (
        "safety-3", 0.005, -0.003, 7,
        "Busy market area. Safe during day, moderate caution at night.",
        "2023-05-12T10:15:00+00:00",
        RatingAuthor(name="Meera R.", is_verified=False),
    ),
)


def build_seed_ratings(anchor: GeoPoint) -> List[AreaRating]:
    """기준 위치 주변의 고정된 시드 평가 3개를 만듭니다."""
    return [
        AreaRating(
            id=rating_id,
            location=GeoPoint(anchor.lat + d_lat, anchor.lng + d_lng),
            score=score,
            comment=comment,
            created_at=datetime.fromisoformat(created_at),
            created_by=author,
        )
        for rating_id, d_lat, d_lng, score, comment, created_at, author in SEED_RATINGS
    ]


# ============================================
# 헬퍼 함수
# ============================================

def safety_level(score: int) -> str:
    """마커 색상 등급 (safe / moderate / unsafe)"""
    if score >= 8:
        return "safe"
    if score >= 5:
        return "moderate"
    return "unsafe"


def draft_needs_confirmation(score: int, comment: str) -> bool:
    """
    작성 중인 평가를 버리기 전에 사용자 확인이 필요한지 판단합니다.

    점수를 바꿨거나 코멘트를 입력했다면 True.
    """
    return score != DEFAULT_DRAFT_SCORE or comment.strip() != ""


class StaleMarkerError(ValueError):
    """저장/취소하려는 마커가 지금 작성 중인 마커가 아님 (이미 저장됐거나 버려짐)"""


def validate_rating_score(score: int) -> int:
    """평가 점수는 1~10 정수"""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Rating score must be an integer, got {score!r}")
    if not MIN_RATING_SCORE <= score <= MAX_RATING_SCORE:
        raise ValueError(
            f"Rating score must be between {MIN_RATING_SCORE} and {MAX_RATING_SCORE}, got {score}"
        )
    return score


def hit_test(
    screen: ScreenPoint,
    ratings: Sequence[AreaRating],
    anchor: GeoPoint,
    transform: ViewTransform,
    center: ScreenPoint,
    radius_px: float = DEFAULT_HIT_RADIUS_PX,
) -> Optional[AreaRating]:
    """
    클릭 위치에서 radius_px 안에 있는 첫 번째 평가를 찾습니다.

    가장 가까운 마커가 아니라 목록 순서(추가된 순서)상 첫 번째를 반환합니다.

    Args:
        screen: 클릭한 화면 좌표
        ratings: 평가 목록
        anchor: 기준 좌표
        transform: 현재 pan/zoom 상태
        center: 화면 중앙 좌표
        radius_px: 판정 반경 (경계 포함)

    Returns:
        Optional[AreaRating]: 찾은 평가 (없으면 None)
    """
    if not ratings:
        return None

    coords = project_many((r.location for r in ratings), anchor, transform, center)
    distances = np.hypot(coords[:, 0] - screen.x, coords[:, 1] - screen.y)
    hits = np.flatnonzero(distances <= radius_px)
    if hits.size == 0:
        return None
    return ratings[int(hits[0])]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================
# 지도 모델
# ============================================

class AreaRatingMap:
    """
    지역 안전 평가 지도 모델

    [신입 개발자를 위한 설명]
    화면을 그리는 코드 없이 지도의 상태와 규칙만 담당합니다.
    - 평가 목록 (추가만 가능)
    - 이동/확대 상태 (ViewTransform)
    - 저장 전 평가 마커, 선택된 평가
    - 드래그와 클릭 구분

    프레젠테이션 계층은 dispatch() 로 포인터 이벤트를 넘기고
    render() 결과로 마커를 그립니다.

    한 세션에 여러 요청이 동시에 들어올 수 있으므로(스레드풀),
    상태를 읽고 바꾸는 메서드는 모두 지도별 lock 안에서 실행됩니다.
    """

    def __init__(
        self,
        anchor: GeoPoint,
        viewport: Viewport,
        hit_radius_px: float = DEFAULT_HIT_RADIUS_PX,
        drag_threshold_px: float = 4.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        AreaRatingMap 초기화

        Args:
            anchor: 화면 중앙에 오는 기준 좌표 (보통 사용자 위치)
            viewport: 화면 크기
            hit_radius_px: 마커 클릭 판정 반경
            drag_threshold_px: 이보다 많이 움직이면 드래그로 판단
            clock: 현재 시각 함수 (테스트에서 교체)
        """
        self.anchor = anchor
        self.viewport = viewport
        self.hit_radius_px = hit_radius_px
        self.drag_threshold_px = drag_threshold_px
        self.transform = ViewTransform()
        self.pending_marker: Optional[MapMarker] = None
        self.selected_rating: Optional[AreaRating] = None

        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self._ratings: List[AreaRating] = []
        self._gesture_active = False
        self._gesture_travel = 0.0
        self._suppress_next_click = False

    # ============================================
    # 평가 목록
    # ============================================

    @property
    def ratings(self) -> Tuple[AreaRating, ...]:
        """추가된 순서대로의 평가 목록 (읽기 전용)"""
        with self._lock:
            return tuple(self._ratings)

    @property
    def card_open(self) -> bool:
        """상세 보기나 평가 입력창이 열려 있는지"""
        return self.pending_marker is not None or self.selected_rating is not None

    def load_seed_ratings(self, anchor: GeoPoint) -> None:
        """기준 위치를 바꾸고 평가 목록을 시드 데이터로 교체합니다."""
        with self._lock:
            self.anchor = anchor
            self._ratings = build_seed_ratings(anchor)
            self.selected_rating = None
        logger.debug(f"Loaded {len(self._ratings)} seed ratings around ({anchor.lat}, {anchor.lng})")

    # ============================================
    # 좌표 변환
    # ============================================

    @property
    def center(self) -> ScreenPoint:
        return self.viewport.center

    def project(self, point: GeoPoint) -> ScreenPoint:
        return project(point, self.anchor, self.transform, self.center)

    def unproject(self, screen: ScreenPoint) -> GeoPoint:
        return unproject(screen, self.anchor, self.transform, self.center)

    def hit_test(self, screen: ScreenPoint) -> Optional[AreaRating]:
        return hit_test(
            screen, self._ratings, self.anchor, self.transform, self.center, self.hit_radius_px
        )

    def resize(self, viewport: Viewport) -> None:
        with self._lock:
            self.viewport = viewport

    # ============================================
    # 이동 / 확대
    # ============================================

    def pan(self, dx: float, dy: float) -> None:
        """드래그한 만큼 화면을 이동합니다 (범위 제한 없음)."""
        with self._lock:
            offset = self.transform.pan_offset
            self.transform.pan_offset = ScreenPoint(offset.x + dx, offset.y + dy)

    def zoom_in(self) -> None:
        with self._lock:
            self.transform.zoom = min(self.transform.zoom * ZOOM_STEP, MAX_ZOOM)

    def zoom_out(self) -> None:
        with self._lock:
            self.transform.zoom = max(self.transform.zoom / ZOOM_STEP, MIN_ZOOM)

    # ============================================
    # 새 평가
    # ============================================

    def begin_rating(self, location: GeoPoint, screen: Optional[ScreenPoint] = None) -> MapMarker:
        """
        새 평가 마커를 만듭니다. 평가 목록은 바뀌지 않습니다.

        Args:
            location: 평가할 위치
            screen: 클릭한 화면 좌표 (없으면 location 을 투영해서 사용)
        """
        with self._lock:
            if screen is None:
                screen = self.project(location)
            marker = MapMarker(location=location, screen_x=screen.x, screen_y=screen.y)
            self.pending_marker = marker
            return marker

    def save_rating(
        self,
        marker: MapMarker,
        score: int,
        comment: str,
        author: RatingAuthor,
    ) -> AreaRating:
        """
        작성 중인 평가를 저장합니다.

        점수는 입력 슬라이더가 1~10 으로 제한하지만 여기서도 다시 검사합니다.
        마커 확인부터 추가까지 lock 안에서 처리하므로 같은 마커는 한 번만 저장됩니다.

        Args:
            marker: begin_rating() 이 반환한 마커
            score: 안전 점수 (1~10)
            comment: 코멘트 (입력 그대로 저장)
            author: 작성자

        Returns:
            AreaRating: 새로 추가된 평가

        Raises:
            StaleMarkerError: 마커가 현재 작성 중인 마커가 아닐 때 (이미 저장/취소됨)
            ValueError: 점수가 범위를 벗어났을 때
        """
        with self._lock:
            if self.pending_marker is None or marker != self.pending_marker:
                raise StaleMarkerError("Marker is not the pending rating on this map")
            validate_rating_score(score)

            created_at = self._clock()
            rating = AreaRating(
                id=self._next_rating_id(created_at),
                location=marker.location,
                score=score,
                comment=comment,
                created_at=created_at,
                created_by=author,
            )
            self._ratings.append(rating)
            self.pending_marker = None

        logger.info(
            f"Saved safety rating {rating.id} (score={score}) at "
            f"({rating.location.lat:.6f}, {rating.location.lng:.6f})"
        )
        return rating

    def discard_rating(self, marker: MapMarker) -> None:
        """
        작성 중인 평가를 버립니다. 평가 목록은 바뀌지 않습니다.

        작성 내용이 있으면 호출 전에 화면에서 사용자 확인을 받아야 합니다
        (draft_needs_confirmation 참고).
        """
        with self._lock:
            if self.pending_marker is not None and marker == self.pending_marker:
                self.pending_marker = None

    def close_details(self) -> None:
        """선택된 평가의 상세 보기를 닫습니다."""
        with self._lock:
            self.selected_rating = None

    def _next_rating_id(self, created_at: datetime) -> str:
        base = f"safety-{int(created_at.timestamp() * 1000)}"
        existing = {r.id for r in self._ratings}
        rating_id = base
        suffix = 2
        while rating_id in existing:
            rating_id = f"{base}-{suffix}"
            suffix += 1
        return rating_id

    # ============================================
    # 포인터 이벤트
    # ============================================

    def dispatch(self, event: MapEvent) -> Optional[MapIntent]:
        """
        포인터/줌 이벤트를 처리합니다.

        - PointerDown -> PointerMove... -> PointerUp: 드래그 (화면 이동)
        - 드래그 직후의 Click 은 무시합니다.
        - Click: 마커 위면 SelectRating, 빈 곳이면 BeginRating
        - 상세 보기/입력창이 열려 있으면 PointerDown, Click 은 무시합니다.

        Returns:
            Optional[MapIntent]: 클릭으로 생긴 결과 (없으면 None)
        """
        with self._lock:
            return self._handle_event(event)

    def _handle_event(self, event: MapEvent) -> Optional[MapIntent]:
        if isinstance(event, PointerDown):
            if not self.card_open:
                self._gesture_active = True
                self._gesture_travel = 0.0
            return None

        if isinstance(event, PointerMove):
            if self._gesture_active:
                self.pan(event.dx, event.dy)
                self._gesture_travel += math.hypot(event.dx, event.dy)
            return None

        if isinstance(event, PointerUp):
            if self._gesture_active:
                self._suppress_next_click = self._gesture_travel > self.drag_threshold_px
                self._gesture_active = False
            return None

        if isinstance(event, Click):
            return self._resolve_click(ScreenPoint(event.x, event.y))

        if isinstance(event, ZoomIn):
            self.zoom_in()
            return None

        if isinstance(event, ZoomOut):
            self.zoom_out()
            return None

        raise TypeError(f"Unsupported map event: {event!r}")

    def _resolve_click(self, screen: ScreenPoint) -> Optional[MapIntent]:
        if self._suppress_next_click:
            self._suppress_next_click = False
            return None
        if self.card_open or self._gesture_active:
            return None

        rating = self.hit_test(screen)
        if rating is not None:
            self.selected_rating = rating
            return SelectRating(rating=rating)

        marker = self.begin_rating(self.unproject(screen), screen)
        return BeginRating(marker=marker)

    # ============================================
    # 렌더링
    # ============================================

    def render(self) -> MapFrame:
        """현재 상태로 화면 한 장을 그리는 데 필요한 값을 계산합니다."""
        with self._lock:
            # lock 안에서는 상태 복사만, 계산은 복사본으로
            ratings = list(self._ratings)
            anchor = self.anchor
            viewport = self.viewport
            transform = ViewTransform(pan_offset=self.transform.pan_offset, zoom=self.transform.zoom)

        center = viewport.center
        coords = project_many((r.location for r in ratings), anchor, transform, center)

        markers: List[RenderedMarker] = []
        for rating, (x, y) in zip(ratings, coords):
            point = ScreenPoint(float(x), float(y))
            markers.append(RenderedMarker(
                rating=rating,
                x=point.x,
                y=point.y,
                level=safety_level(rating.score),
                visible=viewport.contains(point, margin=RENDER_MARGIN_PX),
            ))

        pan_offset = transform.pan_offset
        grid_size = GRID_CELL_PX * transform.zoom
        grid_x, grid_y = grid_phase(pan_offset, grid_size)

        return MapFrame(
            markers=markers,
            user_pin=ScreenPoint(center.x + pan_offset.x, center.y + pan_offset.y),
            grid_size=grid_size,
            grid_offset=ScreenPoint(grid_x, grid_y),
            zoom=transform.zoom,
            pan_offset=pan_offset,
        )
