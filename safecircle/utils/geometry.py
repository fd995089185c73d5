"""
기하학 계산 유틸리티
지도 화면과 위경도 좌표 사이의 변환(투영/역투영)을 제공합니다.

메르카토르 같은 실제 지도 투영이 아니라 기준 위치(anchor) 주변에서만
유효한 평면 근사입니다. 1도 = 10000px (zoom=1 기준).
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Tuple

import numpy as np


# zoom=1 일 때 위경도 1도가 차지하는 픽셀 수
PIXELS_PER_DEGREE = 10000.0

# 줌 범위와 한 번에 바뀌는 배율
MIN_ZOOM = 0.5
MAX_ZOOM = 5.0
ZOOM_STEP = 1.2


@dataclass(frozen=True)
class GeoPoint:
    """위경도 좌표 (WGS84, 십진 도)"""
    lat: float
    lng: float

    def is_finite(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)


@dataclass(frozen=True)
class ScreenPoint:
    """화면 좌표 (px, 왼쪽 위가 원점, y는 아래로 증가)"""
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    """지도를 그리는 화면 크기 (px)"""
    width: float
    height: float

    @property
    def center(self) -> ScreenPoint:
        return ScreenPoint(self.width / 2, self.height / 2)

    def contains(self, point: ScreenPoint, margin: float = 0.0) -> bool:
        """margin 만큼 넓힌 화면 안에 점이 있는지 확인합니다."""
        return (
            -margin <= point.x <= self.width + margin
            and -margin <= point.y <= self.height + margin
        )


@dataclass
class ViewTransform:
    """
    지도의 이동(pan) / 확대(zoom) 상태

    pan_offset 은 드래그한 픽셀 수가 그대로 누적되고,
    zoom 은 [MIN_ZOOM, MAX_ZOOM] 범위 안에서만 움직입니다.
    """
    pan_offset: ScreenPoint = field(default_factory=lambda: ScreenPoint(0.0, 0.0))
    zoom: float = 1.0

    @property
    def scale(self) -> float:
        """위경도 1도당 픽셀 수"""
        return PIXELS_PER_DEGREE * self.zoom


def project(
    point: GeoPoint,
    anchor: GeoPoint,
    transform: ViewTransform,
    center: ScreenPoint,
) -> ScreenPoint:
    """
    위경도 좌표를 화면 좌표로 변환합니다.

    x = cx + (lng - anchor.lng) * 10000 * zoom + pan.x
    y = cy - (lat - anchor.lat) * 10000 * zoom + pan.y

    Args:
        point: 변환할 좌표
        anchor: 화면 중앙(pan=0)에 오는 기준 좌표
        transform: 현재 pan/zoom 상태
        center: 화면 중앙 좌표

    Returns:
        ScreenPoint: 화면 좌표 (경도가 늘면 오른쪽, 위도가 늘면 위쪽)
    """
    scale = transform.scale
    return ScreenPoint(
        center.x + (point.lng - anchor.lng) * scale + transform.pan_offset.x,
        center.y - (point.lat - anchor.lat) * scale + transform.pan_offset.y,
    )


def unproject(
    screen: ScreenPoint,
    anchor: GeoPoint,
    transform: ViewTransform,
    center: ScreenPoint,
) -> GeoPoint:
    """
    화면 좌표를 위경도 좌표로 되돌립니다. project() 의 역함수입니다.

    Args:
        screen: 화면 좌표
        anchor: 기준 좌표
        transform: 현재 pan/zoom 상태
        center: 화면 중앙 좌표

    Returns:
        GeoPoint: 위경도 좌표
    """
    scale = transform.scale
    return GeoPoint(
        lat=anchor.lat - (screen.y - center.y - transform.pan_offset.y) / scale,
        lng=anchor.lng + (screen.x - center.x - transform.pan_offset.x) / scale,
    )


def project_many(
    points: Iterable[GeoPoint],
    anchor: GeoPoint,
    transform: ViewTransform,
    center: ScreenPoint,
) -> np.ndarray:
    """
    여러 좌표를 한 번에 화면 좌표로 변환합니다.

    Returns:
        np.ndarray: shape (N, 2) 배열, 각 행은 (x, y). 입력 순서를 유지합니다.
    """
    coords = np.array([(p.lng, p.lat) for p in points], dtype=float)
    if coords.size == 0:
        return np.empty((0, 2), dtype=float)

    scale = transform.scale
    xs = center.x + (coords[:, 0] - anchor.lng) * scale + transform.pan_offset.x
    ys = center.y - (coords[:, 1] - anchor.lat) * scale + transform.pan_offset.y
    return np.column_stack((xs, ys))


def screen_distance(a: ScreenPoint, b: ScreenPoint) -> float:
    """두 화면 좌표 사이의 유클리드 거리 (px)"""
    return math.hypot(a.x - b.x, a.y - b.y)


def clamp(value: float, low: float, high: float) -> float:
    """value 를 [low, high] 범위로 자릅니다."""
    return max(low, min(high, value))


def grid_phase(pan_offset: ScreenPoint, cell_size: float) -> Tuple[float, float]:
    """
    격자(도로) 선의 시작 위치를 계산합니다.

    나머지 부호는 pan 값의 부호를 따릅니다 (math.fmod).
    """
    if cell_size <= 0:
        return 0.0, 0.0
    return math.fmod(pan_offset.x, cell_size), math.fmod(pan_offset.y, cell_size)
