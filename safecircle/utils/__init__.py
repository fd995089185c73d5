"""
유틸리티 모듈
안전점수 계산, 지도 좌표 변환 등 공통 유틸리티 함수를 제공합니다.
"""

from .geometry import GeoPoint, ScreenPoint, Viewport, ViewTransform, project, unproject
from .safety_score import compute_safety_score, compute_safety_factors, SafetyFactors

__all__ = [
    'GeoPoint',
    'ScreenPoint',
    'Viewport',
    'ViewTransform',
    'project',
    'unproject',
    'compute_safety_score',
    'compute_safety_factors',
    'SafetyFactors',
]
