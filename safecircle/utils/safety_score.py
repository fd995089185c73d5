# ============================================
# safecircle/utils/safety_score.py - 안전점수 계산 유틸리티
# ============================================
# 위치와 현재 시각으로 1~10 사이의 안전점수를 계산합니다.
# 실제 범죄/인구 데이터가 아니라 좌표와 시간대로 만든 결정적인
# 가상 요인 5가지를 가중 평균합니다.
# ============================================

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict

from safecircle.utils.geometry import GeoPoint, clamp


# ---------- 가중치 (합계 1.0) ----------
WEIGHTS: Dict[str, float] = {
    "time_of_day": 0.30,
    "crime_rate": 0.25,
    "crowdedness": 0.15,
    "lighting": 0.15,
    "known_safe_zones": 0.15,
}

MIN_SCORE = 1
MAX_SCORE = 10


@dataclass(frozen=True)
class SafetyFactors:
    """
    안전점수를 구성하는 5가지 요인 (각 0~10)

    저장되지 않는 중간 계산 결과입니다.
    """
    time_of_day: float
    crime_rate: float
    crowdedness: float
    lighting: float
    known_safe_zones: float

    def weighted_sum(self) -> float:
        return sum(getattr(self, name) * weight for name, weight in WEIGHTS.items())

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


# ============================================
# 요인별 계산 함수
# ============================================

def time_of_day_score(hour: int) -> float:
    """
    시간대 점수

    - 22시~5시: 5 (야간)
    - 18시 이후 또는 7시 이전: 7 (저녁/이른 아침)
    - 그 외: 10

    두 번째 조건은 첫 번째 조건 다음에 검사합니다. 순서를 바꾸지 마세요.
    """
    if hour >= 22 or hour <= 5:
        return 5.0
    elif hour >= 18 or hour <= 7:
        return 7.0
    return 10.0


def crime_rate_score(location: GeoPoint) -> float:
    """가상 범죄율 점수: 7 + 2sin(10·lat) + 2cos(10·lng)"""
    base = 7.0
    lat_variation = math.sin(location.lat * 10) * 2
    lng_variation = math.cos(location.lng * 10) * 2
    return clamp(base + lat_variation + lng_variation, 1.0, 10.0)


def crowdedness_score(location: GeoPoint, hour: int) -> float:
    """가상 유동인구 점수: 시간대 기본값 + 위치 변동폭(0~4)"""
    if 9 <= hour <= 17:
        base = 8.0
    elif 18 <= hour <= 22:
        base = 7.0
    else:
        base = 4.0

    variation = (math.sin(location.lat + location.lng) + 1) * 2
    return clamp(base + variation, 1.0, 10.0)


def lighting_score(hour: int) -> float:
    """조명 점수: 18시 이후 또는 6시 이전이면 6, 낮에는 9"""
    return 6.0 if hour >= 18 or hour <= 6 else 9.0


def known_safe_zones_score(location: GeoPoint) -> float:
    """안전시설(경찰서, 병원 등) 근접 점수: 6 + 3cos(lat·lng)"""
    variation = math.cos(location.lat * location.lng) * 3
    return clamp(6.0 + variation, 1.0, 10.0)


def _round_half_up(value: float) -> int:
    # round()는 은행가 반올림이라 x.5 에서 결과가 달라집니다
    return int(math.floor(value + 0.5))


# ============================================
# 핵심 계산 함수
# ============================================

def compute_safety_factors(location: GeoPoint, now: datetime) -> SafetyFactors:
    """
    위치와 시각으로 5가지 요인을 계산합니다.

    Args:
        location: 위경도 좌표
        now: 기준 시각 (now.hour 를 그대로 사용하므로 시간대는 호출자가 맞춥니다)

    Raises:
        ValueError: 위도/경도가 유한한 숫자가 아닐 때
    """
    if not location.is_finite():
        raise ValueError(f"Location must have finite coordinates: {location}")

    hour = now.hour
    return SafetyFactors(
        time_of_day=time_of_day_score(hour),
        crime_rate=crime_rate_score(location),
        crowdedness=crowdedness_score(location, hour),
        lighting=lighting_score(hour),
        known_safe_zones=known_safe_zones_score(location),
    )


def compute_safety_score(location: GeoPoint, now: datetime) -> int:
    """
    안전점수(1~10 정수)를 계산합니다.

    같은 (location, now) 에 대해서는 항상 같은 값을 반환하는 순수 함수입니다.

    Args:
        location: 위경도 좌표
        now: 기준 시각

    Returns:
        int: 안전점수 (1~10)
    """
    factors = compute_safety_factors(location, now)
    return int(clamp(_round_half_up(factors.weighted_sum()), MIN_SCORE, MAX_SCORE))


# ============================================
# 표시용 헬퍼
# ============================================

def score_level(score: int) -> str:
    """점수 등급 문구"""
    if score >= 8:
        return "Safe"
    if score >= 5:
        return "Moderate"
    return "Caution"


def score_description(score: int) -> str:
    """점수 등급 설명"""
    if score >= 8:
        return "This area is generally considered safe."
    if score >= 5:
        return "Exercise normal caution in this area."
    return "Exercise increased caution in this area."
