# ============================================
# safecircle/services/geolocation_service.py - 위치 확인 서비스
# ============================================
# 단말이 보낸 위치를 확인하고, 위치를 얻지 못했으면
# 기본 위치(설정값)로 대신합니다. 이때 is_approximate=True 입니다.
# ============================================

import logging
from dataclasses import dataclass
from typing import Optional

from safecircle.config import settings
from safecircle.utils.geometry import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationFix:
    """확정된 위치"""
    point: GeoPoint
    is_approximate: bool


def is_valid_reading(reading: Optional[GeoPoint]) -> bool:
    """유한한 값이고 위도 -90~90, 경도 -180~180 범위인지"""
    if reading is None or not reading.is_finite():
        return False
    return -90.0 <= reading.lat <= 90.0 and -180.0 <= reading.lng <= 180.0


class GeolocationService:
    """
    위치 확인 서비스

    [신입 개발자를 위한 설명]
    브라우저 위치 권한이 없거나 시간 초과로 위치를 못 얻는 경우가 많습니다.
    그래도 SOS 같은 기능은 멈추면 안 되므로 기본 위치로 계속 진행합니다.
    """

    def __init__(self, default_location: Optional[GeoPoint] = None):
        """
        Args:
            default_location: 대체 위치 (기본: DEFAULT_LATITUDE, DEFAULT_LONGITUDE)
        """
        self.default_location = default_location or GeoPoint(
            settings.DEFAULT_LATITUDE, settings.DEFAULT_LONGITUDE
        )

    def resolve(self, reading: Optional[GeoPoint]) -> LocationFix:
        """
        단말 위치를 확정합니다.

        Args:
            reading: 단말이 보낸 위치 (없으면 None)

        Returns:
            LocationFix: 확정된 위치와 대체 위치 사용 여부
        """
        if is_valid_reading(reading):
            return LocationFix(point=reading, is_approximate=False)

        if reading is not None:
            logger.warning(f"Ignoring invalid location reading ({reading.lat}, {reading.lng})")
        else:
            logger.debug("No location reading, using default location")
        return LocationFix(point=self.default_location, is_approximate=True)
