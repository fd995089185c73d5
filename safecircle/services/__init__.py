# ============================================
# safecircle/services/__init__.py
# ============================================
# 비즈니스 로직 서비스 패키지 초기화
# ============================================

"""
서비스 모듈

[신입 개발자를 위한 팁]
- 라우터는 요청/응답만 처리하고, 실제 로직은 서비스에서 처리합니다.
- area_rating_map 은 DB 없이 메모리에서만 동작하는 지도 모델입니다.

[아키텍처 흐름]
요청 → 라우터(API) → 서비스(비즈니스 로직) → 모델(DB) → 응답
"""

from safecircle.services.area_rating_map import AreaRatingMap
from safecircle.services.map_session_service import MapSessionRegistry, map_sessions
from safecircle.services.geolocation_service import GeolocationService, LocationFix
from safecircle.services.notification_service import EmailDispatcher, ToastSink
from safecircle.services.mock_data_service import MockDataService
from safecircle.services.safety_service import SafetyService


__all__ = [
    "AreaRatingMap",
    "MapSessionRegistry",
    "map_sessions",
    "GeolocationService",
    "LocationFix",
    "EmailDispatcher",
    "ToastSink",
    "MockDataService",
    "SafetyService",
]
