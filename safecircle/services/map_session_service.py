# ============================================
# safecircle/services/map_session_service.py - 지도 세션 관리
# ============================================
# 화면 하나(지도 뷰)마다 AreaRatingMap 하나를 만들어 메모리에 보관합니다.
# 세션이 닫히면 그 세션에서 추가한 평가도 함께 사라집니다.
# ============================================

import logging
import threading
import uuid
from typing import Callable, Optional

from cachetools import LRUCache

from safecircle.config import settings
from safecircle.core.exceptions import MapSessionNotFoundException
from safecircle.services.area_rating_map import AreaRatingMap
from safecircle.utils.geometry import GeoPoint, Viewport

logger = logging.getLogger(__name__)


class _SessionCache(LRUCache):
    """가장 오래 쓰이지 않은 세션부터 내보내고, 내보낼 때 로그를 남깁니다."""

    def popitem(self):
        session_id, area_map = super().popitem()
        logger.info(
            f"Map session limit reached, closed idle session {session_id} "
            f"({len(area_map.ratings)} ratings dropped)"
        )
        return session_id, area_map


class MapSessionRegistry:
    """
    지도 세션 저장소

    [신입 개발자를 위한 설명]
    - 세션 ID는 추측할 수 없는 uuid4 hex 입니다.
    - 최대 개수(limit)를 넘으면 가장 오래 쓰이지 않은 세션을 닫습니다 (LRU).
    - FastAPI 는 동기 엔드포인트를 스레드풀에서 실행합니다.
      세션 목록은 이 저장소의 lock 으로, 각 지도의 상태는 AreaRatingMap 의 lock 으로 보호합니다.
    """

    def __init__(self, limit: int = None, map_factory: Optional[Callable[..., AreaRatingMap]] = None):
        """
        Args:
            limit: 동시에 유지할 최대 세션 수 (기본: MAP_SESSION_LIMIT)
            map_factory: AreaRatingMap 생성 함수 (테스트에서 시계 주입용)
        """
        self.limit = limit or settings.MAP_SESSION_LIMIT
        self._map_factory = map_factory or AreaRatingMap
        self._sessions = _SessionCache(maxsize=self.limit)
        self._lock = threading.Lock()

    def create(self, anchor: GeoPoint, viewport: Viewport = None) -> str:
        """
        새 지도 세션을 만들고 시드 평가를 불러옵니다.

        Args:
            anchor: 화면 중앙 기준 좌표
            viewport: 화면 크기 (기본: MAP_VIEWPORT_WIDTH x MAP_VIEWPORT_HEIGHT)

        Returns:
            str: 세션 ID
        """
        viewport = viewport or Viewport(settings.MAP_VIEWPORT_WIDTH, settings.MAP_VIEWPORT_HEIGHT)
        area_map = self._map_factory(
            anchor,
            viewport,
            hit_radius_px=settings.MAP_HIT_RADIUS_PX,
            drag_threshold_px=settings.MAP_DRAG_THRESHOLD_PX,
        )
        area_map.load_seed_ratings(anchor)

        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = area_map

        logger.info(f"Opened map session {session_id} at ({anchor.lat}, {anchor.lng})")
        return session_id

    def get(self, session_id: str) -> AreaRatingMap:
        """세션의 지도 모델 (없으면 MapSessionNotFoundException). 조회하면 최근 사용으로 기록됩니다."""
        with self._lock:
            area_map = self._sessions.get(session_id)
        if area_map is None:
            raise MapSessionNotFoundException()
        return area_map

    def close(self, session_id: str) -> None:
        """세션을 닫습니다. 세션의 평가도 버려집니다."""
        with self._lock:
            area_map = self._sessions.pop(session_id, None)
        if area_map is None:
            raise MapSessionNotFoundException()
        logger.info(f"Closed map session {session_id} ({len(area_map.ratings)} ratings dropped)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions


# 애플리케이션 전체에서 쓰는 세션 저장소
map_sessions = MapSessionRegistry()
