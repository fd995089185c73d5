# ============================================
# safecircle/api/deps.py - API 의존성
# ============================================
# FastAPI의 Dependency Injection에서 사용하는 공통 의존성을 정의합니다.
# 테스트에서는 app.dependency_overrides 로 각각 교체할 수 있습니다.
# ============================================

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.orm import Session

from safecircle.config import settings
from safecircle.db.database import get_db
from safecircle.models import Profile
from safecircle.services.geolocation_service import GeolocationService
from safecircle.services.map_session_service import MapSessionRegistry, map_sessions
from safecircle.services.mock_data_service import MockDataService
from safecircle.services.notification_service import (
    EmailDispatcher,
    ToastSink,
    email_dispatcher,
    toast_sink,
)
from safecircle.services.safety_service import SafetyService


def get_now() -> datetime:
    """
    현재 시각 (TIMEZONE 기준)

    안전점수의 시간대 판단과 알림 표시 시간에 사용됩니다.
    """
    return datetime.now(ZoneInfo(settings.TIMEZONE))


def get_toast_sink() -> ToastSink:
    return toast_sink


def get_email_dispatcher() -> EmailDispatcher:
    return email_dispatcher


def get_geolocation() -> GeolocationService:
    return GeolocationService()


def get_map_sessions() -> MapSessionRegistry:
    return map_sessions


def get_store(db: Session = Depends(get_db)) -> MockDataService:
    return MockDataService(db)


def get_current_user(store: MockDataService = Depends(get_store)) -> Profile:
    """
    현재 사용자를 반환하는 의존성 함수

    인증은 하지 않고 항상 데모 사용자(DEMO_USER_ID)를 반환합니다.

    Raises:
        ProfileNotFoundException: 데모 데이터가 없는 경우
    """
    return store.get_user_profile()


def get_safety_service(
    db: Session = Depends(get_db),
    toasts: ToastSink = Depends(get_toast_sink),
    mailer: EmailDispatcher = Depends(get_email_dispatcher),
    geolocation: GeolocationService = Depends(get_geolocation)
) -> SafetyService:
    return SafetyService(db, toasts, mailer, geolocation)
