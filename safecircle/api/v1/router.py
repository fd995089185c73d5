# ============================================
# safecircle/api/v1/router.py - API v1 메인 라우터
# ============================================
# 모든 API v1 라우터를 통합하는 메인 라우터입니다.
# 최종 URL은 /api/v1/{도메인}/{엔드포인트} 형태가 됩니다.
# ============================================

from fastapi import APIRouter

# 각 도메인별 라우터 import
from safecircle.api.v1.safety import router as safety_router
from safecircle.api.v1.map import router as map_router
from safecircle.api.v1.profile import router as profile_router
from safecircle.api.v1.contacts import router as contacts_router
from safecircle.api.v1.alerts import router as alerts_router
from safecircle.api.v1.settings import router as settings_router
from safecircle.api.v1.notifications import router as notifications_router


api_router = APIRouter()


# ============================================
# 라우터 등록
# ============================================
# - /api/v1/safety/score, /sos, /check-ins, /guardian -> 안전 기능
# - /api/v1/map/sessions/... -> 지역 안전 평가 지도
# - /api/v1/profile, /contacts, /alerts, /settings -> 사용자 데이터
# - /api/v1/notifications/toasts -> 화면 토스트
# ============================================

# 안전점수, SOS, 체크인, 보호자 모드
api_router.include_router(safety_router)

# 지역 안전 평가 지도
api_router.include_router(map_router)

# 프로필 / Aadhaar 인증
api_router.include_router(profile_router)

# 비상연락처
api_router.include_router(contacts_router)

# 알림
api_router.include_router(alerts_router)

# 사용자 설정
api_router.include_router(settings_router)

# 화면 토스트
api_router.include_router(notifications_router)
