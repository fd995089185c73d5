# ============================================
# safecircle/models/__init__.py
# ============================================
# 데이터베이스 모델 패키지 초기화
#
# 모든 모델을 한 곳에서 import할 수 있도록 합니다.
# ============================================

"""
데이터베이스 모델 모듈

[신입 개발자를 위한 팁]
- user.py: 프로필, 설정, 보호자 모드
- contact.py: 비상연락처
- alert.py: 알림
- safety.py: SOS, 체크인
"""

# 모든 모델을 import하여 Base.metadata에 등록
from safecircle.models.user import Profile, UserSettings, GuardianMode
from safecircle.models.contact import EmergencyContact
from safecircle.models.alert import Alert, ALERT_TYPES
from safecircle.models.safety import SosEvent, SafetyCheckIn, CheckInSchedule

__all__ = [
    # User 관련
    "Profile",
    "UserSettings",
    "GuardianMode",
    # Contact 관련
    "EmergencyContact",
    # Alert 관련
    "Alert",
    "ALERT_TYPES",
    # Safety 관련
    "SosEvent",
    "SafetyCheckIn",
    "CheckInSchedule",
]
