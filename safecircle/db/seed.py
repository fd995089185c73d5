# ============================================
# safecircle/db/seed.py - 데모 데이터 입력
# ============================================
# 서버 시작 시 메모리 DB에 데모 사용자의 프로필, 비상연락처,
# 설정, 알림을 넣습니다. 항상 같은 데이터가 들어갑니다.
# ============================================

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from safecircle.config import settings
from safecircle.models import (
    Alert,
    CheckInSchedule,
    EmergencyContact,
    GuardianMode,
    Profile,
    UserSettings,
)
from safecircle.models.user import utcnow

logger = logging.getLogger(__name__)


DEMO_PROFILE = {
    "full_name": "Priya Sharma",
    "email": "demo@example.com",
    "phone": "XXXXXXXXXX",
    "address": "123 Main Street, Mumbai",
    "aadhaar_verified": False,
    "aadhaar_number": "",
    "blood_group": "O+",
    "allergies": "None",
    "medications": "None",
}

DEMO_CONTACTS = [
    {"id": "contact-1", "name": "Mom", "phone": "XXXXXXXXXX",
     "email": "sreejitc2019@gmail.com", "relation": "Family"},
    {"id": "contact-2", "name": "Sister", "phone": "XXXXXXXXXX",
     "email": "sreejitc2019@gmail.com", "relation": "Family"},
]

DEMO_SETTINGS = {
    "dark_mode": False,
    "notifications": True,
    "sound": True,
    "location_tracking": True,
    "privacy_mode": "standard",
    "check_in_interval": 15,
    "safety_radius": 50,
}

# (id, type, 제목, 내용, 위치, 표시 시간, 읽음, 몇 분 전)
DEMO_ALERTS = [
    ("alert-1", "area", "Safety Alert: Your Area",
     "Recent incidents reported in your vicinity. Exercise caution when traveling alone.",
     "Within 500m of your location", "Today, 10:30 AM", False, 30),
    ("alert-2", "checkin", "Missed Check-in",
     "You missed your scheduled safety check-in at 9:00 AM.",
     None, "Today, 9:15 AM", True, 105),
    ("alert-3", "system", "Guardian Mode Activated",
     "Guardian mode was activated for your journey home.",
     None, "Yesterday, 8:45 PM", True, 990),
]


def seed_demo_data(db: Session, user_id: str = None) -> bool:
    """
    데모 데이터를 넣습니다.

    이미 프로필이 있으면 아무것도 하지 않습니다.

    Args:
        db: 데이터베이스 세션
        user_id: 데모 사용자 ID (기본: settings.DEMO_USER_ID)

    Returns:
        bool: 새로 넣었으면 True
    """
    user_id = user_id or settings.DEMO_USER_ID

    if db.get(Profile, user_id) is not None:
        return False

    now = utcnow()
    db.add(Profile(id=user_id, **DEMO_PROFILE))
    db.add(UserSettings(user_id=user_id, **DEMO_SETTINGS))
    db.add(GuardianMode(user_id=user_id, is_active=False))
    db.add(CheckInSchedule(user_id=user_id, is_active=False))

    for index, contact in enumerate(DEMO_CONTACTS):
        db.add(EmergencyContact(
            user_id=user_id,
            created_at=now - timedelta(minutes=len(DEMO_CONTACTS) - index),
            **contact
        ))

    for alert_id, alert_type, title, message, location, time, read, minutes_ago in DEMO_ALERTS:
        db.add(Alert(
            id=alert_id,
            user_id=user_id,
            type=alert_type,
            title=title,
            message=message,
            location=location,
            time=time,
            read=read,
            created_at=now - timedelta(minutes=minutes_ago),
        ))

    db.commit()
    logger.info(f"Seeded demo data for user {user_id}")
    return True
