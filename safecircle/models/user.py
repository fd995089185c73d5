# ============================================
# safecircle/models/user.py - 사용자 관련 데이터베이스 모델
# ============================================
# 프로필, 앱 설정, 보호자 모드 테이블을 정의합니다.
# ============================================

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey

from safecircle.db.database import Base


def generate_uuid() -> str:
    """UUID를 생성하는 헬퍼 함수"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """현재 UTC 시각 (SQLite 저장용, tzinfo 없음)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Profile(Base):
    """
    사용자 프로필 테이블 (profiles)

    [신입 개발자를 위한 팁]
    - __tablename__: 실제 데이터베이스 테이블 이름
    - Column: 테이블의 컬럼(필드)을 정의
    """
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid, comment='사용자 ID')
    full_name = Column(String(100), nullable=False, comment='이름')
    email = Column(String(255), nullable=False, comment='이메일')
    phone = Column(String(30), nullable=False, default="", comment='전화번호')
    address = Column(String(255), nullable=False, default="", comment='주소')

    # ========== 본인 인증 ==========
    aadhaar_verified = Column(Boolean, nullable=False, default=False, comment='Aadhaar 인증 여부')
    aadhaar_number = Column(String(12), nullable=False, default="", comment='Aadhaar 번호')

    # ========== 의료 정보 ==========
    blood_group = Column(String(5), nullable=False, default="", comment='혈액형')
    allergies = Column(String(255), nullable=False, default="", comment='알레르기')
    medications = Column(String(255), nullable=False, default="", comment='복용 약')

    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Profile(id={self.id}, full_name={self.full_name})>"


class UserSettings(Base):
    """
    사용자 설정 테이블 (user_settings)

    사용자당 하나의 설정 레코드만 존재합니다 (1:1 관계).
    """
    __tablename__ = "user_settings"

    user_id = Column(String(36), ForeignKey("profiles.id"), primary_key=True, comment='사용자 ID')

    # ========== 화면/알림 ==========
    dark_mode = Column(Boolean, nullable=False, default=False, comment='다크 모드')
    notifications = Column(Boolean, nullable=False, default=True, comment='알림 허용')
    sound = Column(Boolean, nullable=False, default=True, comment='소리')

    # ========== 위치/개인정보 ==========
    location_tracking = Column(Boolean, nullable=False, default=True, comment='위치 추적')
    privacy_mode = Column(String(10), nullable=False, default="standard", comment='standard/enhanced/maximum')

    # ========== 안전 기능 ==========
    check_in_interval = Column(Integer, nullable=False, default=15, comment='체크인 간격 (분)')
    safety_radius = Column(Integer, nullable=False, default=50, comment='안전 반경 (m)')

    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class GuardianMode(Base):
    """보호자 모드 상태 테이블 (guardian_modes)"""
    __tablename__ = "guardian_modes"

    user_id = Column(String(36), ForeignKey("profiles.id"), primary_key=True, comment='사용자 ID')
    is_active = Column(Boolean, nullable=False, default=False, comment='활성화 여부')
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
