# ============================================
# safecircle/models/safety.py - 안전 기능 데이터베이스 모델
# ============================================
# SOS 발생 기록, 안전 체크인 기록, 체크인 일정을 저장합니다.
# ============================================

from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey

from safecircle.db.database import Base
from safecircle.models.user import generate_uuid, utcnow


class SosEvent(Base):
    """
    SOS 발생 기록 테이블 (sos_events)

    위치를 얻지 못하면 기본 위치를 저장하고 is_approximate=True 로 표시합니다.
    """
    __tablename__ = "sos_events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    latitude = Column(Float, nullable=False, comment='위도')
    longitude = Column(Float, nullable=False, comment='경도')
    is_approximate = Column(Boolean, nullable=False, default=False, comment='기본 위치 사용 여부')
    created_at = Column(DateTime, nullable=False, default=utcnow)


class SafetyCheckIn(Base):
    """안전 체크인 기록 테이블 (safety_check_ins)"""
    __tablename__ = "safety_check_ins"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    latitude = Column(Float, nullable=False, comment='위도')
    longitude = Column(Float, nullable=False, comment='경도')
    is_approximate = Column(Boolean, nullable=False, default=False, comment='기본 위치 사용 여부')
    created_at = Column(DateTime, nullable=False, default=utcnow)


class CheckInSchedule(Base):
    """
    체크인 일정 테이블 (check_in_schedules)

    사용자당 하나. 마지막 체크인(또는 시작) 시각으로부터
    check_in_interval 분이 지나면 체크인이 필요합니다.
    """
    __tablename__ = "check_in_schedules"

    user_id = Column(String(36), ForeignKey("profiles.id"), primary_key=True)
    is_active = Column(Boolean, nullable=False, default=False, comment='체크인 활성화 여부')
    last_check_in_at = Column(DateTime, nullable=True, comment='마지막 체크인 (또는 시작) 시각')
    last_missed_alert_at = Column(DateTime, nullable=True, comment='마지막으로 알린 미체크인 기한')
