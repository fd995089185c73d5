# ============================================
# safecircle/services/mock_data_service.py - 목업 데이터 저장소
# ============================================
# 프로필, 비상연락처, 보호자 모드, 설정, 알림, SOS/체크인 기록을
# 메모리 DB에서 읽고 씁니다. 실제 백엔드 대신 쓰는 데모용 저장소입니다.
# ============================================

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from safecircle.config import settings
from safecircle.core.exceptions import (
    AlertNotFoundException,
    ContactNotFoundException,
    ProfileNotFoundException,
    ValidationException,
)
from safecircle.models import (
    ALERT_TYPES,
    Alert,
    CheckInSchedule,
    EmergencyContact,
    GuardianMode,
    Profile,
    SafetyCheckIn,
    SosEvent,
    UserSettings,
)
from safecircle.models.user import utcnow
from safecircle.utils.geometry import GeoPoint

logger = logging.getLogger(__name__)


# 수정 가능한 프로필 필드 (Aadhaar 관련 필드는 verify_aadhaar 로만 변경)
PROFILE_FIELDS = (
    "full_name", "email", "phone", "address",
    "blood_group", "allergies", "medications",
)

SETTINGS_FIELDS = (
    "dark_mode", "notifications", "sound", "location_tracking",
    "privacy_mode", "check_in_interval", "safety_radius",
)


def format_alert_time(at: datetime) -> str:
    """알림에 표시할 시간 문자열 (예: "Mar 15, 2:30 PM")"""
    hour = at.hour % 12 or 12
    return f"{at:%b} {at.day}, {hour}:{at:%M} {at:%p}"


class MockDataService:
    """
    목업 데이터 서비스 클래스

    [신입 개발자를 위한 설명]
    데모 사용자 한 명의 데이터를 다룹니다 (인증 없음).
    - 프로필 조회/수정, Aadhaar 인증
    - 비상연락처 조회/추가/삭제
    - 보호자 모드, 설정
    - 알림 조회/읽음/삭제
    - SOS, 체크인 기록
    """

    def __init__(self, db: Session, user_id: str = None):
        """
        MockDataService 초기화

        Args:
            db: 데이터베이스 세션
            user_id: 사용자 ID (기본: DEMO_USER_ID)
        """
        self.db = db
        self.user_id = user_id or settings.DEMO_USER_ID

    # ============================================
    # 프로필
    # ============================================

    def get_user_profile(self) -> Profile:
        profile = self.db.get(Profile, self.user_id)
        if profile is None:
            raise ProfileNotFoundException()
        return profile

    def update_user_profile(self, **changes) -> Profile:
        """
        프로필 수정 (None 인 값은 무시)

        Raises:
            ValidationException: 수정할 수 없는 필드가 포함된 경우
        """
        profile = self.get_user_profile()
        for field, value in changes.items():
            if field not in PROFILE_FIELDS:
                raise ValidationException(
                    message=f"Profile field '{field}' cannot be updated",
                    field=field
                )
            if value is not None:
                setattr(profile, field, value)

        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"Updated profile {self.user_id}")
        return profile

    def verify_aadhaar(self, aadhaar_number: str) -> Profile:
        """Aadhaar 인증 완료 처리 (번호 형식 검사는 호출하는 쪽에서)"""
        profile = self.get_user_profile()
        profile.aadhaar_verified = True
        profile.aadhaar_number = aadhaar_number
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"Aadhaar verified for {self.user_id}")
        return profile

    # ============================================
    # 비상연락처
    # ============================================

    def get_emergency_contacts(self) -> List[EmergencyContact]:
        """등록 순서대로의 비상연락처"""
        return self.db.query(EmergencyContact).filter(
            EmergencyContact.user_id == self.user_id
        ).order_by(EmergencyContact.created_at.asc()).all()

    def add_emergency_contact(
        self,
        name: str,
        phone: str = "",
        email: str = "",
        relation: str = ""
    ) -> EmergencyContact:
        """
        비상연락처 추가

        Args:
            name: 이름 (필수)
            phone: 전화번호
            email: 이메일
            relation: 관계

        Returns:
            EmergencyContact: 추가된 연락처

        Raises:
            ValidationException: 이름이 없거나, 전화번호와 이메일이 모두 없는 경우
        """
        name = (name or "").strip()
        phone = (phone or "").strip()
        email = (email or "").strip()

        if not name or not (phone or email):
            logger.warning("Rejected emergency contact without name or phone/email")
            raise ValidationException(
                message="Please provide a name and either a phone number or email.",
                field="name" if not name else "phone",
                reason="MISSING_INFORMATION"
            )

        contact = EmergencyContact(
            user_id=self.user_id,
            name=name,
            phone=phone,
            email=email,
            relation=(relation or "").strip(),
            created_at=utcnow()
        )
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)

        logger.info(f"Added emergency contact {contact.id} ({name})")
        return contact

    def delete_emergency_contact(self, contact_id: str) -> None:
        contact = self.db.query(EmergencyContact).filter(
            EmergencyContact.id == contact_id,
            EmergencyContact.user_id == self.user_id
        ).first()
        if contact is None:
            raise ContactNotFoundException()

        self.db.delete(contact)
        self.db.commit()
        logger.info(f"Deleted emergency contact {contact_id}")

    # ============================================
    # 보호자 모드
    # ============================================

    def get_guardian_mode(self) -> GuardianMode:
        guardian = self.db.get(GuardianMode, self.user_id)
        if guardian is None:
            guardian = GuardianMode(user_id=self.user_id, is_active=False)
            self.db.add(guardian)
            self.db.commit()
            self.db.refresh(guardian)
        return guardian

    def update_guardian_mode(self, is_active: bool) -> GuardianMode:
        guardian = self.get_guardian_mode()
        guardian.is_active = is_active
        self.db.commit()
        self.db.refresh(guardian)
        logger.info(f"Guardian mode {'activated' if is_active else 'deactivated'} for {self.user_id}")
        return guardian

    # ============================================
    # 설정
    # ============================================

    def get_settings(self) -> UserSettings:
        user_settings = self.db.get(UserSettings, self.user_id)
        if user_settings is None:
            user_settings = UserSettings(user_id=self.user_id)
            self.db.add(user_settings)
            self.db.commit()
            self.db.refresh(user_settings)
        return user_settings

    def update_settings(self, **changes) -> UserSettings:
        """설정 수정 (None 인 값은 무시, 범위 검사는 스키마에서)"""
        user_settings = self.get_settings()
        for field, value in changes.items():
            if field not in SETTINGS_FIELDS:
                raise ValidationException(
                    message=f"Setting '{field}' does not exist",
                    field=field
                )
            if value is not None:
                setattr(user_settings, field, value)

        self.db.commit()
        self.db.refresh(user_settings)
        logger.info(f"Updated settings for {self.user_id}")
        return user_settings

    # ============================================
    # 알림
    # ============================================

    def get_alerts(self) -> List[Alert]:
        """최신순 알림 목록"""
        return self.db.query(Alert).filter(
            Alert.user_id == self.user_id
        ).order_by(Alert.created_at.desc()).all()

    def add_alert(
        self,
        type: str,
        title: str,
        message: str,
        location: Optional[str] = None,
        at: Optional[datetime] = None
    ) -> Alert:
        """
        알림 추가

        Args:
            type: sos / checkin / area / system
            title: 제목
            message: 내용
            location: 위치 설명
            at: 발생 시각 (기본: 현재)
        """
        if type not in ALERT_TYPES:
            raise ValidationException(message=f"Unknown alert type '{type}'", field="type")

        at = at or datetime.now()
        alert = Alert(
            user_id=self.user_id,
            type=type,
            title=title,
            message=message,
            location=location,
            time=format_alert_time(at),
            read=False,
            created_at=utcnow()
        )
        self.db.add(alert)
        self.db.commit()
        self.db.refresh(alert)

        logger.info(f"Added {type} alert {alert.id}: {title}")
        return alert

    def _get_alert(self, alert_id: str) -> Alert:
        alert = self.db.query(Alert).filter(
            Alert.id == alert_id,
            Alert.user_id == self.user_id
        ).first()
        if alert is None:
            raise AlertNotFoundException()
        return alert

    def mark_alert_as_read(self, alert_id: str) -> Alert:
        alert = self._get_alert(alert_id)
        alert.read = True
        self.db.commit()
        self.db.refresh(alert)
        return alert

    def mark_all_alerts_as_read(self) -> int:
        """모든 알림 읽음 처리, 새로 읽음 처리된 개수를 반환"""
        updated = self.db.query(Alert).filter(
            Alert.user_id == self.user_id,
            Alert.read.is_(False)
        ).update({Alert.read: True}, synchronize_session=False)
        self.db.commit()
        return updated

    def delete_alert(self, alert_id: str) -> None:
        alert = self._get_alert(alert_id)
        self.db.delete(alert)
        self.db.commit()
        logger.info(f"Deleted alert {alert_id}")

    def unread_alert_count(self) -> int:
        return self.db.query(Alert).filter(
            Alert.user_id == self.user_id,
            Alert.read.is_(False)
        ).count()

    # ============================================
    # SOS / 체크인
    # ============================================

    def trigger_sos(self, location: GeoPoint, is_approximate: bool = False) -> SosEvent:
        """SOS 발생 기록"""
        event = SosEvent(
            user_id=self.user_id,
            latitude=location.lat,
            longitude=location.lng,
            is_approximate=is_approximate,
            created_at=utcnow()
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.warning(f"SOS triggered by {self.user_id} at ({location.lat}, {location.lng})")
        return event

    def record_check_in(self, location: GeoPoint, is_approximate: bool = False) -> SafetyCheckIn:
        """안전 체크인 기록"""
        check_in = SafetyCheckIn(
            user_id=self.user_id,
            latitude=location.lat,
            longitude=location.lng,
            is_approximate=is_approximate,
            created_at=utcnow()
        )
        self.db.add(check_in)
        self.db.commit()
        self.db.refresh(check_in)

        logger.info(f"Safety check-in recorded at ({location.lat}, {location.lng})")
        return check_in

    def get_check_in_schedule(self) -> CheckInSchedule:
        schedule = self.db.get(CheckInSchedule, self.user_id)
        if schedule is None:
            schedule = CheckInSchedule(user_id=self.user_id, is_active=False)
            self.db.add(schedule)
            self.db.commit()
            self.db.refresh(schedule)
        return schedule
