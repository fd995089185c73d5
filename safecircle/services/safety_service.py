# ============================================
# safecircle/services/safety_service.py - 안전 기능 서비스
# ============================================
# SOS, 안전 체크인, 보호자 모드, Aadhaar 본인 인증 흐름을 처리합니다.
# 저장은 MockDataService, 위치는 GeolocationService,
# 토스트/이메일은 notification_service 의 수집기에 맡깁니다.
# ============================================

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from safecircle.config import settings
from safecircle.core.exceptions import (
    ConflictException,
    InvalidAadhaarNumberException,
    InvalidOtpException,
)
from safecircle.models import EmergencyContact, GuardianMode, Profile, SafetyCheckIn, SosEvent
from safecircle.services.geolocation_service import GeolocationService, LocationFix
from safecircle.services.mock_data_service import MockDataService
from safecircle.services.notification_service import (
    DispatchResult,
    EmailDispatcher,
    Toast,
    ToastSink,
)
from safecircle.utils.geometry import GeoPoint

logger = logging.getLogger(__name__)


SOS_EMAIL_SUBJECT = "EMERGENCY SOS ALERT"

AADHAAR_PATTERN = re.compile(r"[0-9]{12}")
OTP_PATTERN = re.compile(r"[0-9]{6}")


# ============================================
# 결과 타입
# ============================================

@dataclass(frozen=True)
class SosOutcome:
    """SOS 처리 결과"""
    event: SosEvent
    fix: LocationFix
    recipients: List[str]
    email: DispatchResult
    toast: Toast


@dataclass(frozen=True)
class CheckInOutcome:
    check_in: SafetyCheckIn
    fix: LocationFix
    next_due_at: datetime
    toast: Toast


@dataclass(frozen=True)
class CheckInStatus:
    """
    체크인 상태

    due_at, last_check_in_at 은 요청 시각(now)과 같은 시간대로 표시합니다.
    """
    is_active: bool
    interval_minutes: int
    last_check_in_at: Optional[datetime]
    due_at: Optional[datetime]
    seconds_remaining: Optional[int]
    overdue: bool
    missed_alert_raised: bool


@dataclass(frozen=True)
class RouteShareOutcome:
    fix: LocationFix
    guardians: List[EmergencyContact]
    toast: Toast


# ============================================
# 헬퍼 함수
# ============================================

def format_local_time(at: datetime) -> str:
    """이메일 본문용 시각 (예: "3/15/2024, 2:30:00 PM")"""
    hour = at.hour % 12 or 12
    return f"{at.month}/{at.day}/{at.year}, {hour}:{at:%M:%S} {at:%p}"


def format_clock_time(at: datetime) -> str:
    """시:분 (예: "9:00 AM")"""
    hour = at.hour % 12 or 12
    return f"{hour}:{at:%M} {at:%p}"


def to_naive_utc(at: datetime) -> datetime:
    """DB 저장용 UTC 시각. tzinfo 가 없으면 이미 UTC 로 봅니다."""
    if at.tzinfo is None:
        return at
    return at.astimezone(timezone.utc).replace(tzinfo=None)


def maps_link(point: GeoPoint) -> str:
    return f"https://www.google.com/maps?q={point.lat},{point.lng}"


def build_sos_email_body(user_name: str, now: datetime, fix: LocationFix) -> str:
    """SOS 이메일 본문"""
    approximate = " (approximate)" if fix.is_approximate else ""
    return (
        "Emergency SOS alert triggered!\n"
        "\n"
        f"User: {user_name}\n"
        f"Time: {format_local_time(now)}\n"
        f"Location: {maps_link(fix.point)}{approximate}\n"
        "\n"
        "This is an automated emergency alert. "
        "The user may be in danger and requires immediate assistance."
    )


def sos_recipients(contacts: List[EmergencyContact], fallback: str = None) -> List[str]:
    """이메일이 있는 연락처 (중복 제거, 순서 유지). 없으면 대체 주소."""
    recipients: List[str] = []
    for contact in contacts:
        email = (contact.email or "").strip()
        if email and email not in recipients:
            recipients.append(email)
    if not recipients:
        recipients.append(fallback or settings.SOS_FALLBACK_EMAIL)
    return recipients


def is_valid_aadhaar_number(number: str) -> bool:
    return bool(number) and AADHAAR_PATTERN.fullmatch(number) is not None


def is_valid_otp(otp: str) -> bool:
    return bool(otp) and OTP_PATTERN.fullmatch(otp) is not None


# ============================================
# 서비스
# ============================================

class SafetyService:
    """
    안전 기능 서비스 클래스

    [신입 개발자를 위한 설명]
    - SOS: 위치 확정 -> 기록 -> 알림 추가 -> 연락처에 이메일 -> 토스트
    - 체크인: 시작/중지, 체크인, 기한이 지났는지 확인
    - 보호자 모드: 켜기/끄기, 경로 공유
    - Aadhaar 인증: 번호 확인 후 OTP 발송, OTP 확인 후 인증 완료
    """

    def __init__(
        self,
        db: Session,
        toasts: ToastSink,
        mailer: EmailDispatcher,
        geolocation: GeolocationService = None,
        user_id: str = None
    ):
        """
        SafetyService 초기화

        Args:
            db: 데이터베이스 세션
            toasts: 토스트 수집기
            mailer: 이메일 발송기
            geolocation: 위치 확인 서비스
            user_id: 사용자 ID (기본: DEMO_USER_ID)
        """
        self.store = MockDataService(db, user_id)
        self.toasts = toasts
        self.mailer = mailer
        self.geolocation = geolocation or GeolocationService()

    # ============================================
    # SOS
    # ============================================

    def trigger_sos(self, reading: Optional[GeoPoint], now: datetime) -> SosOutcome:
        """
        SOS 를 발생시킵니다.

        위치를 얻지 못해도 기본 위치로 계속 진행합니다.

        Args:
            reading: 단말 위치 (없으면 None)
            now: 현재 시각 (이메일 본문 표시용)

        Returns:
            SosOutcome: 기록, 위치, 받는 사람, 이메일 결과, 토스트
        """
        fix = self.geolocation.resolve(reading)
        profile = self.store.get_user_profile()

        event = self.store.trigger_sos(fix.point, fix.is_approximate)
        self.store.add_alert(
            type="sos",
            title="SOS Alert Sent",
            message="Emergency SOS alert was sent to your emergency contacts.",
            location=maps_link(fix.point),
            at=now,
        )

        recipients = sos_recipients(self.store.get_emergency_contacts())
        body = build_sos_email_body(profile.full_name, now, fix)
        email = self.mailer.send(",".join(recipients), SOS_EMAIL_SUBJECT, body)
        if not email.success:
            logger.error(f"SOS email could not be dispatched: {email.error}")

        description = "Emergency contacts have been notified"
        if fix.is_approximate:
            description += " with approximate location"
        toast = self.toasts.push("SOS Activated", description, "destructive")

        return SosOutcome(event=event, fix=fix, recipients=recipients, email=email, toast=toast)

    # ============================================
    # 안전 체크인
    # ============================================

    def _interval(self) -> timedelta:
        return timedelta(minutes=self.store.get_settings().check_in_interval)

    def start_check_ins(self, now: datetime) -> CheckInStatus:
        """체크인 타이머를 시작합니다 (now 부터 간격만큼 뒤가 첫 기한)."""
        schedule = self.store.get_check_in_schedule()
        schedule.is_active = True
        schedule.last_check_in_at = to_naive_utc(now)
        schedule.last_missed_alert_at = None
        self.store.db.commit()

        logger.info(f"Safety check-ins started for {self.store.user_id}")
        return self.check_in_status(now)

    def stop_check_ins(self, now: datetime) -> CheckInStatus:
        schedule = self.store.get_check_in_schedule()
        schedule.is_active = False
        self.store.db.commit()

        logger.info(f"Safety check-ins stopped for {self.store.user_id}")
        return self.check_in_status(now)

    def check_in(self, reading: Optional[GeoPoint], now: datetime) -> CheckInOutcome:
        """
        체크인합니다. 타이머가 처음부터 다시 시작됩니다.

        Raises:
            ConflictException: 체크인이 켜져 있지 않은 경우
        """
        schedule = self.store.get_check_in_schedule()
        if not schedule.is_active:
            raise ConflictException(
                message="Safety check-ins are not active",
                error_code="CHECK_IN_INACTIVE"
            )

        fix = self.geolocation.resolve(reading)
        check_in = self.store.record_check_in(fix.point, fix.is_approximate)

        schedule.last_check_in_at = to_naive_utc(now)
        schedule.last_missed_alert_at = None
        self.store.db.commit()

        if fix.is_approximate:
            description = "Your safety status has been updated with approximate location."
        else:
            description = "Your safety status has been updated and shared with your emergency contacts."
        toast = self.toasts.push("Check-In Successful", description)

        return CheckInOutcome(
            check_in=check_in,
            fix=fix,
            next_due_at=now + self._interval(),
            toast=toast,
        )

    def check_in_status(self, now: datetime) -> CheckInStatus:
        """
        체크인 상태를 확인합니다.

        기한이 지났으면 그 기한에 대해 한 번만
        "Check-In Required" 토스트와 "Missed Check-in" 알림을 만듭니다.
        """
        schedule = self.store.get_check_in_schedule()
        interval = self._interval()
        interval_minutes = int(interval.total_seconds() // 60)

        if not schedule.is_active or schedule.last_check_in_at is None:
            return CheckInStatus(
                is_active=False,
                interval_minutes=interval_minutes,
                last_check_in_at=None,
                due_at=None,
                seconds_remaining=None,
                overdue=False,
                missed_alert_raised=False,
            )

        now_utc = to_naive_utc(now)
        due_utc = schedule.last_check_in_at + interval
        # 저장값(UTC)을 now 와 같은 시간대로 바꿔서 보여줍니다
        last_local = now + (schedule.last_check_in_at - now_utc)
        due_local = now + (due_utc - now_utc)

        overdue = now_utc >= due_utc
        raised = False
        if overdue and schedule.last_missed_alert_at != due_utc:
            self.toasts.push(
                "Check-In Required",
                "Please check in to confirm your safety.",
                "destructive"
            )
            self.store.add_alert(
                type="checkin",
                title="Missed Check-in",
                message=f"You missed your scheduled safety check-in at {format_clock_time(due_local)}.",
                at=now,
            )
            schedule.last_missed_alert_at = due_utc
            self.store.db.commit()
            raised = True
            logger.warning(f"Missed check-in for {self.store.user_id} (due {due_utc})")

        remaining = max(0, int((due_utc - now_utc).total_seconds()))
        return CheckInStatus(
            is_active=True,
            interval_minutes=interval_minutes,
            last_check_in_at=last_local,
            due_at=due_local,
            seconds_remaining=remaining,
            overdue=overdue,
            missed_alert_raised=raised,
        )

    # ============================================
    # 보호자 모드
    # ============================================

    def set_guardian_mode(self, is_active: bool, now: datetime) -> GuardianMode:
        """보호자 모드를 켜거나 끕니다."""
        guardian = self.store.update_guardian_mode(is_active)
        if is_active:
            self.store.add_alert(
                type="system",
                title="Guardian Mode Activated",
                message="Guardian mode was activated for your journey.",
                at=now,
            )
            self.toasts.push(
                "Guardian Mode Activated",
                "Your guardians can now follow your journey."
            )
        else:
            self.toasts.push(
                "Guardian Mode Deactivated",
                "Your guardians will no longer receive updates."
            )
        return guardian

    def share_route(self, reading: Optional[GeoPoint]) -> RouteShareOutcome:
        """
        현재 위치를 보호자(비상연락처)에게 공유합니다.

        Raises:
            ConflictException: 보호자 모드가 꺼져 있는 경우
        """
        if not self.store.get_guardian_mode().is_active:
            raise ConflictException(
                message="Guardian mode is not active",
                error_code="GUARDIAN_MODE_INACTIVE"
            )

        fix = self.geolocation.resolve(reading)
        guardians = self.store.get_emergency_contacts()
        logger.info(
            f"Sharing route with {len(guardians)} guardians at ({fix.point.lat}, {fix.point.lng})"
        )
        toast = self.toasts.push(
            "Route Shared",
            "Your current route has been shared with your guardians."
        )
        return RouteShareOutcome(fix=fix, guardians=guardians, toast=toast)

    # ============================================
    # Aadhaar 본인 인증
    # ============================================

    def request_aadhaar_otp(self, aadhaar_number: str) -> Toast:
        """
        1단계: Aadhaar 번호(12자리 숫자)를 확인하고 OTP 를 보냅니다.

        Raises:
            InvalidAadhaarNumberException: 번호 형식이 틀린 경우
        """
        if not is_valid_aadhaar_number(aadhaar_number):
            logger.warning("Rejected malformed Aadhaar number")
            raise InvalidAadhaarNumberException()

        return self.toasts.push(
            "OTP Sent",
            "A verification code has been sent to your registered mobile number"
        )

    def confirm_aadhaar(self, aadhaar_number: str, otp: str) -> Profile:
        """
        2단계: OTP(6자리 숫자)를 확인하고 프로필을 인증 완료로 바꿉니다.

        데모이므로 형식만 맞으면 어떤 OTP 든 통과합니다.

        Raises:
            InvalidAadhaarNumberException: 번호 형식이 틀린 경우
            InvalidOtpException: OTP 형식이 틀린 경우
        """
        if not is_valid_aadhaar_number(aadhaar_number):
            raise InvalidAadhaarNumberException()
        if not is_valid_otp(otp):
            logger.warning("Rejected malformed OTP")
            raise InvalidOtpException()

        profile = self.store.verify_aadhaar(aadhaar_number)
        self.toasts.push(
            "Verification Successful",
            "Your identity has been verified with Aadhaar"
        )
        return profile
