"""
safety_service.py 모듈의 단위 테스트
SOS, 체크인, 보호자 모드, Aadhaar 인증 흐름을 검증합니다.
"""

import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from safecircle.core.exceptions import (
    ConflictException,
    InvalidAadhaarNumberException,
    InvalidOtpException,
)
from safecircle.db.database import create_db_engine, init_db
from safecircle.db.seed import seed_demo_data
from safecircle.models import EmergencyContact
from safecircle.services.notification_service import EmailDispatcher, ToastSink
from safecircle.services.safety_service import (
    SafetyService,
    format_local_time,
    sos_recipients,
)
from safecircle.utils.geometry import GeoPoint


IST = timezone(timedelta(hours=5, minutes=30))
FIXED_NOW = datetime(2024, 3, 15, 14, 30, tzinfo=IST)


class RecordingMailer(EmailDispatcher):
    """보낸 메일 내용을 기록하는 발송기"""

    def __init__(self):
        super().__init__()
        self.messages = []

    def send(self, to, subject, body):
        self.messages.append((to, subject, body))
        return super().send(to, subject, body)


class SafetyServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = create_db_engine("sqlite://")
        init_db(bind=self.engine)
        self.db = sessionmaker(bind=self.engine, autoflush=False)()
        seed_demo_data(self.db)

        self.toasts = ToastSink(maxlen=20)
        self.mailer = RecordingMailer()
        self.service = SafetyService(self.db, self.toasts, self.mailer)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def toast_titles(self):
        return [t.title for t in self.toasts.drain()]


class TestSos(SafetyServiceTestCase):
    """SOS 테스트"""

    def test_sos_without_location(self):
        outcome = self.service.trigger_sos(None, FIXED_NOW)

        self.assertTrue(outcome.fix.is_approximate)
        self.assertEqual(outcome.fix.point, GeoPoint(19.033, 73.0297))
        self.assertTrue(outcome.event.is_approximate)

        # 두 연락처의 이메일이 같으므로 한 번만
        self.assertEqual(outcome.recipients, ["sreejitc2019@gmail.com"])
        to, subject, body = self.mailer.messages[0]
        self.assertEqual(to, "sreejitc2019@gmail.com")
        self.assertEqual(subject, "EMERGENCY SOS ALERT")
        self.assertEqual(
            body,
            "Emergency SOS alert triggered!\n"
            "\n"
            "User: Priya Sharma\n"
            "Time: 3/15/2024, 2:30:00 PM\n"
            "Location: https://www.google.com/maps?q=19.033,73.0297 (approximate)\n"
            "\n"
            "This is an automated emergency alert. "
            "The user may be in danger and requires immediate assistance."
        )
        self.assertTrue(outcome.email.success)
        self.assertTrue(outcome.email.mailto.startswith(
            "mailto:sreejitc2019@gmail.com?subject=EMERGENCY%20SOS%20ALERT&body="
        ))

        self.assertEqual(outcome.toast.title, "SOS Activated")
        self.assertEqual(
            outcome.toast.description,
            "Emergency contacts have been notified with approximate location"
        )
        self.assertEqual(outcome.toast.variant, "destructive")

        latest = self.service.store.get_alerts()[0]
        self.assertEqual(latest.type, "sos")
        self.assertFalse(latest.read)

    def test_sos_with_precise_location(self):
        outcome = self.service.trigger_sos(GeoPoint(18.52, 73.85), FIXED_NOW)
        self.assertFalse(outcome.fix.is_approximate)
        self.assertNotIn("(approximate)", self.mailer.messages[0][2])
        self.assertIn("maps?q=18.52,73.85", self.mailer.messages[0][2])
        self.assertEqual(outcome.toast.description, "Emergency contacts have been notified")

    def test_sos_falls_back_when_no_contact_email(self):
        self.service.store.delete_emergency_contact("contact-1")
        self.service.store.delete_emergency_contact("contact-2")
        self.service.store.add_emergency_contact(name="Dad", phone="555")

        outcome = self.service.trigger_sos(None, FIXED_NOW)
        self.assertEqual(outcome.recipients, ["sreejitc2019@gmail.com"])

    def test_recipients_deduplicated_in_order(self):
        contacts = [
            EmergencyContact(name="A", email="a@example.com"),
            EmergencyContact(name="B", email=""),
            EmergencyContact(name="C", email="c@example.com"),
            EmergencyContact(name="D", email=" a@example.com "),
        ]
        self.assertEqual(sos_recipients(contacts), ["a@example.com", "c@example.com"])
        self.assertEqual(sos_recipients([], fallback="x@example.com"), ["x@example.com"])

    def test_format_local_time(self):
        self.assertEqual(format_local_time(datetime(2024, 1, 5, 0, 3, 9)), "1/5/2024, 12:03:09 AM")


class TestCheckIns(SafetyServiceTestCase):
    """안전 체크인 테스트"""

    def test_check_in_requires_active_schedule(self):
        with self.assertRaises(ConflictException):
            self.service.check_in(None, FIXED_NOW)

    def test_inactive_status(self):
        status = self.service.check_in_status(FIXED_NOW)
        self.assertFalse(status.is_active)
        self.assertIsNone(status.due_at)
        self.assertEqual(status.interval_minutes, 15)

    def test_countdown(self):
        self.service.start_check_ins(FIXED_NOW)
        status = self.service.check_in_status(FIXED_NOW + timedelta(minutes=10))
        self.assertTrue(status.is_active)
        self.assertEqual(status.seconds_remaining, 300)
        self.assertFalse(status.overdue)
        self.assertEqual(status.due_at, FIXED_NOW + timedelta(minutes=15))

    def test_missed_check_in_alert_raised_once(self):
        self.service.start_check_ins(FIXED_NOW)
        self.toasts.drain()

        status = self.service.check_in_status(FIXED_NOW + timedelta(minutes=16))
        self.assertTrue(status.overdue)
        self.assertTrue(status.missed_alert_raised)
        self.assertEqual(status.seconds_remaining, 0)
        self.assertEqual(self.toast_titles(), ["Check-In Required"])

        missed = self.service.store.get_alerts()[0]
        self.assertEqual(missed.type, "checkin")
        self.assertEqual(missed.title, "Missed Check-in")
        self.assertEqual(missed.message, "You missed your scheduled safety check-in at 2:45 PM.")

        again = self.service.check_in_status(FIXED_NOW + timedelta(minutes=17))
        self.assertTrue(again.overdue)
        self.assertFalse(again.missed_alert_raised)
        self.assertEqual(self.toast_titles(), [])
        checkin_alerts = [a for a in self.service.store.get_alerts() if a.title == "Missed Check-in"]
        self.assertEqual(len(checkin_alerts), 2)  # 시드 알림 1개 + 새 알림 1개

    def test_check_in_resets_timer(self):
        self.service.start_check_ins(FIXED_NOW)
        self.service.check_in_status(FIXED_NOW + timedelta(minutes=16))
        self.toasts.drain()

        outcome = self.service.check_in(GeoPoint(19.0, 73.0), FIXED_NOW + timedelta(minutes=20))
        self.assertFalse(outcome.fix.is_approximate)
        self.assertEqual(outcome.toast.title, "Check-In Successful")
        self.assertEqual(
            outcome.toast.description,
            "Your safety status has been updated and shared with your emergency contacts."
        )
        self.assertEqual(outcome.next_due_at, FIXED_NOW + timedelta(minutes=35))

        status = self.service.check_in_status(FIXED_NOW + timedelta(minutes=21))
        self.assertFalse(status.overdue)
        self.assertEqual(status.seconds_remaining, 14 * 60)

        # 새 기한이 지나면 다시 알림
        late = self.service.check_in_status(FIXED_NOW + timedelta(minutes=36))
        self.assertTrue(late.missed_alert_raised)

    def test_check_in_with_approximate_location(self):
        self.service.start_check_ins(FIXED_NOW)
        outcome = self.service.check_in(None, FIXED_NOW)
        self.assertTrue(outcome.check_in.is_approximate)
        self.assertEqual(
            outcome.toast.description,
            "Your safety status has been updated with approximate location."
        )

    def test_interval_follows_settings(self):
        self.service.store.update_settings(check_in_interval=5)
        self.service.start_check_ins(FIXED_NOW)
        status = self.service.check_in_status(FIXED_NOW + timedelta(minutes=6))
        self.assertEqual(status.interval_minutes, 5)
        self.assertTrue(status.overdue)

    def test_stop(self):
        self.service.start_check_ins(FIXED_NOW)
        status = self.service.stop_check_ins(FIXED_NOW)
        self.assertFalse(status.is_active)
        self.assertFalse(self.service.check_in_status(FIXED_NOW + timedelta(hours=2)).overdue)


class TestGuardianMode(SafetyServiceTestCase):
    """보호자 모드 테스트"""

    def test_share_requires_guardian_mode(self):
        with self.assertRaises(ConflictException):
            self.service.share_route(None)

    def test_activate_and_share(self):
        guardian = self.service.set_guardian_mode(True, FIXED_NOW)
        self.assertTrue(guardian.is_active)
        self.assertEqual(self.service.store.get_alerts()[0].title, "Guardian Mode Activated")

        outcome = self.service.share_route(None)
        self.assertTrue(outcome.fix.is_approximate)
        self.assertEqual([g.name for g in outcome.guardians], ["Mom", "Sister"])
        self.assertEqual(self.toast_titles(), ["Guardian Mode Activated", "Route Shared"])

    def test_deactivate(self):
        self.service.set_guardian_mode(True, FIXED_NOW)
        self.service.set_guardian_mode(False, FIXED_NOW)
        self.assertFalse(self.service.store.get_guardian_mode().is_active)
        self.assertEqual(self.toast_titles()[-1], "Guardian Mode Deactivated")


class TestAadhaar(SafetyServiceTestCase):
    """Aadhaar 인증 테스트"""

    def test_number_must_be_twelve_digits(self):
        for bad in ("", "12345678901", "1234567890123", "1234 5678 9012", "12345678901a"):
            with self.assertRaises(InvalidAadhaarNumberException):
                self.service.request_aadhaar_otp(bad)

    def test_request_otp(self):
        toast = self.service.request_aadhaar_otp("123456789012")
        self.assertEqual(toast.title, "OTP Sent")

    def test_otp_must_be_six_digits(self):
        for bad in ("", "12345", "1234567", "12a456"):
            with self.assertRaises(InvalidOtpException):
                self.service.confirm_aadhaar("123456789012", bad)
        self.assertFalse(self.service.store.get_user_profile().aadhaar_verified)

    def test_confirm(self):
        profile = self.service.confirm_aadhaar("123456789012", "654321")
        self.assertTrue(profile.aadhaar_verified)
        self.assertEqual(profile.aadhaar_number, "123456789012")
        self.assertEqual(self.toast_titles(), ["Verification Successful"])


if __name__ == '__main__':
    unittest.main()
