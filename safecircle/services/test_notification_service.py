"""
geolocation_service.py / notification_service.py 단위 테스트
"""

import math
import unittest

from safecircle.services.geolocation_service import GeolocationService, is_valid_reading
from safecircle.services.notification_service import EmailDispatcher, ToastSink, build_mailto
from safecircle.utils.geometry import GeoPoint


class TestGeolocation(unittest.TestCase):
    """위치 확인 테스트"""

    def setUp(self):
        self.service = GeolocationService(default_location=GeoPoint(19.033, 73.0297))

    def test_valid_reading_is_precise(self):
        fix = self.service.resolve(GeoPoint(28.61, 77.2))
        self.assertEqual(fix.point, GeoPoint(28.61, 77.2))
        self.assertFalse(fix.is_approximate)

    def test_missing_reading_falls_back(self):
        fix = self.service.resolve(None)
        self.assertEqual(fix.point, GeoPoint(19.033, 73.0297))
        self.assertTrue(fix.is_approximate)

    def test_invalid_readings_fall_back(self):
        for reading in (GeoPoint(math.nan, 73.0), GeoPoint(19.0, math.inf), GeoPoint(91.0, 0.0), GeoPoint(0.0, -180.5)):
            self.assertFalse(is_valid_reading(reading))
            self.assertTrue(self.service.resolve(reading).is_approximate)


class TestToastSink(unittest.TestCase):
    """토스트 대기열 테스트"""

    def test_push_and_drain(self):
        sink = ToastSink(maxlen=5)
        sink.push("A", "first")
        sink.push("B", "second", "destructive")
        self.assertEqual(len(sink), 2)

        toasts = sink.drain()
        self.assertEqual([(t.title, t.variant) for t in toasts], [("A", "default"), ("B", "destructive")])
        self.assertEqual(sink.drain(), [])

    def test_unknown_variant_becomes_default(self):
        self.assertEqual(ToastSink().push("A", "x", "success").variant, "default")

    def test_bounded(self):
        sink = ToastSink(maxlen=3)
        for i in range(5):
            sink.push(f"T{i}", "")
        self.assertEqual([t.title for t in sink.drain()], ["T2", "T3", "T4"])


class TestEmailDispatcher(unittest.TestCase):
    """이메일 발송 테스트"""

    def test_mailto_is_encoded(self):
        link = build_mailto("a@example.com", "EMERGENCY SOS ALERT", "Line 1\nq=1,2 & more")
        self.assertEqual(
            link,
            "mailto:a@example.com?subject=EMERGENCY%20SOS%20ALERT&body=Line%201%0Aq%3D1%2C2%20%26%20more"
        )

    def test_send(self):
        mailer = EmailDispatcher()
        result = mailer.send("a@example.com", "Hi", "Body")
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(list(mailer.sent), [result])

    def test_send_without_recipient_reports_failure(self):
        result = EmailDispatcher().send("  ", "Hi", "Body")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "No recipient")
        self.assertIsNone(result.mailto)


if __name__ == '__main__':
    unittest.main()
