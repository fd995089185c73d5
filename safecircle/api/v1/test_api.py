"""
API v1 통합 테스트
TestClient 로 엔드포인트를 호출하고, DB/토스트/지도 세션은 테스트마다 새로 만듭니다.
"""

import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from safecircle.api.deps import (
    get_email_dispatcher,
    get_map_sessions,
    get_now,
    get_toast_sink,
)
from safecircle.db.database import create_db_engine, get_db, init_db
from safecircle.db.seed import seed_demo_data
from safecircle.main import app
from safecircle.services.map_session_service import MapSessionRegistry
from safecircle.services.notification_service import EmailDispatcher, ToastSink


IST = timezone(timedelta(hours=5, minutes=30))
FIXED_NOW = datetime(2024, 3, 15, 14, 30, tzinfo=IST)
API = "/api/v1"


class ApiTestCase(unittest.TestCase):
    """테스트마다 새 메모리 DB와 수집기로 의존성을 교체"""

    def setUp(self):
        self.engine = create_db_engine("sqlite://")
        init_db(bind=self.engine)
        self.SessionTesting = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)
        db = self.SessionTesting()
        seed_demo_data(db)
        db.close()

        self.toasts = ToastSink(maxlen=50)
        self.mailer = EmailDispatcher()
        self.sessions = MapSessionRegistry(limit=10)

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_toast_sink] = lambda: self.toasts
        app.dependency_overrides[get_email_dispatcher] = lambda: self.mailer
        app.dependency_overrides[get_map_sessions] = lambda: self.sessions
        app.dependency_overrides[get_now] = lambda: FIXED_NOW

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def error_code(self, response):
        return response.json()["detail"]["error"]["code"]


class TestHealth(ApiTestCase):

    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").json()["status"], "ok")
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")


class TestSafetyScoreApi(ApiTestCase):
    """안전점수 API 테스트"""

    def test_default_location(self):
        response = self.client.get(f"{API}/safety/score")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["score"], 9)
        self.assertEqual(data["level"], "Safe")
        self.assertTrue(data["location"]["is_approximate"])
        self.assertEqual(set(data["factors"]), {
            "time_of_day", "crime_rate", "crowdedness", "lighting", "known_safe_zones"
        })

    def test_late_night(self):
        response = self.client.get(
            f"{API}/safety/score",
            params={"lat": 19.033, "lng": 73.0297, "at": "2024-03-15T23:30:00"}
        )
        data = response.json()["data"]
        self.assertEqual(data["score"], 6)
        self.assertEqual(data["level"], "Moderate")
        self.assertFalse(data["location"]["is_approximate"])

    def test_out_of_range(self):
        response = self.client.get(f"{API}/safety/score", params={"lat": 95, "lng": 73})
        self.assertEqual(response.status_code, 422)

    def test_half_coordinate_pair_rejected(self):
        for params in ({"lat": 19.033}, {"lng": 73.0297}):
            response = self.client.get(f"{API}/safety/score", params=params)
            self.assertEqual(response.status_code, 400, params)
            self.assertEqual(self.error_code(response), "VALIDATION_ERROR")
            self.assertEqual(response.json()["detail"]["error"]["details"]["field"], "location")


class TestMapApi(ApiTestCase):
    """지도 세션 API 테스트"""

    def create_session(self, **body):
        response = self.client.post(f"{API}/map/sessions", json=body or None)
        self.assertEqual(response.status_code, 201)
        return response.json()["data"]

    def send(self, session_id, **event):
        response = self.client.post(f"{API}/map/sessions/{session_id}/events", json=event)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]

    def test_create_default_session(self):
        data = self.create_session()
        self.assertEqual(data["anchor"], {"lat": 19.033, "lng": 73.0297})
        self.assertEqual(data["viewport"], {"width": 360, "height": 480})
        self.assertEqual([m["rating"]["id"] for m in data["frame"]["markers"]],
                         ["safety-1", "safety-2", "safety-3"])
        self.assertIsNone(data["pending_marker"])

    def test_end_to_end(self):
        """시드 선택 -> 닫기 -> 빈 곳 클릭 -> 저장"""
        session = self.create_session(
            anchor={"lat": 19.033, "lng": 73.0297},
            viewport={"width": 800, "height": 600}
        )
        session_id = session["session_id"]

        result = self.send(session_id, type="click", x=420, y=270)
        self.assertEqual(result["intent"]["type"], "select_rating")
        self.assertEqual(result["intent"]["rating"]["score"], 9)
        self.assertTrue(result["intent"]["rating"]["comment"].startswith("Well-lit area"))

        closed = self.client.post(f"{API}/map/sessions/{session_id}/selection/close").json()["data"]
        self.assertIsNone(closed["selected_rating"])

        result = self.send(session_id, type="click", x=200, y=500)
        self.assertEqual(result["intent"]["type"], "begin_rating")
        marker = result["intent"]["marker"]
        self.assertAlmostEqual(marker["lat"], 19.013, places=9)
        self.assertAlmostEqual(marker["lng"], 73.0097, places=9)

        response = self.client.post(
            f"{API}/map/sessions/{session_id}/ratings",
            json={"score": 7, "comment": "Shops open late"}
        )
        self.assertEqual(response.status_code, 201)
        rating = response.json()["data"]
        self.assertEqual(rating["score"], 7)
        self.assertEqual(rating["comment"], "Shops open late")
        self.assertEqual(rating["created_by"], {"name": "Priya Sharma", "is_verified": False})

        ratings = self.client.get(f"{API}/map/sessions/{session_id}/ratings").json()["data"]
        self.assertEqual(len(ratings), 4)
        self.assertEqual(ratings[-1]["id"], rating["id"])

    def test_save_without_pending(self):
        session_id = self.create_session()["session_id"]
        response = self.client.post(f"{API}/map/sessions/{session_id}/ratings", json={"score": 5})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.error_code(response), "NO_PENDING_RATING")

    def test_save_out_of_range_score(self):
        session_id = self.create_session()["session_id"]
        self.send(session_id, type="click", x=10, y=10)
        for score in (0, 11):
            response = self.client.post(f"{API}/map/sessions/{session_id}/ratings", json={"score": score})
            self.assertEqual(response.status_code, 422)
        ratings = self.client.get(f"{API}/map/sessions/{session_id}/ratings").json()["data"]
        self.assertEqual(len(ratings), 3)

    def test_discard_requires_confirmation(self):
        session_id = self.create_session()["session_id"]
        self.send(session_id, type="click", x=10, y=10)

        response = self.client.post(
            f"{API}/map/sessions/{session_id}/ratings/discard",
            json={"score": 8, "comment": ""}
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.error_code(response), "CONFIRMATION_REQUIRED")

        response = self.client.post(
            f"{API}/map/sessions/{session_id}/ratings/discard",
            json={"score": 8, "comment": "", "confirmed": True}
        )
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["data"]["pending_marker"])
        self.assertEqual(len(response.json()["data"]["frame"]["markers"]), 3)

    def test_discard_untouched_draft(self):
        session_id = self.create_session()["session_id"]
        self.send(session_id, type="click", x=10, y=10)
        response = self.client.post(f"{API}/map/sessions/{session_id}/ratings/discard")
        self.assertEqual(response.status_code, 200)

    def test_drag_suppresses_click(self):
        session_id = self.create_session()["session_id"]
        self.send(session_id, type="pointer_down", x=100, y=100)
        self.send(session_id, type="pointer_move", dx=30, dy=20)
        self.send(session_id, type="pointer_up")
        result = self.send(session_id, type="click", x=130, y=120)
        self.assertIsNone(result["intent"])
        self.assertEqual(result["frame"]["pan_offset"], {"x": 30, "y": 20})

    def test_zoom_is_clamped(self):
        session_id = self.create_session()["session_id"]
        for _ in range(30):
            frame = self.send(session_id, type="zoom_in")["frame"]
        self.assertEqual(frame["zoom"], 5.0)
        self.assertEqual(frame["grid_size"], 200.0)

    def test_unknown_event_type(self):
        session_id = self.create_session()["session_id"]
        response = self.client.post(f"{API}/map/sessions/{session_id}/events", json={"type": "tap"})
        self.assertEqual(response.status_code, 422)

    def test_resize_viewport(self):
        session_id = self.create_session()["session_id"]
        response = self.client.put(
            f"{API}/map/sessions/{session_id}/viewport",
            json={"width": 800, "height": 600}
        )
        frame = response.json()["data"]
        self.assertEqual(frame["user_pin"], {"x": 400, "y": 300})

    def test_closed_session(self):
        session_id = self.create_session()["session_id"]
        self.assertEqual(self.client.delete(f"{API}/map/sessions/{session_id}").status_code, 200)

        response = self.client.get(f"{API}/map/sessions/{session_id}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.error_code(response), "MAP_SESSION_NOT_FOUND")


class TestSafetyFlowsApi(ApiTestCase):
    """SOS / 체크인 / 보호자 모드 API 테스트"""

    def test_sos(self):
        response = self.client.post(f"{API}/sos")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["data"]["recipients"], ["sreejitc2019@gmail.com"])
        self.assertTrue(body["data"]["location"]["is_approximate"])
        self.assertTrue(body["data"]["email_sent"])
        self.assertEqual(body["message"], "Emergency contacts have been notified with approximate location")

        toasts = self.client.get(f"{API}/notifications/toasts").json()["data"]
        self.assertEqual([(t["title"], t["variant"]) for t in toasts], [("SOS Activated", "destructive")])
        self.assertEqual(self.client.get(f"{API}/notifications/toasts").json()["data"], [])

        alerts = self.client.get(f"{API}/alerts").json()["data"]["alerts"]
        self.assertEqual(alerts[0]["type"], "sos")

    def test_sos_with_location(self):
        response = self.client.post(f"{API}/sos", json={"location": {"lat": 18.52, "lng": 73.85}})
        data = response.json()["data"]
        self.assertFalse(data["location"]["is_approximate"])
        self.assertIn("18.52%2C73.85", data["mailto"])

    def test_check_in_flow(self):
        response = self.client.post(f"{API}/check-ins")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.error_code(response), "CHECK_IN_INACTIVE")

        status = self.client.post(f"{API}/check-ins/start").json()["data"]
        self.assertTrue(status["is_active"])
        self.assertEqual(status["seconds_remaining"], 15 * 60)

        response = self.client.post(f"{API}/check-ins", json={"location": {"lat": 19.0, "lng": 73.0}})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["location"]["is_approximate"])

        status = self.client.get(f"{API}/check-ins/status").json()["data"]
        self.assertFalse(status["overdue"])

        status = self.client.post(f"{API}/check-ins/stop").json()["data"]
        self.assertFalse(status["is_active"])

    def test_guardian_mode(self):
        response = self.client.post(f"{API}/guardian/share-route")
        self.assertEqual(response.status_code, 409)

        response = self.client.put(f"{API}/guardian", json={"is_active": True})
        self.assertTrue(response.json()["data"]["is_active"])
        self.assertTrue(self.client.get(f"{API}/guardian").json()["data"]["is_active"])

        response = self.client.post(f"{API}/guardian/share-route")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([g["name"] for g in response.json()["data"]["guardians"]], ["Mom", "Sister"])


class TestUserDataApi(ApiTestCase):
    """프로필 / 연락처 / 알림 / 설정 API 테스트"""

    def test_profile(self):
        profile = self.client.get(f"{API}/profile").json()["data"]
        self.assertEqual(profile["full_name"], "Priya Sharma")

        response = self.client.patch(f"{API}/profile", json={"phone": "9876543210"})
        self.assertEqual(response.json()["data"]["phone"], "9876543210")
        self.assertEqual(response.json()["data"]["address"], "123 Main Street, Mumbai")

    def test_aadhaar_verification(self):
        response = self.client.post(f"{API}/profile/aadhaar/otp", json={"aadhaar_number": "12345"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.error_code(response), "INVALID_AADHAAR_NUMBER")

        response = self.client.post(f"{API}/profile/aadhaar/otp", json={"aadhaar_number": "123456789012"})
        self.assertEqual(response.status_code, 200)

        response = self.client.post(
            f"{API}/profile/aadhaar/verify",
            json={"aadhaar_number": "123456789012", "otp": "12345"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.error_code(response), "INVALID_OTP")

        response = self.client.post(
            f"{API}/profile/aadhaar/verify",
            json={"aadhaar_number": "123456789012", "otp": "123456"}
        )
        self.assertTrue(response.json()["data"]["aadhaar_verified"])

    def test_verified_author_on_rating(self):
        self.client.post(
            f"{API}/profile/aadhaar/verify",
            json={"aadhaar_number": "123456789012", "otp": "123456"}
        )
        session_id = self.client.post(f"{API}/map/sessions").json()["data"]["session_id"]
        self.client.post(f"{API}/map/sessions/{session_id}/events", json={"type": "click", "x": 10, "y": 10})
        rating = self.client.post(
            f"{API}/map/sessions/{session_id}/ratings", json={"score": 2}
        ).json()["data"]
        self.assertTrue(rating["created_by"]["is_verified"])

    def test_contacts(self):
        contacts = self.client.get(f"{API}/contacts").json()["data"]
        self.assertEqual([c["name"] for c in contacts], ["Mom", "Sister"])

        response = self.client.post(f"{API}/contacts", json={"name": "Dad"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.error_code(response), "VALIDATION_ERROR")

        response = self.client.post(f"{API}/contacts", json={"name": "Dad", "phone": "555"})
        self.assertEqual(response.status_code, 201)
        contact_id = response.json()["data"]["id"]

        self.assertEqual(self.client.delete(f"{API}/contacts/{contact_id}").status_code, 200)
        response = self.client.delete(f"{API}/contacts/{contact_id}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.error_code(response), "CONTACT_NOT_FOUND")

    def test_alerts(self):
        data = self.client.get(f"{API}/alerts").json()["data"]
        self.assertEqual([a["id"] for a in data["alerts"]], ["alert-1", "alert-2", "alert-3"])
        self.assertEqual(data["unread_count"], 1)

        read = self.client.post(f"{API}/alerts/alert-1/read").json()["data"]
        self.assertTrue(read["read"])

        updated = self.client.post(f"{API}/alerts/read-all").json()["data"]["updated"]
        self.assertEqual(updated, 0)

        self.assertEqual(self.client.delete(f"{API}/alerts/alert-3").status_code, 200)
        response = self.client.delete(f"{API}/alerts/alert-3")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.error_code(response), "ALERT_NOT_FOUND")

    def test_settings(self):
        data = self.client.get(f"{API}/settings").json()["data"]
        self.assertEqual(data["check_in_interval"], 15)

        for body in ({"check_in_interval": 7}, {"check_in_interval": 65},
                     {"safety_radius": 205}, {"privacy_mode": "secret"}):
            self.assertEqual(self.client.patch(f"{API}/settings", json=body).status_code, 422, body)

        data = self.client.patch(
            f"{API}/settings",
            json={"check_in_interval": 30, "privacy_mode": "maximum"}
        ).json()["data"]
        self.assertEqual(data["check_in_interval"], 30)
        self.assertEqual(data["privacy_mode"], "maximum")
        self.assertEqual(data["safety_radius"], 50)


if __name__ == '__main__':
    unittest.main()
