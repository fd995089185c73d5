"""
safety_score.py 모듈의 단위 테스트
안전점수 요인별 계산과 최종 점수를 검증합니다.
"""

import math
import unittest
from datetime import datetime

from safecircle.utils.geometry import GeoPoint
from safecircle.utils.safety_score import (
    WEIGHTS,
    compute_safety_factors,
    compute_safety_score,
    crime_rate_score,
    crowdedness_score,
    known_safe_zones_score,
    lighting_score,
    score_description,
    score_level,
    time_of_day_score,
)


DEFAULT_LOCATION = GeoPoint(19.033, 73.0297)


def at_hour(hour: int) -> datetime:
    return datetime(2024, 3, 15, hour, 30)


class TestTimeOfDay(unittest.TestCase):
    """시간대 점수 테스트"""

    def test_night_hours(self):
        """야간 (22시~5시)"""
        for hour in (22, 23, 0, 3, 5):
            self.assertEqual(time_of_day_score(hour), 5, f"{hour}시는 야간이어야 합니다")

    def test_evening_and_early_morning(self):
        """저녁/이른 아침"""
        for hour in (6, 7, 18, 19, 21):
            self.assertEqual(time_of_day_score(hour), 7, f"{hour}시는 저녁/이른 아침이어야 합니다")

    def test_daytime(self):
        """낮 시간"""
        for hour in (8, 12, 17):
            self.assertEqual(time_of_day_score(hour), 10, f"{hour}시는 낮이어야 합니다")


class TestFactors(unittest.TestCase):
    """요인별 계산 테스트"""

    def test_weights_sum_to_one(self):
        self.assertAlmostEqual(sum(WEIGHTS.values()), 1.0)

    def test_lighting(self):
        self.assertEqual(lighting_score(6), 6)
        self.assertEqual(lighting_score(7), 9)
        self.assertEqual(lighting_score(17), 9)
        self.assertEqual(lighting_score(18), 6)

    def test_crime_rate_formula(self):
        """7 + 2sin(10·lat) + 2cos(10·lng)"""
        expected = 7 + 2 * math.sin(190.33) + 2 * math.cos(730.297)
        self.assertAlmostEqual(crime_rate_score(DEFAULT_LOCATION), expected)

    def test_crime_rate_is_clamped(self):
        """최대값(11)이 10으로 잘림"""
        location = GeoPoint(math.pi / 20, 0.0)
        self.assertEqual(crime_rate_score(location), 10)

    def test_crowdedness_base_by_hour(self):
        """시간대별 기본값 차이"""
        location = GeoPoint(0.0, 0.0)  # 변동폭 = (sin(0) + 1) * 2 = 2
        self.assertAlmostEqual(crowdedness_score(location, 12), 10)
        self.assertAlmostEqual(crowdedness_score(location, 22), 9)
        self.assertAlmostEqual(crowdedness_score(location, 23), 6)
        self.assertAlmostEqual(crowdedness_score(location, 8), 6)

    def test_known_safe_zones_formula(self):
        expected = 6 + 3 * math.cos(19.033 * 73.0297)
        self.assertAlmostEqual(known_safe_zones_score(DEFAULT_LOCATION), expected)

    def test_factors_stay_in_range(self):
        """모든 요인은 0~10"""
        for lat in range(-80, 81, 7):
            for lng in range(-170, 171, 13):
                for hour in (0, 6, 12, 19):
                    factors = compute_safety_factors(GeoPoint(lat + 0.123, lng + 0.456), at_hour(hour))
                    for name, value in factors.to_dict().items():
                        self.assertGreaterEqual(value, 0, name)
                        self.assertLessEqual(value, 10, name)


class TestSafetyScore(unittest.TestCase):
    """최종 안전점수 테스트"""

    def test_default_location_noon(self):
        self.assertEqual(compute_safety_score(DEFAULT_LOCATION, at_hour(12)), 9)

    def test_default_location_late_night(self):
        self.assertEqual(compute_safety_score(DEFAULT_LOCATION, at_hour(23)), 6)

    def test_default_location_evening(self):
        self.assertEqual(compute_safety_score(DEFAULT_LOCATION, at_hour(19)), 7)

    def test_night_is_not_safer_than_noon(self):
        night = compute_safety_score(DEFAULT_LOCATION, at_hour(23))
        noon = compute_safety_score(DEFAULT_LOCATION, at_hour(12))
        self.assertLessEqual(night, noon)

    def test_deterministic(self):
        """같은 입력이면 같은 결과"""
        now = datetime(2024, 1, 1, 21, 5)
        results = {compute_safety_score(DEFAULT_LOCATION, now) for _ in range(20)}
        self.assertEqual(len(results), 1)

    def test_bounds(self):
        """모든 위치/시간에서 1~10"""
        for lat in range(-85, 86, 5):
            for lng in range(-175, 176, 11):
                for hour in range(24):
                    score = compute_safety_score(GeoPoint(lat * 1.01, lng * 0.99), at_hour(hour))
                    self.assertIsInstance(score, int)
                    self.assertGreaterEqual(score, 1)
                    self.assertLessEqual(score, 10)

    def test_non_finite_location_rejected(self):
        with self.assertRaises(ValueError):
            compute_safety_score(GeoPoint(float("nan"), 73.0), at_hour(12))
        with self.assertRaises(ValueError):
            compute_safety_score(GeoPoint(19.0, float("inf")), at_hour(12))


class TestScoreLabels(unittest.TestCase):
    """점수 등급 문구 테스트"""

    def test_levels(self):
        self.assertEqual(score_level(10), "Safe")
        self.assertEqual(score_level(8), "Safe")
        self.assertEqual(score_level(7), "Moderate")
        self.assertEqual(score_level(5), "Moderate")
        self.assertEqual(score_level(4), "Caution")

    def test_descriptions(self):
        self.assertEqual(score_description(9), "This area is generally considered safe.")
        self.assertEqual(score_description(1), "Exercise increased caution in this area.")


if __name__ == '__main__':
    unittest.main()
