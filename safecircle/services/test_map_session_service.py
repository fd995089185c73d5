"""
map_session_service.py 단위 테스트
"""

import unittest

from safecircle.core.exceptions import MapSessionNotFoundException
from safecircle.services.area_rating_map import RatingAuthor
from safecircle.services.map_session_service import MapSessionRegistry
from safecircle.utils.geometry import GeoPoint, Viewport


ANCHOR = GeoPoint(19.033, 73.0297)


class TestMapSessionRegistry(unittest.TestCase):
    """지도 세션 저장소 테스트"""

    def test_create_loads_seed_ratings(self):
        registry = MapSessionRegistry(limit=5)
        session_id = registry.create(ANCHOR, Viewport(800, 600))

        area_map = registry.get(session_id)
        self.assertEqual(len(area_map.ratings), 3)
        self.assertEqual(area_map.viewport, Viewport(800, 600))
        self.assertEqual(len(session_id), 32)

    def test_sessions_are_isolated(self):
        registry = MapSessionRegistry(limit=5)
        first = registry.create(ANCHOR)
        second = registry.create(ANCHOR)
        self.assertNotEqual(first, second)

        area_map = registry.get(first)
        marker = area_map.begin_rating(GeoPoint(19.0, 73.0))
        area_map.save_rating(marker, 8, "", RatingAuthor("You"))

        self.assertEqual(len(registry.get(first).ratings), 4)
        self.assertEqual(len(registry.get(second).ratings), 3)

    def test_close(self):
        registry = MapSessionRegistry(limit=5)
        session_id = registry.create(ANCHOR)
        registry.close(session_id)
        self.assertNotIn(session_id, registry)
        with self.assertRaises(MapSessionNotFoundException):
            registry.get(session_id)
        with self.assertRaises(MapSessionNotFoundException):
            registry.close(session_id)

    def test_oldest_evicted(self):
        registry = MapSessionRegistry(limit=2)
        ids = [registry.create(ANCHOR) for _ in range(3)]
        self.assertEqual(len(registry), 2)
        self.assertNotIn(ids[0], registry)
        self.assertIn(ids[2], registry)

    def test_recently_used_session_survives(self):
        registry = MapSessionRegistry(limit=2)
        first = registry.create(ANCHOR)
        second = registry.create(ANCHOR)
        registry.get(first)

        third = registry.create(ANCHOR)
        self.assertIn(first, registry)
        self.assertNotIn(second, registry)
        self.assertIn(third, registry)


if __name__ == '__main__':
    unittest.main()
