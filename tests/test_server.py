import pathlib
import sys
import unittest

from fastapi.testclient import TestClient


ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from server import app

client = TestClient(app)


class TestServer(unittest.TestCase):
    def test_health(self) -> None:
        response = client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_index_lists_endpoints(self) -> None:
        response = client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("/simulate", response.text)

    def test_difficulty(self) -> None:
        response = client.get("/difficulty", params={"level": 2})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["level"], 2)
        self.assertAlmostEqual(payload["gap_factor"], 1.6 / 1.2)
        self.assertAlmostEqual(payload["count_boost"], 1.25)

    def test_difficulty_rejects_level_zero(self) -> None:
        response = client.get("/difficulty", params={"level": 0})
        self.assertEqual(response.status_code, 422)

    def test_manual_course(self) -> None:
        response = client.get("/course", params={"mode": "manual", "manual": "150:1.2, 320:1.8"})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["mode"], "manual")
        self.assertEqual([obstacle["x"] for obstacle in payload["obstacles"]], [150.0, 320.0])
        self.assertTrue(all(obstacle["hit"] is False for obstacle in payload["obstacles"]))

    def test_random_course_is_seeded(self) -> None:
        first = client.get("/course", params={"level": 3, "seed": 7}).json()
        second = client.get("/course", params={"level": 3, "seed": 7}).json()
        self.assertEqual(first, second)
        self.assertGreater(len(first["obstacles"]), 0)

    def test_course_rejects_unknown_mode(self) -> None:
        response = client.get("/course", params={"mode": "zigzag"})
        self.assertEqual(response.status_code, 422)

    def test_simulate_small_run(self) -> None:
        response = client.get("/simulate", params={"generations": 2, "population_size": 4, "seed": 5})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["seed"], 5)
        self.assertEqual([summary["generation"] for summary in payload["generations"]], [1, 2])
        self.assertEqual(payload["final"]["generation"], 2)
        self.assertEqual(payload["final"]["reason"], "max_generations")


if __name__ == "__main__":
    unittest.main(verbosity=2)
