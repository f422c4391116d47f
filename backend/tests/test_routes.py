"""
Tests for the daily blueprint and the application factory.

Uses the Flask test client against a real ArtifactStore in a temporary
directory, so the exact bytes on disk can be compared with the bytes served.

Coverage:
  - GET /daily/latest.json   → verbatim body, no-store headers, 404 when absent
  - GET /daily/<date>.json   → verbatim body, 404 when absent, 400 on bad key
  - POST /daily/check-guess  → normalized matching, payload validation
  - GET / and unknown routes → create_response envelope
"""

import os
import tempfile
import unittest

from constraint.app import create_app
from constraint.generation.normalize import post_process
from constraint.generation.schema import validate_candidate
from constraint.services.artifact_store import ArtifactStore


def _puzzle(date="2026-10-18"):
    return post_process(validate_candidate({
        "date": date,
        "answer": "Teapot",
        "classes": [
            "ontological", "functional", "contextual",
            "structural", "temporal", "human_interaction",
        ],
        "clues": [
            "A vessel used for brewing and serving a hot drink",
            "You pour boiling water into it and wait a few minutes",
            "Found on kitchen counters and at afternoon gatherings",
            "It has a spout, a handle and a lid",
            "Used most in the morning and around four o'clock",
            "Often passed around the table for guests to share",
        ],
        "explanation": "A teapot brews tea; every clue points at its shape and use.",
        "accepted": ["tea pot"],
    }))


class TestDailyRoutes(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = os.path.join(self.tmp.name, "daily")
        self.store = ArtifactStore(self.root)
        self.app = create_app(daily_dir=self.root)
        self.app.config["TESTING"] = True
        self.client = self.app.test_client()

    def tearDown(self):
        self.tmp.cleanup()

    def _seed(self, date="2026-10-18"):
        puzzle = _puzzle(date)
        self.store.write(date, puzzle)
        self.store.write_latest(puzzle)
        return puzzle

    def test_latest_served_verbatim_without_caching(self):
        self._seed()
        response = self.client.get("/daily/latest.json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "application/json")
        self.assertEqual(response.get_data(as_text=True), self.store.read_raw())
        self.assertIn("no-store", response.headers["Cache-Control"])

    def test_latest_missing(self):
        response = self.client.get("/daily/latest.json")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.get_json())

    def test_dated_artifact(self):
        self._seed("2026-10-17")
        response = self.client.get("/daily/2026-10-17.json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["date"], "2026-10-17")
        self.assertIn("no-store", response.headers["Cache-Control"])

    def test_dated_artifact_missing(self):
        response = self.client.get("/daily/2026-10-01.json")
        self.assertEqual(response.status_code, 404)

    def test_dated_artifact_bad_key(self):
        response = self.client.get("/daily/yesterday.json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "Invalid date."})

    def test_dated_artifact_key_with_trailing_newline(self):
        response = self.client.get("/daily/2026-10-18%0A.json")
        self.assertEqual(response.status_code, 400)

    def test_check_guess_correct(self):
        self._seed()
        for guess in ("teapot", "  TEA   POT "):
            with self.subTest(guess=guess):
                response = self.client.post("/daily/check-guess", json={"guess": guess})
                self.assertEqual(response.status_code, 200)
                self.assertEqual(
                    response.get_json(),
                    {"data": {"correct": True, "date": "2026-10-18"}},
                )
                self.assertIn("no-store", response.headers["Cache-Control"])

    def test_check_guess_wrong(self):
        self._seed()
        response = self.client.post("/daily/check-guess", json={"guess": "kettle"})
        self.assertEqual(response.get_json()["data"]["correct"], False)

    def test_check_guess_validation(self):
        self._seed()
        response = self.client.post("/daily/check-guess", json={})
        self.assertEqual(response.status_code, 400)

        response = self.client.post("/daily/check-guess", json={"word": "teapot"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("guess", response.get_json()["error"])

        response = self.client.post("/daily/check-guess", json={"guess": 42})
        self.assertEqual(response.get_json(), {"error": "Invalid guess."})

    def test_check_guess_without_puzzle(self):
        response = self.client.post("/daily/check-guess", json={"guess": "teapot"})
        self.assertEqual(response.status_code, 404)


class TestAppFactory(unittest.TestCase):

    def setUp(self):
        self.app = create_app(daily_dir="unused")
        self.client = self.app.test_client()

    def test_index(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", response.get_json()["data"])

    def test_unknown_route(self):
        response = self.client.get("/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"error": "Not Found"})


if __name__ == "__main__":
    unittest.main()
