import shutil
import tempfile
import unittest

from fastapi.testclient import TestClient

from messvote.api.api_run import create_app
from messvote.api.deps import build_context
from messvote.tests.helpers import FixedClock
from messvote.utilities.config import ADMIN_PASSWORD, ADMIN_USERNAME

ADMIN = (ADMIN_USERNAME, ADMIN_PASSWORD)
STUDENT = {"X-Student-Id": "42"}


class TestMessVoteApi(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp(prefix="messvote_api_")
        self.clock = FixedClock()
        self.ctx = build_context(self.tmp_dir, self.clock, sleep=lambda s: None)
        self.client = TestClient(create_app(self.ctx))
        self.client.put("/api/settings", json={"voting_start_time": "00:00", "voting_end_time": "12:00"}, auth=ADMIN)
        self.client.post("/api/students", json={"name": "Ravi", "student_id": "42"}, auth=ADMIN)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _create_item(self, name, meal_type):
        resp = self.client.post("/api/menu", data={"name": name, "meal_type": meal_type}, auth=ADMIN)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["id"]

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    def test_admin_routes_require_credentials(self):
        resp = self.client.post("/api/menu", data={"name": "Dal", "meal_type": "lunch"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "NotAuthenticated")
        resp = self.client.get("/api/students", auth=("admin", "wrong"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Invalid admin credentials")

    def test_login(self):
        resp = self.client.post("/api/auth/login", json={"name": "ravi", "student_id": "42"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"name": "Ravi", "student_id": "42"})
        resp = self.client.post("/api/auth/login", json={"name": "Ravi", "student_id": "43"})
        self.assertEqual(resp.status_code, 401)
        resp = self.client.post("/api/auth/login", json={"name": "Ravi", "student_id": "4x"})
        self.assertEqual(resp.status_code, 400)

    def test_duplicate_registration_is_conflict(self):
        resp = self.client.post("/api/students", json={"name": "Other", "student_id": "42"}, auth=ADMIN)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "Student ID already exists")

    def test_vote_change_and_results(self):
        biryani = self._create_item("Biryani", "lunch")
        chole = self._create_item("Chole", "lunch")
        resp = self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": biryani}, headers=STUDENT)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.clock.set(9, 5)
        resp = self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": chole}, headers=STUDENT)
        self.assertEqual(resp.json()["previous_item_id"], biryani)
        self.assertEqual(resp.json()["results"]["counts"], {chole: 1})

        results = self.client.get("/api/results").json()
        self.assertEqual(results["meals"]["lunch"]["counts"], {chole: 1})
        self.assertIsNone(results["meals"]["lunch"]["winner"])
        self.assertEqual(self.client.get("/api/votes/me", headers=STUDENT).json()["votes"], {"lunch": chole})

        self.clock.set(12, 1)
        results = self.client.get("/api/results").json()
        self.assertEqual(results["meals"]["lunch"]["winner"]["name"], "Chole")

    def test_vote_rejections(self):
        dal = self._create_item("Dal", "lunch")
        resp = self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": dal})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Please log in to vote")
        resp = self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": "ghost"}, headers=STUDENT)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "InvalidChoice")
        resp = self.client.post("/api/votes", json={"meal_type": "supper", "item_id": dal}, headers=STUDENT)
        self.assertEqual(resp.status_code, 400)
        self.clock.set(13, 0)
        resp = self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": dal}, headers=STUDENT)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "VotingClosed")

    def test_plan_endpoints(self):
        dal = self._create_item("Dal", "lunch")
        rajma = self._create_item("Rajma", "lunch")
        resp = self.client.put("/api/plans/2026-03-02", json={"lunch": [dal]}, auth=ADMIN)
        self.assertEqual(resp.status_code, 200, resp.text)
        votable = self.client.get("/api/plans/2026-03-02/votable", params={"meal_type": "lunch"}).json()
        self.assertEqual([e["id"] for e in votable["lunch"]], [dal])

        resp = self.client.post("/api/plans/2026-03-02/lunch/items", json={"item_id": rajma}, auth=ADMIN)
        self.assertEqual([e["id"] for e in resp.json()["lunch"]], [dal, rajma])
        resp = self.client.post("/api/plans/2026-03-02/lunch/items", json={"item_id": rajma}, auth=ADMIN)
        self.assertEqual(resp.status_code, 409)
        resp = self.client.post("/api/plans/2026-03-02/lunch/items", json={"item_id": "skip"}, auth=ADMIN)
        self.assertEqual(resp.status_code, 400)

        self.client.delete(f"/api/plans/2026-03-02/lunch/items/{dal}", auth=ADMIN)
        self.assertEqual([e["id"] for e in self.client.get("/api/plans/2026-03-02").json()["lunch"]], [rajma])

        days = self.client.get("/api/plans/upcoming").json()["days"]
        self.assertEqual(len(days), self.ctx.settings.get_window().menu_cycle_days)
        self.assertEqual(days[0]["plan"]["lunch"][0]["id"], rajma)

        self.assertTrue(self.client.delete("/api/plans/2026-03-02", auth=ADMIN).json()["cleared"])
        self.assertEqual(self.client.get("/api/plans/2026-03-02").status_code, 404)
        self.assertEqual(self.client.get("/api/plans/not-a-date").status_code, 400)

    def test_second_plan_stream_for_session_is_rejected(self):
        self.ctx.subscriptions.subscribe("tab-1")
        resp = self.client.get("/api/plans/stream", params={"session_id": "tab-1"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.client.get("/api/plans/stream").status_code, 400)
        self.assertTrue(self.client.delete("/api/plans/stream/tab-1").json()["closed"])

    def test_settings_and_status(self):
        resp = self.client.put("/api/settings", json={"voting_end_time": "08:30", "menu_cycle_days": 5}, auth=ADMIN)
        self.assertEqual(resp.json(), {"voting_start_time": "00:00", "voting_end_time": "08:30", "menu_cycle_days": 5})
        status = self.client.get("/api/status").json()
        self.assertFalse(status["is_open"])
        self.assertEqual(status["time_remaining"], {"hours": 0, "minutes": 0, "seconds": 0})
        resp = self.client.put("/api/settings", json={"voting_end_time": "25:00"}, auth=ADMIN)
        self.assertEqual(resp.status_code, 400)

    def test_event_feed(self):
        cursor = self.client.get("/api/events").json()["next_cursor"]
        dal = self._create_item("Dal", "lunch")
        self.client.put("/api/plans/2026-03-03", json={"lunch": [dal]}, auth=ADMIN)
        self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": dal}, headers=STUDENT)
        events = self.client.get("/api/events", params={"since": cursor}).json()["events"]
        self.assertEqual([e["type"] for e in events], ["plans.changed", "votes.recorded"])
        self.assertEqual(events[0]["date"], "2026-03-03")

    def test_menu_item_image_served(self):
        resp = self.client.post(
            "/api/menu",
            data={"name": "Poha", "meal_type": "breakfast", "description": "light"},
            files={"image": ("poha.png", b"\x89PNG fake", "image/png")},
            auth=ADMIN,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        url = resp.json()["image_url"]
        self.assertEqual(self.client.get(url).content, b"\x89PNG fake")
        item_id = resp.json()["id"]
        self.assertEqual(self.client.delete(f"/api/menu/{item_id}", auth=ADMIN).status_code, 200)
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_complaint_flow(self):
        resp = self.client.post("/api/complaints", data={
            "name": "Ravi", "room_number": "150", "category": "Electrical", "urgency": "medium",
            "text": "Fan not working",
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        complaint_id = resp.json()["id"]
        resp = self.client.post("/api/complaints", data={
            "name": "Ravi", "room_number": "201", "category": "Electrical", "urgency": "medium", "text": "x",
        })
        self.assertEqual(resp.status_code, 400)

        mine = self.client.get("/api/complaints/mine", params={"name": "Ravi"}).json()["complaints"]
        self.assertEqual([c["id"] for c in mine], [complaint_id])
        self.assertEqual(self.client.get("/api/complaints").status_code, 401)

        resp = self.client.patch(f"/api/complaints/{complaint_id}",
                                 json={"status": "resolved", "response": "Replaced capacitor"}, auth=ADMIN)
        self.assertEqual(resp.json()["status"], "resolved")
        resolved = self.client.get("/api/complaints", params={"filter": "resolved"}, auth=ADMIN).json()
        self.assertEqual(len(resolved["complaints"]), 1)

        export = self.client.get("/api/complaints/export", params={"filter": "all"}, auth=ADMIN)
        self.assertEqual(export.headers["content-type"].split(";")[0], "text/csv")
        self.assertIn("Replaced capacitor", export.text)
        self.assertEqual(self.client.post("/api/complaints/bulk-resolve", auth=ADMIN).json(), {"resolved": 0})

    def test_dashboard(self):
        dal = self._create_item("Dal", "lunch")
        self.client.post("/api/votes", json={"meal_type": "lunch", "item_id": dal}, headers=STUDENT)
        self.client.post("/api/votes", json={"meal_type": "dinner", "item_id": "skip"}, headers=STUDENT)
        data = self.client.get("/api/dashboard", auth=ADMIN).json()
        self.assertEqual(data["registered_students"], 1)
        self.assertEqual(data["students_voted_today"], 1)
        self.assertEqual(data["votes_today"], {"breakfast": 0, "lunch": 1, "dinner": 1})
        self.assertEqual(data["pending_complaints"], 0)


if __name__ == '__main__':
    unittest.main()
