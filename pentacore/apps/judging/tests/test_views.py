import json
from unittest import mock

from pentacore.apps.judging.models import ScoreStatus
from pentacore.apps.scoring import constants as c

from .base import ScoringTestCase


class JudgingApiTest(ScoringTestCase):
    def post_json(self, url, body):
        return self.client.post(url, data=json.dumps(body), content_type="application/json")

    def test_submit_requires_login(self):
        r = self.post_json("/judging/scores/submit/", {})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["code"], "AUTH_REQUIRED")

    def test_submit(self):
        self.client.login(username="volunteer", password="Pass1234!")
        r = self.post_json(
            "/judging/scores/submit/",
            {"event_id": self.events[c.SWIMMING].pk, "athlete_id": self.ana.pk, "data": {"time": "01:10.00"}},
        )
        self.assertEqual(r.status_code, 201)
        body = r.json()["score"]
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["discipline"], c.SWIMMING)

    def test_submit_validation_error_has_details(self):
        self.client.login(username="volunteer", password="Pass1234!")
        r = self.post_json(
            "/judging/scores/submit/",
            {"event_id": self.events[c.FENCING_DE].pk, "athlete_id": self.ana.pk, "data": {"placement": 0}},
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["code"], "VALIDATION_FAILED")
        self.assertIn("placement", r.json()["details"])

    def test_submit_bad_json(self):
        self.client.login(username="volunteer", password="Pass1234!")
        r = self.client.post("/judging/scores/submit/", data="{no json", content_type="application/json")
        self.assertEqual(r.status_code, 400)

    def test_volunteer_cannot_verify(self):
        score = self.make_score()
        self.client.login(username="volunteer", password="Pass1234!")
        r = self.post_json(f"/judging/scores/{score.pk}/verify/", {})
        self.assertEqual(r.status_code, 403)

    def test_verify_and_conflict(self):
        score = self.make_score()
        self.client.login(username="reviewer", password="Pass1234!")

        r = self.post_json(f"/judging/scores/{score.pk}/verify/", {})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["official_score"]["points"], 298)

        r = self.post_json(f"/judging/scores/{score.pk}/verify/", {})
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json(), {"error": "La puntuación ya fue procesada", "code": "CONFLICT"})

    def test_verify_not_found(self):
        self.client.login(username="reviewer", password="Pass1234!")
        r = self.post_json("/judging/scores/999999/verify/", {})
        self.assertEqual(r.status_code, 404)

    def test_verify_requires_post(self):
        score = self.make_score()
        self.client.login(username="reviewer", password="Pass1234!")
        self.assertEqual(self.client.get(f"/judging/scores/{score.pk}/verify/").status_code, 405)

    def test_correct(self):
        score = self.make_score()
        self.client.login(username="reviewer", password="Pass1234!")
        r = self.post_json(f"/judging/scores/{score.pk}/correct/", {"data": {"victories": 14, "total_bouts": 20}})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["official_score"]["points"], 250)

        r = self.post_json(f"/judging/scores/{score.pk}/correct/", {})
        self.assertEqual(r.status_code, 400)

    def test_reject(self):
        score = self.make_score()
        self.client.login(username="reviewer", password="Pass1234!")
        r = self.post_json(f"/judging/scores/{score.pk}/reject/", {"reason": " "})
        self.assertEqual(r.status_code, 400)

        r = self.post_json(f"/judging/scores/{score.pk}/reject/", {"reason": "Dorsal equivocado"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["score"]["status"], "rejected")
        self.assertEqual(r.json()["score"]["rejection_reason"], "Dorsal equivocado")

    def test_list_and_filters(self):
        s1 = self.make_score()
        self.make_score(c.RIDING, data={}, athlete=self.bruno)
        self.make_score(c.OBSTACLE, data={"time_seconds": 20}, status=ScoreStatus.REJECTED, rejection_reason="x")
        self.client.login(username="reviewer", password="Pass1234!")

        url = f"/judging/competitions/{self.competition.pk}/preliminary-scores/"
        self.assertEqual(self.client.get(url).json()["count"], 3)
        self.assertEqual(self.client.get(url, {"status": "pending"}).json()["count"], 2)
        r = self.client.get(url, {"event": self.events[c.FENCING_RANKING].pk})
        self.assertEqual([s["id"] for s in r.json()["scores"]], [s1.pk])
        self.assertEqual(self.client.get(url, {"status": "nope"}).status_code, 400)
        self.assertEqual(self.client.get("/judging/competitions/999999/preliminary-scores/").status_code, 404)

    def test_bulk_verify(self):
        s1 = self.make_score()
        s2 = self.make_score(c.RIDING, data={})
        self.client.login(username="reviewer", password="Pass1234!")
        url = f"/judging/competitions/{self.competition.pk}/bulk-verify/"

        r = self.post_json(url, {"ids": [s1.pk, s2.pk, 999999]})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["verified"], 2)
        self.assertEqual(body["failed"], 1)

        self.assertEqual(self.post_json(url, {"ids": []}).status_code, 400)

    def test_unexpected_error_is_generic_500(self):
        score = self.make_score()
        self.client.login(username="reviewer", password="Pass1234!")
        with mock.patch("pentacore.apps.judging.services.lifecycle.promote", side_effect=RuntimeError("boom")):
            with self.assertLogs("pentacore.apps.core.http", level="ERROR"):
                r = self.post_json(f"/judging/scores/{score.pk}/verify/", {})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "Ocurrió un error inesperado", "code": "INTERNAL_ERROR"})
        self.assertNotIn("boom", r.content.decode())


class HealthTest(ScoringTestCase):
    def test_health(self):
        r = self.client.get("/api/health/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"ok": True, "database": True})
