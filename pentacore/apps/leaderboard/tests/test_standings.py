from datetime import date

from pentacore.apps.events.models import Athlete, Competition
from pentacore.apps.judging.services import lifecycle
from pentacore.apps.judging.tests.base import ScoringTestCase
from pentacore.apps.leaderboard import services
from pentacore.apps.scoring import constants as c


class StandingsTest(ScoringTestCase):
    def verify(self, discipline, athlete, data):
        score = self.make_score(discipline, athlete=athlete, data=data)
        return lifecycle.verify(score.pk, self.reviewer)

    def setUp(self):
        # Ana: 298 + 300 = 598 ; Bruno: 250 + 300 = 550
        self.verify(c.FENCING_RANKING, self.ana, {"victories": 20, "total_bouts": 20})
        self.verify(c.RIDING, self.ana, {})
        self.verify(c.FENCING_RANKING, self.bruno, {"victories": 14, "total_bouts": 20})
        self.verify(c.RIDING, self.bruno, {})

    def test_individual_standings(self):
        rows = services.competition_standings(self.competition)
        self.assertEqual([r["athlete_id"] for r in rows], [self.ana.pk, self.bruno.pk])
        self.assertEqual([r["rank"] for r in rows], [1, 2])
        self.assertEqual(rows[0]["total"], 598)
        self.assertEqual(rows[0]["disciplines"], {c.FENCING_RANKING: 298, c.RIDING: 300})
        self.assertEqual(len(rows[0]["cells"]), len(c.DISCIPLINE_ORDER))
        self.assertIn("-", rows[0]["cells"])

    def test_pending_scores_do_not_count(self):
        self.make_score(c.OBSTACLE, athlete=self.bruno, data={"time_seconds": 15})
        rows = services.competition_standings(self.competition)
        self.assertEqual(rows[1]["total"], 550)

    def test_ties_share_rank(self):
        self.verify(c.OBSTACLE, self.ana, {"time_seconds": 30.84})  # 598 + 352
        self.verify(c.OBSTACLE, self.bruno, {"time_seconds": 15})  # 550 + 400
        rows = services.competition_standings(self.competition)
        self.assertEqual(rows[0]["total"], rows[1]["total"])
        self.assertEqual([r["rank"] for r in rows], [1, 1])

    def test_masters_bonus(self):
        self.competition.age_category = "Masters"
        self.competition.start_date = date(2026, 6, 1)
        self.competition.save()
        Athlete.objects.filter(pk=self.ana.pk).update(date_of_birth=date(1976, 1, 1))

        rows = services.competition_standings(self.competition)
        ana = next(r for r in rows if r["athlete_id"] == self.ana.pk)
        self.assertEqual(ana["raw_total"], 598)
        self.assertEqual(ana["masters_bonus"], 50)
        self.assertEqual(ana["total"], 648)
        bruno = next(r for r in rows if r["athlete_id"] == self.bruno.pk)
        self.assertEqual(bruno["masters_bonus"], 0)

    def test_handicap_ignores_laser_run(self):
        self.verify(c.LASER_RUN, self.bruno, {"finish_time_seconds": 700})
        starts = services.handicap_starts(self.competition)
        self.assertEqual(starts[0]["athlete_id"], self.ana.pk)
        self.assertEqual(starts[0]["start_delay"], 0)
        self.assertEqual(starts[1]["athlete_id"], self.bruno.pk)
        self.assertEqual(starts[1]["start_delay"], 48)
        self.assertEqual(starts[1]["gate_assignment"], "B")

    def test_team_needs_three_athletes(self):
        self.assertEqual(services.team_standings(self.competition), [])
        for first in ("Carla", "Diego"):
            athlete = Athlete.objects.create(first_name=first, last_name="Soto", country="CHI", gender="F")
            self.verify(c.RIDING, athlete, {"knockdowns": 1})
        teams = services.team_standings(self.competition)
        self.assertEqual(len(teams), 1)
        self.assertEqual(teams[0]["country"], "CHI")
        self.assertEqual(teams[0]["team_total"], 598 + 293 + 293)
        self.assertEqual(teams[0]["rank"], 1)

    def test_de_bracket_seeded_by_ranking_round(self):
        bracket = services.de_bracket(self.competition)
        self.assertEqual(bracket["tableau_size"], 2)
        final = bracket["rounds"][0][0]
        self.assertEqual((final["athlete1_id"], final["athlete1_seed"]), (self.ana.pk, 1))
        self.assertEqual((final["athlete2_id"], final["athlete2_seed"]), (self.bruno.pk, 2))
        self.assertEqual(bracket["round_names"], ["Final"])
        self.assertFalse(bracket["stats"]["is_complete"])


class LeaderboardViewsTest(ScoringTestCase):
    def test_index_excludes_drafts(self):
        Competition.objects.create(name="Borrador", slug="borrador")
        r = self.client.get("/leaderboard/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([x["slug"] for x in r.json()["competitions"]], ["copa-test"])

    def test_competition_leaderboard(self):
        lifecycle.verify(self.make_score().pk, self.reviewer)
        r = self.client.get("/leaderboard/copa-test/")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(len(body["columns"]), len(c.DISCIPLINE_ORDER))
        self.assertEqual(body["rows"][0]["total"], 298)

    def test_team_and_handicap_views(self):
        self.assertEqual(self.client.get("/leaderboard/copa-test/teams/").json()["teams"], [])
        self.assertEqual(self.client.get("/leaderboard/copa-test/handicap/").json()["starts"], [])

    def test_unknown_competition(self):
        r = self.client.get("/leaderboard/nope/")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["code"], "NOT_FOUND")

    def test_de_bracket_view(self):
        r = self.client.get("/leaderboard/copa-test/de-bracket/")
        self.assertEqual(r.status_code, 200)
        bracket = r.json()["bracket"]
        # Sin ranking round oficial el cuadro está vacío
        self.assertEqual(bracket["num_competitors"], 0)
        self.assertIsNone(bracket["placements"])
