import threading
from unittest import mock

from django.db import DatabaseError, IntegrityError, connection, transaction
from django.test import TransactionTestCase, override_settings

from pentacore.apps.audit.models import AuditEventType, AuditLog, Severity
from pentacore.apps.core.errors import ConflictError, NotFoundError, ScoreValidationError
from pentacore.apps.judging.models import PreliminaryScore, ScoreStatus
from pentacore.apps.judging.services import lifecycle, promote
from pentacore.apps.leaderboard.broadcast import ScoreEventChannel
from pentacore.apps.scoring import constants as c
from pentacore.apps.scoring.models import OfficialScore

from .base import ScoringFixtures, ScoringTestCase

PENTACORE_NO_REREVIEW = {"DEFAULT_AGE_CATEGORY": "Senior", "ALLOW_REJECTED_CORRECTION": False, "REVIEWERS_GROUP": "reviewers"}


class SubmitTest(ScoringTestCase):
    def test_creates_pending_and_audits(self):
        ev = self.events[c.LASER_RUN]
        score = lifecycle.submit(ev.pk, self.ana.pk, {"finish_time": "13:20"}, self.volunteer)

        self.assertEqual(score.status, ScoreStatus.PENDING)
        self.assertEqual(score.discipline, c.LASER_RUN)
        self.assertEqual(score.data, {"finish_time": "13:20"})
        self.assertIsNone(score.official_score)

        log = AuditLog.objects.get(event_type=AuditEventType.SCORE_CREATE)
        self.assertEqual(log.target_id, str(score.pk))
        self.assertEqual(log.actor_id, str(self.volunteer.pk))
        self.assertEqual(log.actor_role, "VOLUNTEER")

    def test_invalid_payload_writes_nothing(self):
        with self.assertRaises(ScoreValidationError):
            lifecycle.submit(self.events[c.FENCING_RANKING].pk, self.ana.pk, {"victories": "x"}, self.volunteer)
        self.assertFalse(PreliminaryScore.objects.exists())

    def test_unknown_event_or_athlete(self):
        with self.assertRaises(NotFoundError):
            lifecycle.submit(999999, self.ana.pk, {}, self.volunteer)
        with self.assertRaises(NotFoundError):
            lifecycle.submit(self.events[c.RIDING].pk, 999999, {}, self.volunteer)


class VerifyTest(ScoringTestCase):
    def test_verify_promotes(self):
        score = self.make_score()
        official = lifecycle.verify(score.pk, self.reviewer)

        score.refresh_from_db()
        self.assertEqual(official.points, 298)
        self.assertEqual(official.age_category, "Senior")
        self.assertEqual(official.source_id, score.pk)
        self.assertEqual(score.status, ScoreStatus.VERIFIED)
        self.assertEqual(score.official_score_id, official.pk)
        self.assertEqual(score.verified_by, self.reviewer)
        self.assertIsNotNone(score.verified_at)
        self.assertIsNone(score.corrected_data)

        log = AuditLog.objects.get(event_type=AuditEventType.SCORE_VERIFY)
        self.assertEqual(log.severity, Severity.INFO)
        self.assertEqual(log.actor_role, "REVIEWER")
        self.assertEqual(log.details["points"], 298)

    def test_uses_competition_age_category(self):
        self.competition.age_category = "U17"
        self.competition.save()
        score = self.make_score(c.LASER_RUN, data={"finish_time_seconds": 630})
        official = lifecycle.verify(score.pk, self.reviewer)
        self.assertEqual(official.points, 500)
        self.assertEqual(official.age_category, "U17")

    def test_verify_twice_is_conflict(self):
        score = self.make_score()
        first = lifecycle.verify(score.pk, self.reviewer)
        with self.assertRaises(ConflictError):
            lifecycle.verify(score.pk, self.reviewer)
        self.assertEqual(OfficialScore.objects.count(), 1)
        score.refresh_from_db()
        self.assertEqual(score.official_score_id, first.pk)
        self.assertEqual(score.status, ScoreStatus.VERIFIED)

    def test_verify_rejected_is_conflict(self):
        score = self.make_score(status=ScoreStatus.REJECTED, rejection_reason="x")
        with self.assertRaises(ConflictError):
            lifecycle.verify(score.pk, self.reviewer)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.REJECTED)

    def test_not_found(self):
        with self.assertRaises(NotFoundError):
            lifecycle.verify(123456, self.reviewer)

    def test_invalid_stored_data_leaves_pending(self):
        score = self.make_score(data={"victories": 5})
        with self.assertRaises(ScoreValidationError):
            lifecycle.verify(score.pk, self.reviewer)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.PENDING)
        self.assertFalse(OfficialScore.objects.exists())

    def test_second_score_same_athlete_event_is_conflict(self):
        first = self.make_score()
        second = self.make_score(data={"victories": 10, "total_bouts": 20})
        lifecycle.verify(first.pk, self.reviewer)

        with self.assertRaises(ConflictError):
            lifecycle.verify(second.pk, self.reviewer)
        second.refresh_from_db()
        self.assertEqual(second.status, ScoreStatus.PENDING)
        self.assertEqual(OfficialScore.objects.get().points, 298)


class ConcurrencyTest(ScoringTestCase):
    def test_stale_promotion_rolls_back(self):
        score = self.make_score()
        stale = PreliminaryScore.objects.get(pk=score.pk)

        lifecycle.verify(score.pk, self.reviewer)

        # La segunda promoción usa una copia leída antes de la verificación
        with self.assertRaises(ConflictError):
            promote(stale, stale.data, self.reviewer, ScoreStatus.CORRECTED, (ScoreStatus.PENDING,))

        self.assertEqual(OfficialScore.objects.count(), 1)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.VERIFIED)

    def test_guard_update_miss_rolls_back_official_score(self):
        score = self.make_score(c.RIDING, data={})
        # Ningún estado permitido calza: el UPDATE no toca filas
        with self.assertRaises(ConflictError):
            promote(score, score.data, self.reviewer, ScoreStatus.VERIFIED, (ScoreStatus.REJECTED,))
        self.assertFalse(OfficialScore.objects.exists())

    def test_check_constraint_rejects_inconsistent_row(self):
        score = self.make_score()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                PreliminaryScore.objects.filter(pk=score.pk).update(status=ScoreStatus.VERIFIED)

    def test_official_score_is_immutable(self):
        score = self.make_score()
        official = lifecycle.verify(score.pk, self.reviewer)
        official.points = 1
        with self.assertRaises(ConflictError):
            official.save()


class CorrectTest(ScoringTestCase):
    def test_correct_keeps_original_data(self):
        score = self.make_score(data={"victories": 10, "total_bouts": 20})
        official = lifecycle.correct(score.pk, {"victories": 14, "total_bouts": 20}, self.reviewer)

        score.refresh_from_db()
        self.assertEqual(official.points, 250)
        self.assertEqual(official.input["victories"], 14)
        self.assertEqual(score.status, ScoreStatus.CORRECTED)
        self.assertEqual(score.data, {"victories": 10, "total_bouts": 20})
        self.assertEqual(score.corrected_data, {"victories": 14, "total_bouts": 20})
        self.assertEqual(score.effective_data, score.corrected_data)

        log = AuditLog.objects.get(event_type=AuditEventType.SCORE_CORRECT)
        self.assertEqual(log.severity, Severity.WARNING)
        self.assertEqual(log.details["original"], {"victories": 10, "total_bouts": 20})

    def test_invalid_correction_leaves_pending(self):
        score = self.make_score()
        with self.assertRaises(ScoreValidationError):
            lifecycle.correct(score.pk, {"victories": 200, "total_bouts": 20}, self.reviewer)
        with self.assertRaises(ScoreValidationError):
            lifecycle.correct(score.pk, "no es un objeto", self.reviewer)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.PENDING)
        self.assertIsNone(score.corrected_data)

    def test_correct_verified_is_conflict(self):
        score = self.make_score()
        lifecycle.verify(score.pk, self.reviewer)
        with self.assertRaises(ConflictError):
            lifecycle.correct(score.pk, {"victories": 1, "total_bouts": 20}, self.reviewer)

    def test_correct_rejected_score(self):
        score = self.make_score()
        lifecycle.reject(score.pk, "Planilla ilegible", self.reviewer)
        official = lifecycle.correct(score.pk, {"victories": 15, "total_bouts": 20}, self.reviewer)

        score.refresh_from_db()
        self.assertEqual(official.points, 258)
        self.assertEqual(score.status, ScoreStatus.CORRECTED)
        self.assertEqual(score.rejection_reason, "")
        log = AuditLog.objects.get(event_type=AuditEventType.SCORE_CORRECT)
        self.assertEqual(log.details["previous_rejection_reason"], "Planilla ilegible")

    @override_settings(PENTACORE=PENTACORE_NO_REREVIEW)
    def test_correct_rejected_disabled(self):
        score = self.make_score()
        lifecycle.reject(score.pk, "Planilla ilegible", self.reviewer)
        with self.assertRaises(ConflictError):
            lifecycle.correct(score.pk, {"victories": 15, "total_bouts": 20}, self.reviewer)


class RejectTest(ScoringTestCase):
    def test_reject(self):
        score = self.make_score()
        result = lifecycle.reject(score.pk, "  Atleta equivocado  ", self.reviewer)

        self.assertEqual(result.status, ScoreStatus.REJECTED)
        self.assertEqual(result.rejection_reason, "Atleta equivocado")
        self.assertIsNone(result.official_score)
        self.assertEqual(result.verified_by, self.reviewer)
        self.assertFalse(OfficialScore.objects.exists())
        self.assertEqual(AuditLog.objects.get(event_type=AuditEventType.SCORE_REJECT).details["reason"], "Atleta equivocado")

    def test_empty_reason(self):
        score = self.make_score()
        for reason in ("", "   ", None):
            with self.subTest(reason=reason):
                with self.assertRaises(ScoreValidationError):
                    lifecycle.reject(score.pk, reason, self.reviewer)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.PENDING)

    def test_reject_verified_is_conflict(self):
        score = self.make_score()
        lifecycle.verify(score.pk, self.reviewer)
        with self.assertRaises(ConflictError):
            lifecycle.reject(score.pk, "tarde", self.reviewer)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.VERIFIED)


class ConcurrentVerifyTest(ScoringFixtures, TransactionTestCase):
    """
    Dos revisores verifican la misma puntuación a la vez. Ambos leen la
    preliminar en 'pending' antes de que el otro escriba; las escrituras van
    en serie porque SQLite no admite dos escritores simultáneos.
    """

    def setUp(self):
        self.create_fixtures()

    def test_only_one_verify_wins(self):
        score = self.make_score()
        both_read = threading.Barrier(2, timeout=10)
        writer = threading.Lock()
        real_get_score = lifecycle._get_score
        results, errors = [], []

        def read_then_wait(score_id):
            current = real_get_score(score_id)
            both_read.wait()
            writer.acquire()
            return current

        def attempt():
            try:
                results.append(lifecycle.verify(score.pk, self.reviewer))
            except ConflictError as exc:
                errors.append(exc)
            finally:
                if writer.locked():
                    writer.release()
                connection.close()

        with mock.patch.object(lifecycle, "_get_score", side_effect=read_then_wait):
            threads = [threading.Thread(target=attempt) for _ in range(2)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=30)

        self.assertEqual(len(results), 1)
        self.assertEqual(len(errors), 1)
        self.assertEqual(OfficialScore.objects.count(), 1)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.VERIFIED)
        self.assertEqual(score.official_score_id, results[0].pk)


class AuditFailureTest(ScoringTestCase):
    def test_audit_failure_does_not_undo_verification(self):
        score = self.make_score()
        with mock.patch.object(AuditLog.objects, "create", side_effect=DatabaseError("audit caído")):
            with self.assertLogs("pentacore.apps.audit.services", level="ERROR"):
                official = lifecycle.verify(score.pk, self.reviewer)

        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.VERIFIED)
        self.assertEqual(score.official_score_id, official.pk)
        self.assertFalse(AuditLog.objects.exists())


class BroadcastTest(ScoringTestCase):
    def test_event_published_after_commit(self):
        channel = ScoreEventChannel()
        received = []
        channel.subscribe(received.append)

        score = self.make_score()
        with self.captureOnCommitCallbacks(execute=True):
            lifecycle.verify(score.pk, self.reviewer, channel=channel)

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].competition_id, self.competition.pk)
        self.assertEqual(received[0].discipline, c.FENCING_RANKING)
        self.assertEqual(received[0].athlete_ids, (self.ana.pk,))

    def test_nothing_published_on_conflict(self):
        channel = ScoreEventChannel()
        received = []
        channel.subscribe(received.append)
        score = self.make_score(status=ScoreStatus.REJECTED, rejection_reason="x")

        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(ConflictError):
                lifecycle.verify(score.pk, self.reviewer, channel=channel)
        self.assertEqual(received, [])


class BulkVerifyTest(ScoringTestCase):
    def test_mixed_batch(self):
        ok = self.make_score()
        bad_payload = self.make_score(c.OBSTACLE, data={"time_seconds": 9999})
        already = self.make_score(c.RIDING, data={})
        lifecycle.verify(already.pk, self.reviewer)

        summary = lifecycle.bulk_verify(self.competition.pk, [ok.pk, bad_payload.pk, already.pk, 424242], self.reviewer)

        self.assertEqual(summary["verified"], 1)
        self.assertEqual(summary["failed"], 3)
        self.assertEqual(summary["results"][0]["id"], ok.pk)
        self.assertEqual(summary["results"][0]["points"], 298)
        codes = {e["id"]: e["code"] for e in summary["errors"]}
        self.assertEqual(codes[bad_payload.pk], "VALIDATION_FAILED")
        self.assertEqual(codes[already.pk], "CONFLICT")
        self.assertEqual(codes[424242], "NOT_FOUND")

    def test_other_competition_is_not_verified(self):
        score = self.make_score()
        summary = lifecycle.bulk_verify(self.competition.pk + 1000, [score.pk], self.reviewer)
        self.assertEqual(summary["verified"], 0)
        score.refresh_from_db()
        self.assertEqual(score.status, ScoreStatus.PENDING)
