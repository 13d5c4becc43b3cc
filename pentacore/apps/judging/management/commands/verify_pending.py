from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from pentacore.apps.events.models import Competition
from pentacore.apps.judging.models import PreliminaryScore, ScoreStatus
from pentacore.apps.judging.services import lifecycle
from pentacore.apps.scoring.constants import DISCIPLINE_ORDER


class Command(BaseCommand):
    help = "Verifica en bloque las puntuaciones pendientes de una competencia."

    def add_arguments(self, parser):
        parser.add_argument("--competition", type=str, required=True, help="Slug de la competencia.")
        parser.add_argument("--reviewer", type=str, required=True, help="Username del revisor.")
        parser.add_argument("--discipline", type=str, choices=DISCIPLINE_ORDER, default=None)

    def handle(self, *args, **opts):
        try:
            competition = Competition.objects.get(slug=opts["competition"])
        except Competition.DoesNotExist:
            raise CommandError(f"Competencia '{opts['competition']}' no existe")

        User = get_user_model()
        try:
            reviewer = User.objects.get(username=opts["reviewer"])
        except User.DoesNotExist:
            raise CommandError(f"Usuario '{opts['reviewer']}' no existe")

        qs = PreliminaryScore.objects.filter(event__competition=competition, status=ScoreStatus.PENDING)
        if opts["discipline"]:
            qs = qs.filter(discipline=opts["discipline"])
        ids = list(qs.order_by("submitted_at", "id").values_list("id", flat=True))

        if not ids:
            self.stdout.write("No hay puntuaciones pendientes.")
            return

        summary = lifecycle.bulk_verify(competition.pk, ids, reviewer)
        for err in summary["errors"]:
            self.stdout.write(self.style.WARNING(f"  #{err['id']}: {err['code']} {err['error']}"))
        self.stdout.write(
            self.style.SUCCESS(f"OK. {summary['verified']} verificadas, {summary['failed']} con error.")
        )
