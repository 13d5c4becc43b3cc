from __future__ import annotations

import random
from datetime import date
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from pentacore.apps.events.models import Athlete, Competition
from pentacore.apps.judging.services import lifecycle
from pentacore.apps.scoring import constants as c

FIRST_NAMES = ["Ana", "Bruno", "Carla", "Diego", "Elena", "Felipe", "Gabriela", "Hugo", "Inés", "Joaquín", "Lucía", "Martín"]
LAST_NAMES = ["Rojas", "Muñoz", "Silva", "Pérez", "Soto", "Contreras", "Vargas", "Fuentes", "Castro", "Reyes"]
COUNTRIES = ["CHI", "ARG", "BRA", "MEX", "ESP"]


def ensure_demo_user(username: str, email: str, reviewer: bool = False):
    User = get_user_model()
    user, _ = User.objects.get_or_create(username=username, defaults={"email": email})
    if not user.has_usable_password():
        user.set_password("Pass1234!")
        user.save()
    if reviewer:
        group, _ = Group.objects.get_or_create(name=settings.PENTACORE.get("REVIEWERS_GROUP", "reviewers"))
        user.groups.add(group)
    return user


def random_payload(discipline: str, rng: random.Random, n_athletes: int) -> Dict[str, Any]:
    """Resultado plausible por disciplina (dentro de los rangos de validación)."""
    if discipline == c.FENCING_RANKING:
        bouts = max(1, n_athletes - 1)
        return {"victories": rng.randint(0, bouts), "total_bouts": bouts}
    if discipline == c.FENCING_DE:
        return {"placement": rng.randint(1, min(n_athletes, 18))}
    if discipline == c.OBSTACLE:
        return {"time_seconds": round(rng.uniform(14.0, 40.0), 2), "penalty_points": rng.choice([0, 0, 0, 10])}
    if discipline == c.SWIMMING:
        return {"time_hundredths": rng.randint(6000, 8500), "penalty_points": 0}
    if discipline == c.LASER_RUN:
        return {"finish_time_seconds": rng.randint(700, 900), "penalty_seconds": rng.choice([0, 0, 10])}
    if discipline == c.RIDING:
        return {"knockdowns": rng.randint(0, 3), "disobediences": rng.randint(0, 1), "time_over_seconds": rng.randint(0, 5)}
    raise CommandError(f"Disciplina sin generador demo: {discipline}")


class Command(BaseCommand):
    help = "Crea una competencia DEMO con todas las disciplinas, atletas y puntuaciones pendientes."

    def add_arguments(self, parser):
        parser.add_argument("--name", type=str, default="Copa Demo Pentatlón")
        parser.add_argument("--slug", type=str, default="")
        parser.add_argument("--athletes", type=int, default=12)
        parser.add_argument("--age-category", type=str, choices=c.AGE_CATEGORIES, default=c.DEFAULT_AGE_CATEGORY)
        parser.add_argument("--seed", type=int, default=None, help="Semilla para resultados reproducibles.")
        parser.add_argument("--no-scores", action="store_true", help="Solo crea competencia y atletas.")

    @transaction.atomic
    def handle(self, *args, **opts):
        name: str = opts["name"]
        slug: str = opts["slug"] or slugify(name)
        n: int = opts["athletes"]
        if n < 2:
            raise CommandError("--athletes debe ser >= 2")
        rng = random.Random(opts["seed"])

        # 1) Competencia + disciplinas
        competition, created = Competition.objects.get_or_create(
            slug=slug,
            defaults={
                "name": name,
                "age_category": opts["age_category"],
                "start_date": date.today(),
                "status": "active",
                "location": "Demo Arena",
            },
        )
        events = competition.ensure_events()
        self.stdout.write(f"Competencia: {competition} ({'nueva' if created else 'existente'})")

        # 2) Usuarios demo
        volunteer = ensure_demo_user("volunteer_demo", "volunteer@example.com")
        ensure_demo_user("reviewer_demo", "reviewer@example.com", reviewer=True)

        # 3) Atletas (Masters con fecha de nacimiento para el bonus por edad)
        athletes = []
        for i in range(n):
            first = FIRST_NAMES[i % len(FIRST_NAMES)]
            last = f"{LAST_NAMES[i % len(LAST_NAMES)]} Demo{i + 1}"
            dob_year = date.today().year - (rng.randint(35, 65) if competition.is_masters else rng.randint(18, 30))
            athlete, _ = Athlete.objects.get_or_create(
                first_name=first,
                last_name=last,
                defaults={
                    "country": COUNTRIES[i % len(COUNTRIES)],
                    "gender": "F" if i % 2 else "M",
                    "date_of_birth": date(dob_year, rng.randint(1, 12), rng.randint(1, 28)),
                    "club": "Club Demo",
                },
            )
            athletes.append(athlete)

        # 4) Puntuaciones pendientes
        submitted = 0
        if not opts["no_scores"]:
            for ev in events:
                for athlete in athletes:
                    if ev.preliminary_scores.filter(athlete=athlete).exists():
                        continue
                    lifecycle.submit(ev.pk, athlete.pk, random_payload(ev.discipline, rng, n), volunteer)
                    submitted += 1

        self.stdout.write(self.style.SUCCESS(
            f"OK. {len(athletes)} atletas, {len(events)} disciplinas, {submitted} puntuaciones pendientes."
        ))
        self.stdout.write("Revisor: reviewer_demo / Pass1234!")
