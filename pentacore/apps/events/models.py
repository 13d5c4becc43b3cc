from __future__ import annotations

from datetime import date
from typing import Optional

from django.db import models
from django.utils.text import slugify

from pentacore.apps.scoring.constants import (
    AGE_CATEGORY_CHOICES,
    DEFAULT_AGE_CATEGORY,
    DISCIPLINE_CHOICES,
    DISCIPLINE_ORDER,
)


class Competition(models.Model):
    TYPE_INDIVIDUAL = "individual"
    TYPE_RELAY = "relay"
    TYPE_TEAM = "team"
    TYPE_CHOICES = (
        (TYPE_INDIVIDUAL, "Individual"),
        (TYPE_RELAY, "Relevo"),
        (TYPE_TEAM, "Equipos"),
    )

    STATUS_CHOICES = (
        ("draft", "Borrador"),
        ("active", "En curso"),
        ("finished", "Finalizada"),
    )

    name = models.CharField(max_length=160)
    slug = models.SlugField(unique=True)
    location = models.CharField(max_length=160, blank=True)
    start_date = models.DateField(null=True, blank=True)
    age_category = models.CharField(max_length=16, choices=AGE_CATEGORY_CHOICES, default=DEFAULT_AGE_CATEGORY)
    competition_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_INDIVIDUAL)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="draft")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-start_date", "name")

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    @property
    def is_relay(self) -> bool:
        return self.competition_type == self.TYPE_RELAY

    @property
    def is_masters(self) -> bool:
        return self.age_category == "Masters"

    def ensure_events(self):
        """Crea (idempotente) un Event por disciplina, en el orden canónico."""
        events = []
        for order, discipline in enumerate(DISCIPLINE_ORDER, start=1):
            ev, _ = Event.objects.get_or_create(
                competition=self, discipline=discipline, defaults={"order": order}
            )
            events.append(ev)
        return events


class Event(models.Model):
    """Una disciplina dentro de una competencia."""

    competition = models.ForeignKey(Competition, on_delete=models.CASCADE, related_name="events")
    discipline = models.CharField(max_length=32, choices=DISCIPLINE_CHOICES)
    order = models.PositiveIntegerField(default=1, help_text="Orden de la disciplina dentro de la competencia.")
    scheduled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = (("competition", "discipline"),)
        ordering = ("competition", "order")

    def __str__(self) -> str:
        return f"{self.competition.name} · {self.get_discipline_display()}"


class Athlete(models.Model):
    GENDER_CHOICES = (
        ("M", "Masculino"),
        ("F", "Femenino"),
    )

    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    country = models.CharField(max_length=3, help_text="Código de país (COI), p.ej. CHI.")
    gender = models.CharField(max_length=1, choices=GENDER_CHOICES)
    date_of_birth = models.DateField(null=True, blank=True)
    club = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ("last_name", "first_name")

    def __str__(self) -> str:
        return f"{self.full_name} ({self.country})"

    def save(self, *args, **kwargs):
        self.country = (self.country or "").strip().upper()
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def age_on(self, when: Optional[date] = None) -> Optional[int]:
        if not self.date_of_birth:
            return None
        from pentacore.apps.scoring.calculators import calculate_age

        return calculate_age(self.date_of_birth, when)
