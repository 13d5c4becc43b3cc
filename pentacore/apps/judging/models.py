# pentacore/apps/judging/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from pentacore.apps.scoring.constants import DISCIPLINE_CHOICES


class ScoreStatus(models.TextChoices):
    PENDING = "pending", "Pendiente"
    VERIFIED = "verified", "Verificada"
    CORRECTED = "corrected", "Corregida"
    REJECTED = "rejected", "Rechazada"


# Estados con puntuación oficial asociada
PROMOTED_STATUSES = (ScoreStatus.VERIFIED, ScoreStatus.CORRECTED)


class PreliminaryScore(models.Model):
    """
    Resultado cargado en cancha por un voluntario, pendiente de revisión.

    ``data`` es el payload original y nunca se modifica; una corrección
    queda en ``corrected_data``. ``official_score`` existe si y solo si el
    estado es verified/corrected (lo garantiza también la BD).
    """

    discipline = models.CharField(max_length=32, choices=DISCIPLINE_CHOICES)
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="preliminary_scores")
    athlete = models.ForeignKey("events.Athlete", on_delete=models.CASCADE, related_name="preliminary_scores")

    data = models.JSONField()
    status = models.CharField(max_length=16, choices=ScoreStatus.choices, default=ScoreStatus.PENDING)
    corrected_data = models.JSONField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default="")

    official_score = models.OneToOneField(
        "scoring.OfficialScore",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    submitted_at = models.DateTimeField(default=timezone.now, editable=False)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="submitted_scores",
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_scores",
    )

    class Meta:
        ordering = ("-submitted_at", "id")
        indexes = [
            models.Index(fields=["event", "status"], name="prelim_event_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status__in=["verified", "corrected"], official_score__isnull=False)
                    | (~Q(status__in=["verified", "corrected"]) & Q(official_score__isnull=True))
                ),
                name="prelim_official_iff_promoted",
            ),
        ]

    def __str__(self) -> str:
        return f"#{self.pk} {self.athlete} · {self.get_discipline_display()} [{self.status}]"

    @property
    def is_terminal(self) -> bool:
        return self.status != ScoreStatus.PENDING

    @property
    def effective_data(self):
        """Payload que cuenta: la corrección si existe, si no el original."""
        return self.corrected_data if self.corrected_data is not None else self.data
