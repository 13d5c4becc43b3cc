from __future__ import annotations

from django.db import models

from pentacore.apps.core.errors import ConflictError

from .constants import AGE_CATEGORY_CHOICES, DISCIPLINE_CHOICES


class OfficialScore(models.Model):
    """
    Puntuación oficial: se crea una sola vez al promover una preliminar
    y no vuelve a modificarse.
    """

    discipline = models.CharField(max_length=32, choices=DISCIPLINE_CHOICES)
    event = models.ForeignKey("events.Event", on_delete=models.PROTECT, related_name="official_scores")
    athlete = models.ForeignKey("events.Athlete", on_delete=models.PROTECT, related_name="official_scores")
    points = models.PositiveIntegerField()
    input = models.JSONField(help_text="Payload validado que produjo los puntos.")
    age_category = models.CharField(max_length=16, choices=AGE_CATEGORY_CHOICES)
    is_relay = models.BooleanField(default=False)
    source = models.OneToOneField(
        "judging.PreliminaryScore",
        on_delete=models.PROTECT,
        related_name="promoted",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "athlete"], name="official_score_unique_event_athlete"),
        ]
        ordering = ("event_id", "-points")

    def __str__(self) -> str:
        return f"{self.athlete} · {self.get_discipline_display()} = {self.points}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ConflictError(f"OfficialScore {self.pk} es inmutable")
        super().save(*args, **kwargs)
