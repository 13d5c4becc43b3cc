from __future__ import annotations

from django.db import models


class AuditEventType(models.TextChoices):
    SCORE_CREATE = "SCORE_CREATE", "Puntuación cargada"
    SCORE_VERIFY = "SCORE_VERIFY", "Puntuación verificada"
    SCORE_CORRECT = "SCORE_CORRECT", "Puntuación corregida"
    SCORE_REJECT = "SCORE_REJECT", "Puntuación rechazada"
    DATA_RETENTION_PURGE = "DATA_RETENTION_PURGE", "Purga por retención"


class Severity(models.TextChoices):
    INFO = "INFO", "Info"
    WARNING = "WARNING", "Warning"
    ALERT = "ALERT", "Alert"
    CRITICAL = "CRITICAL", "Critical"


class AuditLog(models.Model):
    """Registro append-only de acciones sobre puntuaciones."""

    event_type = models.CharField(max_length=40, choices=AuditEventType.choices)
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.INFO)
    action = models.CharField(max_length=120)

    actor_id = models.CharField(max_length=64, blank=True, default="")
    actor_role = models.CharField(max_length=32, blank=True, default="")

    target_type = models.CharField(max_length=64, blank=True, default="")
    target_id = models.CharField(max_length=64, blank=True, default="")
    details = models.JSONField(default=dict, blank=True)

    request_path = models.CharField(max_length=255, blank=True, default="")
    request_method = models.CharField(max_length=10, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="audit_target_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.severity}] {self.event_type} {self.target_type}#{self.target_id}"
