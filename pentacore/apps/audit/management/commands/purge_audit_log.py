from __future__ import annotations

from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from pentacore.apps.accounts.sessions import ROLE_SYSTEM
from pentacore.apps.audit.models import AuditEventType, AuditLog, Severity
from pentacore.apps.audit.services import audit_logger


class Command(BaseCommand):
    help = "Elimina registros de auditoría más antiguos que N días y deja constancia (ALERT)."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, required=True, help="Antigüedad mínima en días.")
        parser.add_argument("--dry-run", action="store_true", help="Solo cuenta, no borra.")

    def handle(self, *args, **opts):
        days: int = opts["days"]
        dry: bool = bool(opts["dry_run"])
        if days < 1:
            raise CommandError("--days debe ser >= 1")

        cutoff = timezone.now() - timedelta(days=days)
        qs = AuditLog.objects.filter(created_at__lt=cutoff)
        count = qs.count()

        if dry:
            self.stdout.write(f"[DRY-RUN] {count} registros anteriores a {cutoff:%Y-%m-%d %H:%M} serían eliminados.")
            return

        deleted, _ = qs.delete()
        audit_logger.log(
            AuditEventType.DATA_RETENTION_PURGE,
            "purge_audit_log",
            severity=Severity.ALERT,
            actor_id="purge_audit_log",
            actor_role=ROLE_SYSTEM,
            target_type="AuditLog",
            details={"days": days, "cutoff": cutoff.isoformat(), "deleted": deleted},
        )
        self.stdout.write(self.style.SUCCESS(f"OK. {deleted} registros de auditoría eliminados."))
