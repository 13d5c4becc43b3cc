# pentacore/apps/audit/services.py
"""
Escritura de auditoría, best-effort.

Se llama después de que la transición ya está confirmada: si la escritura
falla se registra en el log con todo el contexto y no se relanza.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction
from django.http import HttpRequest

from pentacore.apps.accounts.sessions import Session, actor_for, session_from_request

from .models import AuditLog, Severity

logger = logging.getLogger(__name__)


class AuditLogger:
    def log(
        self,
        event_type: str,
        action: str,
        severity: str = Severity.INFO,
        actor_id: str = "",
        actor_role: str = "",
        target_type: str = "",
        target_id: Any = "",
        details: Optional[Dict[str, Any]] = None,
        request_path: str = "",
        request_method: str = "",
    ) -> Optional[AuditLog]:
        try:
            # Savepoint propio: un fallo aquí no contamina la transacción externa
            with transaction.atomic():
                return AuditLog.objects.create(
                    event_type=event_type,
                    severity=severity,
                    action=action,
                    actor_id=str(actor_id or ""),
                    actor_role=actor_role or "",
                    target_type=target_type,
                    target_id=str(target_id if target_id is not None else ""),
                    details=details or {},
                    request_path=(request_path or "")[:255],
                    request_method=request_method or "",
                )
        except DatabaseError:
            logger.exception(
                "No se pudo escribir auditoría %s (%s %s#%s actor=%s/%s details=%r)",
                event_type,
                action,
                target_type,
                target_id,
                actor_id,
                actor_role,
                details,
            )
            return None

    def log_for_session(
        self,
        session: Optional[Session],
        event_type: str,
        action: str,
        request: Optional[HttpRequest] = None,
        **kwargs,
    ) -> Optional[AuditLog]:
        actor_id, actor_role = actor_for(session)
        if request is not None:
            kwargs.setdefault("request_path", request.path)
            kwargs.setdefault("request_method", request.method)
        return self.log(event_type, action, actor_id=actor_id, actor_role=actor_role, **kwargs)

    def log_from_request(self, request: HttpRequest, event_type: str, action: str, **kwargs) -> Optional[AuditLog]:
        return self.log_for_session(session_from_request(request), event_type, action, request=request, **kwargs)


audit_logger = AuditLogger()
