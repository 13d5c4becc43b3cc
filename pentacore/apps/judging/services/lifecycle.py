# pentacore/apps/judging/services/lifecycle.py
"""
Ciclo de vida de una puntuación preliminar.

    pending -> verified | corrected | rejected
    rejected -> corrected   (re-revisión, si PENTACORE["ALLOW_REJECTED_CORRECTION"])

Cada transición:
  1) valida entrada y estado (sin escribir nada si falla),
  2) promueve o actualiza con guarda de estado (ver ``promotion``),
  3) escribe auditoría (best-effort, después de la transición),
  4) publica un ScoreEvent al confirmar la transacción.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.http import HttpRequest
from django.utils import timezone

from pentacore.apps.accounts.sessions import session_for_user
from pentacore.apps.audit.models import AuditEventType, Severity
from pentacore.apps.audit.services import AuditLogger, audit_logger
from pentacore.apps.core.errors import ConflictError, NotFoundError, PipelineError, ScoreValidationError
from pentacore.apps.events.models import Athlete, Event
from pentacore.apps.leaderboard.broadcast import ScoreEvent, ScoreEventChannel, get_channel
from pentacore.apps.scoring.engine import validate_payload
from pentacore.apps.scoring.models import OfficialScore

from ..models import PreliminaryScore, ScoreStatus
from .promotion import promote

logger = logging.getLogger(__name__)

TARGET_TYPE = "PreliminaryScore"


# -------------------------------
# Utilidades
# -------------------------------
def _get_score(score_id: Any) -> PreliminaryScore:
    try:
        return PreliminaryScore.objects.select_related("event__competition", "athlete").get(pk=score_id)
    except (PreliminaryScore.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"PreliminaryScore {score_id!r} no existe")


def _ensure_status(score: PreliminaryScore, allowed: Iterable[str]) -> None:
    allowed = tuple(allowed)
    if score.status not in allowed:
        logger.warning("Transición inválida de PreliminaryScore %s: estado %s", score.pk, score.status)
        raise ConflictError(
            f"PreliminaryScore {score.pk} en estado {score.status}; se esperaba {allowed}",
            details={"status": score.status},
        )


def _correctable_statuses() -> tuple:
    if settings.PENTACORE.get("ALLOW_REJECTED_CORRECTION", True):
        return (ScoreStatus.PENDING, ScoreStatus.REJECTED)
    return (ScoreStatus.PENDING,)


def _publish_on_commit(channel: Optional[ScoreEventChannel], score: PreliminaryScore) -> None:
    channel = channel or get_channel()
    if channel is None:
        return
    event = ScoreEvent(
        competition_id=score.event.competition_id,
        discipline=score.discipline,
        athlete_ids=(score.athlete_id,),
    )
    transaction.on_commit(lambda: channel.publish(event))


def _audit(
    audit: Optional[AuditLogger],
    reviewer,
    request: Optional[HttpRequest],
    event_type: str,
    action: str,
    severity: str,
    score: PreliminaryScore,
    details: Dict[str, Any],
) -> None:
    (audit or audit_logger).log_for_session(
        session_for_user(reviewer),
        event_type,
        action,
        request=request,
        severity=severity,
        target_type=TARGET_TYPE,
        target_id=score.pk,
        details=details,
    )


# -------------------------------
# Carga
# -------------------------------
def submit(
    event_id: Any,
    athlete_id: Any,
    data: Any,
    submitted_by=None,
    *,
    audit: Optional[AuditLogger] = None,
    request: Optional[HttpRequest] = None,
) -> PreliminaryScore:
    """Crea una preliminar ``pending``; el payload se valida contra la disciplina del evento."""
    try:
        event = Event.objects.select_related("competition").get(pk=event_id)
    except (Event.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Event {event_id!r} no existe")
    try:
        athlete = Athlete.objects.get(pk=athlete_id)
    except (Athlete.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Athlete {athlete_id!r} no existe")

    validate_payload(event.discipline, data)

    score = PreliminaryScore.objects.create(
        discipline=event.discipline,
        event=event,
        athlete=athlete,
        data=dict(data),
        submitted_by=submitted_by,
    )
    logger.info("PreliminaryScore %s cargada (%s, atleta %s)", score.pk, score.discipline, athlete.pk)

    _audit(
        audit,
        submitted_by,
        request,
        AuditEventType.SCORE_CREATE,
        "submit",
        Severity.INFO,
        score,
        {"discipline": score.discipline, "event_id": event.pk, "athlete_id": athlete.pk, "data": score.data},
    )
    return score


# -------------------------------
# Transiciones
# -------------------------------
def verify(
    score_id: Any,
    reviewer,
    *,
    audit: Optional[AuditLogger] = None,
    channel: Optional[ScoreEventChannel] = None,
    request: Optional[HttpRequest] = None,
) -> OfficialScore:
    score = _get_score(score_id)
    _ensure_status(score, (ScoreStatus.PENDING,))

    official = promote(
        score,
        score.data,
        reviewer,
        new_status=ScoreStatus.VERIFIED,
        allowed_from=(ScoreStatus.PENDING,),
    )

    _audit(
        audit,
        reviewer,
        request,
        AuditEventType.SCORE_VERIFY,
        "verify",
        Severity.INFO,
        score,
        {"discipline": score.discipline, "points": official.points, "official_score_id": official.pk},
    )
    _publish_on_commit(channel, score)
    return official


def correct(
    score_id: Any,
    corrected_payload: Any,
    reviewer,
    *,
    audit: Optional[AuditLogger] = None,
    channel: Optional[ScoreEventChannel] = None,
    request: Optional[HttpRequest] = None,
) -> OfficialScore:
    """Sobrescritura del revisor: ``data`` queda intacto, la corrección va a ``corrected_data``."""
    score = _get_score(score_id)
    allowed = _correctable_statuses()
    _ensure_status(score, allowed)

    previous_status = score.status
    previous_reason = score.rejection_reason
    corrected = dict(corrected_payload) if isinstance(corrected_payload, dict) else corrected_payload

    official = promote(
        score,
        corrected,
        reviewer,
        new_status=ScoreStatus.CORRECTED,
        allowed_from=allowed,
        corrected_data=corrected,
    )

    details = {
        "discipline": score.discipline,
        "points": official.points,
        "official_score_id": official.pk,
        "original": score.data,
        "corrected": corrected,
        "previous_status": previous_status,
    }
    if previous_status == ScoreStatus.REJECTED:
        details["previous_rejection_reason"] = previous_reason
    _audit(audit, reviewer, request, AuditEventType.SCORE_CORRECT, "correct", Severity.WARNING, score, details)
    _publish_on_commit(channel, score)
    return official


def reject(
    score_id: Any,
    reason: Any,
    reviewer,
    *,
    audit: Optional[AuditLogger] = None,
    request: Optional[HttpRequest] = None,
) -> PreliminaryScore:
    reason = reason.strip() if isinstance(reason, str) else ""
    if not reason:
        raise ScoreValidationError("Motivo de rechazo vacío", details={"reason": ["Debe indicar un motivo."]})

    score = _get_score(score_id)
    _ensure_status(score, (ScoreStatus.PENDING,))

    updated = PreliminaryScore.objects.filter(pk=score.pk, status=ScoreStatus.PENDING).update(
        status=ScoreStatus.REJECTED,
        rejection_reason=reason,
        verified_at=timezone.now(),
        verified_by=reviewer,
    )
    if updated != 1:
        logger.warning("Conflicto al rechazar PreliminaryScore %s (estado cambió)", score.pk)
        raise ConflictError(f"PreliminaryScore {score.pk} ya no está pendiente")

    score.refresh_from_db()
    logger.info("PreliminaryScore %s -> rejected", score.pk)

    _audit(
        audit,
        reviewer,
        request,
        AuditEventType.SCORE_REJECT,
        "reject",
        Severity.INFO,
        score,
        {"discipline": score.discipline, "reason": reason},
    )
    return score


def bulk_verify(
    competition_id: Any,
    score_ids: Iterable[Any],
    reviewer,
    *,
    audit: Optional[AuditLogger] = None,
    channel: Optional[ScoreEventChannel] = None,
    request: Optional[HttpRequest] = None,
) -> Dict[str, Any]:
    """
    Verifica cada id por separado. Los que no se pueden verificar (otro
    estado, otra competencia, payload inválido) quedan en ``errors``.
    """
    results: List[Dict[str, Any]] = []
    errors: List[Dict[str, Any]] = []

    for score_id in score_ids:
        try:
            belongs = PreliminaryScore.objects.filter(pk=score_id, event__competition_id=competition_id).exists()
        except (ValueError, TypeError):
            belongs = False
        if not belongs:
            errors.append({"id": score_id, "code": NotFoundError.code, "error": "No pertenece a la competencia"})
            continue

        try:
            official = verify(score_id, reviewer, audit=audit, channel=channel, request=request)
        except PipelineError as exc:
            errors.append({"id": score_id, "code": exc.code, "error": exc.client_message})
            continue
        results.append({"id": score_id, "official_score_id": official.pk, "points": official.points})

    logger.info(
        "Verificación masiva competencia %s: %s ok, %s con error", competition_id, len(results), len(errors)
    )
    return {"verified": len(results), "failed": len(errors), "results": results, "errors": errors}
