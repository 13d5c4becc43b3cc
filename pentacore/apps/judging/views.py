# pentacore/apps/judging/views.py
from __future__ import annotations

from typing import Any, Dict, Optional

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from pentacore.apps.core.errors import NotFoundError, ScoreValidationError
from pentacore.apps.core.http import api_view, login_required_json, read_json_body, reviewer_required
from pentacore.apps.events.models import Competition
from pentacore.apps.scoring.models import OfficialScore

from .models import PreliminaryScore, ScoreStatus
from .services import lifecycle


# -------------------------------
# Serialización
# -------------------------------
def _score_dict(score: PreliminaryScore) -> Dict[str, Any]:
    return {
        "id": score.pk,
        "discipline": score.discipline,
        "event_id": score.event_id,
        "athlete_id": score.athlete_id,
        "athlete": score.athlete.full_name,
        "data": score.data,
        "status": score.status,
        "corrected_data": score.corrected_data,
        "rejection_reason": score.rejection_reason or None,
        "official_score_id": score.official_score_id,
        "submitted_at": score.submitted_at.isoformat() if score.submitted_at else None,
        "submitted_by": score.submitted_by_id,
        "verified_at": score.verified_at.isoformat() if score.verified_at else None,
        "verified_by": score.verified_by_id,
    }


def _official_dict(official: OfficialScore) -> Dict[str, Any]:
    return {
        "id": official.pk,
        "discipline": official.discipline,
        "event_id": official.event_id,
        "athlete_id": official.athlete_id,
        "points": official.points,
        "age_category": official.age_category,
        "is_relay": official.is_relay,
        "preliminary_score_id": official.source_id,
    }


def _get_competition(competition_id: int) -> Competition:
    try:
        return Competition.objects.get(pk=competition_id)
    except Competition.DoesNotExist:
        raise NotFoundError(f"Competition {competition_id} no existe")


# -------------------------------
# Carga en cancha (voluntarios)
# -------------------------------
@require_POST
@login_required_json
@api_view
def submit_score(request: HttpRequest):
    body = read_json_body(request)
    missing = [k for k in ("event_id", "athlete_id", "data") if k not in body]
    if missing:
        raise ScoreValidationError("Faltan campos", details={k: ["Campo requerido."] for k in missing})

    score = lifecycle.submit(body["event_id"], body["athlete_id"], body["data"], request.user, request=request)
    return JsonResponse({"score": _score_dict(score)}, status=201)


# -------------------------------
# Revisión
# -------------------------------
@require_POST
@reviewer_required
@api_view
def verify_score(request: HttpRequest, score_id: int):
    official = lifecycle.verify(score_id, request.user, request=request)
    return JsonResponse({"official_score": _official_dict(official)})


@require_POST
@reviewer_required
@api_view
def correct_score(request: HttpRequest, score_id: int):
    body = read_json_body(request)
    if "data" not in body:
        raise ScoreValidationError("Falta data", details={"data": ["Campo requerido."]})
    official = lifecycle.correct(score_id, body["data"], request.user, request=request)
    return JsonResponse({"official_score": _official_dict(official)})


@require_POST
@reviewer_required
@api_view
def reject_score(request: HttpRequest, score_id: int):
    body = read_json_body(request)
    score = lifecycle.reject(score_id, body.get("reason"), request.user, request=request)
    return JsonResponse({"score": _score_dict(score)})


@require_GET
@reviewer_required
@api_view
def preliminary_scores(request: HttpRequest, competition_id: int):
    """Listado para revisión: ``?status=pending&event=<id>``."""
    competition = _get_competition(competition_id)
    qs = PreliminaryScore.objects.filter(event__competition=competition).select_related("athlete")

    status: Optional[str] = request.GET.get("status")
    if status:
        if status not in ScoreStatus.values:
            raise ScoreValidationError("Estado inválido", details={"status": [f"Valores: {', '.join(ScoreStatus.values)}"]})
        qs = qs.filter(status=status)

    event_id = request.GET.get("event")
    if event_id:
        if not event_id.isdigit():
            raise ScoreValidationError("Evento inválido", details={"event": ["Debe ser un id numérico."]})
        qs = qs.filter(event_id=int(event_id))

    scores = [_score_dict(s) for s in qs.order_by("submitted_at", "id")]
    return JsonResponse({"competition": competition.slug, "count": len(scores), "scores": scores})


@require_POST
@reviewer_required
@api_view
def bulk_verify(request: HttpRequest, competition_id: int):
    competition = _get_competition(competition_id)
    body = read_json_body(request)
    ids = body.get("ids")
    if not isinstance(ids, list) or not ids:
        raise ScoreValidationError("Lista de ids vacía", details={"ids": ["Debe ser una lista no vacía."]})

    summary = lifecycle.bulk_verify(competition.pk, ids, request.user, request=request)
    return JsonResponse(summary)
