# pentacore/apps/judging/services/promotion.py
"""
Promoción de una puntuación preliminar a oficial.

Todo o nada: se calcula primero (los errores de validación salen antes de
escribir), luego en una sola transacción se crea la OfficialScore y se
actualiza la preliminar con un UPDATE condicionado al estado. Si el UPDATE
no toca filas, otro revisor ganó la carrera: ConflictError y rollback.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from pentacore.apps.core.errors import ConflictError
from pentacore.apps.scoring.engine import ScoringContext, compute_points, validate_payload
from pentacore.apps.scoring.models import OfficialScore

from ..models import PreliminaryScore

logger = logging.getLogger(__name__)


def scoring_context_for(score: PreliminaryScore) -> ScoringContext:
    """Categoría y relevo salen de la competencia; el género, del atleta."""
    competition = score.event.competition
    age_category = competition.age_category or settings.PENTACORE.get("DEFAULT_AGE_CATEGORY", "Senior")
    return ScoringContext(
        age_category=age_category,
        is_relay=competition.is_relay,
        gender=score.athlete.gender or None,
    )


def promote(
    score: PreliminaryScore,
    payload: Dict[str, Any],
    reviewer,
    new_status: str,
    allowed_from: Iterable[str],
    corrected_data: Optional[Dict[str, Any]] = None,
) -> OfficialScore:
    context = scoring_context_for(score)
    validated = validate_payload(score.discipline, payload)
    points = compute_points(score.discipline, payload, context)

    allowed_from = tuple(allowed_from)
    now = timezone.now()
    try:
        with transaction.atomic():
            official = OfficialScore.objects.create(
                discipline=score.discipline,
                event_id=score.event_id,
                athlete_id=score.athlete_id,
                points=points,
                input=validated,
                age_category=context.age_category,
                is_relay=context.is_relay,
                source_id=score.pk,
            )

            updated = PreliminaryScore.objects.filter(pk=score.pk, status__in=allowed_from).update(
                status=new_status,
                official_score=official,
                corrected_data=corrected_data,
                rejection_reason="",
                verified_at=now,
                verified_by=reviewer,
            )
            if updated != 1:
                raise ConflictError(f"PreliminaryScore {score.pk} ya no está en {allowed_from}")
    except IntegrityError as exc:
        # Ya existe una oficial para (event, athlete) o para esta preliminar
        logger.warning("Promoción duplicada de PreliminaryScore %s: %s", score.pk, exc)
        raise ConflictError(
            f"Ya existe una puntuación oficial para event={score.event_id} athlete={score.athlete_id}"
        ) from exc
    except ConflictError:
        logger.warning("Conflicto al promover PreliminaryScore %s (estado cambió)", score.pk)
        raise

    logger.info(
        "PreliminaryScore %s -> %s (%s, %s pts, atleta %s)",
        score.pk,
        new_status,
        score.discipline,
        points,
        score.athlete_id,
    )
    score.refresh_from_db()
    return official
