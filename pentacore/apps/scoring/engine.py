# pentacore/apps/scoring/engine.py
"""
Motor de puntos: payload crudo -> variante validada -> calculadora -> int.

Es la única puerta de entrada a las calculadoras desde el ciclo de vida.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from pentacore.apps.core.errors import ComputationError, ScoreValidationError

from . import constants as c
from .calculators import (
    calculate_fencing_de,
    calculate_fencing_ranking,
    calculate_laser_run,
    calculate_obstacle,
    calculate_riding,
    calculate_swimming,
)
from .forms import PAYLOAD_FORMS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringContext:
    """Datos de la competencia que afectan el cálculo (no vienen del juez)."""

    age_category: str = c.DEFAULT_AGE_CATEGORY
    is_relay: bool = False
    gender: Optional[str] = None


def validate_payload(discipline: str, data: Any) -> Dict[str, Any]:
    """Valida ``data`` contra la variante cerrada de la disciplina y la devuelve normalizada."""
    form_class = PAYLOAD_FORMS.get(discipline)
    if form_class is None:
        raise ScoreValidationError(
            f"Disciplina desconocida: {discipline!r}",
            details={"discipline": [f"Disciplina desconocida: {discipline}"]},
        )
    if not isinstance(data, Mapping):
        raise ScoreValidationError(
            "El payload no es un objeto",
            details={"data": ["Se esperaba un objeto con los datos de la disciplina."]},
        )

    form = form_class(data=dict(data))
    if not form.is_valid():
        raise ScoreValidationError(
            f"Payload inválido para {discipline}",
            details={k: [str(e) for e in v] for k, v in form.errors.items()},
        )
    return form.payload()


# -------------------------------
# Despacho por disciplina
# -------------------------------
def _fencing_ranking(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_fencing_ranking(p["victories"], p["total_bouts"])


def _fencing_de(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_fencing_de(p["placement"])


def _obstacle(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_obstacle(p["time_seconds"], p["penalty_points"], is_relay=ctx.is_relay)


def _swimming(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_swimming(p["time_hundredths"], p["penalty_points"], ctx.age_category, ctx.gender)


def _laser_run(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_laser_run(
        p["finish_time_seconds"],
        p["penalty_seconds"],
        age_category=ctx.age_category,
        is_relay=ctx.is_relay,
        overall_time_seconds=p.get("overall_time_seconds"),
    )


def _riding(p: Dict[str, Any], ctx: ScoringContext) -> int:
    return calculate_riding(p["knockdowns"], p["disobediences"], p["time_over_seconds"], p["other_penalties"])


CALCULATORS: Mapping[str, Callable[[Dict[str, Any], ScoringContext], int]] = {
    c.FENCING_RANKING: _fencing_ranking,
    c.FENCING_DE: _fencing_de,
    c.OBSTACLE: _obstacle,
    c.SWIMMING: _swimming,
    c.LASER_RUN: _laser_run,
    c.RIDING: _riding,
}


def compute_points(discipline: str, raw_input: Any, context: Optional[ScoringContext] = None) -> int:
    """
    Valida y calcula los puntos MP.

    - ``ScoreValidationError`` si el payload no corresponde a la disciplina.
    - ``ComputationError`` si la calculadora produjo un valor no finito.
    """
    context = context or ScoringContext()
    payload = validate_payload(discipline, raw_input)
    points = CALCULATORS[discipline](payload, context)

    if not isinstance(points, (int, float)) or not math.isfinite(points):
        logger.error("Resultado no finito en %s: %r (payload=%r)", discipline, points, payload)
        raise ComputationError(f"Resultado no finito para {discipline}: {points!r}")
    return max(0, int(points))
