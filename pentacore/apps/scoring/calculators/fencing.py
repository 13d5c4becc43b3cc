# pentacore/apps/scoring/calculators/fencing.py
from __future__ import annotations

from typing import List, NamedTuple, Tuple

from ..constants import (
    FENCING_BASE_POINTS,
    FENCING_DE_PLACEMENT_POINTS,
    FENCING_FALLBACK_RATIO,
    FENCING_VICTORY_VALUE_TABLE,
)
from .rounding import round_half_up


class FencingRankingParams(NamedTuple):
    total_bouts: int
    victories_for_250: int
    value_per_victory: int


def _victory_values(total_bouts: int) -> Tuple[int, int]:
    """
    Tabla UIPM si existe; si no, fórmula de respaldo:
        victorias_250 = round(bouts * 0.70)
        valor = round(250 / victorias_250)   (0 si victorias_250 == 0)
    """
    entry = FENCING_VICTORY_VALUE_TABLE.get(total_bouts)
    if entry is not None:
        return entry.victories_for_250, entry.value_per_victory

    victories_for_250 = round_half_up(total_bouts * FENCING_FALLBACK_RATIO)
    if victories_for_250 <= 0:
        return 0, 0
    return victories_for_250, round_half_up(FENCING_BASE_POINTS / victories_for_250)


def calculate_fencing_ranking(victories: int, total_bouts: int) -> int:
    """
    Puntos MP del ranking round:
        250 + (victorias - victorias_250) * valor_por_victoria, mínimo 0.
    Sin asaltos válidos (total_bouts <= 0) no hay ranking round: 0.
    """
    if total_bouts <= 0:
        return 0

    victories_for_250, value_per_victory = _victory_values(total_bouts)
    if victories_for_250 == 0:
        return 0

    points = FENCING_BASE_POINTS + (victories - victories_for_250) * value_per_victory
    return max(0, points)


def get_fencing_ranking_params(num_competitors: int) -> FencingRankingParams:
    """Parámetros del pool para mostrar/validar (independiente del resultado de un atleta)."""
    total_bouts = num_competitors - 1
    if total_bouts <= 0:
        return FencingRankingParams(total_bouts, 0, 0)
    victories_for_250, value_per_victory = _victory_values(total_bouts)
    return FencingRankingParams(total_bouts, victories_for_250, value_per_victory)


def calculate_fencing_de(placement: int) -> int:
    # Fuera de tabla (eliminado en el asalto inicial) = 0
    if placement <= 0:
        return 0
    return FENCING_DE_PLACEMENT_POINTS.get(placement, 0)


def get_all_de_placements() -> List[Tuple[int, int]]:
    return sorted(FENCING_DE_PLACEMENT_POINTS.items())
