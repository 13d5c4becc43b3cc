# pentacore/apps/scoring/calculators/riding.py
from __future__ import annotations

from ..constants import RIDING_CONFIG


def calculate_riding(
    knockdowns: int = 0,
    disobediences: int = 0,
    time_over_seconds: int = 0,
    other_penalties: int = 0,
) -> int:
    """300 menos penalizaciones (derribo 7, desobediencia 10, 1/seg excedido, otras 10)."""
    c = RIDING_CONFIG
    total_penalty = (
        knockdowns * c.knockdown_penalty
        + disobediences * c.disobedience_penalty
        + time_over_seconds * c.time_over_penalty_per_second
        + other_penalties * c.other_penalty
    )
    return max(0, c.base_points - total_penalty)
