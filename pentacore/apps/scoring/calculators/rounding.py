from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Redondeo .5 hacia +inf (igual para tablas y fórmulas de todas las disciplinas)."""
    return int(math.floor(value + 0.5))
