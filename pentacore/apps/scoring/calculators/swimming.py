# pentacore/apps/scoring/calculators/swimming.py
from __future__ import annotations

import re
from typing import Optional

from ..constants import get_swimming_config

_SWIM_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?:\.(\d{1,2}))?$")


def calculate_swimming(
    time_hundredths: int,
    penalty_points: int = 0,
    age_category: str = "Senior",
    gender: Optional[str] = None,
) -> int:
    """
    250 - floor((tiempo - base) / incremento) - penalización, mínimo 0.
    Bandas de 0.20s (estándar) o 0.50s (infantiles y Masters).
    """
    config = get_swimming_config(age_category, gender)
    points_from_time = (int(time_hundredths) - config.base_time_hundredths) // config.increment_hundredths
    points = config.base_points - points_from_time - (penalty_points or 0)
    return max(0, points)


def is_swimming_time(text: str) -> bool:
    return bool(_SWIM_TIME_RE.match((text or "").strip()))


def parse_swimming_time(text: str) -> int:
    """'01:10.00' -> 7000 centésimas. Formato inválido -> 0."""
    m = _SWIM_TIME_RE.match((text or "").strip())
    if not m:
        return 0
    minutes = int(m.group(1))
    seconds = int(m.group(2))
    hh = m.group(3) or "0"
    # "5" son 50 centésimas, "05" son 5
    hundredths = int(hh + "0" if len(hh) == 1 else hh)
    return minutes * 6000 + seconds * 100 + hundredths


def format_swimming_time(hundredths: int) -> str:
    total_seconds, rest = divmod(int(hundredths), 100)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}.{rest:02d}"
