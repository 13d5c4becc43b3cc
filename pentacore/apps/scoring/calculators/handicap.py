# pentacore/apps/scoring/calculators/handicap.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from ..constants import (
    HANDICAP_PACK_START_THRESHOLD_SECONDS,
    HANDICAP_PACK_START_TIME_SECONDS,
    get_masters_handicap_bonus,
)
from .laser_run import format_laser_run_time


@dataclass
class HandicapAthlete:
    athlete_id: int
    athlete_name: str
    cumulative_points: int


@dataclass
class HandicapStart:
    athlete_id: int
    athlete_name: str
    cumulative_points: int
    raw_delay: int
    start_delay: int
    is_pack_start: bool
    shooting_station: int
    gate_assignment: str
    start_time: str


def calculate_handicap_starts(athletes: Iterable[HandicapAthlete]) -> List[HandicapStart]:
    """
    Salidas con hándicap del Laser Run:
      1) líder = máximo de puntos acumulados
      2) retraso = puntos_líder - puntos_atleta (1 punto = 1 segundo)
      3) retraso > 90s -> salida en pack a 1:30
      4) orden por retraso (pack al final, por retraso bruto)
      5) estación = posición; puertas A/B alternadas (pack en A)
    """
    athletes = list(athletes)
    if not athletes:
        return []

    leader = max(a.cumulative_points for a in athletes)

    rows = []
    for a in athletes:
        raw_delay = leader - a.cumulative_points
        is_pack = raw_delay > HANDICAP_PACK_START_THRESHOLD_SECONDS
        start_delay = HANDICAP_PACK_START_TIME_SECONDS if is_pack else raw_delay
        rows.append((a, raw_delay, start_delay, is_pack))

    # sorted() es estable: empates conservan el orden de entrada
    rows.sort(key=lambda r: (r[3], r[1]))

    out: List[HandicapStart] = []
    for idx, (a, raw_delay, start_delay, is_pack) in enumerate(rows):
        gate = "A" if is_pack or idx % 2 == 0 else "B"
        out.append(
            HandicapStart(
                athlete_id=a.athlete_id,
                athlete_name=a.athlete_name,
                cumulative_points=a.cumulative_points,
                raw_delay=raw_delay,
                start_delay=start_delay,
                is_pack_start=is_pack,
                shooting_station=idx + 1,
                gate_assignment=gate,
                start_time=format_laser_run_time(start_delay),
            )
        )
    return out


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def apply_masters_handicap(total_points: int, age: int) -> Tuple[int, int]:
    """Devuelve (total_ajustado, bonus). Edad base 40 = sin bonus."""
    bonus = get_masters_handicap_bonus(age)
    return total_points + bonus, bonus
