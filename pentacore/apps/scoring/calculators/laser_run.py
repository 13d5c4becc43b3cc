# pentacore/apps/scoring/calculators/laser_run.py
from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Union

from ..constants import LASER_RUN_BASE_POINTS, get_laser_run_target_time
from .rounding import round_half_up

Number = Union[int, float]

# M:SS, MM:SS, MM:SS.ff (también M:S por comodidad)
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?:\.(\d{1,2}))?$")
# Número plano estricto (para validar) y prefijo numérico ("525s" -> 525)
_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def calculate_laser_run(
    finish_time_seconds: Number,
    penalty_seconds: Number = 0,
    age_category: str = "Senior",
    is_relay: bool = False,
    overall_time_seconds: Optional[Number] = None,
) -> int:
    """
    Puntos MP de Laser Run:
        500 + (objetivo - tiempo) - penalización

    1 segundo = 1 punto, así que tiempo y penalización se suman en la misma
    unidad y se redondea una sola vez al final. Mínimo 0.
    Con salida en masa el tiempo total del cronómetro (overall) manda.
    """
    effective_time = overall_time_seconds if overall_time_seconds is not None else finish_time_seconds
    target = get_laser_run_target_time(age_category, is_relay)

    points = LASER_RUN_BASE_POINTS + (target - effective_time) - (penalty_seconds or 0)
    return max(0, round_half_up(points))


def is_laser_run_time(text: str) -> bool:
    """True si el texto es un tiempo M:SS(.ff) o un número plano."""
    value = (text or "").strip()
    return bool(_TIME_RE.match(value) or _NUMBER_RE.match(value))


def parse_laser_run_time(text: str) -> Number:
    """
    'M:SS' / 'MM:SS' / 'MM:SS.ff' -> segundos.
    Si no calza, usa el número con que empieza el texto ("525s" -> 525);
    si no hay ninguno, 0. Nunca lanza.
    """
    value = (text or "").strip()
    m = _TIME_RE.match(value)
    if not m:
        lead = _LEADING_NUMBER_RE.match(value)
        if not lead:
            return 0
        num = float(lead.group(0))
        return num if math.isfinite(num) else 0

    minutes = int(m.group(1))
    seconds = int(m.group(2))
    total = minutes * 60 + seconds
    if m.group(3):
        return total + float(f"0.{m.group(3)}")
    return total


def format_laser_run_time(total_seconds: Number) -> str:
    # Redondeamos antes de separar para no producir "0:60"
    total = max(0, round_half_up(total_seconds))
    minutes, seconds = divmod(total, 60)
    return f"{minutes}:{seconds:02d}"


def aggregate_laser_run_timer(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Agrega los datos crudos del cronómetro de Laser Run.

    ``data`` trae ``overall_time_seconds``, ``start_mode`` (staggered/mass),
    ``handicap_start_delay``, ``laps`` [{lap, split_timestamp, type}] y
    ``shoot_times`` [{visit, shoot_time_seconds, timed_out}].
    """
    overall = data.get("overall_time_seconds") or 0
    shoot_times = data.get("shoot_times") or []
    laps = data.get("laps") or []
    start_mode = data.get("start_mode") or "staggered"
    delay = data.get("handicap_start_delay") or 0

    total_shoot = sum(st.get("shoot_time_seconds") or 0 for st in shoot_times)
    adjusted = overall - delay if start_mode == "mass" else None

    rows: List[Dict[str, Any]] = []
    prev_split = 0
    shoot_idx = 0
    for lap in laps:
        split = lap.get("split_timestamp") or 0
        lap_time = split - prev_split
        prev_split = split

        shoot_time = None
        if lap.get("type") == "shoot":
            if shoot_idx < len(shoot_times):
                shoot_time = shoot_times[shoot_idx].get("shoot_time_seconds")
            shoot_idx += 1

        rows.append(
            {
                "lap": lap.get("lap"),
                "split_timestamp": split,
                "lap_time_seconds": lap_time,
                "type": lap.get("type"),
                "shoot_time_seconds": shoot_time,
                "run_time_seconds": lap_time - shoot_time if shoot_time is not None else lap_time,
            }
        )

    return {
        "overall_time_seconds": overall,
        "adjusted_time_seconds": adjusted,
        "total_shoot_time_seconds": total_shoot,
        "total_run_time_seconds": overall - total_shoot,
        "penalty_seconds": 0,
        "start_mode": start_mode,
        "total_laps": data.get("total_laps", len(laps)),
        "laps": rows,
        "handicap_start_delay": delay,
        "is_pack_start": bool(data.get("is_pack_start")),
        "gate_assignment": data.get("gate_assignment") or "A",
    }
