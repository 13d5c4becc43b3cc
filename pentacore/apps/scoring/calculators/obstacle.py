# pentacore/apps/scoring/calculators/obstacle.py
from __future__ import annotations

from ..constants import OBSTACLE_CONFIG
from .rounding import round_half_up


def calculate_obstacle(time_seconds: float, penalty_points: int = 0, is_relay: bool = False) -> int:
    """400 - round((tiempo - base) / 0.33) - penalización, mínimo 0."""
    config = OBSTACLE_CONFIG["relay" if is_relay else "individual"]
    points_from_time = round_half_up((time_seconds - config.base_time_seconds) / config.seconds_per_point)
    return max(0, config.base_points - points_from_time - (penalty_points or 0))
