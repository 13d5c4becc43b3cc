# pentacore/apps/scoring/constants.py
"""
Tablas de referencia UIPM. Solo lectura, cargadas una vez por proceso.
"""
from __future__ import annotations

from typing import Dict, NamedTuple, Optional, Tuple

# ---------------------------------
# Categorías de edad / disciplinas
# ---------------------------------
AGE_CATEGORIES = ("U9", "U11", "U13", "U15", "U17", "U19", "Junior", "Senior", "Masters")
AGE_CATEGORY_CHOICES = tuple((c, c) for c in AGE_CATEGORIES)
DEFAULT_AGE_CATEGORY = "Senior"

FENCING_RANKING = "fencing_ranking"
FENCING_DE = "fencing_de"
OBSTACLE = "obstacle"
SWIMMING = "swimming"
LASER_RUN = "laser_run"
RIDING = "riding"

DISCIPLINE_NAMES: Dict[str, str] = {
    FENCING_RANKING: "Fencing - Ranking",
    FENCING_DE: "Fencing - DE",
    OBSTACLE: "Obstacle",
    SWIMMING: "Swimming",
    LASER_RUN: "Laser Run",
    RIDING: "Riding",
}

DISCIPLINE_ORDER: Tuple[str, ...] = (FENCING_RANKING, FENCING_DE, OBSTACLE, SWIMMING, LASER_RUN, RIDING)
DISCIPLINE_CHOICES = tuple((d, DISCIPLINE_NAMES[d]) for d in DISCIPLINE_ORDER)


# ---------------------------------
# Esgrima: ranking round
# total_bouts -> (victorias para 250, valor por victoria)
# ---------------------------------
class VictoryValue(NamedTuple):
    victories_for_250: int
    value_per_victory: int


FENCING_VICTORY_VALUE_TABLE: Dict[int, VictoryValue] = {
    60: VictoryValue(42, 3),
    59: VictoryValue(41, 3),
    58: VictoryValue(41, 3),
    57: VictoryValue(40, 3),
    56: VictoryValue(39, 3),
    55: VictoryValue(39, 3),
    54: VictoryValue(38, 3),
    53: VictoryValue(37, 3),
    52: VictoryValue(36, 3),
    51: VictoryValue(36, 3),
    50: VictoryValue(35, 3),
    49: VictoryValue(34, 3),
    48: VictoryValue(34, 3),
    47: VictoryValue(33, 4),
    46: VictoryValue(32, 4),
    45: VictoryValue(32, 4),
    44: VictoryValue(31, 4),
    43: VictoryValue(30, 4),
    42: VictoryValue(29, 4),
    41: VictoryValue(29, 4),
    40: VictoryValue(28, 4),
    39: VictoryValue(27, 5),
    38: VictoryValue(27, 5),
    37: VictoryValue(26, 5),
    36: VictoryValue(25, 5),
    35: VictoryValue(25, 5),
    34: VictoryValue(24, 5),
    33: VictoryValue(23, 6),
    32: VictoryValue(22, 6),
    31: VictoryValue(22, 6),
    30: VictoryValue(21, 6),
    29: VictoryValue(20, 7),
    28: VictoryValue(20, 7),
    27: VictoryValue(19, 7),
    26: VictoryValue(18, 7),
    25: VictoryValue(18, 7),
    24: VictoryValue(17, 7),
    23: VictoryValue(16, 7),
    22: VictoryValue(15, 8),
    21: VictoryValue(15, 8),
    20: VictoryValue(14, 8),
    19: VictoryValue(13, 8),
}

# Fórmula de respaldo fuera de tabla
FENCING_FALLBACK_RATIO = 0.70
FENCING_BASE_POINTS = 250

# ---------------------------------
# Esgrima: eliminación directa (puesto -> puntos)
# ---------------------------------
FENCING_DE_PLACEMENT_POINTS: Dict[int, int] = {
    1: 250,
    2: 244,
    3: 238,
    4: 236,
    5: 230,
    6: 228,
    7: 226,
    8: 224,
    9: 218,
    10: 216,
    11: 214,
    12: 212,
    13: 210,
    14: 208,
    15: 206,
    16: 204,
    17: 198,
    18: 196,
}


# ---------------------------------
# Obstáculos
# ---------------------------------
class ObstacleConfig(NamedTuple):
    base_time_seconds: float
    base_points: int
    seconds_per_point: float


OBSTACLE_CONFIG: Dict[str, ObstacleConfig] = {
    "individual": ObstacleConfig(15.0, 400, 0.33),
    "relay": ObstacleConfig(35.0, 400, 0.33),
}


# ---------------------------------
# Natación (centésimas)
# ---------------------------------
class SwimmingConfig(NamedTuple):
    distance_meters: int
    base_time_hundredths: int
    base_points: int
    increment_hundredths: int


SWIMMING_CONFIG: Dict[str, SwimmingConfig] = {
    # Senior, Junior, U19, U17, U15, U13: 100m, 1:10.00 = 250, ±1 por 0.20s
    "standard": SwimmingConfig(100, 7000, 250, 20),
    # U11, U9: 50m, 0:45.00 = 250, ±1 por 0.50s
    "youth": SwimmingConfig(50, 4500, 250, 50),
    # Masters 30+/40+/50+
    "masters_M": SwimmingConfig(100, 7800, 250, 50),
    "masters_F": SwimmingConfig(100, 9000, 250, 50),
    # Masters 60+/70+ (sin grupo de edad propio todavía)
    "masters_60_M": SwimmingConfig(50, 3800, 250, 50),
    "masters_60_F": SwimmingConfig(50, 4300, 250, 50),
}


def get_swimming_config(age_category: str, gender: Optional[str] = None) -> SwimmingConfig:
    if age_category in ("U9", "U11"):
        return SWIMMING_CONFIG["youth"]
    if age_category == "Masters":
        # Sin género informado se asume masculino
        return SWIMMING_CONFIG["masters_F"] if gender == "F" else SWIMMING_CONFIG["masters_M"]
    return SWIMMING_CONFIG["standard"]


# ---------------------------------
# Laser Run: tiempos objetivo
# ---------------------------------
class LaserRunTarget(NamedTuple):
    age_group: str
    total_distance_meters: int
    running_sequences: str
    shooting_sequences: str
    target_time_seconds: int


SENIOR_GROUP = "Senior, Junior, U19"

LASER_RUN_INDIVIDUAL_TARGETS: Tuple[LaserRunTarget, ...] = (
    LaserRunTarget(SENIOR_GROUP, 3000, "4 x 600m", "4 x 5 hits", 800),  # 13:20
    LaserRunTarget("U17", 2400, "3 x 600m", "3 x 5 hits", 630),  # 10:30
    LaserRunTarget("U15", 1800, "3 x 600m", "3 x 5 hits", 460),  # 7:40
    LaserRunTarget("U13", 900, "2 x 300m", "2 x 5 hits", 320),  # 5:20
    LaserRunTarget("U11", 600, "2 x 300m", "2 x 5 hits", 240),  # 4:00
    LaserRunTarget("U9", 600, "2 x 300m", "2 x 5 hits", 240),
)

LASER_RUN_RELAY_TARGETS: Tuple[LaserRunTarget, ...] = (
    LaserRunTarget(SENIOR_GROUP, 3600, "2 x 3 x 600m", "2 x 3 x 5 hits", 800),
    LaserRunTarget("U17", 2400, "2 x 2 x 600m", "2 x 2 x 5 hits", 460),
    LaserRunTarget("U15", 2400, "2 x 2 x 600m", "2 x 2 x 5 hits", 460),
    LaserRunTarget("U13", 1200, "2 x 2 x 300m", "2 x 2 x 5 hits", 320),
    LaserRunTarget("U11", 1200, "2 x 2 x 300m", "2 x 2 x 5 hits", 320),
    LaserRunTarget("U9", 1200, "2 x 2 x 300m", "2 x 2 x 5 hits", 320),
)

# Masters usa las bases Senior
LASER_RUN_AGE_GROUPS: Dict[str, str] = {
    "Senior": SENIOR_GROUP,
    "Junior": SENIOR_GROUP,
    "U19": SENIOR_GROUP,
    "U17": "U17",
    "U15": "U15",
    "U13": "U13",
    "U11": "U11",
    "U9": "U9",
    "Masters": SENIOR_GROUP,
}

LASER_RUN_BASE_POINTS = 500
LASER_RUN_DEFAULT_TARGET_SECONDS = 800


def get_laser_run_config(age_category: str, is_relay: bool = False) -> Optional[LaserRunTarget]:
    targets = LASER_RUN_RELAY_TARGETS if is_relay else LASER_RUN_INDIVIDUAL_TARGETS
    group = LASER_RUN_AGE_GROUPS.get(age_category, SENIOR_GROUP)
    for t in targets:
        if t.age_group == group:
            return t
    return None


def get_laser_run_target_time(age_category: str, is_relay: bool = False) -> int:
    config = get_laser_run_config(age_category, is_relay)
    return config.target_time_seconds if config else LASER_RUN_DEFAULT_TARGET_SECONDS


# ---------------------------------
# Salida con hándicap (Laser Run)
# ---------------------------------
HANDICAP_PACK_START_THRESHOLD_SECONDS = 90
HANDICAP_PACK_START_TIME_SECONDS = 90  # 1:30


# ---------------------------------
# Hípica (solo Masters)
# ---------------------------------
class RidingConfig(NamedTuple):
    base_points: int
    knockdown_penalty: int
    disobedience_penalty: int
    time_over_penalty_per_second: int
    other_penalty: int


RIDING_CONFIG = RidingConfig(300, 7, 10, 1, 10)


# ---------------------------------
# Hándicap Masters por edad (base 40 = 0)
# ---------------------------------
MASTERS_HANDICAP_BASE_AGE = 40


def get_masters_handicap_bonus(age: int) -> int:
    # Interpolación: 30 = -50, 40 = 0, 50 = +50, 60 = +150, 70 = +300
    if age <= 30:
        return -50 + (age - 30) * 5
    if age <= 50:
        return (age - MASTERS_HANDICAP_BASE_AGE) * 5
    if age <= 60:
        return 50 + (age - 50) * 10
    return 150 + (age - 60) * 15
