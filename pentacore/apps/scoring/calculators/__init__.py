# Calculadoras puras por disciplina (sin acceso a BD)
from .fencing import (
    FencingRankingParams,
    calculate_fencing_de,
    calculate_fencing_ranking,
    get_all_de_placements,
    get_fencing_ranking_params,
)
from .handicap import (
    HandicapAthlete,
    HandicapStart,
    apply_masters_handicap,
    calculate_age,
    calculate_handicap_starts,
)
from .laser_run import (
    aggregate_laser_run_timer,
    calculate_laser_run,
    format_laser_run_time,
    is_laser_run_time,
    parse_laser_run_time,
)
from .obstacle import calculate_obstacle
from .riding import calculate_riding
from .swimming import calculate_swimming, format_swimming_time, parse_swimming_time
from .team import TeamMember, TeamStanding, calculate_team_standings
from .fencing_de_bracket import (
    DEBracket,
    DEMatch,
    DESeed,
    advance_winner,
    bracket_stats,
    calculate_final_placements,
    de_points,
    generate_de_bracket,
    generate_seed_positions,
    get_round_name,
    get_tableau_size,
    is_bracket_complete,
)
