# pentacore/apps/leaderboard/services.py
"""
Clasificaciones a partir de puntuaciones oficiales (solo lectura).
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from django.utils import timezone

from pentacore.apps.events.models import Competition
from pentacore.apps.scoring.calculators import (
    DESeed,
    HandicapAthlete,
    TeamMember,
    apply_masters_handicap,
    bracket_stats,
    calculate_handicap_starts,
    calculate_team_standings,
    generate_de_bracket,
    get_round_name,
)
from pentacore.apps.scoring.constants import DISCIPLINE_ORDER, FENCING_RANKING, LASER_RUN
from pentacore.apps.scoring.models import OfficialScore


def _official_scores(competition: Competition):
    return (
        OfficialScore.objects.filter(event__competition=competition)
        .select_related("athlete")
        .order_by("athlete_id", "event__order")
    )


def competition_standings(competition: Competition) -> List[Dict[str, Any]]:
    """
    Una fila por atleta con puntos por disciplina y total, ordenada por total.
    En Masters se suma el bonus por edad si se conoce la fecha de nacimiento.
    """
    rows: Dict[int, Dict[str, Any]] = {}
    for os_ in _official_scores(competition):
        a = os_.athlete
        row = rows.get(a.pk)
        if row is None:
            row = rows[a.pk] = {
                "athlete_id": a.pk,
                "name": a.full_name,
                "country": a.country,
                "gender": a.gender,
                "disciplines": {},
                "raw_total": 0,
                "masters_bonus": 0,
                "total": 0,
                "_athlete": a,
            }
        row["disciplines"][os_.discipline] = os_.points
        row["raw_total"] += os_.points

    when = competition.start_date or timezone.localdate()
    out: List[Dict[str, Any]] = []
    for row in rows.values():
        athlete = row.pop("_athlete")
        row["total"] = row["raw_total"]
        if competition.is_masters:
            age = athlete.age_on(when)
            if age is not None:
                row["total"], row["masters_bonus"] = apply_masters_handicap(row["raw_total"], age)
        # Columnas en orden canónico ("-" si no hay puntuación)
        row["cells"] = [row["disciplines"].get(d, "-") for d in DISCIPLINE_ORDER]
        out.append(row)

    out.sort(key=lambda r: (-r["total"], r["name"]))

    # Empates comparten puesto (1, 1, 3 ...)
    prev_total, prev_rank = None, 0
    for idx, row in enumerate(out, start=1):
        if row["total"] != prev_total:
            prev_rank = idx
            prev_total = row["total"]
        row["rank"] = prev_rank
    return out


def team_standings(competition: Competition) -> List[Dict[str, Any]]:
    members = [
        TeamMember(athlete_id=r["athlete_id"], athlete_name=r["name"], country=r["country"], total_points=r["total"])
        for r in competition_standings(competition)
    ]
    return [asdict(t) for t in calculate_team_standings(members)]


def handicap_starts(competition: Competition) -> List[Dict[str, Any]]:
    """Lista de salida del Laser Run según puntos acumulados antes del Laser Run."""
    cumulative: Dict[int, HandicapAthlete] = {}
    for os_ in _official_scores(competition):
        entry = cumulative.get(os_.athlete_id)
        if entry is None:
            entry = cumulative[os_.athlete_id] = HandicapAthlete(
                athlete_id=os_.athlete_id, athlete_name=os_.athlete.full_name, cumulative_points=0
            )
        if os_.discipline != LASER_RUN:
            entry.cumulative_points += os_.points

    return [asdict(s) for s in calculate_handicap_starts(cumulative.values())]


def de_bracket(competition: Competition) -> Dict[str, Any]:
    """Cuadro DE inicial, sembrado por los puntos oficiales del ranking round."""
    ranking = (
        OfficialScore.objects.filter(event__competition=competition, discipline=FENCING_RANKING)
        .select_related("athlete")
        .order_by("-points", "athlete__last_name", "athlete__first_name")
    )
    seeds = [
        DESeed(seed=i, athlete_id=os_.athlete_id, athlete_name=os_.athlete.full_name)
        for i, os_ in enumerate(ranking, start=1)
    ]
    bracket = generate_de_bracket(seeds)

    data = bracket.to_dict()
    data["round_names"] = [get_round_name(r, bracket.total_rounds) for r in range(1, bracket.total_rounds + 1)]
    data["stats"] = bracket_stats(bracket)
    return data
