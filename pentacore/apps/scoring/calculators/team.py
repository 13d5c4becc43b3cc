# pentacore/apps/scoring/calculators/team.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

TEAM_SIZE = 3


@dataclass
class TeamMember:
    athlete_id: int
    athlete_name: str
    country: str
    total_points: int


@dataclass
class TeamStanding:
    country: str
    athletes: List[TeamMember] = field(default_factory=list)
    team_total: int = 0
    rank: int = 0


def calculate_team_standings(members: Iterable[TeamMember]) -> List[TeamStanding]:
    """
    Clasificación por países: suma de los 3 mejores totales.
    Países con menos de 3 atletas no clasifican.
    """
    by_country: Dict[str, List[TeamMember]] = {}
    for m in members:
        by_country.setdefault(m.country, []).append(m)

    teams: List[TeamStanding] = []
    for country, athletes in by_country.items():
        if len(athletes) < TEAM_SIZE:
            continue
        best = sorted(athletes, key=lambda a: a.total_points, reverse=True)[:TEAM_SIZE]
        teams.append(TeamStanding(country=country, athletes=best, team_total=sum(a.total_points for a in best)))

    teams.sort(key=lambda t: t.team_total, reverse=True)
    for i, t in enumerate(teams, start=1):
        t.rank = i
    return teams
