# pentacore/apps/scoring/calculators/fencing_de_bracket.py
"""
Cuadro de eliminación directa (DE) de esgrima.

- Tamaño del cuadro = siguiente potencia de 2 >= competidores.
- Siembra por división binaria recursiva (1 vs N, 2 vs N-1, ...).
- Cuando faltan competidores, los mejores sembrados pasan con bye.
- El ganador de un asalto ocupa su casilla en la ronda siguiente.
- Puesto final = ronda de eliminación y, dentro de la ronda, siembra.

La siembra sale del ranking round; los puntos MP salen del puesto final
(``calculate_fencing_de``). Todo en memoria: el cuadro se serializa con
``to_dict`` / ``from_dict``.
"""
from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .fencing import calculate_fencing_de

# Siembra de quien aparece sin siembra conocida (va al final del grupo)
UNKNOWN_SEED = 999


@dataclass
class DESeed:
    seed: int
    athlete_id: int
    athlete_name: str = ""


@dataclass
class DEMatch:
    match_id: str
    round_number: int
    position: int
    athlete1_id: Optional[int] = None
    athlete2_id: Optional[int] = None
    athlete1_seed: Optional[int] = None
    athlete2_seed: Optional[int] = None
    athlete1_name: Optional[str] = None
    athlete2_name: Optional[str] = None
    winner_id: Optional[int] = None
    winner_seed: Optional[int] = None
    score1: Optional[int] = None
    score2: Optional[int] = None
    is_bye: bool = False
    feeder1_id: Optional[str] = None
    feeder2_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.athlete1_id is None and self.athlete2_id is None

    @property
    def has_both(self) -> bool:
        return self.athlete1_id is not None and self.athlete2_id is not None

    @property
    def winner_name(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.athlete1_name if self.winner_id == self.athlete1_id else self.athlete2_name

    def loser(self) -> Optional[Tuple[int, int]]:
        """(athlete_id, seed) del perdedor, o None si no hubo asalto decidido."""
        if self.winner_id is None or self.is_bye or not self.has_both:
            return None
        if self.winner_id == self.athlete1_id:
            return self.athlete2_id, self.athlete2_seed or UNKNOWN_SEED
        return self.athlete1_id, self.athlete1_seed or UNKNOWN_SEED


@dataclass
class DEBracket:
    tableau_size: int
    num_competitors: int
    rounds: List[List[DEMatch]] = field(default_factory=list)
    # athlete_id -> puesto final (None hasta que el cuadro termina)
    placements: Optional[Dict[int, int]] = None

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    def find_match(self, match_id: str) -> Tuple[int, DEMatch]:
        for idx, round_matches in enumerate(self.rounds):
            for match in round_matches:
                if match.match_id == match_id:
                    return idx, match
        raise KeyError(f"Asalto no encontrado: {match_id}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # JSON no admite claves enteras
        if self.placements is not None:
            data["placements"] = {str(k): v for k, v in self.placements.items()}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DEBracket":
        placements = data.get("placements")
        return cls(
            tableau_size=data["tableau_size"],
            num_competitors=data["num_competitors"],
            rounds=[[DEMatch(**m) for m in round_matches] for round_matches in data.get("rounds", [])],
            placements={int(k): v for k, v in placements.items()} if placements is not None else None,
        )


# ---------------------------------
# Tamaño y siembra
# ---------------------------------

def get_tableau_size(num_competitors: int) -> int:
    """18 -> 32, 16 -> 16, 9 -> 16, 3 -> 4; mínimo 2."""
    size = 2
    while size < num_competitors:
        size *= 2
    return size


def generate_seed_positions(tableau_size: int) -> List[int]:
    """
    Orden de siembra del cuadro. Para 8: [1, 8, 4, 5, 2, 7, 3, 6], es decir
    1-8, 4-5, 2-7, 3-6. Los sembrados 1 y 2 solo pueden cruzarse en la final.
    """
    if tableau_size <= 2:
        return [1, 2]
    out: List[int] = []
    for seed in generate_seed_positions(tableau_size // 2):
        out.append(seed)
        out.append(tableau_size + 1 - seed)
    return out


def _match_id(round_number: int, position: int) -> str:
    return f"R{round_number}-M{position}"


# ---------------------------------
# Construcción y avance
# ---------------------------------

def generate_de_bracket(seeds: Iterable[DESeed]) -> DEBracket:
    """
    Cuadro completo a partir de la siembra (1 = mejor del ranking round).
    Los byes se resuelven y propagan al construirlo.
    """
    seeds = list(seeds)
    by_seed: Dict[int, DESeed] = {}
    for s in seeds:
        if s.seed < 1 or s.seed > len(seeds) or s.seed in by_seed:
            raise ValueError(f"Siembra inválida: {s.seed}")
        by_seed[s.seed] = s

    size = get_tableau_size(len(seeds))
    positions = generate_seed_positions(size)

    first_round: List[DEMatch] = []
    for i in range(size // 2):
        seed1, seed2 = positions[2 * i], positions[2 * i + 1]
        a1, a2 = by_seed.get(seed1), by_seed.get(seed2)
        match = DEMatch(match_id=_match_id(1, i), round_number=1, position=i, is_bye=a1 is None or a2 is None)
        if a1 is not None:
            match.athlete1_id, match.athlete1_seed, match.athlete1_name = a1.athlete_id, seed1, a1.athlete_name
        if a2 is not None:
            match.athlete2_id, match.athlete2_seed, match.athlete2_name = a2.athlete_id, seed2, a2.athlete_name
        # Bye: pasa directo, marcador 0-0
        if match.is_bye and not match.is_empty:
            winner = a1 or a2
            match.winner_id = winner.athlete_id
            match.winner_seed = seed1 if a1 is not None else seed2
            match.score1 = match.score2 = 0
        first_round.append(match)

    rounds = [first_round]
    round_number = 2
    while len(rounds[-1]) > 1:
        prev = rounds[-1]
        rounds.append(
            [
                DEMatch(
                    match_id=_match_id(round_number, i),
                    round_number=round_number,
                    position=i,
                    feeder1_id=prev[2 * i].match_id,
                    feeder2_id=prev[2 * i + 1].match_id,
                )
                for i in range(len(prev) // 2)
            ]
        )
        round_number += 1

    bracket = DEBracket(tableau_size=size, num_competitors=len(seeds), rounds=rounds)
    _propagate_winners(bracket.rounds)
    return bracket


def _propagate_winners(rounds: List[List[DEMatch]]) -> None:
    for r in range(1, len(rounds)):
        for i, match in enumerate(rounds[r]):
            feeder1, feeder2 = rounds[r - 1][2 * i], rounds[r - 1][2 * i + 1]
            if feeder1.winner_id is not None:
                match.athlete1_id = feeder1.winner_id
                match.athlete1_seed = feeder1.winner_seed
                match.athlete1_name = feeder1.winner_name
            if feeder2.winner_id is not None:
                match.athlete2_id = feeder2.winner_id
                match.athlete2_seed = feeder2.winner_seed
                match.athlete2_name = feeder2.winner_name

            # Rival que nunca llegará (rama vacía): pasa directo
            if match.winner_id is None and not match.has_both and not match.is_empty:
                other_feeder = feeder2 if match.athlete2_id is None else feeder1
                if other_feeder.is_empty:
                    match.is_bye = True
                    match.winner_id = match.athlete1_id if match.athlete1_id is not None else match.athlete2_id
                    match.winner_seed = match.athlete1_seed if match.athlete1_id is not None else match.athlete2_seed


def _clear_downstream(rounds: List[List[DEMatch]], round_idx: int, position: int) -> None:
    if round_idx + 1 >= len(rounds):
        return
    next_position = position // 2
    nxt = rounds[round_idx + 1][next_position]

    if position % 2 == 0:
        nxt.athlete1_id = nxt.athlete1_seed = nxt.athlete1_name = None
    else:
        nxt.athlete2_id = nxt.athlete2_seed = nxt.athlete2_name = None

    if nxt.winner_id is not None:
        nxt.winner_id = nxt.winner_seed = nxt.score1 = nxt.score2 = None
        _clear_downstream(rounds, round_idx + 1, next_position)


def advance_winner(
    bracket: DEBracket,
    match_id: str,
    winner_id: int,
    score1: Optional[int] = None,
    score2: Optional[int] = None,
) -> DEBracket:
    """
    Registra el resultado de un asalto y devuelve un cuadro nuevo (el original
    no se modifica). Si cambia un ganador ya registrado, se limpian los
    asaltos posteriores que dependían de él.
    """
    new = copy.deepcopy(bracket)
    round_idx, match = new.find_match(match_id)
    if not match.has_both or winner_id not in (match.athlete1_id, match.athlete2_id):
        raise ValueError(f"{winner_id} no disputa el asalto {match_id}")

    changed = match.winner_id is not None and match.winner_id != winner_id
    match.winner_id = winner_id
    match.winner_seed = match.athlete1_seed if winner_id == match.athlete1_id else match.athlete2_seed
    match.score1, match.score2 = score1, score2

    if changed:
        _clear_downstream(new.rounds, round_idx, match.position)
    _propagate_winners(new.rounds)

    new.placements = calculate_final_placements(new) if is_bracket_complete(new) else None
    return new


def is_bracket_complete(bracket: DEBracket) -> bool:
    for round_matches in bracket.rounds:
        for match in round_matches:
            if not match.is_empty and match.winner_id is None:
                return False
    final = bracket.rounds[-1] if bracket.rounds else []
    return len(final) == 1 and final[0].winner_id is not None


# ---------------------------------
# Puestos y puntos
# ---------------------------------

def calculate_final_placements(bracket: DEBracket) -> Dict[int, int]:
    """
    Ganador de la final 1°, perdedor 2°; perdedores de semifinal 3°-4°,
    de cuartos 5°-8°, etc. Dentro de cada ronda, mejor siembra = mejor puesto.
    """
    placements: Dict[int, int] = {}
    if not bracket.rounds:
        return placements

    total = bracket.total_rounds
    final = bracket.rounds[-1][0]
    if final.winner_id is not None:
        placements[final.winner_id] = 1
        loser = final.loser()
        if loser is not None:
            placements[loser[0]] = 2

    for r in range(total - 2, -1, -1):
        losers = sorted(
            (lo for lo in (m.loser() for m in bracket.rounds[r]) if lo is not None),
            key=lambda lo: lo[1],
        )
        start = 2 ** (total - r - 1) + 1
        for offset, (athlete_id, _seed) in enumerate(losers):
            placements[athlete_id] = start + offset
    return placements


def de_points(placements: Dict[int, int]) -> Dict[int, int]:
    """Puntos MP por atleta según su puesto final."""
    return {athlete_id: calculate_fencing_de(place) for athlete_id, place in placements.items()}


def get_round_name(round_number: int, total_rounds: int) -> str:
    from_end = total_rounds - round_number
    if from_end == 0:
        return "Final"
    if from_end == 1:
        return "Semifinal"
    if from_end == 2:
        return "Cuartos de final"
    return f"Tabla de {2 ** (from_end + 1)}"


def bracket_athletes(bracket: DEBracket) -> List[int]:
    seen: List[int] = []
    for round_matches in bracket.rounds:
        for match in round_matches:
            for athlete_id in (match.athlete1_id, match.athlete2_id):
                if athlete_id is not None and athlete_id not in seen:
                    seen.append(athlete_id)
    return seen


def bracket_stats(bracket: DEBracket) -> Dict[str, Any]:
    total = completed = byes = 0
    current_round = None
    for round_matches in bracket.rounds:
        for match in round_matches:
            if match.is_empty:
                continue
            if match.is_bye:
                byes += 1
                total += 1
                completed += 1
            elif match.has_both:
                total += 1
                if match.winner_id is not None:
                    completed += 1
                elif current_round is None:
                    current_round = match.round_number
    return {
        "total_matches": total,
        "completed_matches": completed,
        "bye_count": byes,
        # Ronda más baja con asaltos pendientes; terminado = última ronda
        "current_round": current_round or bracket.total_rounds,
        "is_complete": is_bracket_complete(bracket),
    }
