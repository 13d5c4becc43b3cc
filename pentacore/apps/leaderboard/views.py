from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from pentacore.apps.core.errors import NotFoundError
from pentacore.apps.core.http import api_view
from pentacore.apps.events.models import Competition
from pentacore.apps.scoring.constants import DISCIPLINE_NAMES, DISCIPLINE_ORDER

from . import services


def _get_competition(slug: str) -> Competition:
    try:
        return Competition.objects.get(slug=slug)
    except Competition.DoesNotExist:
        raise NotFoundError(f"Competition '{slug}' no existe")


def _competition_dict(c: Competition):
    return {
        "name": c.name,
        "slug": c.slug,
        "age_category": c.age_category,
        "competition_type": c.competition_type,
        "status": c.status,
    }


# ---------- Vistas ----------

@require_GET
@api_view
def leaderboard_index(request: HttpRequest):
    competitions = Competition.objects.exclude(status="draft").order_by("-start_date", "name")
    return JsonResponse({"competitions": [_competition_dict(c) for c in competitions]})


@require_GET
@api_view
def competition_leaderboard(request: HttpRequest, slug: str):
    """
    Clasificación individual: puntos MP por disciplina (solo oficiales) y total.
    Columnas en el orden canónico de disciplinas.
    """
    competition = _get_competition(slug)
    return JsonResponse(
        {
            "competition": _competition_dict(competition),
            "columns": [{"discipline": d, "name": DISCIPLINE_NAMES[d]} for d in DISCIPLINE_ORDER],
            "rows": services.competition_standings(competition),
        }
    )


@require_GET
@api_view
def team_leaderboard(request: HttpRequest, slug: str):
    competition = _get_competition(slug)
    return JsonResponse({"competition": _competition_dict(competition), "teams": services.team_standings(competition)})


@require_GET
@api_view
def handicap_start_list(request: HttpRequest, slug: str):
    competition = _get_competition(slug)
    return JsonResponse({"competition": _competition_dict(competition), "starts": services.handicap_starts(competition)})


@require_GET
@api_view
def de_bracket(request: HttpRequest, slug: str):
    competition = _get_competition(slug)
    return JsonResponse({"competition": _competition_dict(competition), "bracket": services.de_bracket(competition)})
