# pentacore/apps/accounts/sessions.py
"""
Quién está actuando: un usuario del sistema (juez, revisor, admin) o un
atleta que entró con su propia cuenta. Variante cerrada.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from django.conf import settings
from django.http import HttpRequest

ROLE_ADMIN = "ADMIN"
ROLE_REVIEWER = "REVIEWER"
ROLE_VOLUNTEER = "VOLUNTEER"
ROLE_ATHLETE = "ATHLETE"
ROLE_ANONYMOUS = "ANONYMOUS"
ROLE_SYSTEM = "SYSTEM"


@dataclass(frozen=True)
class UserSession:
    user_id: int
    role: str


@dataclass(frozen=True)
class AthleteSession:
    athlete_id: int


Session = Union[UserSession, AthleteSession]


def role_for_user(user) -> str:
    if user.is_superuser:
        return ROLE_ADMIN
    group = settings.PENTACORE.get("REVIEWERS_GROUP", "reviewers")
    if user.is_staff or user.groups.filter(name=group).exists():
        return ROLE_REVIEWER
    return ROLE_VOLUNTEER


def session_for_user(user) -> Optional[Session]:
    if user is None or not user.is_authenticated:
        return None

    role = role_for_user(user)
    # Un atleta con cuenta propia (sin rol de revisión) actúa como atleta
    if role == ROLE_VOLUNTEER:
        profile = getattr(user, "profile", None)
        if profile is not None and profile.athlete_id:
            return AthleteSession(athlete_id=profile.athlete_id)
    return UserSession(user_id=user.pk, role=role)


def session_from_request(request: Optional[HttpRequest]) -> Optional[Session]:
    if request is None:
        return None
    return session_for_user(getattr(request, "user", None))


def actor_for(session: Optional[Session]) -> Tuple[str, str]:
    """(actor_id, actor_role) para auditoría."""
    if session is None:
        return "", ROLE_ANONYMOUS
    if isinstance(session, UserSession):
        return str(session.user_id), session.role
    if isinstance(session, AthleteSession):
        return f"athlete:{session.athlete_id}", ROLE_ATHLETE
    raise TypeError(f"Sesión desconocida: {type(session).__name__}")
