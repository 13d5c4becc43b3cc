# pentacore/apps/core/http.py
from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Dict

from django.conf import settings
from django.http import HttpRequest, JsonResponse

from .errors import InternalError, PipelineError, ScoreValidationError

logger = logging.getLogger(__name__)


# -------------------------------
# Permisos
# -------------------------------
def user_is_reviewer(request: HttpRequest) -> bool:
    u = request.user
    if not u.is_authenticated:
        return False
    # Permitimos staff o miembros del grupo de revisores
    group = settings.PENTACORE.get("REVIEWERS_GROUP", "reviewers")
    return u.is_staff or u.is_superuser or u.groups.filter(name=group).exists()


def login_required_json(view_func):
    @wraps(view_func)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Autenticación requerida", "code": "AUTH_REQUIRED"}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped


def reviewer_required(view_func):
    @wraps(view_func)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Autenticación requerida", "code": "AUTH_REQUIRED"}, status=401)
        if not user_is_reviewer(request):
            return JsonResponse({"error": "Solo revisores.", "code": "FORBIDDEN"}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped


# -------------------------------
# Frontera de errores
# -------------------------------
def api_view(view_func):
    """
    Capa más externa de las vistas JSON.

    - ``PipelineError`` -> respuesta estructurada con su status.
    - Cualquier otra excepción -> log completo + 500 genérico (sin filtrar detalles).
    """
    @wraps(view_func)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except PipelineError as exc:
            if exc.status_code >= 500:
                logger.error("Error interno en %s %s: %s", request.method, request.path, exc)
            else:
                logger.info("%s en %s %s: %s", exc.code, request.method, request.path, exc)
            return JsonResponse(exc.to_client_dict(), status=exc.status_code)
        except Exception:
            logger.exception("Excepción no controlada en %s %s", request.method, request.path)
            err = InternalError()
            return JsonResponse(err.to_client_dict(), status=err.status_code)
    return _wrapped


def read_json_body(request: HttpRequest) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        body = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ScoreValidationError("JSON inválido", details={"body": ["JSON inválido."]}) from exc
    if not isinstance(body, dict):
        raise ScoreValidationError("Se esperaba un objeto JSON", details={"body": ["Se esperaba un objeto JSON."]})
    return body
