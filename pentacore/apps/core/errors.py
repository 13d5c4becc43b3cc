# pentacore/apps/core/errors.py
"""
Errores de dominio del pipeline de puntuación.

Cada error lleva un mensaje interno (solo para logs) y un mensaje seguro
para el cliente. La capa HTTP traduce ``PipelineError`` a JSON; cualquier
otra excepción se registra completa y sale como error genérico.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class PipelineError(Exception):
    code = "PIPELINE_ERROR"
    status_code = 400
    client_message = "Solicitud inválida"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.client_message)
        self.details = details

    def to_client_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.client_message, "code": self.code}
        if self.details and self.expose_details:
            body["details"] = self.details
        return body

    # Solo los errores de validación devuelven detalle al cliente
    expose_details = False


class ScoreValidationError(PipelineError):
    """Entrada mal formada: payload, motivo de rechazo vacío, disciplina desconocida."""

    code = "VALIDATION_FAILED"
    status_code = 400
    client_message = "Datos inválidos"
    expose_details = True


class NotFoundError(PipelineError):
    code = "NOT_FOUND"
    status_code = 404
    client_message = "Recurso no encontrado"


class ConflictError(PipelineError):
    """Transición desde un estado terminal (p.ej. verificar dos veces)."""

    code = "CONFLICT"
    status_code = 409
    client_message = "La puntuación ya fue procesada"


class ComputationError(PipelineError):
    code = "COMPUTATION_FAILED"
    status_code = 422
    client_message = "No se pudo calcular la puntuación"


class InternalError(PipelineError):
    code = "INTERNAL_ERROR"
    status_code = 500
    client_message = "Ocurrió un error inesperado"
