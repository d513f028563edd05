"""Esquemas Pydantic comunes.

Common Pydantic response schema definitions shared across API domains.
"""

from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Respuesta genérica con mensaje.

    Generic message response schema for simple confirmations such as
    deletions.

    Attributes:
        message: Mensaje de respuesta (Human-readable confirmation message)
    """

    message: str


class ErrorResponse(BaseModel):
    """Cuerpo de error de la API (API error body).

    Attributes:
        detail: Mensaje de error (Error message)
        code: Código de error de base de datos (Database error code, optional)
        errors: Errores de validación (Validation error list, optional)
    """

    detail: str
    code: str | None = None
    errors: list[Any] | None = None
