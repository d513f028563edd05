"""Excepciones HTTP personalizadas y traducción de errores de base de datos.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error patterns of
the reserve-adjustment service, plus the translation of database driver
errors (legacy Oracle codes included) into Spanish user messages.

Usage:
    from app.utils.exceptions import BusinessError, NotFoundError
    raise NotFoundError("Siniestro no encontrado")
    raise BusinessError("El Monto a ajustar es igual a cero")
"""

from fastapi import HTTPException, status
from sqlalchemy.exc import DBAPIError, SQLAlchemyError


class NotFoundError(HTTPException):
    """404 Not Found - recurso inexistente.

    Raised when a claim, certificate, coverage or reserve row does not exist.

    Args:
        detail: Mensaje de error (Error message, default: "Recurso no encontrado")
    """

    def __init__(self, detail: str = "Recurso no encontrado") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden - permisos insuficientes.

    Raised when the authenticated user's role cannot perform the operation
    (e.g. a read-only user applying an adjustment).

    Args:
        detail: Mensaje de error (Error message)
    """

    def __init__(
        self,
        detail: str = "Acceso denegado: No tiene permisos para acceder a este recurso.",
    ) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized - autenticación ausente o inválida.

    Raised when the JWT is missing, invalid or expired, or credentials are wrong.

    Args:
        detail: Mensaje de error (Error message, default: "Autenticación requerida")
    """

    def __init__(self, detail: str = "Autenticación requerida") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request - datos de petición inválidos.

    Args:
        detail: Mensaje de error (Error message, default: "Solicitud inválida")
    """

    def __init__(self, detail: str = "Solicitud inválida") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class BusinessError(BadRequestError):
    """400 - violación de una regla de negocio.

    Business-rule violation raised by the adjustment validations.
    Services that collect validation outcomes (validate endpoint, apply
    endpoint) catch this class and report ``detail`` as the row message.

    Args:
        detail: Mensaje de la regla incumplida (Rule message, in Spanish)
    """

    def __init__(self, detail: str = "Error de negocio") -> None:
        super().__init__(detail=detail)


class SumaAseguradaError(BusinessError):
    """Fallo al obtener la suma asegurada de una cobertura.

    Insured-sum lookup failure. ``detail`` carries the numbered legacy
    message (e.g. "2 - Error, al obtener la suma asegurada.").
    """


# ---------------------------------------------------------------------------
# Traducción de errores de base de datos (Database error translation)
# ---------------------------------------------------------------------------

DB_CONNECTION_LOST: str = "DB_CONNECTION_LOST"
CREDENTIALS_LOST: str = "CREDENTIALS_LOST"
PACKAGE_CHANGED: str = "PACKAGE_CHANGED"
FILE_NOT_FOUND: str = "FILE_NOT_FOUND"
DB_ERROR: str = "DB_ERROR"

# (marcadores en el mensaje del driver, código, estado HTTP, mensaje al usuario)
_DB_ERROR_RULES: list[tuple[tuple[str, ...], str, int, str]] = [
    (("ORA-03113",), DB_CONNECTION_LOST, status.HTTP_503_SERVICE_UNAVAILABLE,
     "Se ha perdido la conexión con la base de datos."),
    (("ORA-03114",), CREDENTIALS_LOST, status.HTTP_401_UNAUTHORIZED,
     "Se han perdido sus credenciales inicie sesión nuevamente."),
    (("ORA-04068", "ORA-04061"), PACKAGE_CHANGED, status.HTTP_500_INTERNAL_SERVER_ERROR,
     "El paquete ha sufrido cambios, vuelva iniciar sesión nuevamente."),
    (("302000",), FILE_NOT_FOUND, status.HTTP_400_BAD_REQUEST,
     "El archivo seleccionado no existe, seleccione uno existente."),
]


def translate_db_error(exc: SQLAlchemyError) -> tuple[str, int, str]:
    """Traduce un error de SQLAlchemy a (código, estado HTTP, mensaje).

    Map a database error to an error code, HTTP status and Spanish message.
    A connection invalidated by the driver counts as a lost connection
    whatever its message says.

    Args:
        exc: Error lanzado por SQLAlchemy (Error raised by SQLAlchemy)

    Returns:
        tuple[str, int, str]: (código, estado HTTP, mensaje para el usuario)
    """
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DB_CONNECTION_LOST, status.HTTP_503_SERVICE_UNAVAILABLE, _DB_ERROR_RULES[0][3]

    text: str = str(exc)
    for markers, code, http_status, message in _DB_ERROR_RULES:
        if any(marker in text for marker in markers):
            return code, http_status, message
    return DB_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al acceder a la base de datos."
