"""Middleware de logging de la API en Axiom.

Axiom API logging middleware.
Ships one structured event per request to Axiom: endpoint, method,
parameters, masked body, status, duration, the analyst who made the call
and the error reason of failed requests. Disabled when no Axiom token or
dataset is configured.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger: logging.Logger = logging.getLogger(__name__)

# Campos a enmascarar (Fields masked in request bodies and query strings)
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# Rutas sin logging (Paths excluded from logging)
_SKIP_PATHS: set[str] = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_DEPTH: int = 5
_MAX_ITEMS: int = 20
_MAX_ERROR_LEN: int = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """Enmascara recursivamente los campos sensibles.

    Recursively mask sensitive keys in dicts and lists. Lists are cut to
    their first items and nesting deeper than a few levels is elided.
    """
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:_MAX_ITEMS]]
    return data


def _error_from_body(body: bytes) -> str:
    """Extrae el motivo del error de un cuerpo de respuesta (Error reason from a response body)."""
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_ERROR_LEN]
    detail: Any = data.get("detail", data) if isinstance(data, dict) else data
    text: str = detail if isinstance(detail, str) else json.dumps(detail, default=str)
    return text[:_MAX_ERROR_LEN]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """Registra cada petición de la API en Axiom.

    Logs every API request and response to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._client is None or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time: float = time.time()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path}
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))

        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            body_bytes: bytes = await request.body()
            if body_bytes:
                try:
                    event["request_body"] = mask_sensitive(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    event["request_body"] = "(non-json body)"

        status_code: int = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                # El cuerpo se consume para leer el error y se reconstruye la respuesta
                body: bytes = b""
                async for chunk in response.body_iterator:
                    body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = getattr(request.state, "error", None) or _error_from_body(body)
                response = Response(
                    content=body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            analista: str | None = getattr(request.state, "analista", None)
            if analista:
                event["analista"] = analista
            path_params: dict[str, Any] = dict(request.path_params)
            if path_params:
                event["path_params"] = path_params
            self._ingest(event)

        return response

    def _ingest(self, event: dict[str, Any]) -> None:
        """Envía el evento a Axiom; un fallo de envío no interrumpe la petición.

        Ship the event to Axiom. Shipping failures are logged and do not
        break the request.
        """
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            logger.warning("No se pudo enviar el evento a Axiom (path=%s)", event.get("path"), exc_info=True)
